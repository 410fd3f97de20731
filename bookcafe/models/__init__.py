from bookcafe.models.book import Book
from bookcafe.models.enum import BookStatus
from bookcafe.database.db import Base

__all__ = ["Base", "Book", "BookStatus"]
