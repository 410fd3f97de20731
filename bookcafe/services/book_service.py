from sqlalchemy import case, delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from bookcafe.core.exceptions import StorageError
from bookcafe.models import Book, BookStatus

logger = logging.getLogger(__name__)

# ids are signed 64-bit integers in every supported engine
MIN_ID = -(2**63)
MAX_ID = 2**63 - 1


def _storable_id(book_id: int) -> bool:
    return MIN_ID <= book_id <= MAX_ID


async def _fail(db: AsyncSession, message: str, error: Exception) -> StorageError:
    await db.rollback()
    logger.error(f"❌ {message}: {error}")
    return StorageError(message)


async def _read_back(db: AsyncSession, book_id: int) -> Book | None:
    return await db.scalar(
        select(Book)
        .where(Book.id == book_id)
        .execution_options(populate_existing=True)
    )


async def list_books(db: AsyncSession) -> list[Book]:
    """All books, newest first"""
    try:
        result = await db.scalars(
            select(Book).order_by(Book.created_at.desc(), Book.id.desc())
        )
        return list(result.all())
    except SQLAlchemyError as e:
        raise await _fail(db, "Failed to fetch books", e) from e


async def get_book_by_id(db: AsyncSession, book_id: int) -> Book | None:
    if not _storable_id(book_id):
        return None
    try:
        return await db.get(Book, book_id, populate_existing=True)
    except SQLAlchemyError as e:
        raise await _fail(db, "Failed to fetch book", e) from e


async def create_book(db: AsyncSession, title: str, author: str) -> Book:
    """
    Add a book to the reading list.

    Title and author are stored as given, trimming is up to the caller.
    The returned book is read back from the database, so the generated id,
    creation time, status and rating are all filled in.
    """
    try:
        book = Book(title=title, author=author, status=BookStatus.UNREAD, rating=0)
        db.add(book)
        await db.commit()
        await db.refresh(book)
        logger.info(f"✅ Book created: {book.id} - {book.title}")
        return book
    except SQLAlchemyError as e:
        raise await _fail(db, "Failed to create book", e) from e


async def toggle_book_status(db: AsyncSession, book_id: int) -> Book | None:
    """
    Flip READ <-> UNREAD in a single UPDATE.

    :return: the updated book, or None when no book has this id
    """
    if not _storable_id(book_id):
        return None
    flipped = case(
        (Book.status == BookStatus.READ, BookStatus.UNREAD.value),
        else_=BookStatus.READ.value,
    )
    try:
        result = await db.execute(
            update(Book)
            .where(Book.id == book_id)
            .values(status=flipped)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            return None
        book = await _read_back(db, book_id)
        await db.commit()
        return book
    except SQLAlchemyError as e:
        raise await _fail(db, "Failed to update book", e) from e


async def update_book_rating(db: AsyncSession, book_id: int, rating: int) -> Book | None:
    """
    Store the rating as given.

    The 1-5 range is checked by the API; here only the column constraint
    (0-5) applies, anything outside it fails as a StorageError.
    """
    if not _storable_id(book_id):
        return None
    try:
        result = await db.execute(
            update(Book)
            .where(Book.id == book_id)
            .values(rating=rating)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await db.rollback()
            return None
        book = await _read_back(db, book_id)
        await db.commit()
        return book
    except SQLAlchemyError as e:
        raise await _fail(db, "Failed to update rating", e) from e


async def delete_book(db: AsyncSession, book_id: int) -> bool:
    if not _storable_id(book_id):
        return False
    try:
        result = await db.execute(delete(Book).where(Book.id == book_id))
        await db.commit()
    except SQLAlchemyError as e:
        raise await _fail(db, "Failed to delete book", e) from e
    deleted = result.rowcount > 0
    if deleted:
        logger.info(f"🗑️ Book deleted: {book_id}")
    return deleted
