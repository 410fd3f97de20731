import random
from typing import Any, Iterable, Sequence

from bookcafe.models.enum import BookStatus


def unread_books(books: Iterable[Any]) -> list:
    return [book for book in books if book.status == BookStatus.UNREAD]


def choose_unread(books: Sequence[Any], rng: random.Random | None = None):
    """Pick one UNREAD book uniformly at random, None when there is none."""
    candidates = unread_books(books)
    if not candidates:
        return None
    return (rng or random).choice(candidates)
