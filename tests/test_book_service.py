import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import text

from bookcafe.core.exceptions import StorageError
from bookcafe.database.db import Base, build_engine, build_session_factory, init_models
from bookcafe.models import Book, BookStatus
from bookcafe.services import book_service

pytestmark = pytest.mark.anyio


async def test_create_book_defaults(db):
    book = await book_service.create_book(db, "Dune", "Herbert")

    assert book.id is not None
    assert book.title == "Dune"
    assert book.author == "Herbert"
    assert book.status == BookStatus.UNREAD
    assert book.rating == 0
    assert book.created_at is not None


async def test_create_then_list_has_one_new_entry(db):
    first = await book_service.create_book(db, "Dune", "Herbert")
    second = await book_service.create_book(db, "Emma", "Austen")

    books = await book_service.list_books(db)

    assert [b.id for b in books].count(second.id) == 1
    assert second.id > first.id
    assert {b.status for b in books} == {BookStatus.UNREAD}


async def test_list_is_newest_first(db):
    now = datetime.now(timezone.utc)
    for title, age in [("middle", 5), ("newest", 1), ("oldest", 10)]:
        db.add(Book(title=title, author="someone", created_at=now - timedelta(days=age)))
    await db.commit()

    books = await book_service.list_books(db)

    assert [b.title for b in books] == ["newest", "middle", "oldest"]


async def test_list_breaks_ties_by_id(db):
    same_moment = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for title in ["a", "b", "c"]:
        db.add(Book(title=title, author="someone", created_at=same_moment))
    await db.commit()

    books = await book_service.list_books(db)

    assert [b.title for b in books] == ["c", "b", "a"]


async def test_toggle_twice_restores_status(db):
    book = await book_service.create_book(db, "Dune", "Herbert")

    once = await book_service.toggle_book_status(db, book.id)
    assert once.status == BookStatus.READ
    twice = await book_service.toggle_book_status(db, book.id)
    assert twice.status == BookStatus.UNREAD


async def test_toggle_changes_nothing_else(db):
    book = await book_service.create_book(db, "Dune", "Herbert")
    created_at = book.created_at

    toggled = await book_service.toggle_book_status(db, book.id)

    assert (toggled.title, toggled.author, toggled.rating) == ("Dune", "Herbert", 0)
    assert toggled.created_at == created_at


async def test_toggle_unknown_book_returns_none(db):
    assert await book_service.toggle_book_status(db, 404) is None


@pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
async def test_update_rating_is_read_back(db, rating):
    book = await book_service.create_book(db, "Dune", "Herbert")

    await book_service.update_book_rating(db, book.id, rating)

    stored = await book_service.get_book_by_id(db, book.id)
    assert stored.rating == rating


async def test_update_rating_unknown_book_returns_none(db):
    assert await book_service.update_book_rating(db, 404, 3) is None


async def test_store_accepts_zero_rating(db):
    book = await book_service.create_book(db, "Dune", "Herbert")
    await book_service.update_book_rating(db, book.id, 4)

    updated = await book_service.update_book_rating(db, book.id, 0)

    assert updated.rating == 0


async def test_store_rejects_rating_outside_column_range(db):
    book = await book_service.create_book(db, "Dune", "Herbert")

    with pytest.raises(StorageError) as exc_info:
        await book_service.update_book_rating(db, book.id, 7)

    assert exc_info.value.message == "Failed to update rating"
    stored = await book_service.get_book_by_id(db, book.id)
    assert stored.rating == 0


async def test_delete_is_idempotent(db):
    book = await book_service.create_book(db, "Dune", "Herbert")

    assert await book_service.delete_book(db, book.id) is True
    assert await book_service.delete_book(db, book.id) is False
    assert await book_service.list_books(db) == []


async def test_ids_are_not_reused(db):
    book = await book_service.create_book(db, "Dune", "Herbert")
    await book_service.delete_book(db, book.id)

    again = await book_service.create_book(db, "Dune", "Herbert")

    assert again.id > book.id


async def test_storage_fault_is_not_not_found(db, engine):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    with pytest.raises(StorageError) as exc_info:
        await book_service.list_books(db)
    assert exc_info.value.message == "Failed to fetch books"

    with pytest.raises(StorageError):
        await book_service.toggle_book_status(db, 1)
    with pytest.raises(StorageError):
        await book_service.delete_book(db, 1)


async def test_concurrent_toggles_are_all_applied(engine, db):
    book = await book_service.create_book(db, "Dune", "Herbert")
    sessions = build_session_factory(engine)

    async def toggle():
        async with sessions() as session:
            return await book_service.toggle_book_status(session, book.id)

    results = await asyncio.gather(*(toggle() for _ in range(4)))

    assert [r.status for r in results].count(BookStatus.READ) == 2
    async with sessions() as session:
        final = await book_service.get_book_by_id(session, book.id)
    assert final.status == BookStatus.UNREAD


@pytest.mark.parametrize("book_id", [2**63, -(2**63) - 1, 99999999999999999999])
async def test_ids_beyond_64_bits_are_not_found(db, book_id):
    await book_service.create_book(db, "Dune", "Herbert")

    assert await book_service.get_book_by_id(db, book_id) is None
    assert await book_service.toggle_book_status(db, book_id) is None
    assert await book_service.update_book_rating(db, book_id, 3) is None
    assert await book_service.delete_book(db, book_id) is False


async def test_init_models_upgrades_table_without_rating(settings):
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.execute(
            text(
                """
                CREATE TABLE IF NOT EXISTS books (
                  id INTEGER PRIMARY KEY AUTOINCREMENT,
                  title TEXT NOT NULL,
                  author TEXT NOT NULL,
                  status TEXT NOT NULL DEFAULT 'UNREAD',
                  createdAt TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
        )
        await conn.execute(
            text("INSERT INTO books (title, author) VALUES ('Old', 'Timer')")
        )

    await init_models(engine)

    async with build_session_factory(engine)() as session:
        books = await book_service.list_books(session)
        toggled = await book_service.toggle_book_status(session, books[0].id)
        new = await book_service.create_book(session, "Dune", "Herbert")
        ordered = await book_service.list_books(session)
    await engine.dispose()

    assert [(b.title, b.author, b.rating) for b in books] == [("Old", "Timer", 0)]
    assert isinstance(books[0].created_at, datetime)
    assert toggled.status == BookStatus.READ
    assert ordered[0].id == new.id
