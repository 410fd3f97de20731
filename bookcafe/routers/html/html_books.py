from fastapi import APIRouter, Request, Depends, Form
from fastapi.templating import Jinja2Templates
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
import logging
from typing import Annotated

from bookcafe.core.config import BASE_DIR
from bookcafe.core.exceptions import StorageError
from bookcafe.database.db_depends import get_db
from bookcafe.services import book_service
from bookcafe.utils.flash import flash, pop_flashes
from bookcafe.utils.helpers import choose_unread

router = APIRouter(tags=["Books (HTML)"])
templates = Jinja2Templates(directory=BASE_DIR / "templates")

logger = logging.getLogger(__name__)

DBType = Annotated[AsyncSession, Depends(get_db)]


def back_home(highlight: int | None = None) -> RedirectResponse:
    url = "/" if highlight is None else f"/?highlight={highlight}"
    return RedirectResponse(url=url, status_code=303)


@router.get("/", response_class=HTMLResponse)
async def reading_list_page(request: Request, db: DBType, highlight: int | None = None):
    """The reading list"""
    error = None
    try:
        books = await book_service.list_books(db)
    except StorageError as e:
        books = []
        error = e.message
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "title": request.app.state.settings.APP_NAME,
            "books": books,
            "highlight": highlight,
            "error": error,
            "messages": pop_flashes(request),
        },
    )


@router.post("/books")
async def add_book_submit(
    request: Request,
    db: DBType,
    title: str = Form(""),
    author: str = Form(""),
):
    title, author = title.strip(), author.strip()
    if not title or not author:
        flash(request, "Please enter a title and an author", "error")
        return back_home()
    try:
        book = await book_service.create_book(db, title, author)
        flash(request, f"Added “{book.title}”", "success")
    except StorageError as e:
        flash(request, e.message, "error")
    return back_home()


@router.post("/books/{book_id}/toggle")
async def toggle_book_submit(request: Request, db: DBType, book_id: int):
    try:
        book = await book_service.toggle_book_status(db, book_id)
    except StorageError as e:
        flash(request, e.message, "error")
        return back_home()
    if book is None:
        flash(request, "Book not found", "error")
    else:
        flash(request, f"“{book.title}” marked as {book.status.value.lower()}", "success")
    return back_home()


@router.post("/books/{book_id}/rating")
async def rate_book_submit(
    request: Request,
    db: DBType,
    book_id: int,
    rating: Annotated[int, Form(ge=1, le=5)],
):
    try:
        book = await book_service.update_book_rating(db, book_id, rating)
    except StorageError as e:
        flash(request, e.message, "error")
        return back_home()
    if book is None:
        flash(request, "Book not found", "error")
    return back_home()


@router.post("/books/{book_id}/delete")
async def delete_book_submit(request: Request, db: DBType, book_id: int):
    try:
        deleted = await book_service.delete_book(db, book_id)
    except StorageError as e:
        flash(request, e.message, "error")
        return back_home()
    if deleted:
        flash(request, "Book removed", "success")
    else:
        flash(request, "Book not found", "error")
    return back_home()


@router.post("/surprise")
async def surprise_submit(request: Request, db: DBType):
    """Pick a random unread book and highlight it"""
    try:
        books = await book_service.list_books(db)
    except StorageError as e:
        flash(request, e.message, "error")
        return back_home()
    pick = choose_unread(books)
    if pick is None:
        flash(request, "No unread books left!", "info")
        return back_home()
    logger.debug(f"🎲 Surprise pick: {pick.id}")
    flash(request, f"Today's perfect read: {pick.title}", "info")
    return back_home(highlight=pick.id)
