import asyncio
import logging
import random

from bookcafe.client.api_client import ApiError, BookApiClient
from bookcafe.schemas.book import BookOut
from bookcafe.utils.helpers import choose_unread

logger = logging.getLogger(__name__)

HIGHLIGHT_SECONDS = 2.0
PICK_TOAST_SECONDS = 2.4
EMPTY_TOAST_SECONDS = 2.2


class ReadingListController:
    """
    Local mirror of the reading list for a UI.

    Every action calls the API and, on success, patches the mirror with the
    server's answer instead of refetching the whole list. Failures never
    raise: they leave the mirror alone and set ``error``.
    """

    def __init__(
        self,
        api: BookApiClient,
        rng: random.Random | None = None,
        highlight_seconds: float = HIGHLIGHT_SECONDS,
        pick_toast_seconds: float = PICK_TOAST_SECONDS,
        empty_toast_seconds: float = EMPTY_TOAST_SECONDS,
    ):
        self.api = api
        self.rng = rng or random.Random()
        self.highlight_seconds = highlight_seconds
        self.pick_toast_seconds = pick_toast_seconds
        self.empty_toast_seconds = empty_toast_seconds

        self.books: list[BookOut] = []
        self.loading = False
        self.error = ""
        self.toast = ""
        self.highlighted_id: int | None = None
        self._highlight_timer: asyncio.TimerHandle | None = None
        self._toast_timer: asyncio.TimerHandle | None = None

    def _fail(self, message: str, exc: Exception) -> None:
        logger.warning(f"❌ {message}: {exc}")
        self.error = message

    async def load(self) -> None:
        self.loading = True
        try:
            self.books = await self.api.list_books()
        except ApiError as e:
            self._fail("Could not load the book list", e)
        finally:
            self.loading = False

    async def add(self, title: str, author: str) -> BookOut | None:
        self.error = ""
        title, author = title.strip(), author.strip()
        if not title or not author:
            self.error = "Please enter a title and an author"
            return None
        try:
            book = await self.api.create_book(title, author)
        except ApiError as e:
            self._fail("Failed to add the book, please try again", e)
            return None
        self.books.insert(0, book)
        return book

    def _replace(self, updated: BookOut) -> None:
        self.books = [updated if book.id == updated.id else book for book in self.books]

    async def toggle(self, book_id: int) -> BookOut | None:
        try:
            updated = await self.api.toggle_status(book_id)
        except ApiError as e:
            self._fail("Failed to update the status", e)
            return None
        self._replace(updated)
        return updated

    async def rate(self, book_id: int, rating: int) -> BookOut | None:
        try:
            updated = await self.api.update_rating(book_id, rating)
        except ApiError as e:
            self._fail("Failed to update the rating", e)
            return None
        self._replace(updated)
        return updated

    async def delete(self, book_id: int) -> bool:
        try:
            await self.api.delete_book(book_id)
        except ApiError as e:
            self._fail("Failed to delete the book", e)
            return False
        self.books = [book for book in self.books if book.id != book_id]
        return True

    def dismiss_error(self) -> None:
        self.error = ""

    def surprise(self) -> BookOut | None:
        """
        Highlight a random unread book from the mirror.

        Works on local data only, so the pick may already be gone on the
        server. Must be called from a running event loop, the highlight and
        the toast clear themselves independently.
        """
        pick = choose_unread(self.books, self.rng)
        if pick is None:
            self._show_toast("No unread books left!", self.empty_toast_seconds)
            return None
        self._set_highlight(pick.id)
        self._show_toast(f"Today's perfect read: {pick.title}", self.pick_toast_seconds)
        return pick

    def _set_highlight(self, book_id: int) -> None:
        if self._highlight_timer is not None:
            self._highlight_timer.cancel()
        self.highlighted_id = book_id
        loop = asyncio.get_running_loop()
        self._highlight_timer = loop.call_later(self.highlight_seconds, self._clear_highlight)

    def _clear_highlight(self) -> None:
        self.highlighted_id = None
        self._highlight_timer = None

    def _show_toast(self, message: str, seconds: float) -> None:
        if self._toast_timer is not None:
            self._toast_timer.cancel()
        self.toast = message
        loop = asyncio.get_running_loop()
        self._toast_timer = loop.call_later(seconds, self._clear_toast)

    def _clear_toast(self) -> None:
        self.toast = ""
        self._toast_timer = None
