import logging

import httpx

from bookcafe.schemas.book import BookOut

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-success answer from the books API, or no answer at all"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BookApiClient:
    """
    Thin async wrapper around the ``/api/books`` routes.

    Every method returns the server's view of the data and raises
    ``ApiError`` for error statuses and transport failures.
    """

    def __init__(self, http: httpx.AsyncClient, prefix: str = "/api/books"):
        self.http = http
        self.prefix = prefix.rstrip("/")

    async def _request(self, method: str, path: str = "", **kwargs) -> httpx.Response:
        try:
            response = await self.http.request(method, f"{self.prefix}{path}", **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"❌ {method} {self.prefix}{path} failed: {e}")
            raise ApiError(str(e)) from e
        if response.is_error:
            message = response.reason_phrase
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                message = body.get("message", message)
            raise ApiError(message, response.status_code)
        return response

    async def list_books(self) -> list[BookOut]:
        response = await self._request("GET")
        return [BookOut.model_validate(item) for item in response.json()]

    async def create_book(self, title: str, author: str) -> BookOut:
        response = await self._request("POST", json={"title": title, "author": author})
        return BookOut.model_validate(response.json())

    async def toggle_status(self, book_id: int) -> BookOut:
        response = await self._request("PATCH", f"/{book_id}/toggle")
        return BookOut.model_validate(response.json())

    async def update_rating(self, book_id: int, rating: int) -> BookOut:
        response = await self._request("PATCH", f"/{book_id}/rating", json={"rating": rating})
        return BookOut.model_validate(response.json())

    async def delete_book(self, book_id: int) -> None:
        await self._request("DELETE", f"/{book_id}")
