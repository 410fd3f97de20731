from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookcafe.core.exceptions import not_found
from bookcafe.database.db_depends import get_db
from bookcafe.schemas.book import BookCreate, BookOut, RatingUpdate
from bookcafe.services import book_service


router = APIRouter(prefix="/api/books", tags=["Books (API)"])
DBType = Annotated[AsyncSession, Depends(get_db)]


@router.get("", response_model=list[BookOut])
async def read_books(db: DBType):
    return await book_service.list_books(db)


@router.post("", response_model=BookOut, status_code=status.HTTP_201_CREATED)
async def add_book(db: DBType, create_b: BookCreate):
    return await book_service.create_book(db, create_b.title, create_b.author)


@router.patch("/{book_id}/toggle", response_model=BookOut)
async def toggle_book(db: DBType, book_id: int):
    book = await book_service.toggle_book_status(db, book_id)
    if book is None:
        not_found()
    return book


@router.patch("/{book_id}/rating", response_model=BookOut)
async def rate_book(db: DBType, book_id: int, rating_update: RatingUpdate):
    book = await book_service.update_book_rating(db, book_id, rating_update.rating)
    if book is None:
        not_found()
    return book


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_book(db: DBType, book_id: int):
    deleted = await book_service.delete_book(db, book_id)
    if not deleted:
        not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
