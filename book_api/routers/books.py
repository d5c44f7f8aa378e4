from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from book_api.auth import current_active_user
from book_api.core.database import get_db
from book_api.core.exceptions import AuthorNotFoundException, BookNotFoundException, InvalidBookDataException
from book_api.core.logger_config import log_info
from book_api.repositories import AuthorRepository, BookRepository
from book_api.routers.params import BookId
from book_api.schemas.base import MessageResponse
from book_api.schemas.book import BookCreate, BookDetailResponse, BookResponse, BookUpdate

router = APIRouter(prefix="/books", tags=["books"], dependencies=[Depends(current_active_user)])


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate, request: Request, response: Response, session: AsyncSession = Depends(get_db)
) -> BookResponse:
    """
    Create a book for an existing author.

    Raises:
        AuthorNotFoundException: 404 if ``authorId`` does not reference an author
    """
    if not await AuthorRepository(session).exists(book_data.author_id):
        raise AuthorNotFoundException()

    book = await BookRepository(session).create(book_data, author_id=book_data.author_id)
    log_info(f"Book created: id={book.id}")
    response.headers["Location"] = str(request.url_for("get_book", book_id=book.id))
    return BookResponse.model_validate(book)


@router.get("", response_model=List[BookDetailResponse])
async def get_books(session: AsyncSession = Depends(get_db)) -> List[BookDetailResponse]:
    """List every book with its author"""
    books = await BookRepository(session).get_all()
    return [BookDetailResponse.model_validate(book) for book in books]


@router.get("/{book_id}", response_model=BookDetailResponse)
async def get_book(book_id: BookId, session: AsyncSession = Depends(get_db)) -> BookDetailResponse:
    book = await BookRepository(session).get_by_id(book_id)
    if book is None:
        raise BookNotFoundException()
    return BookDetailResponse.model_validate(book)


@router.put("/{book_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_book(book_id: BookId, book_data: BookUpdate, session: AsyncSession = Depends(get_db)) -> None:
    """
    Replace every mutable field of a book, including its author.

    Raises:
        InvalidBookDataException: 400 if the body ID differs from the path ID, nothing is written
        BookNotFoundException: 404 if the book does not exist
        AuthorNotFoundException: 404 if the new author does not exist
    """
    if book_id != book_data.id:
        raise InvalidBookDataException("Book ID mismatch")

    repository = BookRepository(session)
    book = await repository.get_by_id(book_id)
    if book is None:
        raise BookNotFoundException()
    if not await AuthorRepository(session).exists(book_data.author_id):
        raise AuthorNotFoundException()

    if await repository.update(book, book_data, author_id=book_data.author_id) is None:
        raise BookNotFoundException()
    log_info(f"Book updated: id={book_id}")


@router.delete("/{book_id}", response_model=MessageResponse)
async def delete_book(book_id: BookId, session: AsyncSession = Depends(get_db)) -> MessageResponse:
    if not await BookRepository(session).delete(book_id):
        raise BookNotFoundException()
    return MessageResponse(message="Book deleted successfully")
