from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from book_api.auth import current_active_user
from book_api.core.database import get_db
from book_api.core.exceptions import AuthorNotFoundException, BookNotFoundException, InvalidAuthorDataException
from book_api.core.logger_config import log_info
from book_api.repositories import AuthorRepository, BookRepository
from book_api.routers.params import AuthorId, BookId
from book_api.schemas.author import AuthorCreate, AuthorResponse, AuthorUpdate
from book_api.schemas.base import MessageResponse
from book_api.schemas.book import AuthorBookCreate, AuthorBookUpdate, BookDetailResponse, BookResponse

router = APIRouter(prefix="/authors", tags=["authors"], dependencies=[Depends(current_active_user)])

BOOK_NOT_FOUND_FOR_AUTHOR = "Book not found for this author"


async def ensure_author_exists(author_id: int, session: AsyncSession) -> None:
    """Nested routes check the parent author before touching a book"""
    if not await AuthorRepository(session).exists(author_id):
        raise AuthorNotFoundException()


@router.post("", response_model=AuthorResponse, status_code=status.HTTP_201_CREATED)
async def create_author(
    author_data: AuthorCreate, request: Request, response: Response, session: AsyncSession = Depends(get_db)
) -> AuthorResponse:
    """Create a new author"""
    log_info(f"Creating new author: {author_data.name}")
    author = await AuthorRepository(session).create(author_data)
    response.headers["Location"] = str(request.url_for("get_author", author_id=author.id))
    return AuthorResponse.model_validate(author)


@router.get("", response_model=List[AuthorResponse])
async def get_authors(session: AsyncSession = Depends(get_db)) -> List[AuthorResponse]:
    """List every author with its books"""
    authors = await AuthorRepository(session).get_all()
    return [AuthorResponse.model_validate(author) for author in authors]


@router.get("/{author_id}", response_model=AuthorResponse)
async def get_author(author_id: AuthorId, session: AsyncSession = Depends(get_db)) -> AuthorResponse:
    """
    Get an author with its books.

    Raises:
        AuthorNotFoundException: 404 if the author does not exist
    """
    author = await AuthorRepository(session).get_by_id(author_id)
    if author is None:
        raise AuthorNotFoundException()
    return AuthorResponse.model_validate(author)


@router.put("/{author_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_author(author_id: AuthorId, author_data: AuthorUpdate, session: AsyncSession = Depends(get_db)) -> None:
    """
    Replace every mutable field of an author.

    Raises:
        InvalidAuthorDataException: 400 if the body ID differs from the path ID
        AuthorNotFoundException: 404 if the author does not exist
    """
    if author_id != author_data.id:
        raise InvalidAuthorDataException("Author ID mismatch")

    repository = AuthorRepository(session)
    author = await repository.get_by_id(author_id)
    if author is None or await repository.update(author, author_data) is None:
        raise AuthorNotFoundException()
    log_info(f"Author updated: id={author_id}")


@router.delete("/{author_id}", response_model=MessageResponse)
async def delete_author(author_id: AuthorId, session: AsyncSession = Depends(get_db)) -> MessageResponse:
    """Delete an author and all of its books"""
    deleted_books = await AuthorRepository(session).delete(author_id)
    if deleted_books is None:
        raise AuthorNotFoundException()
    log_info(f"Author deleted: id={author_id}", {"deleted_books": deleted_books})
    return MessageResponse(message="Author deleted successfully")


# Books of an author


@router.post("/{author_id}/books", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book_for_author(
    author_id: AuthorId,
    book_data: AuthorBookCreate,
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_db),
) -> BookResponse:
    """
    Create a book owned by the author in the path.

    Raises:
        AuthorNotFoundException: 404 if the author does not exist, nothing is written
    """
    await ensure_author_exists(author_id, session)

    book = await BookRepository(session).create(book_data, author_id=author_id)
    response.headers["Location"] = str(
        request.url_for("get_book_for_author", author_id=author_id, book_id=book.id)
    )
    return BookResponse.model_validate(book)


@router.get("/{author_id}/books", response_model=List[BookDetailResponse])
async def get_books_for_author(author_id: AuthorId, session: AsyncSession = Depends(get_db)) -> List[BookDetailResponse]:
    await ensure_author_exists(author_id, session)
    books = await BookRepository(session).get_for_author(author_id)
    return [BookDetailResponse.model_validate(book) for book in books]


@router.get("/{author_id}/books/{book_id}", response_model=BookDetailResponse)
async def get_book_for_author(
    author_id: AuthorId, book_id: BookId, session: AsyncSession = Depends(get_db)
) -> BookDetailResponse:
    await ensure_author_exists(author_id, session)
    book = await BookRepository(session).get_for_author_by_id(author_id, book_id)
    if book is None:
        raise BookNotFoundException(BOOK_NOT_FOUND_FOR_AUTHOR)
    return BookDetailResponse.model_validate(book)


@router.put("/{author_id}/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def update_book_for_author(
    author_id: AuthorId, book_id: BookId, book_data: AuthorBookUpdate, session: AsyncSession = Depends(get_db)
) -> None:
    """Replace title and publish date of an author's book"""
    await ensure_author_exists(author_id, session)

    repository = BookRepository(session)
    book = await repository.get_for_author_by_id(author_id, book_id)
    if book is None:
        raise BookNotFoundException(BOOK_NOT_FOUND_FOR_AUTHOR)
    if await repository.update(book, book_data) is None:
        raise BookNotFoundException()


@router.delete("/{author_id}/books/{book_id}", response_model=MessageResponse)
async def delete_book_for_author(
    author_id: AuthorId, book_id: BookId, session: AsyncSession = Depends(get_db)
) -> MessageResponse:
    await ensure_author_exists(author_id, session)

    repository = BookRepository(session)
    book = await repository.get_for_author_by_id(author_id, book_id)
    if book is None:
        raise BookNotFoundException(BOOK_NOT_FOUND_FOR_AUTHOR)
    if not await repository.delete(book.id):
        raise BookNotFoundException()
    return MessageResponse(message="Book deleted successfully")
