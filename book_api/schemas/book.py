"""
Book schemas
"""

from datetime import date
from typing import Optional

from pydantic import Field

from .base import MAX_ID, CamelModel


class BookBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=255, description="Book title")
    publish_date: date = Field(..., description="Publication date")


class AuthorBookCreate(BookBase):
    """
    Body of ``POST /authors/{authorId}/books``, the author comes from the path
    """


class AuthorBookUpdate(BookBase):
    """
    Body of ``PUT /authors/{authorId}/books/{bookId}``
    """


class BookCreate(BookBase):
    author_id: int = Field(..., gt=0, le=MAX_ID, description="Owning author ID")


class BookUpdate(BookCreate):
    id: int = Field(..., ge=1, le=MAX_ID, description="Must match the ID in the path")


class BookAuthor(CamelModel):
    id: int
    name: str
    bio: str
    date_of_birth: date


class BookResponse(BookBase):
    id: int
    author_id: int


class BookDetailResponse(BookResponse):
    """
    Book together with its author
    """

    author: Optional[BookAuthor] = None
