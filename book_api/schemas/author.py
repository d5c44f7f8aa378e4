"""
Author schemas
"""

from datetime import date

from pydantic import Field

from .base import MAX_ID, CamelModel
from .book import BookResponse


class AuthorBase(CamelModel):
    """
    Mutable fields of an author
    """

    name: str = Field(..., min_length=1, max_length=255, description="Author name")
    bio: str = Field("", max_length=4000, description="Author biography")
    date_of_birth: date = Field(..., description="Date of birth")


class AuthorCreate(AuthorBase):
    pass


class AuthorUpdate(AuthorBase):
    """
    Full replacement of an author, ``id`` must match the ID in the path
    """

    id: int = Field(..., ge=1, le=MAX_ID, description="Author ID")


class AuthorResponse(AuthorBase):
    id: int = Field(..., description="Author ID")
    books: list[BookResponse] = Field(default_factory=list)
