"""
Pydantic schemas of the Book API
"""

from .author import AuthorBase, AuthorCreate, AuthorResponse, AuthorUpdate
from .base import CamelModel, MessageResponse
from .book import (
    AuthorBookCreate,
    AuthorBookUpdate,
    BookAuthor,
    BookBase,
    BookCreate,
    BookDetailResponse,
    BookResponse,
    BookUpdate,
)
from .user import AuthResponse, LoginRequest, RegisterRequest, UserRead

__all__ = [
    "CamelModel",
    "MessageResponse",
    "AuthorBase",
    "AuthorCreate",
    "AuthorUpdate",
    "AuthorResponse",
    "BookBase",
    "AuthorBookCreate",
    "AuthorBookUpdate",
    "BookCreate",
    "BookUpdate",
    "BookAuthor",
    "BookResponse",
    "BookDetailResponse",
    "RegisterRequest",
    "LoginRequest",
    "AuthResponse",
    "UserRead",
]
