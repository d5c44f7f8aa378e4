"""
ORM models of the Book API
"""

from .author import Author
from .base import Base
from .book import Book
from .user import User

__all__ = ["Base", "Author", "Book", "User"]
