from .author_repository import AuthorRepository
from .book_repository import BookRepository

__all__ = ["AuthorRepository", "BookRepository"]
