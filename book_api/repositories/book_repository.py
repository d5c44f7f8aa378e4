from typing import Optional

from loguru import logger
from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from book_api.models import Book
from book_api.schemas.book import BookBase


class BookRepository:
    """
    Repository for books. Reads load the owning author as well.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    def _select(self):
        return select(Book).options(selectinload(Book.author)).execution_options(populate_existing=True)

    async def get_all(self) -> list[Book]:
        result = await self.db.execute(self._select().order_by(Book.id))
        return list(result.scalars().all())

    async def get_by_id(self, book_id: int) -> Optional[Book]:
        """
        Get a book by ID.

        Args:
            book_id: Book identifier

        Returns:
            Book with its author or None if not found
        """
        result = await self.db.execute(self._select().where(Book.id == book_id))
        return result.scalars().first()

    async def get_for_author(self, author_id: int) -> list[Book]:
        result = await self.db.execute(self._select().where(Book.author_id == author_id).order_by(Book.id))
        return list(result.scalars().all())

    async def get_for_author_by_id(self, author_id: int, book_id: int) -> Optional[Book]:
        """
        Get a book only if it belongs to the given author.

        Args:
            author_id: Owning author identifier
            book_id: Book identifier

        Returns:
            Book or None if it does not exist or belongs to another author
        """
        query = self._select().where(Book.id == book_id, Book.author_id == author_id)
        result = await self.db.execute(query)
        return result.scalars().first()

    async def exists(self, book_id: int) -> bool:
        result = await self.db.execute(select(exists().where(Book.id == book_id)))
        return bool(result.scalar())

    async def create(self, book_data: BookBase, author_id: int) -> Book:
        """
        Create a book owned by ``author_id``. The caller checks the author exists.

        Args:
            book_data: Title and publish date
            author_id: Owning author identifier

        Returns:
            Created book with its author
        """
        db_book = Book(title=book_data.title, publish_date=book_data.publish_date, author_id=author_id)
        self.db.add(db_book)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Book created: ID={db_book.id}, title='{db_book.title}', author ID={author_id}")
        return await self.get_by_id(db_book.id)

    async def update(self, book: Book, book_data: BookBase, author_id: Optional[int] = None) -> Optional[Book]:
        """
        Overwrite every mutable field of ``book``.

        Args:
            book: Loaded book
            book_data: New title and publish date
            author_id: New owner, unchanged when None

        Returns:
            Updated book, or None if the row disappeared before the write

        Raises:
            StaleDataError: If the write conflicted but the row still exists
        """
        book_id = book.id
        book.title = book_data.title
        book.publish_date = book_data.publish_date
        if author_id is not None:
            book.author_id = author_id

        try:
            await self.db.commit()
        except StaleDataError:
            await self.db.rollback()
            if not await self.exists(book_id):
                logger.warning(f"Book ID={book_id} was deleted during update")
                return None
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Book updated: ID={book_id}")
        return book

    async def delete(self, book_id: int) -> bool:
        """
        Delete a book.

        Returns:
            True if a row was deleted, False if the book does not exist
        """
        try:
            result = await self.db.execute(delete(Book).where(Book.id == book_id))
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        deleted = bool(result.rowcount)
        if deleted:
            logger.info(f"Book deleted: ID={book_id}")
        return deleted
