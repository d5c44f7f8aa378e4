from typing import Optional

from loguru import logger
from sqlalchemy import delete, exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from book_api.models import Author, Book
from book_api.schemas.author import AuthorBase


class AuthorRepository:
    """
    Repository for authors.

    Provides the CRUD operations on authors. Every read eagerly loads the
    author's books, lazy loading is not available on an async session.
    """

    def __init__(self, db_session: AsyncSession):
        """
        Args:
            db_session: SQLAlchemy async session
        """
        self.db = db_session

    async def get_all(self) -> list[Author]:
        """
        Returns every author with its books, ordered by ID.
        """
        query = select(Author).options(selectinload(Author.books)).order_by(Author.id)
        result = await self.db.execute(query)
        authors = list(result.scalars().all())
        logger.debug(f"Found {len(authors)} authors")
        return authors

    async def get_by_id(self, author_id: int) -> Optional[Author]:
        """
        Get an author by its ID.

        Args:
            author_id: Author identifier

        Returns:
            Author with its books or None if not found
        """
        query = (
            select(Author)
            .options(selectinload(Author.books))
            .where(Author.id == author_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        author = result.scalars().first()
        if author is None:
            logger.debug(f"Author with ID={author_id} not found")
        return author

    async def exists(self, author_id: int) -> bool:
        result = await self.db.execute(select(exists().where(Author.id == author_id)))
        return bool(result.scalar())

    async def create(self, author_data: AuthorBase) -> Author:
        """
        Create a new author.

        Args:
            author_data: Author fields

        Returns:
            Created author
        """
        db_author = Author(
            name=author_data.name,
            bio=author_data.bio,
            date_of_birth=author_data.date_of_birth,
        )
        self.db.add(db_author)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Author created: ID={db_author.id}, name='{db_author.name}'")
        return await self.get_by_id(db_author.id)

    async def update(self, author: Author, author_data: AuthorBase) -> Optional[Author]:
        """
        Overwrite every mutable field of ``author``.

        Args:
            author: Loaded author
            author_data: New field values

        Returns:
            Updated author, or None if the row disappeared before the write

        Raises:
            StaleDataError: If the write conflicted but the row still exists
        """
        author_id = author.id
        author.name = author_data.name
        author.bio = author_data.bio
        author.date_of_birth = author_data.date_of_birth

        try:
            await self.db.commit()
        except StaleDataError:
            await self.db.rollback()
            if not await self.exists(author_id):
                logger.warning(f"Author ID={author_id} was deleted during update")
                return None
            raise
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Author updated: ID={author_id}")
        return author

    async def delete(self, author_id: int) -> Optional[int]:
        """
        Delete an author together with all of its books in one transaction.

        Args:
            author_id: Author identifier

        Returns:
            Number of deleted books, or None if the author does not exist
        """
        try:
            books_result = await self.db.execute(delete(Book).where(Book.author_id == author_id))
            author_result = await self.db.execute(delete(Author).where(Author.id == author_id))
            if author_result.rowcount == 0:
                await self.db.rollback()
                logger.debug(f"Author with ID={author_id} not found for deletion")
                return None
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        deleted_books = books_result.rowcount or 0
        logger.info(f"Author deleted: ID={author_id}, books removed: {deleted_books}")
        return deleted_books
