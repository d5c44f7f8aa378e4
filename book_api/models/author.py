from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .book import Book


class Author(Base):
    name: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    # Books are removed explicitly by AuthorRepository.delete
    books: Mapped[list["Book"]] = relationship(back_populates="author", passive_deletes=True)

    def __str__(self) -> str:
        return self.name
