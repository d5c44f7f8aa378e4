from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .author import Author


class Book(Base):
    title: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    publish_date: Mapped[date] = mapped_column(Date, nullable=False)
    author_id: Mapped[int] = mapped_column(ForeignKey("authors.id", ondelete="CASCADE"), index=True, nullable=False)

    author: Mapped[Optional["Author"]] = relationship(back_populates="books")

    def __str__(self) -> str:
        return f"{self.title} - {self.author.name if self.author else ''}"
