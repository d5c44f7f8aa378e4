"""
Path parameters shared by the routers
"""

from typing import Annotated

from fastapi import Path

from book_api.schemas.base import MAX_ID

AuthorId = Annotated[int, Path(ge=1, le=MAX_ID, description="Author ID")]
BookId = Annotated[int, Path(ge=1, le=MAX_ID, description="Book ID")]
