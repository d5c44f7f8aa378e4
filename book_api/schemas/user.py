from datetime import datetime
from typing import Optional

from fastapi_users import schemas
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .base import CamelModel


class RegisterRequest(schemas.BaseUserCreate):
    full_name: Optional[str] = Field(None, alias="fullName", max_length=255)

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    token: str
    email: str
    expiration: datetime


class UserRead(CamelModel):
    id: int
    email: str
    full_name: Optional[str] = None
    created_at: datetime
