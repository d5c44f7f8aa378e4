"""
Authentication: user manager, bearer transport and JWT strategy.
"""

import re
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any, NamedTuple, Optional, Union

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPBearer
from fastapi_users import BaseUserManager, FastAPIUsers, IntegerIDMixin, exceptions, schemas
from fastapi_users.authentication import AuthenticationBackend, BearerTransport, JWTStrategy
from fastapi_users_db_sqlalchemy import SQLAlchemyUserDatabase
from sqlalchemy.ext.asyncio import AsyncSession

from book_api.core.config import settings
from book_api.core.database import get_db
from book_api.core.exceptions import ConfigurationException
from book_api.core.logger_config import log_auth_info, log_auth_warning, logger
from book_api.models.user import User
from book_api.schemas.base import MAX_ID

# Tokens are valid for exactly 24 hours, there is no refresh
TOKEN_LIFETIME = timedelta(hours=24)

PASSWORD_MIN_LENGTH = 6


class IssuedToken(NamedTuple):
    token: str
    expires_at: datetime


class BookApiJWTStrategy(JWTStrategy[User, int]):
    """
    JWT strategy issuing tokens with identity claims.

    Besides ``sub`` the token carries the user's email, display name, a unique
    ``jti`` and the configured issuer and audience. Reading a token checks the
    signature, issuer, audience and expiry; any failure means "no user".
    """

    def __init__(self, secret: str, issuer: str, audience: str, algorithm: str = "HS256"):
        super().__init__(
            secret=secret,
            lifetime_seconds=int(TOKEN_LIFETIME.total_seconds()),
            token_audience=[audience],
            algorithm=algorithm,
        )
        self.issuer = issuer
        self.audience = audience

    def issue(self, user: User) -> IssuedToken:
        issued_at = datetime.now(UTC).replace(microsecond=0)
        expires_at = issued_at + TOKEN_LIFETIME
        claims = {
            "sub": str(user.id),
            "email": user.email,
            "name": user.display_name,
            "jti": str(uuid.uuid4()),
            "iss": self.issuer,
            "aud": self.audience,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(claims, self.encode_key, algorithm=self.algorithm)
        return IssuedToken(token=token, expires_at=expires_at)

    async def write_token(self, user: User) -> str:
        return self.issue(user).token

    async def read_token(
        self, token: Optional[str], user_manager: BaseUserManager[User, int]
    ) -> Optional[User]:
        if token is None:
            return None

        try:
            data = jwt.decode(
                token,
                self.decode_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["sub", "jti", "iat", "exp"]},
            )
        except jwt.PyJWTError as e:
            log_auth_warning(f"Rejected token: {e.__class__.__name__}")
            return None

        try:
            parsed_id = user_manager.parse_id(data["sub"])
            return await user_manager.get(parsed_id)
        except (exceptions.UserNotExists, exceptions.InvalidID):
            log_auth_warning("Token subject does not match a user", {"sub": data.get("sub")})
            return None


def get_jwt_strategy() -> BookApiJWTStrategy:
    """
    Build the JWT strategy from settings.

    Raises:
        ConfigurationException: if the signing key is not configured
    """
    if not settings.JWT_SECRET_KEY:
        logger.error("JWT secret key is not configured")
        raise ConfigurationException("JWT secret key is not configured")

    return BookApiJWTStrategy(
        secret=settings.JWT_SECRET_KEY,
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
        algorithm=settings.JWT_ALGORITHM,
    )


class BearerTokenScheme(HTTPBearer):
    """
    ``Authorization: Bearer <token>`` scheme returning the raw token.

    Documented as an HTTP bearer scheme, since login takes a JSON body and not
    the OAuth2 password form.
    """

    async def __call__(self, request: Request) -> Optional[str]:
        credentials = await super().__call__(request)
        return credentials.credentials if credentials else None


class BookApiBearerTransport(BearerTransport):
    def __init__(self):
        super().__init__(tokenUrl=f"{settings.API_PREFIX}/auth/login")
        self.scheme = BearerTokenScheme(auto_error=False, description="Token returned by /auth/login")


bearer_transport = BookApiBearerTransport()

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)


async def get_user_db(session: AsyncSession = Depends(get_db)):
    yield SQLAlchemyUserDatabase(session, User)


class UserManager(IntegerIDMixin, BaseUserManager[User, int]):
    """User manager with the password policy of the API"""

    reset_password_token_secret = settings.JWT_SECRET_KEY
    verification_token_secret = settings.JWT_SECRET_KEY

    def parse_id(self, value: Any) -> int:
        user_id = super().parse_id(value)
        if not 1 <= user_id <= MAX_ID:
            raise exceptions.InvalidID()
        return user_id

    async def validate_password(self, password: str, user: Union[schemas.UC, User]) -> None:
        """
        Check the password policy.

        Raises:
            InvalidPasswordException: with the list of broken rules as reason
        """
        errors = []
        if len(password) < PASSWORD_MIN_LENGTH:
            errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        if not re.search(r"\d", password):
            errors.append("Password must contain at least one digit")
        if not re.search(r"[a-z]", password):
            errors.append("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", password):
            errors.append("Password must contain at least one uppercase letter")
        if not re.search(r"[^a-zA-Z0-9]", password):
            errors.append("Password must contain at least one non-alphanumeric character")

        if errors:
            raise exceptions.InvalidPasswordException(reason=errors)

    async def on_after_register(self, user: User, request: Optional[Request] = None) -> None:
        log_auth_info(f"User {user.id} has registered", {"email": user.email})

    async def on_after_login(self, user: User, request: Optional[Request] = None, response=None) -> None:
        log_auth_info(f"User {user.id} logged in")


async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)


fastapi_users = FastAPIUsers[User, int](
    get_user_manager,
    [auth_backend],
)

# Any failure to resolve a user (no token, bad token, inactive user) is a 401
current_active_user = fastapi_users.current_user(active=True)


__all__ = [
    "TOKEN_LIFETIME",
    "IssuedToken",
    "BookApiJWTStrategy",
    "get_jwt_strategy",
    "BearerTokenScheme",
    "auth_backend",
    "get_user_db",
    "UserManager",
    "get_user_manager",
    "fastapi_users",
    "current_active_user",
]
