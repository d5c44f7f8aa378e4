"""
Test utilities
"""

import base64
import json
import uuid
from datetime import UTC, datetime, timedelta
from typing import Optional

import jwt

from book_api.core.config import settings


def create_test_token(
    user_id: int,
    issued_at: Optional[datetime] = None,
    lifetime: timedelta = timedelta(hours=24),
    secret: Optional[str] = None,
    **overrides,
) -> str:
    """
    Build a signed token with the claims the API issues.

    Args:
        user_id: Subject of the token
        issued_at: ``iat`` claim, now by default
        lifetime: ``exp - iat``
        secret: Signing key, the configured one by default
        overrides: Claims to replace; None removes the claim

    Returns:
        str: JWT token
    """
    issued_at = issued_at or datetime.now(UTC)
    claims = {
        "sub": str(user_id),
        "email": "someone@example.com",
        "name": "Someone",
        "jti": str(uuid.uuid4()),
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    for key, value in overrides.items():
        if value is None:
            claims.pop(key, None)
        else:
            claims[key] = value
    return jwt.encode(claims, secret or settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_expired_token(user_id: int) -> str:
    return create_test_token(user_id, issued_at=datetime.now(UTC) - timedelta(hours=25))


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def tamper_token(token: str) -> str:
    """
    Rewrite the subject of a token without re-signing it.
    """
    header, payload, signature = token.split(".")
    claims = jwt.decode(token, options={"verify_signature": False})
    claims["sub"] = str(int(claims["sub"]) + 1000)
    return ".".join([header, _b64url(json.dumps(claims).encode()), signature])
