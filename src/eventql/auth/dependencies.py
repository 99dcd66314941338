"""FastAPI auth dependencies.

Learn: These are used as Depends() in the GraphQL context getter to
pull the bearer token off the request and hand resolvers a codec.
Tests override get_token_codec to sign with their own secret.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Header

from eventql.auth.jwt import TokenCodec
from eventql.config import settings


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide codec built once from settings."""
    return TokenCodec.from_settings(settings)


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Return the raw token from the Authorization header.

    Learn: The header value is forwarded as-is. A leading "Bearer "
    is dropped when present so both `Authorization: <jwt>` and
    `Authorization: Bearer <jwt>` work.
    """
    if not authorization:
        return None
    if authorization.startswith("Bearer "):
        return authorization[7:]
    return authorization
