"""Authentication and authorization.

Learn: One authentication path — username/password → bearer JWT.
The token only carries the user id and never expires, so holding it
means acting as that user until the signing secret changes.

Three pieces:
1. password — bcrypt hashing and comparison
2. jwt — TokenCodec issues and verifies tokens
3. authorization — the gate every protected resolver calls first
"""

from eventql.auth.authorization import authorize_request
from eventql.auth.errors import (
    AuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    MissingCredentialError,
    TokenGenerationError,
)
from eventql.auth.jwt import TokenCodec

__all__ = [
    "AuthError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MissingCredentialError",
    "TokenCodec",
    "TokenGenerationError",
    "authorize_request",
]
