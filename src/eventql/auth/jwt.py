"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication.
The token holds a single claim, the user id, plus the issue time.
There is no exp claim — tokens stay valid for as long as the signing
secret does.

Verification failures are collapsed into one InvalidTokenError so
the caller never learns whether the signature, the payload, or the
encoding was wrong.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import jwt
import structlog

from eventql.auth.errors import InvalidTokenError, TokenGenerationError
from eventql.config import Settings

logger = structlog.get_logger()


def _user_id(user: Any) -> Any:
    """Read the id off an ORM row, a dataclass, or a plain dict."""
    if isinstance(user, Mapping):
        return user.get("id")
    return getattr(user, "id", None)


class TokenCodec:
    """Signs and verifies bearer tokens with one shared secret."""

    def __init__(self, secret: str, algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(settings.jwt_secret, settings.jwt_algorithm)

    def issue(self, user: Any) -> str:
        """Create a token for ``user``. Raises TokenGenerationError if it has no id."""
        user_id = _user_id(user)
        if user_id is None:
            raise TokenGenerationError()
        if not self.secret:
            logger.error("auth.token_secret_missing")
            raise TokenGenerationError()

        payload = {
            "id": user_id,
            "iat": datetime.now(timezone.utc),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        """Verify and decode a token.

        Returns the payload dict on success.
        Raises InvalidTokenError on any failure.
        """
        if not self.secret:
            logger.error("auth.token_secret_missing")
            raise InvalidTokenError()
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as e:
            logger.debug("auth.token_rejected", reason=type(e).__name__)
            raise InvalidTokenError() from None

        if "id" not in payload:
            logger.debug("auth.token_rejected", reason="MissingIdClaim")
            raise InvalidTokenError()
        return payload
