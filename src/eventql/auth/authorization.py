"""Authorization gate.

Learn: The gate answers one question — is there a valid token at all?
It does not return the identity. Resolvers that need the user id call
codec.verify() themselves, which keeps the gate side-effect free and
identical for every protected operation.
"""

from typing import Optional

from eventql.auth.errors import MissingCredentialError
from eventql.auth.jwt import TokenCodec


def authorize_request(token: Optional[str], codec: TokenCodec) -> None:
    """Raise unless ``token`` is present and verifies with ``codec``.

    Raises MissingCredentialError for an empty token and lets
    InvalidTokenError from the codec propagate.
    """
    if not token:
        raise MissingCredentialError()
    codec.verify(token)
