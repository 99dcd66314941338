"""Auth error types.

Learn: Each error carries a fixed, client-safe message. The GraphQL
layer passes AuthError messages through to the caller untouched and
masks everything else, so these strings are the whole story a client
ever sees about why auth failed.
"""


class AuthError(Exception):
    """Base class for errors that are safe to show to API clients."""

    message = "Authentication failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class MissingCredentialError(AuthError):
    """No token was presented."""

    message = "No token"


class InvalidTokenError(AuthError):
    """Token is malformed, tampered with, or signed with another secret."""

    message = "Bad token"


class TokenGenerationError(AuthError):
    """A token could not be issued for the given user."""

    message = "Could not generate token."


class InvalidCredentialsError(AuthError):
    """Login failed. Unknown user and wrong password look the same."""

    message = "Invalid login credentials"
