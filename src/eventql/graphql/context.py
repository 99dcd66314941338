"""GraphQL context — carries the bearer token, codec and session factory into resolvers."""

from typing import Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from strawberry.fastapi import BaseContext

from eventql.auth.dependencies import get_bearer_token, get_token_codec
from eventql.auth.jwt import TokenCodec
from eventql.config import settings
from eventql.db.engine import get_session_factory


class GraphQLContext(BaseContext):
    """Context passed to every GraphQL resolver.

    Learn: The token is kept raw. Nothing here decodes it — each resolver
    decides whether it needs the gate, the identity, or neither.
    """

    def __init__(
        self,
        token: Optional[str],
        codec: TokenCodec,
        session_factory: async_sessionmaker[AsyncSession],
        bcrypt_rounds: int = settings.bcrypt_rounds,
    ) -> None:
        super().__init__()
        self.token = token
        self.codec = codec
        self.session_factory = session_factory
        self.bcrypt_rounds = bcrypt_rounds


async def get_context(
    token: Optional[str] = Depends(get_bearer_token),
    codec: TokenCodec = Depends(get_token_codec),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> GraphQLContext:
    """FastAPI dependency used as the GraphQLRouter context_getter."""
    return GraphQLContext(token=token, codec=codec, session_factory=session_factory)
