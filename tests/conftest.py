"""Test fixtures — a fresh SQLite database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI + Strawberry:

1. Each test gets its own SQLite file under tmp_path, with the schema
   created from the ORM models and foreign keys switched on.
2. The app's get_session_factory and get_token_codec dependencies are
   overridden, so HTTP requests hit that database and sign tokens with
   TEST_SECRET.
3. make_context() builds a GraphQLContext for calling resolvers
   directly, without HTTP.

Environment defaults are set before anything from eventql is imported,
because Settings is read once at import time.
"""

import os

os.environ.setdefault("EVENTQL_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("EVENTQL_JWT_SECRET", "test-secret-0123456789abcdef0123456789")
os.environ.setdefault("EVENTQL_BCRYPT_ROUNDS", "4")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from eventql.auth.dependencies import get_token_codec
from eventql.auth.jwt import TokenCodec
from eventql.db.engine import (
    build_engine,
    build_session_factory,
    create_schema,
    get_session_factory,
)
from eventql.graphql.context import GraphQLContext
from eventql.main import app

TEST_SECRET = "unit-test-signing-secret-0123456789abcdef"
TEST_ROUNDS = 4


@pytest.fixture()
def db_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'eventql-test.db'}"


@pytest_asyncio.fixture()
async def engine(db_url):
    """Per-test engine on a fresh database file with all tables created."""
    engine = build_engine(db_url)
    await create_schema(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def codec():
    return TokenCodec(TEST_SECRET)


@pytest.fixture()
def make_context(codec, session_factory):
    """Factory for resolver contexts: make_context(token=None)."""

    def _make(token=None):
        return GraphQLContext(
            token=token,
            codec=codec,
            session_factory=session_factory,
            bcrypt_rounds=TEST_ROUNDS,
        )

    return _make


@pytest_asyncio.fixture()
async def client(session_factory, codec):
    """HTTP client with the app's database and codec overridden for testing."""
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_token_codec] = lambda: codec

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def gql(client):
    """POST a GraphQL operation: await gql(query, variables=None, token=None)."""

    async def _post(query, variables=None, token=None):
        headers = {"authorization": token} if token else {}
        r = await client.post(
            "/graphql",
            json={"query": query, "variables": variables or {}},
            headers=headers,
        )
        assert r.status_code == 200, r.text
        return r.json()

    return _post
