"""eventql CLI — run the server and manage the database.

Usage:
    eventql serve                      # Run the API with uvicorn
    eventql serve --reload             # ...with auto-reload for development
    eventql init-db                    # Create tables (dev/test shortcut for alembic)
    eventql issue-token 42             # Print a bearer token for user 42
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Optional

import click

from eventql import __version__


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="eventql")
def main():
    """eventql — GraphQL backend for events and attendance."""


@main.command()
@click.option("--host", help="Bind address (default: EVENTQL_HOST)")
@click.option("--port", type=int, help="Port (default: EVENTQL_PORT)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP server."""
    import uvicorn

    from eventql.config import settings

    uvicorn.run(
        "eventql.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@main.command("init-db")
@click.option("--drop", is_flag=True, help="Drop existing tables first")
def init_db(drop: bool):
    """Create all tables from the ORM models."""
    from eventql.db.engine import create_schema, drop_schema, engine

    async def _impl():
        if drop:
            await drop_schema(engine)
        await create_schema(engine)
        await engine.dispose()

    _run(_impl())
    click.secho("Tables created.", fg="green")


@main.command("issue-token")
@click.argument("user_id", type=int)
def issue_token(user_id: int):
    """Print a bearer token for an existing user."""
    from eventql.auth.dependencies import get_token_codec
    from eventql.auth.errors import AuthError
    from eventql.db.engine import async_session_factory, engine, transaction
    from eventql.services.user_service import UserService

    async def _impl():
        try:
            async with transaction(async_session_factory) as db:
                return await UserService(db).get_user(user_id)
        finally:
            await engine.dispose()

    user = _run(_impl())
    if user is None:
        click.secho(f"Error: no user with id {user_id}", fg="red", err=True)
        sys.exit(1)

    try:
        token = get_token_codec().issue(user)
    except AuthError as e:
        click.secho(f"Error: {e} (is EVENTQL_JWT_SECRET set?)", fg="red", err=True)
        sys.exit(1)
    click.echo(token)


if __name__ == "__main__":
    main()
