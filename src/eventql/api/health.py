"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running
and the database is reachable through the same session factory
the resolvers use.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eventql import __version__
from eventql.db.engine import get_session_factory

router = APIRouter()


@router.get("/health")
async def health_check(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"error: {e}"

    status = "healthy" if checks["database"] == "ok" else "degraded"
    return {"status": status, **checks}
