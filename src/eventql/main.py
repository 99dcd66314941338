"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (logging, optional schema
creation, engine disposal). Middleware, CORS, and routers all
registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eventql import __version__
from eventql.api import api_router
from eventql.config import settings
from eventql.log import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    from eventql.db.engine import create_schema, engine
    from eventql.graphql.resolvers import warm_login_pad

    logger.info(
        "eventql.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )
    if not settings.jwt_secret:
        logger.warning("eventql.jwt_secret_missing")

    if settings.create_schema_on_startup:
        await create_schema(engine)
        logger.info("eventql.schema_created")

    await warm_login_pad(settings.bcrypt_rounds)

    yield

    logger.info("eventql.shutdown")
    await engine.dispose()


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    configure_logging(settings.log_level, json=settings.log_json)

    app = FastAPI(
        title="eventql",
        description="GraphQL API for events, users and attendance",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: RequestId → Security → CORS → handler

    from eventql.middleware.request_id import RequestIdMiddleware
    from eventql.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: eventql.main:app)
app = create_app()
