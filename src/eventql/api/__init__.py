"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Unlike a REST API, auth is not applied at the router level.
/graphql is one open route — the authorization gate runs inside each
resolver, because registerUser and loginUser must work without a token
while every other operation needs one.
"""

from fastapi import APIRouter

from eventql.api.graphql import router as graphql_router
from eventql.api.health import router as health_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(graphql_router, prefix="/graphql", tags=["graphql"])
