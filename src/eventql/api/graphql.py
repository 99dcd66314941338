"""GraphQL HTTP route.

Learn: Strawberry's GraphQLRouter is a FastAPI APIRouter. Its
context_getter is an ordinary dependency, so the bearer token, codec
and session factory are all resolved through Depends() — and tests
swap them with app.dependency_overrides like any other route.
"""

from strawberry.fastapi import GraphQLRouter

from eventql.graphql import get_context, schema

router = GraphQLRouter(schema, context_getter=get_context)
