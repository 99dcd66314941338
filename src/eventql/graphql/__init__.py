"""GraphQL API surface.

Learn: schema.py declares types and binds each field to a function in
resolvers.py. resolvers.py owns authorization and transactions.
context.py builds the per-request context from the HTTP request.
"""

from eventql.graphql.context import GraphQLContext, get_context
from eventql.graphql.schema import schema

__all__ = ["GraphQLContext", "get_context", "schema"]
