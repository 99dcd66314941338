"""GraphQL schema — type declarations and field bindings.

Learn: Strawberry turns these classes into SDL. Python snake_case names
become camelCase in the schema (created_events → createdEvents,
update_event_attendance → updateEventAttendance).

No business logic lives here. Each field calls the matching function in
resolvers.py and wraps the ORM rows it gets back in a GraphQL type.
Argument IDs are handed over as received; resolvers parse them after the
authorization gate has run.

Resulting SDL:

    type User   { id, username, createdEvents, attendedEvents }
    type Event  { id, name, date, location, creator, attendees }
    type Query  { events, event(id), user }
    type Mutation {
      registerUser, loginUser,
      createEvent, updateEvent, deleteEvent, updateEventAttendance
    }
"""

from typing import Optional

import strawberry
import structlog
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.types import ExecutionContext, Info

from eventql.auth.errors import AuthError
from eventql.db.models import Event, User
from eventql.graphql import resolvers
from eventql.graphql.context import GraphQLContext

logger = structlog.get_logger()

MASKED_ERROR_MESSAGE = "Unexpected error."


def _pk(value: strawberry.ID) -> int:
    return int(value)


@strawberry.type(name="User")
class UserType:
    id: strawberry.ID
    username: str

    @classmethod
    def from_model(cls, user: User) -> "UserType":
        return cls(id=strawberry.ID(str(user.id)), username=user.username)

    @strawberry.field
    async def created_events(self, info: Info[GraphQLContext, None]) -> list["EventType"]:
        rows = await resolvers.created_events(info.context, _pk(self.id))
        return [EventType.from_model(e) for e in rows]

    @strawberry.field
    async def attended_events(self, info: Info[GraphQLContext, None]) -> list["EventType"]:
        rows = await resolvers.attended_events(info.context, _pk(self.id))
        return [EventType.from_model(e) for e in rows]


@strawberry.type(name="Event")
class EventType:
    id: strawberry.ID
    name: str
    date: str
    location: str
    creator_id: strawberry.Private[int]

    @classmethod
    def from_model(cls, event: Event) -> "EventType":
        return cls(
            id=strawberry.ID(str(event.id)),
            name=event.name,
            date=event.date,
            location=event.location,
            creator_id=event.creator_id,
        )

    @strawberry.field
    async def creator(self, info: Info[GraphQLContext, None]) -> UserType:
        row = await resolvers.creator(info.context, self.creator_id)
        return UserType.from_model(row)

    @strawberry.field
    async def attendees(self, info: Info[GraphQLContext, None]) -> list[UserType]:
        rows = await resolvers.attendees(info.context, _pk(self.id))
        return [UserType.from_model(u) for u in rows]


def _event_or_none(row: Optional[Event]) -> Optional[EventType]:
    return EventType.from_model(row) if row is not None else None


@strawberry.type
class Query:
    @strawberry.field
    async def events(self, info: Info[GraphQLContext, None]) -> list[EventType]:
        rows = await resolvers.events(info.context)
        return [EventType.from_model(e) for e in rows]

    @strawberry.field
    async def event(
        self, info: Info[GraphQLContext, None], id: strawberry.ID
    ) -> Optional[EventType]:
        return _event_or_none(await resolvers.event(info.context, id))

    @strawberry.field
    async def user(self, info: Info[GraphQLContext, None]) -> Optional[UserType]:
        row = await resolvers.user(info.context)
        return UserType.from_model(row) if row is not None else None


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def register_user(
        self, info: Info[GraphQLContext, None], username: str, password: str
    ) -> Optional[str]:
        return await resolvers.register_user(info.context, username, password)

    @strawberry.mutation
    async def login_user(
        self, info: Info[GraphQLContext, None], username: str, password: str
    ) -> Optional[str]:
        return await resolvers.login_user(info.context, username, password)

    @strawberry.mutation
    async def create_event(
        self, info: Info[GraphQLContext, None], name: str, date: str, location: str
    ) -> Optional[EventType]:
        return _event_or_none(
            await resolvers.create_event(info.context, name, date, location)
        )

    @strawberry.mutation
    async def update_event(
        self,
        info: Info[GraphQLContext, None],
        id: strawberry.ID,
        name: str,
        date: str,
        location: str,
    ) -> Optional[EventType]:
        return _event_or_none(
            await resolvers.update_event(info.context, id, name, date, location)
        )

    @strawberry.mutation
    async def delete_event(
        self, info: Info[GraphQLContext, None], id: strawberry.ID
    ) -> Optional[EventType]:
        return _event_or_none(await resolvers.delete_event(info.context, id))

    @strawberry.mutation
    async def update_event_attendance(
        self, info: Info[GraphQLContext, None], event_id: strawberry.ID, status: str
    ) -> Optional[EventType]:
        return _event_or_none(
            await resolvers.update_event_attendance(info.context, event_id, status)
        )


def should_mask_error(error: GraphQLError) -> bool:
    """Hide server-side failures; keep auth messages and query errors readable.

    Learn: Errors without an original_error come from parsing/validating
    the query itself. AuthError messages are fixed strings written for
    clients. Anything else (IntegrityError, bad ids...) could leak SQL
    or internals, so the client only sees MASKED_ERROR_MESSAGE.
    """
    original = error.original_error
    if original is None:
        return False
    return not isinstance(original, AuthError)


class EventSchema(strawberry.Schema):
    """Schema that reports field errors through structlog."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: Optional[ExecutionContext] = None,
    ) -> None:
        for error in errors:
            original = error.original_error
            if original is None or isinstance(original, AuthError):
                logger.info("graphql.request_rejected", error=error.message, path=error.path)
            else:
                logger.error(
                    "graphql.resolver_failed",
                    path=error.path,
                    exc_info=(type(original), original, original.__traceback__),
                )


schema = EventSchema(
    query=Query,
    mutation=Mutation,
    extensions=[
        lambda: MaskErrors(
            should_mask_error=should_mask_error, error_message=MASKED_ERROR_MESSAGE
        ),
    ],
)
