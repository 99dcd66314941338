"""Transactional resolvers — one unit of work per GraphQL field.

Learn: Every function here follows the same protocol:

1. open `transaction(ctx.session_factory)` — one session, one BEGIN/COMMIT
2. run the authorization gate (everything except register/login and the
   relationship fields, whose parent was already gated)
3. decode the token again if the operation needs to know *who* is asking
4. delegate to UserService / EventService

Any exception rolls back that resolver's transaction and surfaces as a
GraphQL error for that field only. Nothing is caught and retried.

The functions take the context explicitly and return ORM rows, so they
can be called directly from tests without going through HTTP.
"""

import asyncio
from functools import lru_cache
from typing import Optional

import structlog

from eventql.auth.authorization import authorize_request
from eventql.auth.errors import InvalidCredentialsError
from eventql.auth.password import hash_password, hash_password_async, verify_password_async
from eventql.db.engine import transaction
from eventql.db.models import Event, User
from eventql.graphql.context import GraphQLContext
from eventql.services.event_service import EventService
from eventql.services.user_service import UserService

logger = structlog.get_logger()

ATTEND = "ATTEND"


@lru_cache
def _dummy_hash(rounds: int) -> str:
    # Compared against on unknown usernames so both login failures cost one bcrypt check.
    return hash_password("eventql-login-timing-pad", rounds)


def _identity(ctx: GraphQLContext) -> int:
    return ctx.codec.verify(ctx.token)["id"]


def _pk(value: str | int) -> int:
    # GraphQL IDs arrive as strings; only parsed once the gate has passed.
    return int(value)


async def warm_login_pad(rounds: int) -> None:
    """Build the unknown-user pad hash ahead of the first login."""
    await asyncio.to_thread(_dummy_hash, rounds)


# ─── Queries ─────────────────────────────────────────────


async def events(ctx: GraphQLContext) -> list[Event]:
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        return await EventService(db).list_events()


async def event(ctx: GraphQLContext, event_id: str | int) -> Optional[Event]:
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        return await EventService(db).get_event(_pk(event_id))


async def user(ctx: GraphQLContext) -> Optional[User]:
    """The user the token belongs to, or None if that user is gone."""
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        return await UserService(db).get_user(_identity(ctx))


# ─── Auth mutations ──────────────────────────────────────


async def register_user(ctx: GraphQLContext, username: str, password: str) -> str:
    """Create a user and return a token for them.

    No authorization — this is how a client gets its first token.
    A taken username fails on the unique constraint and rolls back.
    """
    async with transaction(ctx.session_factory) as db:
        password_hash = await hash_password_async(password, ctx.bcrypt_rounds)
        new_user = await UserService(db).create_user(username, password_hash)
        token = ctx.codec.issue(new_user)

    logger.info("auth.user_registered", user_id=new_user.id)
    return token


async def login_user(ctx: GraphQLContext, username: str, password: str) -> str:
    """Exchange username + password for a token.

    Learn: Unknown username and wrong password raise the exact same
    InvalidCredentialsError, and both paths run one bcrypt comparison,
    so a caller can't tell which usernames exist.
    """
    async with transaction(ctx.session_factory) as db:
        found = await UserService(db).get_by_username(username)

        if found is None:
            dummy = await asyncio.to_thread(_dummy_hash, ctx.bcrypt_rounds)
            await verify_password_async(password, dummy)
            logger.info("auth.login_failed")
            raise InvalidCredentialsError()

        if not await verify_password_async(password, found.password):
            logger.info("auth.login_failed")
            raise InvalidCredentialsError()

        return ctx.codec.issue(found)


# ─── Event mutations ─────────────────────────────────────


async def create_event(
    ctx: GraphQLContext, name: str, date: str, location: str
) -> Event:
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        creator_id = _identity(ctx)
        created = await EventService(db).create_event(
            name=name, date=date, location=location, creator_id=creator_id
        )

    logger.info("events.created", event_id=created.id, creator_id=creator_id)
    return created


async def update_event(
    ctx: GraphQLContext, event_id: str | int, name: str, date: str, location: str
) -> Optional[Event]:
    """Overwrite an event's fields.

    Any authenticated user may edit any event. An unknown id changes
    nothing and returns None.
    """
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        event_id = _pk(event_id)
        svc = EventService(db)
        updated = await svc.update_event(event_id, name=name, date=date, location=location)
        if not updated:
            return None
        return await svc.get_event(event_id)


async def delete_event(ctx: GraphQLContext, event_id: str | int) -> Optional[Event]:
    """Delete an event and return it as it was. Unknown ids return None."""
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        event_id = _pk(event_id)
        svc = EventService(db)
        existing = await svc.get_event(event_id)
        await svc.delete_event(event_id)

    if existing is not None:
        logger.info("events.deleted", event_id=event_id)
    return existing


async def update_event_attendance(
    ctx: GraphQLContext, event_id: str | int, status: str
) -> Optional[Event]:
    """ATTEND adds the caller to the event; any other status removes them.

    Removing an attendance that doesn't exist is a no-op. Attending
    twice violates the (user_id, event_id) primary key.
    """
    async with transaction(ctx.session_factory) as db:
        authorize_request(ctx.token, ctx.codec)
        user_id = _identity(ctx)
        event_id = _pk(event_id)
        svc = EventService(db)
        if status == ATTEND:
            await svc.add_attendance(user_id, event_id)
        else:
            await svc.remove_attendance(user_id, event_id)
        return await svc.get_event(event_id)


# ─── Relationship fields ─────────────────────────────────


async def created_events(ctx: GraphQLContext, user_id: int) -> list[Event]:
    async with transaction(ctx.session_factory) as db:
        return await EventService(db).list_events(creator_id=user_id)


async def attended_events(ctx: GraphQLContext, user_id: int) -> list[Event]:
    async with transaction(ctx.session_factory) as db:
        return await UserService(db).attended_events(user_id)


async def creator(ctx: GraphQLContext, creator_id: int) -> Optional[User]:
    async with transaction(ctx.session_factory) as db:
        return await UserService(db).get_user(creator_id)


async def attendees(ctx: GraphQLContext, event_id: int) -> list[User]:
    async with transaction(ctx.session_factory) as db:
        return await EventService(db).attendees(event_id)
