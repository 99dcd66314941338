"""User service — credential store lookups and creation.

Learn: Services take an AsyncSession that the caller already opened a
transaction on. They flush (so ids get assigned) but never commit —
committing is the transaction() block's job.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventql.db.models import Event, EventAttendee, User


class UserService:
    """Business logic for users."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_user(self, username: str, password_hash: str) -> User:
        """Insert a user. A taken username raises IntegrityError on flush."""
        user = User(username=username, password=password_hash)
        self.db.add(user)
        await self.db.flush()
        return user

    async def get_user(self, user_id: int) -> User | None:
        return await self.db.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def attended_events(self, user_id: int) -> list[Event]:
        result = await self.db.execute(
            select(Event)
            .join(EventAttendee, EventAttendee.event_id == Event.id)
            .where(EventAttendee.user_id == user_id)
            .order_by(Event.id)
        )
        return list(result.scalars().all())
