"""Event service — event CRUD and attendance.

Learn: update_event / delete_event / remove_attendance go straight to
UPDATE / DELETE statements with a WHERE clause. They don't look the row
up first, so a missing id is not an error — the caller gets a rowcount
of 0 and decides what that means.
"""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from eventql.db.models import Event, EventAttendee, User


class EventService:
    """Business logic for events and attendance."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Events ─────────────────────────────────────────

    async def list_events(self, creator_id: int | None = None) -> list[Event]:
        q = select(Event).order_by(Event.id)
        if creator_id is not None:
            q = q.where(Event.creator_id == creator_id)
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def get_event(self, event_id: int) -> Event | None:
        return await self.db.get(Event, event_id)

    async def create_event(
        self, name: str, date: str, location: str, creator_id: int
    ) -> Event:
        event = Event(name=name, date=date, location=location, creator_id=creator_id)
        self.db.add(event)
        await self.db.flush()
        return event

    async def update_event(self, event_id: int, **values) -> int:
        """Apply ``values`` to the event. Returns the number of rows changed."""
        result = await self.db.execute(
            update(Event).where(Event.id == event_id).values(**values)
        )
        return result.rowcount

    async def delete_event(self, event_id: int) -> int:
        result = await self.db.execute(delete(Event).where(Event.id == event_id))
        return result.rowcount

    # ─── Attendance ─────────────────────────────────────

    async def add_attendance(self, user_id: int, event_id: int) -> EventAttendee:
        """Mark the user as attending. Attending twice raises IntegrityError."""
        attendance = EventAttendee(user_id=user_id, event_id=event_id)
        self.db.add(attendance)
        await self.db.flush()
        return attendance

    async def remove_attendance(self, user_id: int, event_id: int) -> int:
        result = await self.db.execute(
            delete(EventAttendee).where(
                EventAttendee.user_id == user_id,
                EventAttendee.event_id == event_id,
            )
        )
        return result.rowcount

    async def attendees(self, event_id: int) -> list[User]:
        result = await self.db.execute(
            select(User)
            .join(EventAttendee, EventAttendee.user_id == User.id)
            .where(EventAttendee.event_id == event_id)
            .order_by(User.id)
        )
        return list(result.scalars().all())
