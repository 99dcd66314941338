"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Relationships, constraints, and indexes defined here.
Alembic migrations mirror these tables.

Key concepts:
- Integer autoincrement primary keys — the id is what goes into a token
- event_attendees is a pure join table with a composite primary key,
  so attending the same event twice is a uniqueness violation
- ON DELETE/UPDATE CASCADE on every foreign key: removing a user or an
  event removes the rows that point at it
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=utcnow
    )


class User(TimestampMixin, Base):
    """A registered user.

    Learn: `password` stores the bcrypt digest, never the plaintext,
    and is not exposed through the GraphQL schema.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    created_events: Mapped[list["Event"]] = relationship(
        back_populates="creator", passive_deletes=True
    )
    attended_events: Mapped[list["Event"]] = relationship(
        secondary="event_attendees",
        back_populates="attendees",
        viewonly=True,
    )


class Event(TimestampMixin, Base):
    """An event created by a user.

    Learn: `date` is a free-form string; no calendar validation happens
    anywhere in the stack.
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    creator_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )

    # Relationships
    creator: Mapped["User"] = relationship(back_populates="created_events")
    attendees: Mapped[list["User"]] = relationship(
        secondary="event_attendees",
        back_populates="attended_events",
        viewonly=True,
    )


class EventAttendee(TimestampMixin, Base):
    """Attendance — links a user to an event they intend to attend.

    Learn: Row present = ATTENDING, row absent = not attending. There
    is no status column; the state machine lives in the row's existence.
    """

    __tablename__ = "event_attendees"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )
    event_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    )
