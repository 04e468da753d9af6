"""
Declarative base and shared column mixins.

Dependencies: sqlalchemy
System role: Metadata registry for the document tables
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Registry for every table created by create_tables()."""


class UUIDMixin:
    """
    Client-generated UUID v4 primary key.

    Native UUID on PostgreSQL, CHAR(32) on SQLite. The same value is used
    as the document_id tag on every vector of the document.
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )


class TimestampMixin:
    """Timezone-aware creation and last-update times (UTC)."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    # Also refreshed by Core update() statements such as the status transitions
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        onupdate=utc_now,
        nullable=False,
    )
