# schooldesk/models/base.py - Declarative base and shared column mixins
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from sqlalchemy import DateTime, ForeignKey, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, declared_attr


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


class TenantMixin(TimestampMixin):
    """Every tenant-owned table carries school_id; rows go away only with their school"""

    @declared_attr
    def school_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(Uuid, ForeignKey("schools.id", ondelete="CASCADE"), nullable=False, index=True)
