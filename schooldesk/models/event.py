# schooldesk/models/event.py - School calendar events and notice board
from __future__ import annotations
from datetime import date
from sqlalchemy import String, Boolean, Date, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from schooldesk.models.base import Base, TenantMixin

AUDIENCES = "('all','students','staff','parents')"


class Event(TenantMixin, Base):
    __tablename__ = "events"

    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(128))
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_holiday: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    event_for: Mapped[str] = mapped_column(String(16), nullable=False, default="all")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("start_date <= end_date", name="ck_events_dates"),
        CheckConstraint(f"event_for IN {AUDIENCES}", name="ck_events_event_for"),
    )


class Notice(TenantMixin, Base):
    __tablename__ = "notices"

    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    notice_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Hidden from the board before this date
    publish_on: Mapped[date | None] = mapped_column(Date)
    notice_for: Mapped[str] = mapped_column(String(16), nullable=False, default="all")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(f"notice_for IN {AUDIENCES}", name="ck_notices_notice_for"),
    )
