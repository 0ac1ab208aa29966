# schooldesk/models/school.py - Tenant root
from __future__ import annotations
from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from schooldesk.models.base import Base, TimestampMixin


class School(TimestampMixin, Base):
    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(128))
    phone: Mapped[str | None] = mapped_column(String(32))
    address: Mapped[str | None] = mapped_column(String(256))

    # Locale
    currency_code: Mapped[str] = mapped_column(String(8), nullable=False, default="USD")
    currency_symbol: Mapped[str] = mapped_column(String(8), nullable=False, default="$")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="UTC")
    date_format: Mapped[str] = mapped_column(String(32), nullable=False, default="YYYY-MM-DD")

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
