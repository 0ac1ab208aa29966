# schooldesk/models/hostel.py - Hostels, room types and rooms
from __future__ import annotations
import uuid
from decimal import Decimal
from sqlalchemy import String, Integer, Boolean, ForeignKey, Numeric, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class Hostel(TenantMixin, Base):
    __tablename__ = "hostels"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    hostel_type: Mapped[str] = mapped_column(String(16), nullable=False, default="combined")
    address: Mapped[str | None] = mapped_column(Text)
    intake: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_hostels_school_name"),
        CheckConstraint("hostel_type IN ('boys','girls','combined')", name="ck_hostels_type"),
    )


class RoomType(TenantMixin, Base):
    __tablename__ = "room_types"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_room_types_school_name"),
    )


class HostelRoom(TenantMixin, Base):
    __tablename__ = "hostel_rooms"

    hostel_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("hostels.id", ondelete="RESTRICT"), nullable=False, index=True)
    room_type_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("room_types.id", ondelete="RESTRICT"), index=True)
    room_no: Mapped[str] = mapped_column(String(16), nullable=False)
    beds: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    cost_per_bed: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    description: Mapped[str | None] = mapped_column(Text)

    hostel: Mapped["Hostel"] = relationship("Hostel", lazy="joined")
    room_type: Mapped["RoomType"] = relationship("RoomType", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "hostel_id", "room_no", name="uq_hostel_rooms_hostel_room_no"),
        CheckConstraint("beds > 0", name="ck_hostel_rooms_beds"),
    )

    @property
    def hostel_name(self) -> str | None:
        return self.hostel.name if self.hostel else None

    @property
    def room_type_name(self) -> str | None:
        return self.room_type.name if self.room_type else None
