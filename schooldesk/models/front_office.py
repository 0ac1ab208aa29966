# schooldesk/models/front_office.py - Visitor book, enquiries, complaints, call log and postal register
from __future__ import annotations
import uuid
from datetime import date, datetime
from sqlalchemy import String, Integer, Date, DateTime, ForeignKey, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class Visitor(TenantMixin, Base):
    __tablename__ = "visitors"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    purpose: Mapped[str] = mapped_column(String(128), nullable=False)
    meeting_with: Mapped[str | None] = mapped_column(String(128))
    id_card: Mapped[str | None] = mapped_column(String(64))
    number_of_people: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    visit_date: Mapped[date] = mapped_column(Date, nullable=False)
    in_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    out_time: Mapped[datetime | None] = mapped_column(DateTime)
    note: Mapped[str | None] = mapped_column(Text)

    @property
    def checked_out(self) -> bool:
        return self.out_time is not None


class Enquiry(TenantMixin, Base):
    """Admission enquiry and its follow-up"""
    __tablename__ = "enquiries"

    name: Mapped[str] = mapped_column(String(128), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    email: Mapped[str | None] = mapped_column(String(128))
    source: Mapped[str | None] = mapped_column(String(64))
    class_interested: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str | None] = mapped_column(Text)
    enquiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    follow_up_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="active")
    assigned_staff_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="SET NULL"), index=True)
    note: Mapped[str | None] = mapped_column(Text)

    assigned_staff: Mapped["Staff"] = relationship("Staff", lazy="joined")

    __table_args__ = (
        CheckConstraint("status IN ('active','passive','won','lost','closed')", name="ck_enquiries_status"),
    )

    @property
    def assigned_staff_name(self) -> str | None:
        return self.assigned_staff.full_name if self.assigned_staff else None


class Complaint(TenantMixin, Base):
    __tablename__ = "complaints"

    complaint_type: Mapped[str] = mapped_column(String(64), nullable=False, default="General")
    source: Mapped[str | None] = mapped_column(String(64))
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    email: Mapped[str | None] = mapped_column(String(128))
    complaint_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    action_taken: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    assigned_staff_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="SET NULL"), index=True)
    note: Mapped[str | None] = mapped_column(Text)

    assigned_staff: Mapped["Staff"] = relationship("Staff", lazy="joined")

    __table_args__ = (
        CheckConstraint("status IN ('pending','in_progress','resolved','closed')", name="ck_complaints_status"),
    )

    @property
    def assigned_staff_name(self) -> str | None:
        return self.assigned_staff.full_name if self.assigned_staff else None


class PhoneCall(TenantMixin, Base):
    __tablename__ = "phone_calls"

    call_type: Mapped[str] = mapped_column(String(16), nullable=False, default="incoming")
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    call_date: Mapped[date] = mapped_column(Date, nullable=False)
    call_duration: Mapped[str | None] = mapped_column(String(16))
    description: Mapped[str | None] = mapped_column(Text)
    next_follow_up: Mapped[date | None] = mapped_column(Date)
    note: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("call_type IN ('incoming','outgoing')", name="ck_phone_calls_type"),
    )


class PostalRecord(TenantMixin, Base):
    """Dispatched or received post; reference numbers run per direction"""
    __tablename__ = "postal_records"

    postal_type: Mapped[str] = mapped_column(String(16), nullable=False)
    reference_no: Mapped[str] = mapped_column(String(32), nullable=False)
    from_title: Mapped[str | None] = mapped_column(String(128))
    to_title: Mapped[str | None] = mapped_column(String(128))
    address: Mapped[str | None] = mapped_column(Text)
    postal_date: Mapped[date] = mapped_column(Date, nullable=False)
    note: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "reference_no", name="uq_postal_records_school_reference_no"),
        CheckConstraint("postal_type IN ('dispatch','receive')", name="ck_postal_records_type"),
    )
