# schooldesk/models/fee.py - Fee structure, student assignments and payments
from __future__ import annotations
import uuid
from datetime import date
from decimal import Decimal
from sqlalchemy import String, Date, ForeignKey, Numeric, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class FeeType(TenantMixin, Base):
    __tablename__ = "fee_types"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    code: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "code", name="uq_fee_types_school_code"),
    )


class FeeGroup(TenantMixin, Base):
    __tablename__ = "fee_groups"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_fee_groups_school_name"),
    )


class FeeMaster(TenantMixin, Base):
    """Amount charged for one fee type of one fee group to one class"""
    __tablename__ = "fee_masters"

    class_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("classes.id", ondelete="RESTRICT"), nullable=False, index=True)
    fee_group_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("fee_groups.id", ondelete="RESTRICT"), nullable=False, index=True)
    fee_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("fee_types.id", ondelete="RESTRICT"), nullable=False, index=True)
    session_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("academic_sessions.id", ondelete="RESTRICT"), index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    due_date: Mapped[date | None] = mapped_column(Date)
    fine_type: Mapped[str] = mapped_column(String(16), nullable=False, default="none")
    fine_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False, default=Decimal("0"))
    fine_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass", lazy="joined")
    fee_group: Mapped["FeeGroup"] = relationship("FeeGroup", lazy="joined")
    fee_type: Mapped["FeeType"] = relationship("FeeType", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "class_id", "fee_group_id", "fee_type_id", name="uq_fee_masters_class_group_type"),
        CheckConstraint("fine_type IN ('none','percentage','fixed')", name="ck_fee_masters_fine_type"),
        CheckConstraint("fine_percentage >= 0 AND fine_percentage <= 100", name="ck_fee_masters_fine_percentage"),
        CheckConstraint("amount >= 0", name="ck_fee_masters_amount"),
    )

    @property
    def class_name(self) -> str | None:
        return self.school_class.name if self.school_class else None

    @property
    def fee_group_name(self) -> str | None:
        return self.fee_group.name if self.fee_group else None

    @property
    def fee_type_name(self) -> str | None:
        return self.fee_type.name if self.fee_type else None

    def fine_for(self, balance: Decimal, on: date) -> Decimal:
        """Fine owed once the due date has passed with part of the fee still unpaid"""
        if balance <= 0 or self.due_date is None or on <= self.due_date:
            return Decimal("0.00")
        if self.fine_type == "percentage":
            return (Decimal(self.amount) * Decimal(self.fine_percentage) / Decimal(100)).quantize(Decimal("0.01"))
        if self.fine_type == "fixed":
            return Decimal(self.fine_amount).quantize(Decimal("0.01"))
        return Decimal("0.00")


class StudentFeeAssignment(TenantMixin, Base):
    __tablename__ = "student_fee_assignments"

    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    fee_master_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("fee_masters.id", ondelete="RESTRICT"), nullable=False, index=True)

    fee_master: Mapped["FeeMaster"] = relationship("FeeMaster", lazy="joined")

    __table_args__ = (
        UniqueConstraint("student_id", "fee_master_id", name="uq_student_fee_assignments_student_master"),
    )


class FeePayment(TenantMixin, Base):
    __tablename__ = "fee_payments"

    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="RESTRICT"), nullable=False, index=True)
    assignment_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("student_fee_assignments.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    fine: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    payment_mode: Mapped[str] = mapped_column(String(16), nullable=False, default="Cash")
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    reference_no: Mapped[str | None] = mapped_column(String(64))
    note: Mapped[str | None] = mapped_column(Text)
    collected_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_fee_payments_amount"),
    )
