# schooldesk/models/staff.py - Departments, designations, staff and leave
from __future__ import annotations
import uuid
from datetime import date
from decimal import Decimal
from sqlalchemy import String, Boolean, Date, ForeignKey, Numeric, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class Department(TenantMixin, Base):
    __tablename__ = "departments"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_departments_school_name"),
    )


class Designation(TenantMixin, Base):
    __tablename__ = "designations"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_designations_school_name"),
    )


class Staff(TenantMixin, Base):
    __tablename__ = "staff"

    employee_id: Mapped[str] = mapped_column(String(32), nullable=False)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(64))
    gender: Mapped[str | None] = mapped_column(String(16))
    dob: Mapped[date | None] = mapped_column(Date)
    email: Mapped[str | None] = mapped_column(String(128))
    phone: Mapped[str | None] = mapped_column(String(32))
    qualification: Mapped[str | None] = mapped_column(String(128))
    joining_date: Mapped[date | None] = mapped_column(Date)
    contract_type: Mapped[str | None] = mapped_column(String(32))
    basic_salary: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))
    address: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    role_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("roles.id", ondelete="RESTRICT"), index=True)
    department_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("departments.id", ondelete="RESTRICT"), index=True)
    designation_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("designations.id", ondelete="RESTRICT"), index=True)

    role: Mapped["Role"] = relationship("Role", lazy="joined")
    department: Mapped["Department"] = relationship("Department", lazy="joined")
    designation: Mapped["Designation"] = relationship("Designation", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "employee_id", name="uq_staff_school_employee_id"),
        UniqueConstraint("school_id", "email", name="uq_staff_school_email"),
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def department_name(self) -> str | None:
        return self.department.name if self.department else None

    @property
    def designation_name(self) -> str | None:
        return self.designation.name if self.designation else None

    @property
    def role_name(self) -> str | None:
        return self.role.name if self.role else None


class StaffLeave(TenantMixin, Base):
    __tablename__ = "staff_leaves"

    staff_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    leave_type: Mapped[str] = mapped_column(String(32), nullable=False)
    from_date: Mapped[date] = mapped_column(Date, nullable=False)
    to_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    decided_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))

    staff: Mapped["Staff"] = relationship("Staff", lazy="joined")

    __table_args__ = (
        CheckConstraint("status IN ('pending','approved','rejected')", name="ck_staff_leaves_status"),
        CheckConstraint("from_date <= to_date", name="ck_staff_leaves_dates"),
    )

    @property
    def staff_name(self) -> str | None:
        return self.staff.full_name if self.staff else None

    @property
    def days(self) -> int:
        return (self.to_date - self.from_date).days + 1
