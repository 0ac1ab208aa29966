# schooldesk/models/attendance.py - Daily student and staff attendance
from __future__ import annotations
import uuid
from datetime import date
from sqlalchemy import String, Date, ForeignKey, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from schooldesk.models.base import Base, TenantMixin

STATUSES = "('present','absent','late','half_day','holiday')"


class StudentAttendance(TenantMixin, Base):
    __tablename__ = "student_attendance"

    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    remark: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("student_id", "attendance_date", name="uq_student_attendance_student_date"),
        CheckConstraint(f"status IN {STATUSES}", name="ck_student_attendance_status"),
    )


class StaffAttendance(TenantMixin, Base):
    __tablename__ = "staff_attendance"

    staff_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="CASCADE"), nullable=False, index=True)
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    check_in: Mapped[str | None] = mapped_column(String(8))
    check_out: Mapped[str | None] = mapped_column(String(8))
    remark: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("staff_id", "attendance_date", name="uq_staff_attendance_staff_date"),
        CheckConstraint(f"status IN {STATUSES}", name="ck_staff_attendance_status"),
    )
