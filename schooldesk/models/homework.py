# schooldesk/models/homework.py - Homework assignments and student submissions
from __future__ import annotations
import uuid
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import String, Date, DateTime, ForeignKey, Numeric, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class Homework(TenantMixin, Base):
    __tablename__ = "homework"

    class_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("classes.id", ondelete="RESTRICT"), nullable=False, index=True)
    section_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("sections.id", ondelete="RESTRICT"), nullable=False, index=True)
    subject_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False, index=True)
    staff_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="SET NULL"), index=True)
    title: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    homework_date: Mapped[date] = mapped_column(Date, nullable=False)
    submission_date: Mapped[date] = mapped_column(Date, nullable=False)
    max_marks: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass", lazy="joined")
    section: Mapped["Section"] = relationship("Section", lazy="joined")
    subject: Mapped["Subject"] = relationship("Subject", lazy="joined")
    staff: Mapped["Staff"] = relationship("Staff", lazy="joined")

    __table_args__ = (
        CheckConstraint("homework_date <= submission_date", name="ck_homework_dates"),
    )

    @property
    def class_name(self) -> str | None:
        return self.school_class.name if self.school_class else None

    @property
    def section_name(self) -> str | None:
        return self.section.name if self.section else None

    @property
    def subject_name(self) -> str | None:
        return self.subject.name if self.subject else None

    @property
    def staff_name(self) -> str | None:
        return self.staff.full_name if self.staff else None


class HomeworkSubmission(TenantMixin, Base):
    __tablename__ = "homework_submissions"

    homework_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("homework.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    message: Mapped[str | None] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    marks: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))
    feedback: Mapped[str | None] = mapped_column(Text)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    evaluated_at: Mapped[datetime | None] = mapped_column(DateTime)
    evaluated_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))

    homework: Mapped["Homework"] = relationship("Homework", lazy="joined")
    student: Mapped["Student"] = relationship("Student", lazy="joined")

    __table_args__ = (
        UniqueConstraint("homework_id", "student_id", name="uq_homework_submissions_homework_student"),
        CheckConstraint("status IN ('pending','accepted','rejected')", name="ck_homework_submissions_status"),
    )

    @property
    def homework_title(self) -> str | None:
        return self.homework.title if self.homework else None

    @property
    def student_name(self) -> str | None:
        return self.student.full_name if self.student else None

    @property
    def is_late(self) -> bool:
        return self.homework is not None and self.submitted_at.date() > self.homework.submission_date
