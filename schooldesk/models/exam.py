# schooldesk/models/exam.py - Exam groups, exams, exam subjects and marks
from __future__ import annotations
import uuid
from datetime import date
from decimal import Decimal
from sqlalchemy import String, Boolean, Date, ForeignKey, Numeric, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class ExamGroup(TenantMixin, Base):
    __tablename__ = "exam_groups"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    exam_type: Mapped[str] = mapped_column(String(16), nullable=False, default="term")
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_exam_groups_school_name"),
        CheckConstraint("exam_type IN ('term','unit','final','other')", name="ck_exam_groups_type"),
    )


class Exam(TenantMixin, Base):
    __tablename__ = "exams"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    exam_group_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("exam_groups.id", ondelete="RESTRICT"), index=True)
    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("academic_sessions.id", ondelete="RESTRICT"), nullable=False, index=True)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    exam_group: Mapped["ExamGroup"] = relationship("ExamGroup", lazy="joined")
    session: Mapped["AcademicSession"] = relationship("AcademicSession", lazy="joined")
    # Timetable rows go with the exam; marks block its deletion
    exam_subjects: Mapped[list["ExamSubject"]] = relationship(
        "ExamSubject",
        back_populates="exam",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("school_id", "session_id", "name", name="uq_exams_school_session_name"),
    )

    @property
    def exam_group_name(self) -> str | None:
        return self.exam_group.name if self.exam_group else None

    @property
    def session_name(self) -> str | None:
        return self.session.name if self.session else None

    @property
    def subjects(self) -> list["ExamSubject"]:
        return sorted(self.exam_subjects, key=lambda s: (s.exam_date or date.max, s.subject_name or ""))


class ExamSubject(TenantMixin, Base):
    """One subject paper of an exam"""
    __tablename__ = "exam_subjects"

    exam_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False, index=True)
    exam_date: Mapped[date | None] = mapped_column(Date)
    start_time: Mapped[str | None] = mapped_column(String(8))
    end_time: Mapped[str | None] = mapped_column(String(8))
    room_no: Mapped[str | None] = mapped_column(String(16))
    max_marks: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("100"))
    min_marks: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False, default=Decimal("33"))

    exam: Mapped["Exam"] = relationship("Exam", back_populates="exam_subjects")
    subject: Mapped["Subject"] = relationship("Subject", lazy="joined")

    __table_args__ = (
        UniqueConstraint("exam_id", "subject_id", name="uq_exam_subjects_exam_subject"),
        CheckConstraint("min_marks >= 0 AND min_marks <= max_marks", name="ck_exam_subjects_marks"),
    )

    @property
    def subject_name(self) -> str | None:
        return self.subject.name if self.subject else None


class ExamResult(TenantMixin, Base):
    __tablename__ = "exam_results"

    exam_subject_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("exam_subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    marks_obtained: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))
    is_absent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    note: Mapped[str | None] = mapped_column(Text)

    exam_subject: Mapped["ExamSubject"] = relationship("ExamSubject", lazy="joined")
    student: Mapped["Student"] = relationship("Student", lazy="joined")

    __table_args__ = (
        UniqueConstraint("exam_subject_id", "student_id", name="uq_exam_results_subject_student"),
        CheckConstraint("marks_obtained IS NULL OR marks_obtained >= 0", name="ck_exam_results_marks"),
    )

    @property
    def exam_id(self) -> uuid.UUID:
        return self.exam_subject.exam_id

    @property
    def subject_id(self) -> uuid.UUID:
        return self.exam_subject.subject_id

    @property
    def subject_name(self) -> str | None:
        return self.exam_subject.subject_name

    @property
    def max_marks(self) -> Decimal:
        return self.exam_subject.max_marks

    @property
    def student_name(self) -> str | None:
        return self.student.full_name if self.student else None

    @property
    def admission_no(self) -> str | None:
        return self.student.admission_no if self.student else None

    @property
    def passed(self) -> bool | None:
        if self.is_absent:
            return False
        if self.marks_obtained is None:
            return None
        return self.marks_obtained >= self.exam_subject.min_marks
