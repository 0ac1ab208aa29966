# schooldesk/models/student.py - Parents, students and per-session class enrollment
from __future__ import annotations
import uuid
from datetime import date
from sqlalchemy import String, Boolean, Date, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class Parent(TenantMixin, Base):
    __tablename__ = "parents"

    father_name: Mapped[str | None] = mapped_column(String(128))
    father_phone: Mapped[str | None] = mapped_column(String(32))
    mother_name: Mapped[str | None] = mapped_column(String(128))
    mother_phone: Mapped[str | None] = mapped_column(String(32))
    guardian_name: Mapped[str] = mapped_column(String(128), nullable=False)
    guardian_relation: Mapped[str | None] = mapped_column(String(32))
    guardian_phone: Mapped[str] = mapped_column(String(32), nullable=False)
    guardian_email: Mapped[str | None] = mapped_column(String(128))
    occupation: Mapped[str | None] = mapped_column(String(64))
    address: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "guardian_phone", name="uq_parents_school_guardian_phone"),
    )


class StudentCategory(TenantMixin, Base):
    __tablename__ = "student_categories"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_student_categories_school_name"),
    )


class SchoolHouse(TenantMixin, Base):
    __tablename__ = "school_houses"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_school_houses_school_name"),
    )


class Student(TenantMixin, Base):
    __tablename__ = "students"

    admission_no: Mapped[str] = mapped_column(String(32), nullable=False)
    roll_no: Mapped[str | None] = mapped_column(String(16))
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(64))
    gender: Mapped[str | None] = mapped_column(String(16))
    dob: Mapped[date | None] = mapped_column(Date)
    email: Mapped[str | None] = mapped_column(String(128))
    phone: Mapped[str | None] = mapped_column(String(32))
    admission_date: Mapped[date | None] = mapped_column(Date)
    address: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    parent_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("parents.id", ondelete="RESTRICT"), index=True)
    hostel_room_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("hostel_rooms.id", ondelete="RESTRICT"), index=True)
    pickup_point_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("pickup_points.id", ondelete="RESTRICT"), index=True)
    category_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("student_categories.id", ondelete="RESTRICT"), index=True)
    house_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("school_houses.id", ondelete="RESTRICT"), index=True)

    # Session enrollments and fee assignments go with the student
    enrollments: Mapped[list["StudentSession"]] = relationship(
        "StudentSession",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    fee_assignments: Mapped[list["StudentFeeAssignment"]] = relationship(
        "StudentFeeAssignment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    parent: Mapped["Parent"] = relationship("Parent", lazy="joined")
    category: Mapped["StudentCategory"] = relationship("StudentCategory", lazy="joined")
    house: Mapped["SchoolHouse"] = relationship("SchoolHouse", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "admission_no", name="uq_students_school_admission_no"),
    )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def current_enrollment(self) -> "StudentSession | None":
        for enrollment in self.enrollments:
            if enrollment.session is not None and enrollment.session.is_active:
                return enrollment
        return None

    @property
    def parent_name(self) -> str | None:
        return self.parent.guardian_name if self.parent else None

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def house_name(self) -> str | None:
        return self.house.name if self.house else None

    @property
    def session_id(self) -> uuid.UUID | None:
        enrollment = self.current_enrollment
        return enrollment.session_id if enrollment else None

    @property
    def class_id(self) -> uuid.UUID | None:
        enrollment = self.current_enrollment
        return enrollment.class_section.class_id if enrollment else None

    @property
    def class_name(self) -> str | None:
        enrollment = self.current_enrollment
        return enrollment.class_section.school_class.name if enrollment else None

    @property
    def section_id(self) -> uuid.UUID | None:
        enrollment = self.current_enrollment
        return enrollment.class_section.section_id if enrollment else None

    @property
    def section_name(self) -> str | None:
        enrollment = self.current_enrollment
        return enrollment.class_section.section.name if enrollment else None


class StudentSession(TenantMixin, Base):
    """A student's placement in a class section for one academic session"""
    __tablename__ = "student_sessions"

    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("academic_sessions.id", ondelete="RESTRICT"), nullable=False, index=True)
    class_section_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("class_sections.id", ondelete="RESTRICT"), nullable=False, index=True)
    roll_no: Mapped[str | None] = mapped_column(String(16))

    student: Mapped["Student"] = relationship("Student", back_populates="enrollments")
    session: Mapped["AcademicSession"] = relationship("AcademicSession", lazy="joined")
    class_section: Mapped["ClassSection"] = relationship("ClassSection", lazy="joined")

    __table_args__ = (
        UniqueConstraint("student_id", "session_id", name="uq_student_sessions_student_session"),
    )
