# schooldesk/models/academic.py - Sessions, classes, sections and subjects
from __future__ import annotations
import uuid
from datetime import date
from sqlalchemy import String, Integer, Boolean, Date, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class AcademicSession(TenantMixin, Base):
    __tablename__ = "academic_sessions"

    name: Mapped[str] = mapped_column(String(32), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_academic_sessions_school_name"),
    )


class Section(TenantMixin, Base):
    __tablename__ = "sections"

    name: Mapped[str] = mapped_column(String(32), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_sections_school_name"),
    )


class SchoolClass(TenantMixin, Base):
    __tablename__ = "classes"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    class_sections: Mapped[list["ClassSection"]] = relationship(
        "ClassSection",
        back_populates="school_class",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_classes_school_name"),
    )

    @property
    def sections(self) -> list["Section"]:
        return sorted((cs.section for cs in self.class_sections), key=lambda s: s.name)


class ClassSection(TenantMixin, Base):
    """Join between a class and the sections taught in it"""
    __tablename__ = "class_sections"

    # Class deletion removes its section links; a linked section cannot be deleted
    class_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    section_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("sections.id", ondelete="RESTRICT"), nullable=False, index=True)

    school_class: Mapped["SchoolClass"] = relationship("SchoolClass", back_populates="class_sections")
    section: Mapped["Section"] = relationship("Section", lazy="joined")

    __table_args__ = (
        UniqueConstraint("class_id", "section_id", name="uq_class_sections_class_section"),
    )


class Subject(TenantMixin, Base):
    __tablename__ = "subjects"

    name: Mapped[str] = mapped_column(String(64), nullable=False)
    code: Mapped[str | None] = mapped_column(String(16))
    subject_type: Mapped[str] = mapped_column(String(16), nullable=False, default="theory")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("school_id", "name", name="uq_subjects_school_name"),
        UniqueConstraint("school_id", "code", name="uq_subjects_school_code"),
        CheckConstraint("subject_type IN ('theory','practical')", name="ck_subjects_type"),
    )
