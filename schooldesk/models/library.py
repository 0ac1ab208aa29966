# schooldesk/models/library.py - Books, library members and book issues
from __future__ import annotations
import uuid
from datetime import date
from sqlalchemy import String, Integer, Date, ForeignKey, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class Book(TenantMixin, Base):
    __tablename__ = "books"

    title: Mapped[str] = mapped_column(String(256), nullable=False)
    book_no: Mapped[str] = mapped_column(String(32), nullable=False)
    isbn: Mapped[str | None] = mapped_column(String(32))
    author: Mapped[str | None] = mapped_column(String(128))
    publisher: Mapped[str | None] = mapped_column(String(128))
    subject: Mapped[str | None] = mapped_column(String(64))
    rack_no: Mapped[str | None] = mapped_column(String(16))
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    available: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __table_args__ = (
        UniqueConstraint("school_id", "book_no", name="uq_books_school_book_no"),
        CheckConstraint("available >= 0 AND available <= quantity", name="ck_books_available"),
    )


class LibraryMember(TenantMixin, Base):
    __tablename__ = "library_members"

    member_type: Mapped[str] = mapped_column(String(16), nullable=False)
    library_card_no: Mapped[str] = mapped_column(String(32), nullable=False)
    student_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("students.id", ondelete="RESTRICT"), unique=True)
    staff_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("staff.id", ondelete="RESTRICT"), unique=True)

    student: Mapped["Student"] = relationship("Student", lazy="joined")
    staff: Mapped["Staff"] = relationship("Staff", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "library_card_no", name="uq_library_members_school_card_no"),
        CheckConstraint("member_type IN ('student','staff')", name="ck_library_members_type"),
    )

    @property
    def member_name(self) -> str | None:
        person = self.student if self.member_type == "student" else self.staff
        return person.full_name if person else None


class BookIssue(TenantMixin, Base):
    __tablename__ = "book_issues"

    book_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("books.id", ondelete="RESTRICT"), nullable=False, index=True)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("library_members.id", ondelete="RESTRICT"), nullable=False, index=True)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="issued")
    issued_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"))

    book: Mapped["Book"] = relationship("Book", lazy="joined")
    member: Mapped["LibraryMember"] = relationship("LibraryMember", lazy="joined")

    __table_args__ = (
        CheckConstraint("status IN ('issued','returned')", name="ck_book_issues_status"),
    )

    @property
    def book_title(self) -> str | None:
        return self.book.title if self.book else None

    @property
    def member_name(self) -> str | None:
        return self.member.member_name if self.member else None

    def days_overdue(self, on: date) -> int:
        end = self.return_date or on
        return max((end - self.due_date).days, 0)
