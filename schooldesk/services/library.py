# schooldesk/services/library.py - Books, library members and lending
from datetime import date, timedelta
from typing import Any, List
import logging
import uuid

from sqlalchemy import Select, update

from schooldesk.core.config import settings
from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.models.library import Book, BookIssue, LibraryMember
from schooldesk.models.staff import Staff
from schooldesk.models.student import Student
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)


class BookService(TenantCRUDService[Book]):
    model = Book
    resource_name = "Book"
    unique_rules = (unique("book_no", label="book number"),)
    dependents = (Dependent(BookIssue, "book_id", "{count} issue record(s) refer to it"),)
    search_fields = ("title", "book_no", "author", "isbn", "subject")
    filter_fields = ("subject",)

    def ordering(self):
        return [Book.title, Book.id]

    def prepare_create(self, values, extra):
        values["available"] = values.get("quantity", 1)

    def prepare_update(self, obj, values, extra):
        values.pop("available", None)
        quantity = values.get("quantity")
        if quantity is None:
            return
        on_loan = obj.quantity - obj.available
        if quantity < on_loan:
            raise ConflictError(
                f"Cannot reduce quantity below the {on_loan} copies on loan", field="quantity", count=on_loan
            )
        values["available"] = quantity - on_loan


class MemberService(TenantCRUDService[LibraryMember]):
    model = LibraryMember
    resource_name = "Library member"
    unique_rules = (
        unique("library_card_no", label="library card number"),
        unique("student_id", label="student"),
        unique("staff_id", label="staff member"),
    )
    references = {
        "student_id": Reference(Student, "Student"),
        "staff_id": Reference(Staff, "Staff member"),
    }
    dependents = (Dependent(BookIssue, "member_id", "{count} issue record(s) refer to it"),)
    related_counts = (RelatedCount("issue_count", BookIssue, "member_id"),)
    search_fields = ("library_card_no",)
    filter_fields = ("member_type",)

    def ordering(self):
        return [LibraryMember.library_card_no, LibraryMember.id]


class BookIssueService(TenantCRUDService[BookIssue]):
    model = BookIssue
    resource_name = "Book issue"
    references = {
        "book_id": Reference(Book, "Book"),
        "member_id": Reference(LibraryMember, "Library member"),
    }
    filter_fields = ("book_id", "member_id")

    statuses = ("issued", "returned", "overdue")

    def ordering(self):
        return [BookIssue.issue_date.desc(), BookIssue.created_at.desc(), BookIssue.id]

    def apply_status(self, stmt: Select, status: Any) -> Select:
        if not status:
            return stmt
        if status not in self.statuses:
            raise ValidationFailed(f"status: Unsupported status filter '{status}'", field="status")
        if status == "overdue":
            return stmt.where(BookIssue.status == "issued", BookIssue.due_date < date.today())
        return stmt.where(BookIssue.status == status)

    def _attach_counts(self, row: Any, names: List[str]) -> BookIssue:
        obj = super()._attach_counts(row, names)
        obj.overdue_days = obj.days_overdue(date.today())
        return obj

    def _move_copies(self, book_id: uuid.UUID, delta: int) -> bool:
        stmt = update(Book).where(Book.id == book_id, Book.school_id == self.ctx.school_id)
        if delta < 0:
            stmt = stmt.where(Book.available >= -delta)
        return self.db.execute(stmt.values(available=Book.available + delta)).rowcount == 1

    def prepare_create(self, values, extra):
        values["issue_date"] = values.get("issue_date") or date.today()
        values["due_date"] = values.get("due_date") or values["issue_date"] + timedelta(days=settings.LIBRARY_LOAN_DAYS)
        if values["due_date"] < values["issue_date"]:
            raise ValidationFailed("due_date: Due date cannot be before the issue date", field="due_date")
        values["status"] = "issued"
        values["issued_by"] = self.ctx.user_id

    def after_create(self, obj, extra):
        if not self._move_copies(obj.book_id, -1):
            raise ValidationFailed("book_id: No copies of this book are available", field="book_id")

    def return_book(self, issue_id: uuid.UUID) -> BookIssue:
        obj = self.get_object(issue_id)
        if obj.status == "returned":
            raise ConflictError("Book has already been returned")
        with self.atomic():
            obj.status = "returned"
            obj.return_date = date.today()
            self._move_copies(obj.book_id, 1)
        logger.info(f"Book returned: issue {obj.id} by {self.ctx.username}")
        return self.get(obj.id)

    def before_delete(self, obj):
        if obj.status == "issued":
            self._move_copies(obj.book_id, 1)
