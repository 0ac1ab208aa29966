# schooldesk/schemas/library.py - Books, members and book issues
from datetime import date, datetime
from typing import Annotated, Literal, Optional
from uuid import UUID

from pydantic import Field, StringConstraints, model_validator

from schooldesk.schemas.common import Name, OptionalDate, OptionalId, OptionalStr, RequestModel, ResponseModel

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=256)]
MemberType = Literal["student", "staff"]


class BookCreate(RequestModel):
    title: Title
    book_no: Name
    isbn: OptionalStr = None
    author: OptionalStr = None
    publisher: OptionalStr = None
    subject: OptionalStr = None
    rack_no: OptionalStr = None
    quantity: int = Field(1, ge=1)


class BookUpdate(RequestModel):
    title: Optional[Title] = None
    book_no: Optional[Name] = None
    isbn: OptionalStr = None
    author: OptionalStr = None
    publisher: OptionalStr = None
    subject: OptionalStr = None
    rack_no: OptionalStr = None
    quantity: Optional[int] = Field(None, ge=1)


class BookOut(ResponseModel):
    id: UUID
    title: str
    book_no: str
    isbn: Optional[str]
    author: Optional[str]
    publisher: Optional[str]
    subject: Optional[str]
    rack_no: Optional[str]
    quantity: int
    available: int
    created_at: datetime


class MemberCreate(RequestModel):
    member_type: MemberType
    library_card_no: Name
    student_id: OptionalId = None
    staff_id: OptionalId = None

    @model_validator(mode="after")
    def check_person(self):
        if self.member_type == "student" and (not self.student_id or self.staff_id):
            raise ValueError("A student member needs student_id and no staff_id")
        if self.member_type == "staff" and (not self.staff_id or self.student_id):
            raise ValueError("A staff member needs staff_id and no student_id")
        return self


class MemberUpdate(RequestModel):
    library_card_no: Optional[Name] = None


class MemberOut(ResponseModel):
    id: UUID
    member_type: MemberType
    library_card_no: str
    student_id: Optional[UUID]
    staff_id: Optional[UUID]
    member_name: Optional[str]
    issue_count: int = 0
    created_at: datetime


class BookIssueCreate(RequestModel):
    book_id: UUID
    member_id: UUID
    issue_date: OptionalDate = None
    due_date: OptionalDate = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.issue_date and self.due_date and self.due_date < self.issue_date:
            raise ValueError("Due date cannot be before the issue date")
        return self


class BookIssueOut(ResponseModel):
    id: UUID
    book_id: UUID
    book_title: Optional[str]
    member_id: UUID
    member_name: Optional[str]
    issue_date: date
    due_date: date
    return_date: Optional[date]
    status: str
    overdue_days: int = 0
    created_at: datetime
