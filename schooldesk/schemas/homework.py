# schooldesk/schemas/homework.py - Homework and submissions
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import LongName, MoneyOut, OptionalDate, OptionalId, OptionalStr, RequestModel, ResponseModel

Marks = Annotated[Decimal, Field(ge=0, le=1000, max_digits=6, decimal_places=2)]


class HomeworkCreate(RequestModel):
    class_id: UUID
    section_id: UUID
    subject_id: UUID
    staff_id: OptionalId = None
    title: LongName
    description: OptionalStr = None
    # Today when left out
    homework_date: OptionalDate = None
    submission_date: date
    max_marks: Optional[Marks] = None


class HomeworkUpdate(RequestModel):
    class_id: OptionalId = None
    section_id: OptionalId = None
    subject_id: OptionalId = None
    staff_id: OptionalId = None
    title: Optional[LongName] = None
    description: OptionalStr = None
    homework_date: OptionalDate = None
    submission_date: OptionalDate = None
    max_marks: Optional[Marks] = None


class HomeworkOut(ResponseModel):
    id: UUID
    class_id: UUID
    class_name: Optional[str]
    section_id: UUID
    section_name: Optional[str]
    subject_id: UUID
    subject_name: Optional[str]
    staff_id: Optional[UUID]
    staff_name: Optional[str]
    title: str
    description: Optional[str]
    homework_date: date
    submission_date: date
    max_marks: Optional[MoneyOut]
    submission_count: int = 0
    created_at: datetime


class SubmissionCreate(RequestModel):
    homework_id: UUID
    student_id: UUID
    message: OptionalStr = None


class SubmissionEvaluate(RequestModel):
    status: Literal["accepted", "rejected"]
    marks: Optional[Marks] = None
    feedback: OptionalStr = None


class SubmissionOut(ResponseModel):
    id: UUID
    homework_id: UUID
    homework_title: Optional[str]
    student_id: UUID
    student_name: Optional[str]
    message: Optional[str]
    status: str
    marks: Optional[MoneyOut]
    feedback: Optional[str]
    submitted_at: datetime
    is_late: bool
    evaluated_at: Optional[datetime]
