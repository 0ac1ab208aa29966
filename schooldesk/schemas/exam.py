# schooldesk/schemas/exam.py - Exam groups, exams and marks
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, List, Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from schooldesk.schemas.common import (
    MoneyOut, Name, OptionalDate, OptionalId, OptionalStr, OptionalTime, RequestModel, ResponseModel,
)

ExamType = Literal["term", "unit", "final", "other"]

Marks = Annotated[Decimal, Field(ge=0, le=1000, max_digits=6, decimal_places=2)]


class ExamGroupCreate(RequestModel):
    name: Name
    exam_type: ExamType = "term"
    description: OptionalStr = None


class ExamGroupUpdate(RequestModel):
    name: Optional[Name] = None
    exam_type: Optional[ExamType] = None
    description: OptionalStr = None


class ExamGroupOut(ResponseModel):
    id: UUID
    name: str
    exam_type: str
    description: Optional[str]
    exam_count: int = 0
    created_at: datetime


class ExamSubjectIn(RequestModel):
    subject_id: UUID
    exam_date: OptionalDate = None
    start_time: OptionalTime = None
    end_time: OptionalTime = None
    room_no: OptionalStr = None
    max_marks: Marks = Decimal("100")
    min_marks: Marks = Decimal("33")

    @model_validator(mode="after")
    def check_marks(self):
        if self.max_marks <= 0:
            raise ValueError("max_marks must be greater than 0")
        if self.min_marks > self.max_marks:
            raise ValueError("min_marks cannot exceed max_marks")
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class ExamSubjectOut(ResponseModel):
    id: UUID
    subject_id: UUID
    subject_name: Optional[str]
    exam_date: Optional[date]
    start_time: Optional[str]
    end_time: Optional[str]
    room_no: Optional[str]
    max_marks: MoneyOut
    min_marks: MoneyOut


class ExamCreate(RequestModel):
    name: Name
    description: OptionalStr = None
    exam_group_id: OptionalId = None
    # Active session when left out
    session_id: OptionalId = None
    is_published: bool = False
    is_active: bool = True
    subjects: List[ExamSubjectIn] = []


class ExamUpdate(RequestModel):
    name: Optional[Name] = None
    description: OptionalStr = None
    exam_group_id: OptionalId = None
    session_id: OptionalId = None
    is_published: Optional[bool] = None
    is_active: Optional[bool] = None
    # Replaces the exam's subject list when given
    subjects: Optional[List[ExamSubjectIn]] = None


class ExamOut(ResponseModel):
    id: UUID
    name: str
    description: Optional[str]
    exam_group_id: Optional[UUID]
    exam_group_name: Optional[str]
    session_id: UUID
    session_name: Optional[str]
    is_published: bool
    is_active: bool
    subjects: List[ExamSubjectOut] = []
    result_count: int = 0
    created_at: datetime


class ResultEntry(RequestModel):
    student_id: UUID
    marks_obtained: Optional[Marks] = None
    is_absent: bool = False
    note: OptionalStr = None


class ResultsSave(RequestModel):
    exam_subject_id: UUID
    results: List[ResultEntry] = Field(..., min_length=1)


class ExamResultOut(ResponseModel):
    id: UUID
    exam_id: UUID
    exam_subject_id: UUID
    subject_id: UUID
    subject_name: Optional[str]
    student_id: UUID
    student_name: Optional[str]
    admission_no: Optional[str]
    marks_obtained: Optional[MoneyOut]
    max_marks: MoneyOut
    is_absent: bool
    passed: Optional[bool]
    note: Optional[str]
    updated_at: datetime
