# schooldesk/schemas/academic.py - Sessions, classes, sections and subjects
from datetime import date, datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from schooldesk.schemas.common import Name, OptionalCode, OptionalDate, RequestModel, ResponseModel


class SessionCreate(RequestModel):
    name: Name
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    is_active: bool = False

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class SessionUpdate(RequestModel):
    name: Optional[Name] = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        return self


class SessionOut(ResponseModel):
    id: UUID
    name: str
    start_date: Optional[date]
    end_date: Optional[date]
    is_active: bool
    created_at: datetime


class SectionCreate(RequestModel):
    name: Name
    is_active: bool = True


class SectionUpdate(RequestModel):
    name: Optional[Name] = None
    is_active: Optional[bool] = None


class SectionOut(ResponseModel):
    id: UUID
    name: str
    is_active: bool
    class_count: int = 0
    created_at: datetime


class SectionRef(ResponseModel):
    id: UUID
    name: str


class ClassCreate(RequestModel):
    name: Name
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True
    section_ids: List[UUID] = Field(default_factory=list)


class ClassUpdate(RequestModel):
    name: Optional[Name] = None
    sort_order: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    section_ids: Optional[List[UUID]] = None


class ClassOut(ResponseModel):
    id: UUID
    name: str
    sort_order: int
    is_active: bool
    sections: List[SectionRef] = []
    student_count: int = 0
    created_at: datetime


class SubjectCreate(RequestModel):
    name: Name
    code: OptionalCode = None
    subject_type: Literal["theory", "practical"] = "theory"
    is_active: bool = True


class SubjectUpdate(RequestModel):
    name: Optional[Name] = None
    code: OptionalCode = None
    subject_type: Optional[Literal["theory", "practical"]] = None
    is_active: Optional[bool] = None


class SubjectOut(ResponseModel):
    id: UUID
    name: str
    code: Optional[str]
    subject_type: str
    is_active: bool
    created_at: datetime
