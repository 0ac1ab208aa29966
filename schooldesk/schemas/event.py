# schooldesk/schemas/event.py - Events and notices
from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import LongName, OptionalDate, OptionalStr, RequestModel, ResponseModel

Audience = Literal["all", "students", "staff", "parents"]


class EventCreate(RequestModel):
    title: LongName
    description: OptionalStr = None
    location: OptionalStr = None
    start_date: date
    # Single-day event when left out
    end_date: OptionalDate = None
    is_holiday: bool = False
    event_for: Audience = "all"
    is_active: bool = True


class EventUpdate(RequestModel):
    title: Optional[LongName] = None
    description: OptionalStr = None
    location: OptionalStr = None
    start_date: OptionalDate = None
    end_date: OptionalDate = None
    is_holiday: Optional[bool] = None
    event_for: Optional[Audience] = None
    is_active: Optional[bool] = None


class EventOut(ResponseModel):
    id: UUID
    title: str
    description: Optional[str]
    location: Optional[str]
    start_date: date
    end_date: date
    is_holiday: bool
    event_for: str
    is_active: bool
    created_at: datetime


class NoticeCreate(RequestModel):
    title: LongName
    description: str = Field(..., min_length=1)
    notice_date: OptionalDate = None
    publish_on: OptionalDate = None
    notice_for: Audience = "all"
    is_active: bool = True


class NoticeUpdate(RequestModel):
    title: Optional[LongName] = None
    description: Optional[str] = Field(None, min_length=1)
    notice_date: OptionalDate = None
    publish_on: OptionalDate = None
    notice_for: Optional[Audience] = None
    is_active: Optional[bool] = None


class NoticeOut(ResponseModel):
    id: UUID
    title: str
    description: str
    notice_date: date
    publish_on: Optional[date]
    notice_for: str
    is_active: bool
    created_at: datetime
