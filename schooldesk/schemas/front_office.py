# schooldesk/schemas/front_office.py - Visitor book, enquiries, complaints, call log and postal register
from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import (
    LongName, Name, OptionalDate, OptionalEmail, OptionalId, OptionalPhone, OptionalStr, Phone,
    RequestModel, ResponseModel,
)

EnquiryStatus = Literal["active", "passive", "won", "lost", "closed"]
ComplaintStatus = Literal["pending", "in_progress", "resolved", "closed"]
CallType = Literal["incoming", "outgoing"]
PostalType = Literal["dispatch", "receive"]


class VisitorCreate(RequestModel):
    name: LongName
    phone: OptionalPhone = None
    purpose: LongName
    meeting_with: OptionalStr = None
    id_card: OptionalStr = None
    number_of_people: int = Field(1, ge=1)
    note: OptionalStr = None


class VisitorUpdate(RequestModel):
    name: Optional[LongName] = None
    phone: OptionalPhone = None
    purpose: Optional[LongName] = None
    meeting_with: OptionalStr = None
    id_card: OptionalStr = None
    number_of_people: Optional[int] = Field(None, ge=1)
    note: OptionalStr = None


class VisitorOut(ResponseModel):
    id: UUID
    name: str
    phone: Optional[str]
    purpose: str
    meeting_with: Optional[str]
    id_card: Optional[str]
    number_of_people: int
    visit_date: date
    in_time: datetime
    out_time: Optional[datetime]
    checked_out: bool
    note: Optional[str]
    created_at: datetime


class EnquiryCreate(RequestModel):
    name: LongName
    phone: Phone
    email: OptionalEmail = None
    source: OptionalStr = None
    class_interested: OptionalStr = None
    description: OptionalStr = None
    # Today when left out
    enquiry_date: OptionalDate = None
    follow_up_date: OptionalDate = None
    status: EnquiryStatus = "active"
    assigned_staff_id: OptionalId = None
    note: OptionalStr = None


class EnquiryUpdate(RequestModel):
    name: Optional[LongName] = None
    phone: Optional[Phone] = None
    email: OptionalEmail = None
    source: OptionalStr = None
    class_interested: OptionalStr = None
    description: OptionalStr = None
    enquiry_date: OptionalDate = None
    follow_up_date: OptionalDate = None
    status: Optional[EnquiryStatus] = None
    assigned_staff_id: OptionalId = None
    note: OptionalStr = None


class EnquiryOut(ResponseModel):
    id: UUID
    name: str
    phone: str
    email: Optional[str]
    source: Optional[str]
    class_interested: Optional[str]
    description: Optional[str]
    enquiry_date: date
    follow_up_date: Optional[date]
    status: str
    assigned_staff_id: Optional[UUID]
    assigned_staff_name: Optional[str]
    note: Optional[str]
    created_at: datetime


class ComplaintCreate(RequestModel):
    complaint_type: Name = "General"
    source: OptionalStr = None
    name: LongName
    phone: OptionalPhone = None
    email: OptionalEmail = None
    complaint_date: OptionalDate = None
    description: str = Field(..., min_length=1)
    action_taken: OptionalStr = None
    status: ComplaintStatus = "pending"
    assigned_staff_id: OptionalId = None
    note: OptionalStr = None


class ComplaintUpdate(RequestModel):
    complaint_type: Optional[Name] = None
    source: OptionalStr = None
    name: Optional[LongName] = None
    phone: OptionalPhone = None
    email: OptionalEmail = None
    complaint_date: OptionalDate = None
    description: Optional[str] = Field(None, min_length=1)
    action_taken: OptionalStr = None
    status: Optional[ComplaintStatus] = None
    assigned_staff_id: OptionalId = None
    note: OptionalStr = None


class ComplaintOut(ResponseModel):
    id: UUID
    complaint_type: str
    source: Optional[str]
    name: str
    phone: Optional[str]
    email: Optional[str]
    complaint_date: date
    description: str
    action_taken: Optional[str]
    status: str
    assigned_staff_id: Optional[UUID]
    assigned_staff_name: Optional[str]
    note: Optional[str]
    created_at: datetime


class PhoneCallCreate(RequestModel):
    call_type: CallType = "incoming"
    name: LongName
    phone: Phone
    call_date: OptionalDate = None
    call_duration: OptionalStr = None
    description: OptionalStr = None
    next_follow_up: OptionalDate = None
    note: OptionalStr = None


class PhoneCallUpdate(RequestModel):
    call_type: Optional[CallType] = None
    name: Optional[LongName] = None
    phone: Optional[Phone] = None
    call_date: OptionalDate = None
    call_duration: OptionalStr = None
    description: OptionalStr = None
    next_follow_up: OptionalDate = None
    note: OptionalStr = None


class PhoneCallOut(ResponseModel):
    id: UUID
    call_type: str
    name: str
    phone: str
    call_date: date
    call_duration: Optional[str]
    description: Optional[str]
    next_follow_up: Optional[date]
    note: Optional[str]
    created_at: datetime


class PostalCreate(RequestModel):
    postal_type: PostalType
    from_title: OptionalStr = None
    to_title: OptionalStr = None
    address: OptionalStr = None
    postal_date: OptionalDate = None
    note: OptionalStr = None


class PostalUpdate(RequestModel):
    # Direction and reference number are fixed once recorded
    from_title: OptionalStr = None
    to_title: OptionalStr = None
    address: OptionalStr = None
    postal_date: OptionalDate = None
    note: OptionalStr = None


class PostalOut(ResponseModel):
    id: UUID
    postal_type: str
    reference_no: str
    from_title: Optional[str]
    to_title: Optional[str]
    address: Optional[str]
    postal_date: date
    note: Optional[str]
    created_at: datetime
