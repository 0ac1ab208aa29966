# schooldesk/schemas/student.py - Parents and students
from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from schooldesk.schemas.common import (
    LongName, Name, OptionalDate, OptionalEmail, OptionalId, OptionalPhone, OptionalStr, Phone,
    RequestModel, ResponseModel,
)

Gender = Literal["male", "female", "other"]


class ParentCreate(RequestModel):
    father_name: OptionalStr = None
    father_phone: OptionalPhone = None
    mother_name: OptionalStr = None
    mother_phone: OptionalPhone = None
    guardian_name: LongName
    guardian_relation: OptionalStr = None
    guardian_phone: Phone
    guardian_email: OptionalEmail = None
    occupation: OptionalStr = None
    address: OptionalStr = None


class ParentUpdate(RequestModel):
    father_name: OptionalStr = None
    father_phone: OptionalPhone = None
    mother_name: OptionalStr = None
    mother_phone: OptionalPhone = None
    guardian_name: Optional[LongName] = None
    guardian_relation: OptionalStr = None
    guardian_phone: Optional[Phone] = None
    guardian_email: OptionalEmail = None
    occupation: OptionalStr = None
    address: OptionalStr = None


class ParentOut(ResponseModel):
    id: UUID
    father_name: Optional[str]
    father_phone: Optional[str]
    mother_name: Optional[str]
    mother_phone: Optional[str]
    guardian_name: str
    guardian_relation: Optional[str]
    guardian_phone: str
    guardian_email: Optional[str]
    occupation: Optional[str]
    address: Optional[str]
    student_count: int = 0
    created_at: datetime


class StudentCreate(RequestModel):
    # Generated when left out
    admission_no: Optional[Name] = None
    roll_no: OptionalStr = None
    first_name: Name
    last_name: OptionalStr = None
    gender: Optional[Gender] = None
    dob: OptionalDate = None
    email: OptionalEmail = None
    phone: OptionalPhone = None
    admission_date: OptionalDate = None
    category_id: OptionalId = None
    house_id: OptionalId = None
    address: OptionalStr = None
    is_active: bool = True
    parent_id: OptionalId = None
    hostel_room_id: OptionalId = None
    pickup_point_id: OptionalId = None

    # Enrollment in the given (or active) session
    class_id: OptionalId = None
    section_id: OptionalId = None
    session_id: OptionalId = None


class StudentUpdate(RequestModel):
    admission_no: Optional[Name] = None
    roll_no: OptionalStr = None
    first_name: Optional[Name] = None
    last_name: OptionalStr = None
    gender: Optional[Gender] = None
    dob: OptionalDate = None
    email: OptionalEmail = None
    phone: OptionalPhone = None
    admission_date: OptionalDate = None
    category_id: OptionalId = None
    house_id: OptionalId = None
    address: OptionalStr = None
    is_active: Optional[bool] = None
    parent_id: OptionalId = None
    hostel_room_id: OptionalId = None
    pickup_point_id: OptionalId = None
    class_id: OptionalId = None
    section_id: OptionalId = None
    session_id: OptionalId = None


class StudentOut(ResponseModel):
    id: UUID
    admission_no: str
    roll_no: Optional[str]
    first_name: str
    last_name: Optional[str]
    full_name: str
    gender: Optional[str]
    dob: Optional[date]
    email: Optional[str]
    phone: Optional[str]
    admission_date: Optional[date]
    category_id: Optional[UUID]
    category_name: Optional[str]
    house_id: Optional[UUID]
    house_name: Optional[str]
    address: Optional[str]
    is_active: bool
    parent_id: Optional[UUID]
    parent_name: Optional[str]
    hostel_room_id: Optional[UUID]
    pickup_point_id: Optional[UUID]
    session_id: Optional[UUID]
    class_id: Optional[UUID]
    class_name: Optional[str]
    section_id: Optional[UUID]
    section_name: Optional[str]
    created_at: datetime


class StudentCategoryCreate(RequestModel):
    name: Name
    description: OptionalStr = None


class StudentCategoryUpdate(RequestModel):
    name: Optional[Name] = None
    description: OptionalStr = None


class StudentCategoryOut(ResponseModel):
    id: UUID
    name: str
    description: Optional[str]
    student_count: int = 0
    created_at: datetime


class SchoolHouseCreate(RequestModel):
    name: Name
    description: OptionalStr = None
    is_active: bool = True


class SchoolHouseUpdate(RequestModel):
    name: Optional[Name] = None
    description: OptionalStr = None
    is_active: Optional[bool] = None


class SchoolHouseOut(ResponseModel):
    id: UUID
    name: str
    description: Optional[str]
    is_active: bool
    student_count: int = 0
    created_at: datetime
