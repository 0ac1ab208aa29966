# schooldesk/schemas/attendance.py - Daily attendance registers
from datetime import date
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from schooldesk.schemas.common import OptionalStr, OptionalTime, RequestModel, ResponseModel

AttendanceStatus = Literal["present", "absent", "late", "half_day", "holiday"]


class StudentMark(RequestModel):
    student_id: UUID
    status: AttendanceStatus
    remark: OptionalStr = None


class StudentAttendanceSave(RequestModel):
    date: date
    class_id: UUID
    section_id: UUID
    attendances: List[StudentMark] = Field(..., min_length=1)


class StaffMark(RequestModel):
    staff_id: UUID
    status: AttendanceStatus
    check_in: OptionalTime = None
    check_out: OptionalTime = None
    remark: OptionalStr = None

    @model_validator(mode="after")
    def check_times(self):
        if self.check_in and self.check_out and self.check_out < self.check_in:
            raise ValueError("check_out cannot be before check_in")
        return self


class StaffAttendanceSave(RequestModel):
    date: date
    attendances: List[StaffMark] = Field(..., min_length=1)


class StudentRegisterRow(ResponseModel):
    student_id: UUID
    admission_no: str
    roll_no: Optional[str]
    full_name: str
    status: Optional[str]
    remark: Optional[str]


class StaffRegisterRow(ResponseModel):
    staff_id: UUID
    employee_id: str
    full_name: str
    department_name: Optional[str]
    role_name: Optional[str]
    status: Optional[str]
    check_in: Optional[str]
    check_out: Optional[str]
    remark: Optional[str]


class AttendanceSummary(ResponseModel):
    date: date
    total: int
    marked: int
    present: int
    absent: int
    late: int
    half_day: int
    holiday: int
