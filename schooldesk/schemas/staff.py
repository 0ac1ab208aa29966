# schooldesk/schemas/staff.py - Departments, designations, staff and leave
from datetime import date, datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from schooldesk.schemas.common import (
    LongName, Money, Name, OptionalDate, OptionalEmail, OptionalId, OptionalPhone, OptionalStr,
    MoneyOut, RequestModel, ResponseModel,
)

Gender = Literal["male", "female", "other"]


class DepartmentCreate(RequestModel):
    name: Name
    is_active: bool = True


class DepartmentUpdate(RequestModel):
    name: Optional[Name] = None
    is_active: Optional[bool] = None


class DepartmentOut(ResponseModel):
    id: UUID
    name: str
    is_active: bool
    staff_count: int = 0
    created_at: datetime


class StaffCreate(RequestModel):
    employee_id: Name
    first_name: Name
    last_name: OptionalStr = None
    gender: Optional[Gender] = None
    dob: OptionalDate = None
    email: OptionalEmail = None
    phone: OptionalPhone = None
    qualification: OptionalStr = None
    joining_date: OptionalDate = None
    contract_type: OptionalStr = None
    basic_salary: Optional[Money] = None
    address: OptionalStr = None
    is_active: bool = True
    role_id: OptionalId = None
    department_id: OptionalId = None
    designation_id: OptionalId = None

    # Login account created in the same transaction
    create_login: bool = False
    username: OptionalStr = None
    password: OptionalStr = None

    @model_validator(mode="after")
    def check_login(self):
        if self.create_login:
            if not self.password or len(self.password) < 6:
                raise ValueError("Password must be at least 6 characters when creating a login")
            if not (self.username or self.email):
                raise ValueError("Username or email is required when creating a login")
            if not self.role_id:
                raise ValueError("Role is required when creating a login")
        return self


class StaffUpdate(RequestModel):
    employee_id: Optional[Name] = None
    first_name: Optional[Name] = None
    last_name: OptionalStr = None
    gender: Optional[Gender] = None
    dob: OptionalDate = None
    email: OptionalEmail = None
    phone: OptionalPhone = None
    qualification: OptionalStr = None
    joining_date: OptionalDate = None
    contract_type: OptionalStr = None
    basic_salary: Optional[Money] = None
    address: OptionalStr = None
    is_active: Optional[bool] = None
    role_id: OptionalId = None
    department_id: OptionalId = None
    designation_id: OptionalId = None


class StaffOut(ResponseModel):
    id: UUID
    employee_id: str
    first_name: str
    last_name: Optional[str]
    full_name: str
    gender: Optional[str]
    dob: Optional[date]
    email: Optional[str]
    phone: Optional[str]
    qualification: Optional[str]
    joining_date: Optional[date]
    contract_type: Optional[str]
    basic_salary: Optional[MoneyOut]
    address: Optional[str]
    is_active: bool
    role_id: Optional[UUID]
    role_name: Optional[str]
    department_id: Optional[UUID]
    department_name: Optional[str]
    designation_id: Optional[UUID]
    designation_name: Optional[str]
    has_login: bool = False
    created_at: datetime


LeaveStatus = Literal["pending", "approved", "rejected"]


class LeaveCreate(RequestModel):
    staff_id: UUID
    leave_type: Name
    from_date: date
    to_date: date
    reason: OptionalStr = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.to_date < self.from_date:
            raise ValueError("Leave cannot end before it starts")
        return self


class LeaveUpdate(RequestModel):
    leave_type: Optional[Name] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    reason: OptionalStr = None


class LeaveOut(ResponseModel):
    id: UUID
    staff_id: UUID
    staff_name: Optional[str]
    leave_type: str
    from_date: date
    to_date: date
    days: int
    reason: Optional[str]
    status: LeaveStatus
    created_at: datetime


DesignationCreate = DepartmentCreate
DesignationUpdate = DepartmentUpdate
DesignationOut = DepartmentOut
