# schooldesk/schemas/user.py - Users, roles and permissions
from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import LongName, Name, OptionalEmail, OptionalId, OptionalStr, RequestModel, ResponseModel

UserType = Literal["admin", "staff", "student", "parent"]


class PermissionOut(ResponseModel):
    id: UUID
    name: str
    slug: str
    module: str


class RoleCreate(RequestModel):
    name: Name
    slug: Optional[Name] = None
    description: OptionalStr = None
    permission_ids: List[UUID] = []


class RoleUpdate(RequestModel):
    name: Optional[Name] = None
    slug: Optional[Name] = None
    description: OptionalStr = None
    permission_ids: Optional[List[UUID]] = None


class RoleOut(ResponseModel):
    id: UUID
    name: str
    slug: str
    description: Optional[str]
    is_system: bool
    permission_ids: List[UUID]
    user_count: int = 0
    created_at: datetime


class UserCreate(RequestModel):
    username: Name
    email: OptionalEmail = None
    full_name: Optional[LongName] = None
    password: str = Field(..., min_length=6, max_length=128)
    user_type: UserType = "admin"
    role_id: UUID
    is_active: bool = True
    staff_id: OptionalId = None
    student_id: OptionalId = None
    parent_id: OptionalId = None


class UserUpdate(RequestModel):
    username: Optional[Name] = None
    email: OptionalEmail = None
    full_name: Optional[LongName] = None
    user_type: Optional[UserType] = None
    role_id: Optional[UUID] = None
    is_active: Optional[bool] = None
    staff_id: OptionalId = None
    student_id: OptionalId = None
    parent_id: OptionalId = None


class ResetPasswordIn(RequestModel):
    password: str = Field(..., min_length=6, max_length=128)


class UserOut(ResponseModel):
    id: UUID
    username: str
    email: Optional[str]
    full_name: Optional[str]
    user_type: UserType
    role_id: UUID
    role_name: Optional[str]
    is_active: bool
    last_login: Optional[datetime]
    staff_id: Optional[UUID]
    student_id: Optional[UUID]
    parent_id: Optional[UUID]
    created_at: datetime
