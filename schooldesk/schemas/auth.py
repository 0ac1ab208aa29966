# schooldesk/schemas/auth.py - Login, session principal and password change
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class LoginIn(BaseModel):
    username: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=1)


class ChangePasswordIn(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class PrincipalOut(BaseModel):
    id: UUID
    username: str
    email: Optional[str] = None
    full_name: Optional[str] = None
    user_type: str
    school_id: UUID
    school_name: Optional[str] = None
    role_id: UUID
    role_name: Optional[str] = None
    permissions: List[str] = []


class LoginOut(BaseModel):
    token: str
    token_type: str = "bearer"
    user: PrincipalOut
