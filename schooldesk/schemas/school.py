# schooldesk/schemas/school.py - Tenant settings
from datetime import datetime
from typing import Optional
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator

from schooldesk.schemas.common import LongName, OptionalEmail, OptionalPhone, OptionalStr, RequestModel, ResponseModel


class SchoolUpdate(RequestModel):
    """Contact and locale settings; the school code cannot change"""
    name: Optional[LongName] = None
    email: OptionalEmail = None
    phone: OptionalPhone = None
    address: OptionalStr = None
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    currency_symbol: Optional[str] = Field(None, min_length=1, max_length=8)
    timezone: Optional[str] = None
    date_format: Optional[str] = Field(None, min_length=1, max_length=32)

    @field_validator("currency_code")
    @classmethod
    def upper_currency(cls, v):
        return v.upper() if v else v

    @field_validator("timezone")
    @classmethod
    def known_timezone(cls, v):
        if v is None:
            return v
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{v}'")
        return v


class SchoolOut(ResponseModel):
    id: UUID
    name: str
    code: str
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    currency_code: str
    currency_symbol: str
    timezone: str
    date_format: str
    is_active: bool
    created_at: datetime
