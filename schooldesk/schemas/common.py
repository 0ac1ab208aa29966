# schooldesk/schemas/common.py - Shared pydantic base classes and field types
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, PlainSerializer, StringConstraints


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class RequestModel(BaseModel):
    """Inbound payload: strings are stripped and unknown fields are ignored"""
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class ResponseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
LongName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]
Code = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=32), AfterValidator(str.upper)]

OptionalStr = Annotated[Optional[str], BeforeValidator(_blank_to_none)]
OptionalCode = Annotated[Optional[Code], BeforeValidator(_blank_to_none)]
OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(_blank_to_none)]
OptionalId = Annotated[Optional[UUID], BeforeValidator(_blank_to_none)]
OptionalDate = Annotated[Optional[date], BeforeValidator(_blank_to_none)]
Phone = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=32)]
OptionalPhone = Annotated[Optional[Phone], BeforeValidator(_blank_to_none)]

# Currency and percentages arrive as numbers or numeric strings
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
PositiveMoney = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Percentage = Annotated[Decimal, Field(ge=0, le=100, max_digits=5, decimal_places=2)]

MoneyOut = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# Clock time as HH:MM
OptionalTime = Annotated[
    Optional[Annotated[str, StringConstraints(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]],
    BeforeValidator(_blank_to_none),
]
