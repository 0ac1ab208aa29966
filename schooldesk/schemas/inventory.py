# schooldesk/schemas/inventory.py - Stores, items and item issues
from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import (
    Code, LongName, Name, OptionalDate, OptionalId, OptionalStr, RequestModel, ResponseModel,
)


class StoreCreate(RequestModel):
    name: Name
    code: Code
    description: OptionalStr = None


class StoreUpdate(RequestModel):
    name: Optional[Name] = None
    code: Optional[Code] = None
    description: OptionalStr = None


class StoreOut(ResponseModel):
    id: UUID
    name: str
    code: str
    description: Optional[str]
    item_count: int = 0
    created_at: datetime


class ItemCreate(RequestModel):
    name: LongName
    category: OptionalStr = None
    unit: OptionalStr = None
    quantity: int = Field(0, ge=0)
    description: OptionalStr = None
    store_id: OptionalId = None


class ItemUpdate(RequestModel):
    name: Optional[LongName] = None
    category: OptionalStr = None
    unit: OptionalStr = None
    quantity: Optional[int] = Field(None, ge=0)
    description: OptionalStr = None
    store_id: OptionalId = None


class ItemOut(ResponseModel):
    id: UUID
    name: str
    category: Optional[str]
    unit: Optional[str]
    quantity: int
    description: Optional[str]
    store_id: Optional[UUID]
    store_name: Optional[str]
    created_at: datetime


class ItemIssueCreate(RequestModel):
    item_id: UUID
    issue_to: LongName
    quantity: int = Field(..., gt=0)
    issue_date: OptionalDate = None
    note: OptionalStr = None


class ItemIssueOut(ResponseModel):
    id: UUID
    item_id: UUID
    item_name: Optional[str]
    issue_to: str
    quantity: int
    issue_date: date
    return_date: Optional[date]
    status: str
    note: Optional[str]
    created_at: datetime
