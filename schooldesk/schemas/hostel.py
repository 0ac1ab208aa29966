# schooldesk/schemas/hostel.py - Hostels, room types and rooms
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import Money, MoneyOut, Name, OptionalId, OptionalStr, RequestModel, ResponseModel

HostelType = Literal["boys", "girls", "combined"]


class HostelCreate(RequestModel):
    name: Name
    hostel_type: HostelType = "combined"
    address: OptionalStr = None
    intake: int = Field(0, ge=0)
    is_active: bool = True


class HostelUpdate(RequestModel):
    name: Optional[Name] = None
    hostel_type: Optional[HostelType] = None
    address: OptionalStr = None
    intake: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class HostelOut(ResponseModel):
    id: UUID
    name: str
    hostel_type: HostelType
    address: Optional[str]
    intake: int
    is_active: bool
    room_count: int = 0
    created_at: datetime


class RoomTypeCreate(RequestModel):
    name: Name
    description: OptionalStr = None


class RoomTypeUpdate(RequestModel):
    name: Optional[Name] = None
    description: OptionalStr = None


class RoomTypeOut(ResponseModel):
    id: UUID
    name: str
    description: Optional[str]
    room_count: int = 0
    created_at: datetime


class RoomCreate(RequestModel):
    hostel_id: UUID
    room_type_id: OptionalId = None
    room_no: Name
    beds: int = Field(1, gt=0)
    cost_per_bed: Money = Decimal("0")
    description: OptionalStr = None


class RoomUpdate(RequestModel):
    hostel_id: Optional[UUID] = None
    room_type_id: OptionalId = None
    room_no: Optional[Name] = None
    beds: Optional[int] = Field(None, gt=0)
    cost_per_bed: Optional[Money] = None
    description: OptionalStr = None


class RoomOut(ResponseModel):
    id: UUID
    hostel_id: UUID
    hostel_name: Optional[str]
    room_type_id: Optional[UUID]
    room_type_name: Optional[str]
    room_no: str
    beds: int
    occupied: int = 0
    cost_per_bed: MoneyOut
    description: Optional[str]
    created_at: datetime
