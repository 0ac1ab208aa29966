# schooldesk/schemas/transport.py - Routes, pickup points and vehicles
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from schooldesk.schemas.common import Money, MoneyOut, Name, OptionalId, OptionalPhone, OptionalStr, RequestModel, ResponseModel


class RouteCreate(RequestModel):
    title: Name
    fare: Money = Decimal("0")
    description: OptionalStr = None


class RouteUpdate(RequestModel):
    title: Optional[Name] = None
    fare: Optional[Money] = None
    description: OptionalStr = None


class RouteOut(ResponseModel):
    id: UUID
    title: str
    fare: MoneyOut
    description: Optional[str]
    pickup_point_count: int = 0
    vehicle_count: int = 0
    created_at: datetime


class PickupPointCreate(RequestModel):
    route_id: UUID
    name: Name
    pickup_time: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    distance_km: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=2)


class PickupPointUpdate(RequestModel):
    route_id: Optional[UUID] = None
    name: Optional[Name] = None
    pickup_time: Optional[str] = Field(None, pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    distance_km: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=2)


class PickupPointOut(ResponseModel):
    id: UUID
    route_id: UUID
    route_title: Optional[str]
    name: str
    pickup_time: Optional[str]
    distance_km: Optional[MoneyOut]
    student_count: int = 0
    created_at: datetime


class VehicleCreate(RequestModel):
    vehicle_no: Name
    model: OptionalStr = None
    driver_name: OptionalStr = None
    driver_phone: OptionalPhone = None
    route_id: OptionalId = None


class VehicleUpdate(RequestModel):
    vehicle_no: Optional[Name] = None
    model: OptionalStr = None
    driver_name: OptionalStr = None
    driver_phone: OptionalPhone = None
    route_id: OptionalId = None


class VehicleOut(ResponseModel):
    id: UUID
    vehicle_no: str
    model: Optional[str]
    driver_name: Optional[str]
    driver_phone: Optional[str]
    route_id: Optional[UUID]
    created_at: datetime
