# schooldesk/models/transport.py - Routes, pickup points and vehicles
from __future__ import annotations
import uuid
from decimal import Decimal
from sqlalchemy import String, ForeignKey, Numeric, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship
from schooldesk.models.base import Base, TenantMixin


class TransportRoute(TenantMixin, Base):
    __tablename__ = "transport_routes"

    title: Mapped[str] = mapped_column(String(64), nullable=False)
    fare: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    description: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("school_id", "title", name="uq_transport_routes_school_title"),
    )


class PickupPoint(TenantMixin, Base):
    __tablename__ = "pickup_points"

    route_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("transport_routes.id", ondelete="RESTRICT"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(64), nullable=False)
    pickup_time: Mapped[str | None] = mapped_column(String(8))
    distance_km: Mapped[Decimal | None] = mapped_column(Numeric(6, 2))

    route: Mapped["TransportRoute"] = relationship("TransportRoute", lazy="joined")

    __table_args__ = (
        UniqueConstraint("school_id", "route_id", "name", name="uq_pickup_points_route_name"),
    )

    @property
    def route_title(self) -> str | None:
        return self.route.title if self.route else None


class Vehicle(TenantMixin, Base):
    __tablename__ = "vehicles"

    vehicle_no: Mapped[str] = mapped_column(String(32), nullable=False)
    model: Mapped[str | None] = mapped_column(String(64))
    driver_name: Mapped[str | None] = mapped_column(String(64))
    driver_phone: Mapped[str | None] = mapped_column(String(32))
    route_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("transport_routes.id", ondelete="RESTRICT"), index=True)

    __table_args__ = (
        UniqueConstraint("school_id", "vehicle_no", name="uq_vehicles_school_vehicle_no"),
    )
