# schooldesk/api/routers/transport.py - Routes, pickup points and vehicles
from fastapi import APIRouter

from schooldesk.api.routers.resource import build_resource_router
from schooldesk.schemas.transport import (
    PickupPointCreate, PickupPointOut, PickupPointUpdate, RouteCreate, RouteOut, RouteUpdate,
    VehicleCreate, VehicleOut, VehicleUpdate,
)
from schooldesk.services.transport import PickupPointService, RouteService, VehicleService

router = APIRouter()
router.include_router(build_resource_router(RouteService, RouteCreate, RouteUpdate, RouteOut, "transport"), prefix="/routes")
router.include_router(
    build_resource_router(PickupPointService, PickupPointCreate, PickupPointUpdate, PickupPointOut, "transport"),
    prefix="/pickup-points",
)
router.include_router(build_resource_router(VehicleService, VehicleCreate, VehicleUpdate, VehicleOut, "transport"), prefix="/vehicles")
