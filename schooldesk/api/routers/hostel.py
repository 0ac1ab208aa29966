# schooldesk/api/routers/hostel.py - Hostels, room types and rooms
from fastapi import APIRouter

from schooldesk.api.routers.resource import build_resource_router
from schooldesk.schemas.hostel import (
    HostelCreate, HostelOut, HostelUpdate, RoomCreate, RoomOut, RoomTypeCreate, RoomTypeOut, RoomTypeUpdate, RoomUpdate,
)
from schooldesk.services.hostel import HostelService, RoomService, RoomTypeService

router = APIRouter()
router.include_router(build_resource_router(HostelService, HostelCreate, HostelUpdate, HostelOut, "hostel"), prefix="/hostels")
router.include_router(build_resource_router(RoomTypeService, RoomTypeCreate, RoomTypeUpdate, RoomTypeOut, "hostel"), prefix="/room-types")
router.include_router(build_resource_router(RoomService, RoomCreate, RoomUpdate, RoomOut, "hostel"), prefix="/rooms")
