# schooldesk/api/routers/events.py - Events and the notice board
from fastapi import APIRouter

from schooldesk.api.routers.resource import build_resource_router
from schooldesk.schemas.event import EventCreate, EventOut, EventUpdate, NoticeCreate, NoticeOut, NoticeUpdate
from schooldesk.services.events import EventService, NoticeService

router = APIRouter()

router.include_router(
    build_resource_router(NoticeService, NoticeCreate, NoticeUpdate, NoticeOut, "events"),
    prefix="/notices",
)
build_resource_router(EventService, EventCreate, EventUpdate, EventOut, "events", router=router)
