# schooldesk/api/routers/front_office.py - Visitor book, enquiries, complaints, call log and postal register
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.front_office import (
    ComplaintCreate, ComplaintOut, ComplaintUpdate, EnquiryCreate, EnquiryOut, EnquiryUpdate,
    PhoneCallCreate, PhoneCallOut, PhoneCallUpdate, PostalCreate, PostalOut, PostalUpdate,
    VisitorCreate, VisitorOut, VisitorUpdate,
)
from schooldesk.services.front_office import (
    ComplaintService, EnquiryService, PhoneCallService, PostalService, VisitorService,
)

router = APIRouter()
visitors_router = APIRouter()


@visitors_router.post("/{record_id}/checkout")
def checkout_visitor(
    record_id: UUID,
    ctx: TenantContext = Depends(require_permission("front_office.edit")),
    db: Session = Depends(get_db),
):
    visitor = VisitorService(db, ctx).checkout(record_id)
    return success_response(VisitorOut.model_validate(visitor), message="Visitor checked out")


build_resource_router(VisitorService, VisitorCreate, VisitorUpdate, VisitorOut, "front_office", router=visitors_router)
router.include_router(visitors_router, prefix="/visitors")
router.include_router(
    build_resource_router(EnquiryService, EnquiryCreate, EnquiryUpdate, EnquiryOut, "front_office"),
    prefix="/enquiries",
)
router.include_router(
    build_resource_router(ComplaintService, ComplaintCreate, ComplaintUpdate, ComplaintOut, "front_office"),
    prefix="/complaints",
)
router.include_router(
    build_resource_router(PhoneCallService, PhoneCallCreate, PhoneCallUpdate, PhoneCallOut, "front_office"),
    prefix="/phone-calls",
)
router.include_router(
    build_resource_router(PostalService, PostalCreate, PostalUpdate, PostalOut, "front_office"),
    prefix="/postal",
)
