# schooldesk/api/routers/fees.py - Fee structure, assignment, collection and dues
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router, list_query
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.pagination import ListQuery
from schooldesk.core.responses import success_response
from schooldesk.schemas.fee import (
    FeeAssignRequest, FeeAssignResult, FeeDueRow, FeeDueSummary, FeeGroupCreate, FeeGroupOut, FeeGroupUpdate,
    FeeMasterCreate, FeeMasterOut, FeeMasterUpdate, FeeTypeCreate, FeeTypeOut, FeeTypeUpdate,
    PaymentCreate, PaymentOut,
)
from schooldesk.services.fees import FeeDueService, FeeGroupService, FeeMasterService, FeeTypeService, PaymentService

router = APIRouter()


@router.post("/assign")
def assign_fees(
    payload: FeeAssignRequest,
    ctx: TenantContext = Depends(require_permission("fees.create")),
    db: Session = Depends(get_db),
):
    result = FeeMasterService(db, ctx).assign(payload.fee_master_id, payload.student_ids)
    return success_response(
        FeeAssignResult(**result),
        message=f"Fee assigned to {result['assigned']} student(s)",
    )


@router.get("/due")
def fee_dues(
    query: ListQuery = Depends(list_query),
    class_id: Optional[UUID] = Query(None),
    student_id: Optional[UUID] = Query(None),
    only_due: bool = Query(False),
    ctx: TenantContext = Depends(require_permission("fees.view")),
    db: Session = Depends(get_db),
):
    page, summary = FeeDueService(db, ctx).dues(query, class_id=class_id, student_id=student_id, only_due=only_due)
    return success_response(
        {
            "items": [FeeDueRow(**row) for row in page.items],
            "summary": FeeDueSummary(**summary),
        },
        pagination=page.meta(),
    )


router.include_router(
    build_resource_router(FeeTypeService, FeeTypeCreate, FeeTypeUpdate, FeeTypeOut, "fees"), prefix="/types"
)
router.include_router(
    build_resource_router(FeeGroupService, FeeGroupCreate, FeeGroupUpdate, FeeGroupOut, "fees"), prefix="/groups"
)
router.include_router(
    build_resource_router(FeeMasterService, FeeMasterCreate, FeeMasterUpdate, FeeMasterOut, "fees"), prefix="/master"
)
# Payments are recorded, never edited
router.include_router(
    build_resource_router(PaymentService, PaymentCreate, None, PaymentOut, "fees"), prefix="/collect"
)
