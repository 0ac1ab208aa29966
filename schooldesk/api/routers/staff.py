# schooldesk/api/routers/staff.py - Staff, departments, designations and leave
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.staff import (
    DepartmentCreate, DepartmentOut, DepartmentUpdate, DesignationCreate, DesignationOut, DesignationUpdate,
    LeaveCreate, LeaveOut, LeaveUpdate, StaffCreate, StaffOut, StaffUpdate,
)
from schooldesk.services.staff import DepartmentService, DesignationService, LeaveService, StaffService

router = APIRouter()
leave_router = APIRouter()


@leave_router.post("/{record_id}/approve")
def approve_leave(
    record_id: UUID,
    ctx: TenantContext = Depends(require_permission("staff.edit")),
    db: Session = Depends(get_db),
):
    leave = LeaveService(db, ctx).approve(record_id)
    return success_response(LeaveOut.model_validate(leave), message="Leave approved")


@leave_router.post("/{record_id}/reject")
def reject_leave(
    record_id: UUID,
    ctx: TenantContext = Depends(require_permission("staff.edit")),
    db: Session = Depends(get_db),
):
    leave = LeaveService(db, ctx).reject(record_id)
    return success_response(LeaveOut.model_validate(leave), message="Leave rejected")


build_resource_router(LeaveService, LeaveCreate, LeaveUpdate, LeaveOut, "staff", router=leave_router)


@router.get("/generate-id")
def generate_employee_id(
    ctx: TenantContext = Depends(require_permission("staff.create")),
    db: Session = Depends(get_db),
):
    return success_response({"employee_id": StaffService(db, ctx).generate_employee_id()})


# Static sub-paths go before the /{record_id} routes
router.include_router(
    build_resource_router(DepartmentService, DepartmentCreate, DepartmentUpdate, DepartmentOut, "staff"),
    prefix="/departments",
)
router.include_router(
    build_resource_router(DesignationService, DesignationCreate, DesignationUpdate, DesignationOut, "staff"),
    prefix="/designations",
)
router.include_router(leave_router, prefix="/leave")
build_resource_router(StaffService, StaffCreate, StaffUpdate, StaffOut, "staff", router=router)
