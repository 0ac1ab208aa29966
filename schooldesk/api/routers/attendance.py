# schooldesk/api/routers/attendance.py - Daily student and staff attendance
from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.attendance import (
    AttendanceSummary, StaffAttendanceSave, StaffRegisterRow, StudentAttendanceSave, StudentRegisterRow,
)
from schooldesk.services.attendance import StaffAttendanceService, StudentAttendanceService

router = APIRouter()


def _student_register(register):
    return {
        "date": register["date"],
        "class_id": register["class_id"],
        "section_id": register["section_id"],
        "students": [StudentRegisterRow(**row) for row in register["students"]],
        "summary": AttendanceSummary(**register["summary"]),
    }


@router.get("/students")
def student_register(
    on: date = Query(..., alias="date"),
    class_id: UUID = Query(...),
    section_id: UUID = Query(...),
    ctx: TenantContext = Depends(require_permission("attendance.view")),
    db: Session = Depends(get_db),
):
    register = StudentAttendanceService(db, ctx).register(on, class_id, section_id)
    return success_response(_student_register(register))


@router.post("/students")
def save_student_attendance(
    payload: StudentAttendanceSave,
    ctx: TenantContext = Depends(require_permission("attendance.create")),
    db: Session = Depends(get_db),
):
    register = StudentAttendanceService(db, ctx).save(payload.date, payload.class_id, payload.section_id, payload.attendances)
    return success_response(_student_register(register), message="Attendance saved successfully")


@router.delete("/students")
def clear_student_attendance(
    on: date = Query(..., alias="date"),
    class_id: UUID = Query(...),
    section_id: UUID = Query(...),
    ctx: TenantContext = Depends(require_permission("attendance.delete")),
    db: Session = Depends(get_db),
):
    removed = StudentAttendanceService(db, ctx).clear(on, class_id, section_id)
    return success_response({"date": on, "deleted": removed}, message="Attendance cleared")


@router.get("/staff")
def staff_register(
    on: date = Query(..., alias="date"),
    role_id: Optional[UUID] = Query(None),
    department_id: Optional[UUID] = Query(None),
    ctx: TenantContext = Depends(require_permission("attendance.view")),
    db: Session = Depends(get_db),
):
    register = StaffAttendanceService(db, ctx).register(on, role_id=role_id, department_id=department_id)
    return success_response({
        "date": register["date"],
        "staff": [StaffRegisterRow(**row) for row in register["staff"]],
        "summary": AttendanceSummary(**register["summary"]),
    })


@router.post("/staff")
def save_staff_attendance(
    payload: StaffAttendanceSave,
    ctx: TenantContext = Depends(require_permission("attendance.create")),
    db: Session = Depends(get_db),
):
    result = StaffAttendanceService(db, ctx).save(payload.date, payload.attendances)
    return success_response(
        {"date": result["date"], "saved": result["saved"], "summary": AttendanceSummary(**result["summary"])},
        message="Attendance saved successfully",
    )


@router.delete("/staff")
def clear_staff_attendance(
    on: date = Query(..., alias="date"),
    ctx: TenantContext = Depends(require_permission("attendance.delete")),
    db: Session = Depends(get_db),
):
    removed = StaffAttendanceService(db, ctx).clear(on)
    return success_response({"date": on, "deleted": removed}, message="Attendance cleared")
