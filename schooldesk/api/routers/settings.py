# schooldesk/api/routers/settings.py - The caller's school settings
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.school import SchoolOut, SchoolUpdate
from schooldesk.services.school import SchoolService

router = APIRouter()


@router.get("/school")
def get_school(
    ctx: TenantContext = Depends(require_permission("settings.view")),
    db: Session = Depends(get_db),
):
    return success_response(SchoolOut.model_validate(SchoolService(db, ctx).get()))


@router.put("/school")
def update_school(
    payload: SchoolUpdate,
    ctx: TenantContext = Depends(require_permission("settings.edit")),
    db: Session = Depends(get_db),
):
    school = SchoolService(db, ctx).update(payload)
    return success_response(SchoolOut.model_validate(school), message="Settings updated successfully")
