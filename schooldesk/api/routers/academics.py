# schooldesk/api/routers/academics.py - Sessions, classes, sections and subjects
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.academic import (
    ClassCreate, ClassOut, ClassUpdate, SectionCreate, SectionOut, SectionUpdate,
    SessionCreate, SessionOut, SessionUpdate, SubjectCreate, SubjectOut, SubjectUpdate,
)
from schooldesk.services.academics import ClassService, SectionService, SessionService, SubjectService

sessions_router = APIRouter()
router = APIRouter()


@sessions_router.post("/{record_id}/activate")
def activate_session(
    record_id: UUID,
    ctx: TenantContext = Depends(require_permission("academics.edit")),
    db: Session = Depends(get_db),
):
    session = SessionService(db, ctx).activate(record_id)
    return success_response(SessionOut.model_validate(session), message="Session activated successfully")


build_resource_router(SessionService, SessionCreate, SessionUpdate, SessionOut, "academics", router=sessions_router)

router.include_router(
    build_resource_router(ClassService, ClassCreate, ClassUpdate, ClassOut, "academics"), prefix="/classes"
)
router.include_router(
    build_resource_router(SectionService, SectionCreate, SectionUpdate, SectionOut, "academics"), prefix="/sections"
)
router.include_router(
    build_resource_router(SubjectService, SubjectCreate, SubjectUpdate, SubjectOut, "academics"), prefix="/subjects"
)
