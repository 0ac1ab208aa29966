# schooldesk/api/routers/exams.py - Exam groups, exams and marks entry
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.exam import (
    ExamCreate, ExamGroupCreate, ExamGroupOut, ExamGroupUpdate, ExamOut, ExamResultOut, ExamUpdate, ResultsSave,
)
from schooldesk.services.exams import ExamGroupService, ExamResultService, ExamService

router = APIRouter()
results_router = APIRouter()


@results_router.post("")
def save_results(
    payload: ResultsSave,
    ctx: TenantContext = Depends(require_permission("exams.create")),
    db: Session = Depends(get_db),
):
    results = ExamResultService(db, ctx).save(payload.exam_subject_id, payload.results)
    return success_response(
        [ExamResultOut.model_validate(result) for result in results],
        message=f"{len(results)} result(s) saved",
    )


# Results are written in bulk per exam subject
build_resource_router(ExamResultService, None, None, ExamResultOut, "exams", router=results_router)

router.include_router(
    build_resource_router(ExamGroupService, ExamGroupCreate, ExamGroupUpdate, ExamGroupOut, "exams"),
    prefix="/groups",
)
router.include_router(results_router, prefix="/results")
build_resource_router(ExamService, ExamCreate, ExamUpdate, ExamOut, "exams", router=router)
