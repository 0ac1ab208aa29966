# schooldesk/api/routers/homework.py - Homework, submissions and evaluation
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.homework import (
    HomeworkCreate, HomeworkOut, HomeworkUpdate, SubmissionCreate, SubmissionEvaluate, SubmissionOut,
)
from schooldesk.services.homework import HomeworkService, SubmissionService

router = APIRouter()
submissions_router = APIRouter()


@submissions_router.post("")
def submit_homework(
    payload: SubmissionCreate,
    ctx: TenantContext = Depends(require_permission("homework.create")),
    db: Session = Depends(get_db),
):
    submission, created = SubmissionService(db, ctx).submit(payload.homework_id, payload.student_id, payload.message)
    return success_response(
        SubmissionOut.model_validate(submission),
        message="Homework submitted" if created else "Submission updated",
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@submissions_router.post("/{record_id}/evaluate")
def evaluate_submission(
    record_id: UUID,
    payload: SubmissionEvaluate,
    ctx: TenantContext = Depends(require_permission("homework.edit")),
    db: Session = Depends(get_db),
):
    submission = SubmissionService(db, ctx).evaluate(record_id, payload.status, payload.marks, payload.feedback)
    return success_response(SubmissionOut.model_validate(submission), message=f"Submission {payload.status}")


build_resource_router(SubmissionService, None, None, SubmissionOut, "homework", router=submissions_router)

router.include_router(submissions_router, prefix="/submissions")
build_resource_router(HomeworkService, HomeworkCreate, HomeworkUpdate, HomeworkOut, "homework", router=router)
