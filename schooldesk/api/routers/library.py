# schooldesk/api/routers/library.py - Books, members and lending
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.library import (
    BookCreate, BookIssueCreate, BookIssueOut, BookOut, BookUpdate, MemberCreate, MemberOut, MemberUpdate,
)
from schooldesk.services.library import BookIssueService, BookService, MemberService

router = APIRouter()
issues_router = APIRouter()


@issues_router.post("/{record_id}/return")
def return_book(
    record_id: UUID,
    ctx: TenantContext = Depends(require_permission("library.edit")),
    db: Session = Depends(get_db),
):
    issue = BookIssueService(db, ctx).return_book(record_id)
    message = "Book returned successfully"
    if issue.overdue_days:
        message = f"Book returned {issue.overdue_days} day(s) late"
    return success_response(BookIssueOut.model_validate(issue), message=message)


build_resource_router(BookIssueService, BookIssueCreate, None, BookIssueOut, "library", router=issues_router)

router.include_router(build_resource_router(BookService, BookCreate, BookUpdate, BookOut, "library"), prefix="/books")
router.include_router(build_resource_router(MemberService, MemberCreate, MemberUpdate, MemberOut, "library"), prefix="/members")
router.include_router(issues_router, prefix="/issues")
