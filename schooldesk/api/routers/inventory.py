# schooldesk/api/routers/inventory.py - Stores, items and item issues
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.inventory import (
    ItemCreate, ItemIssueCreate, ItemIssueOut, ItemOut, ItemUpdate, StoreCreate, StoreOut, StoreUpdate,
)
from schooldesk.services.inventory import ItemIssueService, ItemService, StoreService

router = APIRouter()
issues_router = APIRouter()


@issues_router.post("/{record_id}/return")
def return_item(
    record_id: UUID,
    ctx: TenantContext = Depends(require_permission("inventory.edit")),
    db: Session = Depends(get_db),
):
    issue = ItemIssueService(db, ctx).return_issue(record_id)
    return success_response(ItemIssueOut.model_validate(issue), message="Item returned successfully")


build_resource_router(ItemIssueService, ItemIssueCreate, None, ItemIssueOut, "inventory", router=issues_router)

router.include_router(build_resource_router(StoreService, StoreCreate, StoreUpdate, StoreOut, "inventory"), prefix="/stores")
router.include_router(build_resource_router(ItemService, ItemCreate, ItemUpdate, ItemOut, "inventory"), prefix="/items")
router.include_router(issues_router, prefix="/issues")
