# schooldesk/api/routers/finance.py - Income and expense ledgers
from fastapi import APIRouter

from schooldesk.api.routers.resource import build_resource_router
from schooldesk.schemas.finance import EntryCreate, EntryOut, EntryUpdate
from schooldesk.services.finance import ExpenseService, IncomeService

router = APIRouter()
router.include_router(build_resource_router(IncomeService, EntryCreate, EntryUpdate, EntryOut, "finance"), prefix="/income")
router.include_router(build_resource_router(ExpenseService, EntryCreate, EntryUpdate, EntryOut, "finance"), prefix="/expenses")
