# schooldesk/api/routers/dashboard.py - Dashboard statistics
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_school
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.dashboard import DashboardStats
from schooldesk.services.dashboard import DashboardService

router = APIRouter()


@router.get("/stats")
def dashboard_stats(
    ctx: TenantContext = Depends(require_school),
    db: Session = Depends(get_db),
):
    return success_response(DashboardStats(**DashboardService(db, ctx).stats()))
