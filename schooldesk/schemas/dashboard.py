# schooldesk/schemas/dashboard.py - Dashboard counters
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from schooldesk.schemas.common import MoneyOut


class DashboardStats(BaseModel):
    total_students: int
    active_students: int
    total_staff: int
    total_classes: int
    total_parents: int
    active_session_id: Optional[UUID] = None
    active_session: Optional[str] = None
    fees_collected: MoneyOut
    pending_fees: MoneyOut
    outstanding_fees: MoneyOut
    income_total: MoneyOut
    expense_total: MoneyOut
    books_on_loan: int
    visitors_today: int
