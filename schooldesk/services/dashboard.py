# schooldesk/services/dashboard.py - Tenant counters for the dashboard
from datetime import date
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import func, select

from schooldesk.core.context import TenantContext
from schooldesk.models.academic import SchoolClass
from schooldesk.models.fee import FeeMaster, FeePayment, StudentFeeAssignment
from schooldesk.models.finance import Expense, Income
from schooldesk.models.front_office import Visitor
from schooldesk.models.library import BookIssue
from schooldesk.models.staff import Staff
from schooldesk.models.student import Parent, Student
from schooldesk.services.academics import SessionService


class DashboardService:
    def __init__(self, db, ctx: TenantContext):
        self.db = db
        self.ctx = ctx

    def _count(self, model, *criteria) -> int:
        return self.db.execute(
            select(func.count(model.id)).where(model.school_id == self.ctx.school_id, *criteria)
        ).scalar_one()

    def _sum(self, column, model) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(column), 0)).where(model.school_id == self.ctx.school_id)
        ).scalar_one()
        return Decimal(total)

    def stats(self) -> Dict[str, Any]:
        session = SessionService(self.db, self.ctx).active_session()

        collected = self._sum(FeePayment.amount, FeePayment)
        credited = self._sum(FeePayment.amount + FeePayment.discount, FeePayment)
        assigned = Decimal(self.db.execute(
            select(func.coalesce(func.sum(FeeMaster.amount), 0))
            .select_from(StudentFeeAssignment)
            .join(FeeMaster, FeeMaster.id == StudentFeeAssignment.fee_master_id)
            .where(StudentFeeAssignment.school_id == self.ctx.school_id)
        ).scalar_one())

        return {
            "total_students": self._count(Student),
            "active_students": self._count(Student, Student.is_active.is_(True)),
            "total_staff": self._count(Staff),
            "total_classes": self._count(SchoolClass),
            "total_parents": self._count(Parent),
            "active_session_id": session.id if session else None,
            "active_session": session.name if session else None,
            "fees_collected": collected,
            # Kept as the school-wide payment total; see outstanding_fees for assigned minus paid
            "pending_fees": collected,
            "outstanding_fees": max(assigned - credited, Decimal("0")),
            "income_total": self._sum(Income.amount, Income),
            "expense_total": self._sum(Expense.amount, Expense),
            "books_on_loan": self._count(BookIssue, BookIssue.status == "issued"),
            "visitors_today": self._count(Visitor, Visitor.visit_date == date.today()),
        }
