# schooldesk/services/fees.py - Fee structure, assignment, collection and dues
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
import logging
import uuid

from sqlalchemy import Select, and_, func, select

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.core.pagination import ListQuery, Page
from schooldesk.models.academic import AcademicSession, ClassSection, SchoolClass
from schooldesk.models.fee import FeeGroup, FeeMaster, FeePayment, FeeType, StudentFeeAssignment
from schooldesk.models.student import Student, StudentSession
from schooldesk.services.academics import SessionService
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


class FeeTypeService(TenantCRUDService[FeeType]):
    model = FeeType
    resource_name = "Fee type"
    unique_rules = (unique("code"),)
    dependents = (Dependent(FeeMaster, "fee_type_id", "{count} fee master(s) use it"),)
    search_fields = ("name", "code")

    def ordering(self):
        return [FeeType.name, FeeType.id]


class FeeGroupService(TenantCRUDService[FeeGroup]):
    model = FeeGroup
    resource_name = "Fee group"
    unique_rules = (unique("name"),)
    dependents = (Dependent(FeeMaster, "fee_group_id", "{count} fee master(s) use it"),)
    related_counts = (RelatedCount("master_count", FeeMaster, "fee_group_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [FeeGroup.name, FeeGroup.id]


class FeeMasterService(TenantCRUDService[FeeMaster]):
    model = FeeMaster
    resource_name = "Fee master"
    unique_rules = (
        unique("class_id", "fee_group_id", "fee_type_id", label="class, fee group and fee type"),
    )
    references = {
        "class_id": Reference(SchoolClass, "Class"),
        "fee_group_id": Reference(FeeGroup, "Fee group"),
        "fee_type_id": Reference(FeeType, "Fee type"),
        "session_id": Reference(AcademicSession, "Session"),
    }
    dependents = (
        Dependent(StudentFeeAssignment, "fee_master_id", "{count} student assignment(s) use it"),
    )
    related_counts = (RelatedCount("assigned_count", StudentFeeAssignment, "fee_master_id"),)
    filter_fields = ("class_id", "fee_group_id", "fee_type_id", "session_id")

    def ordering(self):
        return [FeeMaster.due_date, FeeMaster.created_at, FeeMaster.id]

    def prepare_update(self, obj, values, extra):
        assignment_ids = self.db.execute(
            select(StudentFeeAssignment.id).where(StudentFeeAssignment.fee_master_id == obj.id)
        ).scalars().all()
        if not assignment_ids:
            return

        # Assigned students keep the fee they were billed for
        for name, label in (("class_id", "class"), ("fee_group_id", "fee group"), ("fee_type_id", "fee type")):
            if name in values and values[name] != getattr(obj, name):
                raise ConflictError(
                    f"Cannot change the {label} of a fee master assigned to {len(assignment_ids)} student(s)",
                    field=name,
                    count=len(assignment_ids),
                )

        amount = values.get("amount")
        if amount is not None:
            credited = max(_paid_toward(self.db, assignment_ids).values(), default=ZERO)
            if amount < credited:
                raise ConflictError(
                    f"amount: Cannot be less than the {credited:.2f} already paid by a student", field="amount"
                )

    def assign(self, fee_master_id: uuid.UUID, student_ids: Optional[List[uuid.UUID]] = None) -> Dict[str, Any]:
        """
        Assign a fee master to students.

        Without explicit ids, every student enrolled in the master's class for
        the master's session (or the active session) is assigned. Students who
        already carry the fee are left alone, so repeating the call is harmless.
        """
        master = self.get_object(fee_master_id)

        if student_ids is None:
            session_id = master.session_id
            if session_id is None:
                session = SessionService(self.db, self.ctx).active_session()
                if session is None:
                    raise ValidationFailed("No active session. Create or activate a session first")
                session_id = session.id
            wanted = list(self.db.execute(
                select(StudentSession.student_id)
                .join(ClassSection, ClassSection.id == StudentSession.class_section_id)
                .where(
                    StudentSession.school_id == self.ctx.school_id,
                    StudentSession.session_id == session_id,
                    ClassSection.class_id == master.class_id,
                )
            ).scalars().all())
        else:
            wanted = list(dict.fromkeys(student_ids))
            found = set(self.db.execute(
                select(Student.id).where(Student.school_id == self.ctx.school_id, Student.id.in_(wanted))
            ).scalars().all())
            if len(found) != len(wanted):
                raise ValidationFailed("student_ids: One or more students were not found", field="student_ids")

        existing = set(self.db.execute(
            select(StudentFeeAssignment.student_id).where(
                StudentFeeAssignment.fee_master_id == master.id,
                StudentFeeAssignment.student_id.in_(wanted),
            )
        ).scalars().all())

        new_ids = [student_id for student_id in wanted if student_id not in existing]
        with self.atomic():
            for student_id in new_ids:
                self.db.add(StudentFeeAssignment(
                    school_id=self.ctx.school_id, student_id=student_id, fee_master_id=master.id,
                ))

        logger.info(f"Fee master {master.id} assigned to {len(new_ids)} student(s) by {self.ctx.username}")
        return {"fee_master_id": master.id, "assigned": len(new_ids), "already_assigned": len(existing)}


def _paid_toward(db, assignment_ids) -> Dict[uuid.UUID, Decimal]:
    """Amount plus discount credited to each assignment"""
    rows = db.execute(
        select(FeePayment.assignment_id, func.sum(FeePayment.amount + FeePayment.discount))
        .where(FeePayment.assignment_id.in_(list(assignment_ids)))
        .group_by(FeePayment.assignment_id)
    ).all()
    return {assignment_id: Decimal(total or 0) for assignment_id, total in rows}


def _fines_paid(db, assignment_ids) -> Dict[uuid.UUID, Decimal]:
    """Fine already collected against each assignment"""
    rows = db.execute(
        select(FeePayment.assignment_id, func.sum(FeePayment.fine))
        .where(FeePayment.assignment_id.in_(list(assignment_ids)))
        .group_by(FeePayment.assignment_id)
    ).all()
    return {assignment_id: Decimal(total or 0) for assignment_id, total in rows}


class PaymentService(TenantCRUDService[FeePayment]):
    model = FeePayment
    resource_name = "Payment"
    references = {"student_id": Reference(Student, "Student")}
    filter_fields = ("student_id", "assignment_id", "fee_master_id", "payment_mode")
    filter_types = {"fee_master_id": uuid.UUID}
    date_field = "payment_date"

    def ordering(self):
        return [FeePayment.payment_date.desc(), FeePayment.created_at.desc(), FeePayment.id]

    def apply_filter(self, stmt: Select, name: str, value: Any) -> Select:
        if name == "fee_master_id":
            return stmt.where(FeePayment.assignment_id.in_(
                select(StudentFeeAssignment.id).where(StudentFeeAssignment.fee_master_id == value)
            ))
        return super().apply_filter(stmt, name, value)

    def balance_of(self, assignment: StudentFeeAssignment) -> Decimal:
        paid = _paid_toward(self.db, [assignment.id]).get(assignment.id, ZERO)
        return Decimal(assignment.fee_master.amount) - paid

    def prepare_create(self, values, extra):
        assignment = self.require(StudentFeeAssignment, values["assignment_id"], "Fee assignment")
        if assignment.student_id != values["student_id"]:
            raise ValidationFailed("assignment_id: Fee assignment does not belong to the student", field="assignment_id")

        balance = self.balance_of(assignment)
        credited = values["amount"] + values.get("discount", ZERO)
        if credited > balance:
            raise ValidationFailed(
                f"amount: Payment exceeds the remaining balance of {balance:.2f}", field="amount"
            )

        values["payment_date"] = values.get("payment_date") or date.today()
        values["collected_by"] = self.ctx.user_id


class FeeDueService(TenantCRUDService[StudentFeeAssignment]):
    """Per-student fee position: assigned, paid, fine and balance"""
    model = StudentFeeAssignment
    resource_name = "Fee assignment"

    def _positions(self, class_id: Optional[uuid.UUID], student_id: Optional[uuid.UUID], only_due: bool) -> Select:
        assigned = (
            select(
                StudentFeeAssignment.student_id.label("student_id"),
                func.sum(FeeMaster.amount).label("assigned"),
            )
            .join(FeeMaster, FeeMaster.id == StudentFeeAssignment.fee_master_id)
            .where(StudentFeeAssignment.school_id == self.ctx.school_id)
            .group_by(StudentFeeAssignment.student_id)
            .subquery()
        )
        paid = (
            select(
                FeePayment.student_id.label("student_id"),
                func.sum(FeePayment.amount + FeePayment.discount).label("paid"),
            )
            .where(FeePayment.school_id == self.ctx.school_id)
            .group_by(FeePayment.student_id)
            .subquery()
        )
        paid_total = func.coalesce(paid.c.paid, 0)

        stmt = (
            select(
                Student.id, Student.admission_no, Student.first_name, Student.last_name,
                assigned.c.assigned, paid_total.label("paid"),
            )
            .join(assigned, assigned.c.student_id == Student.id)
            .outerjoin(paid, paid.c.student_id == Student.id)
            .where(Student.school_id == self.ctx.school_id)
        )
        if student_id is not None:
            stmt = stmt.where(Student.id == student_id)
        if class_id is not None:
            stmt = stmt.where(Student.id.in_(
                select(StudentSession.student_id)
                .join(ClassSection, ClassSection.id == StudentSession.class_section_id)
                .join(AcademicSession, AcademicSession.id == StudentSession.session_id)
                .where(AcademicSession.is_active.is_(True), ClassSection.class_id == class_id)
            ))
        if only_due:
            stmt = stmt.where(assigned.c.assigned - paid_total > 0)
        return stmt

    def _fines(self, student_ids: Optional[List[uuid.UUID]], on: date) -> Dict[uuid.UUID, Decimal]:
        """Fines still owed on overdue, unpaid assignments, summed per student"""
        stmt = (
            select(StudentFeeAssignment)
            .join(FeeMaster, FeeMaster.id == StudentFeeAssignment.fee_master_id)
            .where(
                StudentFeeAssignment.school_id == self.ctx.school_id,
                FeeMaster.fine_type != "none",
                and_(FeeMaster.due_date.is_not(None), FeeMaster.due_date < on),
            )
        )
        if student_ids is not None:
            stmt = stmt.where(StudentFeeAssignment.student_id.in_(student_ids))
        assignments = self.db.execute(stmt).scalars().all()

        ids = [a.id for a in assignments]
        paid = _paid_toward(self.db, ids)
        fines_paid = _fines_paid(self.db, ids)
        fines: Dict[uuid.UUID, Decimal] = defaultdict(lambda: ZERO)
        for assignment in assignments:
            master = assignment.fee_master
            balance = Decimal(master.amount) - paid.get(assignment.id, ZERO)
            owed = master.fine_for(balance, on) - fines_paid.get(assignment.id, ZERO)
            fines[assignment.student_id] += max(owed, ZERO)
        return fines

    def dues(
        self,
        query: ListQuery,
        class_id: Optional[uuid.UUID] = None,
        student_id: Optional[uuid.UUID] = None,
        only_due: bool = False,
    ) -> Tuple[Page[Dict[str, Any]], Dict[str, Any]]:
        today = date.today()
        stmt = self._positions(class_id, student_id, only_due)
        if query.search:
            needle = query.search.strip().lower()
            stmt = stmt.where(
                func.lower(Student.first_name).contains(needle, autoescape=True)
                | func.lower(Student.last_name).contains(needle, autoescape=True)
                | func.lower(Student.admission_no).contains(needle, autoescape=True)
            )

        positions = stmt.subquery()
        totals = self.db.execute(
            select(
                func.count(),
                func.coalesce(func.sum(positions.c.assigned), 0),
                func.coalesce(func.sum(positions.c.paid), 0),
            ).select_from(positions)
        ).one()
        total, assigned_total, paid_total = totals

        rows = self.db.execute(
            stmt.order_by(Student.admission_no, Student.id).offset(query.offset).limit(query.limit)
        ).all()
        fines = self._fines([row.id for row in rows], today)

        items = []
        for row in rows:
            assigned = Decimal(row.assigned or 0)
            paid = Decimal(row.paid or 0)
            fine = fines.get(row.id, ZERO)
            items.append({
                "student_id": row.id,
                "admission_no": row.admission_no,
                "student_name": " ".join(p for p in (row.first_name, row.last_name) if p),
                "assigned": assigned,
                "paid": paid,
                "fine": fine,
                "balance": assigned - paid + fine,
            })

        # Fine totals cover every matching student, not just this page
        all_ids = self.db.execute(select(positions.c.id)).scalars().all()
        fine_total = sum(self._fines(list(all_ids), today).values(), ZERO)
        summary = {
            "students": total,
            "assigned": Decimal(assigned_total),
            "paid": Decimal(paid_total),
            "fine": fine_total,
            "balance": Decimal(assigned_total) - Decimal(paid_total) + fine_total,
        }
        return Page(items=items, total=total, page=query.page, limit=query.limit), summary
