# schooldesk/services/staff.py - Departments, designations, staff (with login accounts) and leave
from datetime import date
import logging
import re
import uuid

from sqlalchemy import delete, select

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.core.security import hash_password
from schooldesk.models.library import LibraryMember
from schooldesk.models.school import School
from schooldesk.models.staff import Department, Designation, Staff, StaffLeave
from schooldesk.models.user import Role, User
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)


class DepartmentService(TenantCRUDService[Department]):
    model = Department
    resource_name = "Department"
    unique_rules = (unique("name"),)
    dependents = (Dependent(Staff, "department_id", "{count} staff member(s) are assigned to it"),)
    related_counts = (RelatedCount("staff_count", Staff, "department_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [Department.name, Department.id]


class DesignationService(TenantCRUDService[Designation]):
    model = Designation
    resource_name = "Designation"
    unique_rules = (unique("name"),)
    dependents = (Dependent(Staff, "designation_id", "{count} staff member(s) are assigned to it"),)
    related_counts = (RelatedCount("staff_count", Staff, "designation_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [Designation.name, Designation.id]


class StaffService(TenantCRUDService[Staff]):
    model = Staff
    resource_name = "Staff"
    unique_rules = (unique("employee_id", label="employee ID"), unique("email"))
    references = {
        "role_id": Reference(Role, "Role"),
        "department_id": Reference(Department, "Department"),
        "designation_id": Reference(Designation, "Designation"),
    }
    dependents = (Dependent(LibraryMember, "staff_id", "{count} library membership(s) belong to it"),)
    related_counts = (RelatedCount("has_login", User, "staff_id"),)
    search_fields = ("first_name", "last_name", "employee_id", "email", "phone")
    filter_fields = ("role_id", "department_id", "designation_id")
    extra_fields = ("create_login", "username", "password")

    def _check_login_available(self, username: str) -> None:
        taken = self.db.execute(
            select(User.id).where(User.username == username)
        ).first()
        if taken is not None:
            raise ConflictError("User with this username already exists", field="username")

    def conflict_from_integrity(self, exc):
        if "username" in str(exc.orig).lower():
            return ConflictError("User with this username already exists", field="username")
        return super().conflict_from_integrity(exc)

    def prepare_create(self, values, extra):
        if extra.get("create_login"):
            extra["username"] = (extra.get("username") or values.get("email") or "").lower()
            self._check_login_available(extra["username"])

    def after_create(self, obj, extra):
        """Create the login account in the same transaction as the staff row"""
        if not extra.get("create_login"):
            return
        user = User(
            school_id=self.ctx.school_id,
            username=extra["username"],
            email=obj.email,
            full_name=obj.full_name,
            password_hash=hash_password(extra["password"]),
            user_type="staff",
            role_id=obj.role_id,
            staff_id=obj.id,
        )
        self.db.add(user)
        self.db.flush()
        logger.info(f"Login created for staff {obj.employee_id}: {user.username}")

    def after_update(self, obj, extra):
        # Keep the linked login's role and display data in step with the profile
        user = self.db.execute(select(User).where(User.staff_id == obj.id)).scalar_one_or_none()
        if user is not None:
            user.full_name = obj.full_name
            user.email = obj.email
            if obj.role_id is not None:
                user.role_id = obj.role_id

    def before_delete(self, obj):
        self.db.execute(delete(User).where(User.staff_id == obj.id, User.school_id == self.ctx.school_id))

    def generate_employee_id(self) -> str:
        """Next free employee ID in the form <SCHOOLCODE>-<YY>-<NNNN>"""
        code = self.db.execute(select(School.code).where(School.id == self.ctx.school_id)).scalar_one()
        prefix = f"{code or 'EMP'}-{date.today():%y}-"

        latest = self.db.execute(
            self.scoped().where(Staff.employee_id.like(f"{prefix}%")).order_by(Staff.employee_id.desc())
        ).scalars().first()

        next_number = 1
        if latest is not None:
            match = re.search(r"(\d+)$", latest.employee_id)
            if match:
                next_number = int(match.group(1)) + 1
        return f"{prefix}{next_number:04d}"


class LeaveService(TenantCRUDService[StaffLeave]):
    model = StaffLeave
    resource_name = "Leave request"
    references = {"staff_id": Reference(Staff, "Staff member")}
    search_fields = ("leave_type",)
    filter_fields = ("staff_id",)

    statuses = ("pending", "approved", "rejected")

    def ordering(self):
        return [StaffLeave.from_date.desc(), StaffLeave.id]

    def apply_status(self, stmt, status):
        if not status:
            return stmt
        if status not in self.statuses:
            raise ValidationFailed(f"status: Unsupported status filter '{status}'", field="status")
        return stmt.where(StaffLeave.status == status)

    def prepare_update(self, obj, values, extra):
        if obj.status != "pending":
            raise ConflictError(f"Leave request is already {obj.status}")
        start = values.get("from_date", obj.from_date)
        end = values.get("to_date", obj.to_date)
        if end < start:
            raise ValidationFailed("Leave cannot end before it starts")

    def _decide(self, leave_id: uuid.UUID, status: str) -> StaffLeave:
        obj = self.get_object(leave_id)
        if obj.status != "pending":
            raise ConflictError(f"Leave request is already {obj.status}")
        with self.atomic():
            obj.status = status
            obj.decided_by = self.ctx.user_id
        logger.info(f"Leave {obj.id} {status} by {self.ctx.username}")
        return self.get(obj.id)

    def approve(self, leave_id: uuid.UUID) -> StaffLeave:
        return self._decide(leave_id, "approved")

    def reject(self, leave_id: uuid.UUID) -> StaffLeave:
        return self._decide(leave_id, "rejected")
