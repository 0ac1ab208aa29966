# schooldesk/services/attendance.py - Daily attendance registers for students and staff
from collections import Counter
from datetime import date
from typing import Any, Dict, Iterable, List, Optional
import logging
import uuid

from sqlalchemy import delete, select

from schooldesk.core.errors import ForbiddenError, ValidationFailed
from schooldesk.models.academic import SchoolClass
from schooldesk.models.attendance import StaffAttendance, StudentAttendance
from schooldesk.models.staff import Staff
from schooldesk.models.student import Student, StudentSession
from schooldesk.services.academics import ClassService, SessionService
from schooldesk.services.crud import TenantCRUDService

logger = logging.getLogger(__name__)

STATUSES = ("present", "absent", "late", "half_day", "holiday")


def summarize(on: date, total: int, statuses: Iterable[Optional[str]]) -> Dict[str, Any]:
    counts = Counter(status for status in statuses if status)
    summary = {"date": on, "total": total, "marked": sum(counts.values())}
    summary.update({status: counts.get(status, 0) for status in STATUSES})
    return summary


def _check_date(on: date) -> None:
    if on > date.today():
        raise ValidationFailed("date: Attendance cannot be marked for a future date", field="date")


def _check_overwrite(ctx, marks: Dict[uuid.UUID, Any]) -> None:
    # Marking a fresh day needs attendance.create; changing a marked one needs attendance.edit
    if marks and not ctx.can("attendance.edit"):
        raise ForbiddenError("Missing permission: attendance.edit")


class StudentAttendanceService(TenantCRUDService[StudentAttendance]):
    """
    Class register for one day.

    The register lists every student enrolled in the class section for the
    active session; saving overwrites the day's status of each student sent.
    """

    model = StudentAttendance
    resource_name = "Attendance"

    def _roster(self, class_id: uuid.UUID, section_id: uuid.UUID) -> List[Student]:
        session = SessionService(self.db, self.ctx).active_session()
        if session is None:
            raise ValidationFailed("No active session. Create or activate a session first")
        self.require(SchoolClass, class_id, "Class")
        link = ClassService(self.db, self.ctx).find_class_section(class_id, section_id)
        return list(self.db.execute(
            select(Student)
            .join(StudentSession, StudentSession.student_id == Student.id)
            .where(
                Student.school_id == self.ctx.school_id,
                Student.is_active.is_(True),
                StudentSession.session_id == session.id,
                StudentSession.class_section_id == link.id,
            )
            .order_by(StudentSession.roll_no, Student.admission_no)
        ).unique().scalars().all())

    def _marks_on(self, on: date, student_ids: List[uuid.UUID]) -> Dict[uuid.UUID, StudentAttendance]:
        if not student_ids:
            return {}
        rows = self.db.execute(
            self.scoped().where(StudentAttendance.attendance_date == on, StudentAttendance.student_id.in_(student_ids))
        ).scalars().all()
        return {row.student_id: row for row in rows}

    def register(self, on: date, class_id: uuid.UUID, section_id: uuid.UUID) -> Dict[str, Any]:
        students = self._roster(class_id, section_id)
        marks = self._marks_on(on, [s.id for s in students])
        rows = []
        for student in students:
            mark = marks.get(student.id)
            enrollment = student.current_enrollment
            rows.append({
                "student_id": student.id,
                "admission_no": student.admission_no,
                "roll_no": enrollment.roll_no if enrollment and enrollment.roll_no else student.roll_no,
                "full_name": student.full_name,
                "status": mark.status if mark else None,
                "remark": mark.remark if mark else None,
            })
        return {
            "date": on,
            "class_id": class_id,
            "section_id": section_id,
            "students": rows,
            "summary": summarize(on, len(rows), (row["status"] for row in rows)),
        }

    def save(self, on: date, class_id: uuid.UUID, section_id: uuid.UUID, entries: List[Any]) -> Dict[str, Any]:
        _check_date(on)
        enrolled = {student.id for student in self._roster(class_id, section_id)}
        student_ids = [entry.student_id for entry in entries]
        if len(set(student_ids)) != len(student_ids):
            raise ValidationFailed("attendances: Each student can appear only once", field="attendances")
        if not set(student_ids) <= enrolled:
            raise ValidationFailed(
                "attendances: One or more students are not enrolled in the selected class and section",
                field="attendances",
            )

        marks = self._marks_on(on, student_ids)
        _check_overwrite(self.ctx, marks)
        with self.atomic():
            for entry in entries:
                mark = marks.get(entry.student_id)
                if mark is None:
                    mark = StudentAttendance(school_id=self.ctx.school_id, student_id=entry.student_id, attendance_date=on)
                    self.db.add(mark)
                mark.status = entry.status
                mark.remark = entry.remark

        logger.info(f"Student attendance saved: {len(entries)} record(s) for {on} by {self.ctx.username}")
        return self.register(on, class_id, section_id)

    def clear(self, on: date, class_id: uuid.UUID, section_id: uuid.UUID) -> int:
        """Remove the day's marks for a class section so it can be taken again"""
        student_ids = [student.id for student in self._roster(class_id, section_id)]
        if not student_ids:
            return 0
        with self.atomic():
            removed = self.db.execute(
                delete(StudentAttendance).where(
                    StudentAttendance.school_id == self.ctx.school_id,
                    StudentAttendance.attendance_date == on,
                    StudentAttendance.student_id.in_(student_ids),
                )
            ).rowcount
        logger.info(f"Student attendance cleared: {removed} record(s) for {on} by {self.ctx.username}")
        return removed


class StaffAttendanceService(TenantCRUDService[StaffAttendance]):
    model = StaffAttendance
    resource_name = "Attendance"

    def _marks_on(self, on: date, staff_ids: List[uuid.UUID]) -> Dict[uuid.UUID, StaffAttendance]:
        if not staff_ids:
            return {}
        rows = self.db.execute(
            self.scoped().where(StaffAttendance.attendance_date == on, StaffAttendance.staff_id.in_(staff_ids))
        ).scalars().all()
        return {row.staff_id: row for row in rows}

    def register(self, on: date, role_id: Optional[uuid.UUID] = None, department_id: Optional[uuid.UUID] = None) -> Dict[str, Any]:
        stmt = self.scoped(Staff).where(Staff.is_active.is_(True))
        if role_id is not None:
            stmt = stmt.where(Staff.role_id == role_id)
        if department_id is not None:
            stmt = stmt.where(Staff.department_id == department_id)
        staff = self.db.execute(stmt.order_by(Staff.employee_id, Staff.id)).unique().scalars().all()

        marks = self._marks_on(on, [member.id for member in staff])
        rows = []
        for member in staff:
            mark = marks.get(member.id)
            rows.append({
                "staff_id": member.id,
                "employee_id": member.employee_id,
                "full_name": member.full_name,
                "department_name": member.department_name,
                "role_name": member.role_name,
                "status": mark.status if mark else None,
                "check_in": mark.check_in if mark else None,
                "check_out": mark.check_out if mark else None,
                "remark": mark.remark if mark else None,
            })
        return {
            "date": on,
            "staff": rows,
            "summary": summarize(on, len(rows), (row["status"] for row in rows)),
        }

    def save(self, on: date, entries: List[Any]) -> Dict[str, Any]:
        _check_date(on)
        staff_ids = [entry.staff_id for entry in entries]
        if len(set(staff_ids)) != len(staff_ids):
            raise ValidationFailed("attendances: Each staff member can appear only once", field="attendances")
        found = self.db.execute(
            select(Staff.id).where(Staff.school_id == self.ctx.school_id, Staff.id.in_(staff_ids))
        ).scalars().all()
        if len(found) != len(staff_ids):
            raise ValidationFailed("attendances: One or more staff members were not found", field="attendances")

        marks = self._marks_on(on, staff_ids)
        _check_overwrite(self.ctx, marks)
        with self.atomic():
            for entry in entries:
                mark = marks.get(entry.staff_id)
                if mark is None:
                    mark = StaffAttendance(school_id=self.ctx.school_id, staff_id=entry.staff_id, attendance_date=on)
                    self.db.add(mark)
                mark.status = entry.status
                mark.check_in = entry.check_in
                mark.check_out = entry.check_out
                mark.remark = entry.remark

        logger.info(f"Staff attendance saved: {len(entries)} record(s) for {on} by {self.ctx.username}")
        saved = self._marks_on(on, staff_ids)
        return {
            "date": on,
            "saved": len(saved),
            "summary": summarize(on, len(saved), (mark.status for mark in saved.values())),
        }

    def clear(self, on: date) -> int:
        with self.atomic():
            removed = self.db.execute(
                delete(StaffAttendance).where(
                    StaffAttendance.school_id == self.ctx.school_id,
                    StaffAttendance.attendance_date == on,
                )
            ).rowcount
        logger.info(f"Staff attendance cleared: {removed} record(s) for {on} by {self.ctx.username}")
        return removed
