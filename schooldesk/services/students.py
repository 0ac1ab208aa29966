# schooldesk/services/students.py - Parents, students and their class enrollment
from datetime import date
from typing import Any, Optional
import logging
import re
import uuid

from sqlalchemy import Select, func, select

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.models.academic import AcademicSession, ClassSection, SchoolClass
from schooldesk.models.fee import FeePayment
from schooldesk.models.hostel import HostelRoom
from schooldesk.models.library import LibraryMember
from schooldesk.models.student import Parent, SchoolHouse, Student, StudentCategory, StudentSession
from schooldesk.models.transport import PickupPoint
from schooldesk.services.academics import ClassService, SessionService
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)


class ParentService(TenantCRUDService[Parent]):
    model = Parent
    resource_name = "Parent"
    unique_rules = (unique("guardian_phone", label="guardian phone"),)
    dependents = (Dependent(Student, "parent_id", "{count} student(s) are linked to it"),)
    related_counts = (RelatedCount("student_count", Student, "parent_id"),)
    search_fields = ("guardian_name", "father_name", "mother_name", "guardian_phone", "guardian_email")

    def ordering(self):
        return [Parent.guardian_name, Parent.id]


class StudentCategoryService(TenantCRUDService[StudentCategory]):
    model = StudentCategory
    resource_name = "Category"
    unique_rules = (unique("name"),)
    dependents = (Dependent(Student, "category_id", "{count} student(s) belong to it"),)
    related_counts = (RelatedCount("student_count", Student, "category_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [StudentCategory.name, StudentCategory.id]


class SchoolHouseService(TenantCRUDService[SchoolHouse]):
    model = SchoolHouse
    resource_name = "House"
    unique_rules = (unique("name"),)
    dependents = (Dependent(Student, "house_id", "{count} student(s) belong to it"),)
    related_counts = (RelatedCount("student_count", Student, "house_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [SchoolHouse.name, SchoolHouse.id]


class StudentService(TenantCRUDService[Student]):
    model = Student
    resource_name = "Student"
    unique_rules = (unique("admission_no", label="admission number"),)
    references = {
        "parent_id": Reference(Parent, "Parent"),
        "hostel_room_id": Reference(HostelRoom, "Hostel room"),
        "pickup_point_id": Reference(PickupPoint, "Pickup point"),
        "category_id": Reference(StudentCategory, "Category"),
        "house_id": Reference(SchoolHouse, "House"),
    }
    dependents = (
        Dependent(FeePayment, "student_id", "{count} fee payment(s) are recorded for it"),
        Dependent(LibraryMember, "student_id", "{count} library membership(s) belong to it"),
    )
    search_fields = ("first_name", "last_name", "admission_no", "roll_no", "phone", "email")
    filter_fields = ("class_id", "section_id", "session_id", "parent_id", "hostel_room_id", "pickup_point_id",
                     "category_id", "house_id", "gender")
    filter_types = {"class_id": uuid.UUID, "section_id": uuid.UUID, "session_id": uuid.UUID}
    extra_fields = ("class_id", "section_id", "session_id")

    def ordering(self):
        return [Student.admission_no, Student.id]

    def apply_filter(self, stmt: Select, name: str, value: Any) -> Select:
        if name == "session_id":
            return stmt.where(Student.id.in_(
                select(StudentSession.student_id).where(StudentSession.session_id == value)
            ))
        if name in ("class_id", "section_id"):
            # Placement in the active session
            enrolled = (
                select(StudentSession.student_id)
                .join(ClassSection, ClassSection.id == StudentSession.class_section_id)
                .join(AcademicSession, AcademicSession.id == StudentSession.session_id)
                .where(AcademicSession.is_active.is_(True), getattr(ClassSection, name) == value)
            )
            return stmt.where(Student.id.in_(enrolled))
        return super().apply_filter(stmt, name, value)

    def _target_session(self, session_id: Optional[uuid.UUID]) -> AcademicSession:
        if session_id is not None:
            return self.require(AcademicSession, session_id, "Session")
        session = SessionService(self.db, self.ctx).active_session()
        if session is None:
            raise ValidationFailed("session_id: No active session. Create or activate a session first", field="session_id")
        return session

    def _check_room(self, room_id: Optional[uuid.UUID], student: Optional[Student] = None) -> None:
        if room_id is None or (student is not None and student.hostel_room_id == room_id):
            return
        room = self.require(HostelRoom, room_id, "Hostel room")
        occupied = self.db.execute(
            select(func.count(Student.id)).where(Student.hostel_room_id == room_id)
        ).scalar_one()
        if occupied >= room.beds:
            raise ConflictError(f"Hostel room {room.room_no} is full", field="hostel_room_id")

    def _placement(self, extra, current: Optional[StudentSession] = None) -> Optional[ClassSection]:
        class_id = extra.get("class_id")
        section_id = extra.get("section_id")
        if class_id is None and section_id is None:
            return None
        if current is not None:
            class_id = class_id or current.class_section.class_id
            section_id = section_id or current.class_section.section_id
        if class_id is None or section_id is None:
            raise ValidationFailed("Both class_id and section_id are required to place a student")
        self.require(SchoolClass, class_id, "Class")
        return ClassService(self.db, self.ctx).find_class_section(class_id, section_id)

    def prepare_create(self, values, extra):
        if not values.get("admission_no"):
            values["admission_no"] = self.generate_admission_no()
        self._check_room(values.get("hostel_room_id"))
        link = self._placement(extra)
        if link is not None:
            extra["session"] = self._target_session(extra.get("session_id"))
            extra["class_section"] = link

    def prepare_update(self, obj, values, extra):
        if "hostel_room_id" in values:
            self._check_room(values["hostel_room_id"], student=obj)
        if extra.get("class_id") is None and extra.get("section_id") is None:
            return
        session = self._target_session(extra.get("session_id"))
        current = next((e for e in obj.enrollments if e.session_id == session.id), None)
        extra["session"] = session
        extra["class_section"] = self._placement(extra, current)

    def _enroll(self, obj: Student, extra) -> None:
        session = extra.get("session")
        link = extra.get("class_section")
        if session is None or link is None:
            return
        enrollment = next((e for e in obj.enrollments if e.session_id == session.id), None)
        if enrollment is None:
            obj.enrollments.append(StudentSession(
                school_id=self.ctx.school_id,
                session_id=session.id,
                class_section_id=link.id,
                roll_no=obj.roll_no,
            ))
        else:
            enrollment.class_section_id = link.id
            enrollment.roll_no = obj.roll_no
        self.db.flush()

    def after_create(self, obj, extra):
        self._enroll(obj, extra)

    def after_update(self, obj, extra):
        self._enroll(obj, extra)

    def generate_admission_no(self) -> str:
        """Next free admission number for this year, <YYYY><NNNN>"""
        prefix = f"{date.today():%Y}"
        numbers = self.db.execute(
            select(Student.admission_no).where(
                Student.school_id == self.ctx.school_id,
                Student.admission_no.like(f"{prefix}%"),
            )
        ).scalars().all()

        highest = 0
        for number in numbers:
            match = re.fullmatch(rf"{prefix}(\d+)", number)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}{highest + 1:04d}"
