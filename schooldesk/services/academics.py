# schooldesk/services/academics.py - Academic sessions, classes, sections and subjects
from typing import Any, Dict, List, Optional, Tuple
import logging
import uuid

from sqlalchemy import func, select, update

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.models.academic import AcademicSession, ClassSection, SchoolClass, Section, Subject
from schooldesk.models.exam import Exam, ExamSubject
from schooldesk.models.homework import Homework
from schooldesk.models.fee import FeeMaster
from schooldesk.models.student import StudentSession
from schooldesk.services.crud import Dependent, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)


class SessionService(TenantCRUDService[AcademicSession]):
    model = AcademicSession
    resource_name = "Session"
    unique_rules = (unique("name"),)
    dependents = (
        Dependent(StudentSession, "session_id", "{count} student enrollment(s) belong to it"),
        Dependent(FeeMaster, "session_id", "{count} fee master(s) are defined for it"),
        Dependent(Exam, "session_id", "{count} exam(s) are scheduled in it"),
    )
    search_fields = ("name",)

    def ordering(self):
        return [AcademicSession.start_date.desc(), AcademicSession.name.desc(), AcademicSession.id]

    def active_session(self) -> Optional[AcademicSession]:
        return self.db.execute(
            self.scoped().where(AcademicSession.is_active.is_(True))
        ).scalars().first()

    def prepare_update(self, obj, values, extra):
        start = values.get("start_date", obj.start_date)
        end = values.get("end_date", obj.end_date)
        if start and end and end <= start:
            raise ValidationFailed("End date must be after start date")

    def _deactivate_others(self, keep_id: uuid.UUID) -> None:
        self.db.execute(
            update(AcademicSession)
            .where(AcademicSession.school_id == self.ctx.school_id, AcademicSession.id != keep_id)
            .values(is_active=False)
        )

    def after_create(self, obj, extra):
        if obj.is_active:
            self._deactivate_others(obj.id)

    def validate_delete(self, obj):
        if obj.is_active:
            raise ConflictError("Cannot delete session. It is the active session.")

    def activate(self, session_id: uuid.UUID) -> AcademicSession:
        """Make one session the only active session of the school"""
        obj = self.get_object(session_id)
        with self.atomic():
            self._deactivate_others(obj.id)
            obj.is_active = True
        logger.info(f"Session activated: {obj.name} by {self.ctx.username}")
        return self.get(obj.id)


class SectionService(TenantCRUDService[Section]):
    model = Section
    resource_name = "Section"
    unique_rules = (unique("name", label="name"),)
    dependents = (
        Dependent(ClassSection, "section_id", "It is assigned to {count} class(es)"),
        Dependent(Homework, "section_id", "{count} homework assignment(s) are set for it"),
    )
    related_counts = (RelatedCount("class_count", ClassSection, "section_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [Section.name, Section.id]


class ClassService(TenantCRUDService[SchoolClass]):
    model = SchoolClass
    resource_name = "Class"
    unique_rules = (unique("name"),)
    dependents = (
        Dependent(FeeMaster, "class_id", "{count} fee master(s) are defined for it"),
        Dependent(Homework, "class_id", "{count} homework assignment(s) are set for it"),
    )
    search_fields = ("name",)
    extra_fields = ("section_ids",)

    def ordering(self):
        return [SchoolClass.sort_order, SchoolClass.name, SchoolClass.id]

    def count_subqueries(self) -> List[Tuple[str, Any]]:
        enrolled = (
            select(ClassSection.class_id.label("parent_id"), func.count(StudentSession.id).label("n"))
            .join(StudentSession, StudentSession.class_section_id == ClassSection.id)
            .join(AcademicSession, AcademicSession.id == StudentSession.session_id)
            .where(ClassSection.school_id == self.ctx.school_id, AcademicSession.is_active.is_(True))
            .group_by(ClassSection.class_id)
            .subquery()
        )
        return super().count_subqueries() + [("student_count", enrolled)]

    def count_dependents(self, obj):
        enrolled = self.db.execute(
            select(func.count(StudentSession.id))
            .join(ClassSection, ClassSection.id == StudentSession.class_section_id)
            .where(ClassSection.class_id == obj.id, StudentSession.school_id == self.ctx.school_id)
        ).scalar_one()
        return [(enrolled, "{count} student(s) are enrolled in it")] + super().count_dependents(obj)

    def _check_sections(self, section_ids: List[uuid.UUID]) -> List[uuid.UUID]:
        wanted = list(dict.fromkeys(section_ids))
        if not wanted:
            return []
        found = set(self.db.execute(
            select(Section.id).where(Section.school_id == self.ctx.school_id, Section.id.in_(wanted))
        ).scalars().all())
        if len(found) != len(wanted):
            raise ValidationFailed("section_ids: One or more sections were not found", field="section_ids")
        return wanted

    def prepare_create(self, values, extra):
        extra["section_ids"] = self._check_sections(extra.get("section_ids") or [])
        if values.get("sort_order") is None:
            highest = self.db.execute(
                select(func.max(SchoolClass.sort_order)).where(SchoolClass.school_id == self.ctx.school_id)
            ).scalar()
            values["sort_order"] = (highest or 0) + 1

    def prepare_update(self, obj, values, extra):
        if extra.get("section_ids") is None:
            extra.pop("section_ids", None)
            return
        extra["section_ids"] = wanted = self._check_sections(extra["section_ids"])

        dropped = [cs.id for cs in obj.class_sections if cs.section_id not in wanted]
        if dropped:
            enrolled = self.db.execute(
                select(func.count(StudentSession.id)).where(StudentSession.class_section_id.in_(dropped))
            ).scalar_one()
            if enrolled:
                raise ConflictError(
                    f"Cannot remove sections from class. {enrolled} student(s) are enrolled in them.",
                    count=enrolled,
                )

    def _link_sections(self, obj: SchoolClass, section_ids: List[uuid.UUID]) -> None:
        existing = {cs.section_id for cs in obj.class_sections}
        for section_id in section_ids:
            if section_id not in existing:
                obj.class_sections.append(
                    ClassSection(school_id=self.ctx.school_id, class_id=obj.id, section_id=section_id)
                )

    def after_create(self, obj, extra):
        self._link_sections(obj, extra.get("section_ids", []))

    def after_update(self, obj, extra):
        if "section_ids" not in extra:
            return
        wanted = set(extra["section_ids"])
        for link in list(obj.class_sections):
            if link.section_id not in wanted:
                obj.class_sections.remove(link)
        self._link_sections(obj, extra["section_ids"])

    def find_class_section(self, class_id: uuid.UUID, section_id: uuid.UUID) -> ClassSection:
        link = self.db.execute(
            select(ClassSection).where(
                ClassSection.school_id == self.ctx.school_id,
                ClassSection.class_id == class_id,
                ClassSection.section_id == section_id,
            )
        ).scalar_one_or_none()
        if link is None:
            raise ValidationFailed("section_id: Section is not assigned to the selected class", field="section_id")
        return link


class SubjectService(TenantCRUDService[Subject]):
    model = Subject
    resource_name = "Subject"
    unique_rules = (unique("name"), unique("code"))
    dependents = (
        Dependent(ExamSubject, "subject_id", "{count} exam paper(s) use it"),
        Dependent(Homework, "subject_id", "{count} homework assignment(s) are set for it"),
    )
    search_fields = ("name", "code")
    filter_fields = ("subject_type",)

    def ordering(self):
        return [Subject.name, Subject.id]
