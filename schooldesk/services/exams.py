# schooldesk/services/exams.py - Exam groups, exam timetables and marks entry
from typing import Any, Dict, List, Tuple
import logging
import uuid

from sqlalchemy import Select, func, select

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.models.academic import AcademicSession, Subject
from schooldesk.models.exam import Exam, ExamGroup, ExamResult, ExamSubject
from schooldesk.models.student import Student
from schooldesk.services.academics import SessionService
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique

logger = logging.getLogger(__name__)

PAPER_FIELDS = ("exam_date", "start_time", "end_time", "room_no", "max_marks", "min_marks")


class ExamGroupService(TenantCRUDService[ExamGroup]):
    model = ExamGroup
    resource_name = "Exam group"
    unique_rules = (unique("name"),)
    dependents = (Dependent(Exam, "exam_group_id", "{count} exam(s) belong to it"),)
    related_counts = (RelatedCount("exam_count", Exam, "exam_group_id"),)
    search_fields = ("name",)
    filter_fields = ("exam_type",)

    def ordering(self):
        return [ExamGroup.name, ExamGroup.id]


class ExamService(TenantCRUDService[Exam]):
    """
    Exams and their subject papers.

    The `subjects` list sent on create, or on update, is the full
    timetable: papers missing from it are removed, which is refused while
    marks are recorded against them.
    """

    model = Exam
    resource_name = "Exam"
    unique_rules = (unique("session_id", "name", label="name"),)
    references = {
        "exam_group_id": Reference(ExamGroup, "Exam group"),
        "session_id": Reference(AcademicSession, "Session"),
    }
    search_fields = ("name",)
    filter_fields = ("exam_group_id", "session_id", "is_published")
    extra_fields = ("subjects",)

    def ordering(self):
        return [Exam.created_at.desc(), Exam.id]

    def count_subqueries(self) -> List[Tuple[str, Any]]:
        results = (
            select(ExamSubject.exam_id.label("parent_id"), func.count(ExamResult.id).label("n"))
            .join(ExamResult, ExamResult.exam_subject_id == ExamSubject.id)
            .where(ExamSubject.school_id == self.ctx.school_id)
            .group_by(ExamSubject.exam_id)
            .subquery()
        )
        return super().count_subqueries() + [("result_count", results)]

    def count_dependents(self, obj):
        return [(self._results_for([s.id for s in obj.exam_subjects]), "{count} result(s) are recorded for it")]

    def _results_for(self, paper_ids: List[uuid.UUID]) -> int:
        if not paper_ids:
            return 0
        return self.db.execute(
            select(func.count(ExamResult.id)).where(ExamResult.exam_subject_id.in_(paper_ids))
        ).scalar_one()

    def _check_subjects(self, papers: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        wanted = [paper["subject_id"] for paper in papers]
        if len(set(wanted)) != len(wanted):
            raise ValidationFailed("subjects: Each subject can appear only once", field="subjects")
        if not wanted:
            return []
        found = self.db.execute(
            select(func.count(Subject.id)).where(Subject.school_id == self.ctx.school_id, Subject.id.in_(wanted))
        ).scalar_one()
        if found != len(wanted):
            raise ValidationFailed("subjects: One or more subjects were not found", field="subjects")
        return papers

    def prepare_create(self, values, extra):
        if values.get("session_id") is None:
            session = SessionService(self.db, self.ctx).active_session()
            if session is None:
                raise ValidationFailed("session_id: No active session. Create or activate a session first", field="session_id")
            values["session_id"] = session.id
        extra["subjects"] = self._check_subjects(extra.get("subjects") or [])

    def prepare_update(self, obj, values, extra):
        if extra.get("subjects") is None:
            extra.pop("subjects", None)
            return
        papers = self._check_subjects(extra["subjects"])
        kept = {paper["subject_id"]: paper for paper in papers}

        dropped = [s.id for s in obj.exam_subjects if s.subject_id not in kept]
        recorded = self._results_for(dropped)
        if recorded:
            raise ConflictError(
                f"Cannot remove subjects from exam. {recorded} result(s) are recorded for them.",
                count=recorded,
            )

        for paper in obj.exam_subjects:
            if paper.subject_id not in kept:
                continue
            highest = self.db.execute(
                select(func.max(ExamResult.marks_obtained)).where(ExamResult.exam_subject_id == paper.id)
            ).scalar()
            if highest is not None and kept[paper.subject_id]["max_marks"] < highest:
                raise ConflictError(
                    f"max_marks: Cannot be less than the {highest} marks already recorded for {paper.subject_name}",
                    field="max_marks",
                )

    def _sync_subjects(self, obj: Exam, papers: List[Dict[str, Any]]) -> None:
        wanted = {paper["subject_id"]: paper for paper in papers}
        for existing in list(obj.exam_subjects):
            if existing.subject_id not in wanted:
                obj.exam_subjects.remove(existing)
                continue
            paper = wanted.pop(existing.subject_id)
            for name in PAPER_FIELDS:
                setattr(existing, name, paper[name])
        for subject_id, paper in wanted.items():
            obj.exam_subjects.append(ExamSubject(
                school_id=self.ctx.school_id,
                exam_id=obj.id,
                subject_id=subject_id,
                **{name: paper[name] for name in PAPER_FIELDS},
            ))
        self.db.flush()

    def after_create(self, obj, extra):
        self._sync_subjects(obj, extra.get("subjects", []))

    def after_update(self, obj, extra):
        if "subjects" in extra:
            self._sync_subjects(obj, extra["subjects"])


class ExamResultService(TenantCRUDService[ExamResult]):
    model = ExamResult
    resource_name = "Exam result"
    filter_fields = ("exam_id", "exam_subject_id", "student_id")
    filter_types = {"exam_id": uuid.UUID}

    def ordering(self):
        return [ExamResult.exam_subject_id, ExamResult.created_at, ExamResult.id]

    def apply_filter(self, stmt: Select, name: str, value: Any) -> Select:
        if name == "exam_id":
            return stmt.where(ExamResult.exam_subject_id.in_(
                select(ExamSubject.id).where(ExamSubject.exam_id == value)
            ))
        return super().apply_filter(stmt, name, value)

    def save(self, exam_subject_id: uuid.UUID, entries: List[Any]) -> List[ExamResult]:
        """Record marks for one paper; a student's earlier entry is overwritten"""
        paper = self.require(ExamSubject, exam_subject_id, "Exam subject")

        student_ids = [entry.student_id for entry in entries]
        if len(set(student_ids)) != len(student_ids):
            raise ValidationFailed("results: Each student can appear only once", field="results")
        found = self.db.execute(
            select(func.count(Student.id)).where(Student.school_id == self.ctx.school_id, Student.id.in_(student_ids))
        ).scalar_one()
        if found != len(student_ids):
            raise ValidationFailed("results: One or more students were not found", field="results")

        for entry in entries:
            if not entry.is_absent and entry.marks_obtained is not None and entry.marks_obtained > paper.max_marks:
                raise ValidationFailed(
                    f"marks_obtained: Cannot exceed the maximum of {paper.max_marks} marks",
                    field="marks_obtained",
                )

        existing = {
            result.student_id: result
            for result in self.db.execute(
                self.scoped().where(ExamResult.exam_subject_id == paper.id, ExamResult.student_id.in_(student_ids))
            ).scalars().all()
        }
        with self.atomic():
            for entry in entries:
                result = existing.get(entry.student_id)
                if result is None:
                    result = ExamResult(school_id=self.ctx.school_id, exam_subject_id=paper.id, student_id=entry.student_id)
                    self.db.add(result)
                result.is_absent = entry.is_absent
                result.marks_obtained = None if entry.is_absent else entry.marks_obtained
                result.note = entry.note

        logger.info(f"Marks saved: {len(entries)} result(s) for exam subject {paper.id} by {self.ctx.username}")
        return list(self.db.execute(
            self.scoped()
            .where(ExamResult.exam_subject_id == paper.id, ExamResult.student_id.in_(student_ids))
            .order_by(ExamResult.created_at, ExamResult.id)
            .execution_options(populate_existing=True)
        ).scalars().all())
