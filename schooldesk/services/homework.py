# schooldesk/services/homework.py - Homework assignments, submissions and evaluation
from datetime import date
from typing import Tuple
import logging
import uuid

from sqlalchemy import func, select

from schooldesk.core.errors import ConflictError, ValidationFailed
from schooldesk.models.academic import SchoolClass, Section, Subject
from schooldesk.models.base import utcnow
from schooldesk.models.homework import Homework, HomeworkSubmission
from schooldesk.models.staff import Staff
from schooldesk.models.student import Student
from schooldesk.services.academics import ClassService
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService

logger = logging.getLogger(__name__)


class HomeworkService(TenantCRUDService[Homework]):
    model = Homework
    resource_name = "Homework"
    references = {
        "class_id": Reference(SchoolClass, "Class"),
        "section_id": Reference(Section, "Section"),
        "subject_id": Reference(Subject, "Subject"),
        "staff_id": Reference(Staff, "Staff member"),
    }
    dependents = (Dependent(HomeworkSubmission, "homework_id", "{count} submission(s) are recorded for it"),)
    related_counts = (RelatedCount("submission_count", HomeworkSubmission, "homework_id"),)
    search_fields = ("title",)
    filter_fields = ("class_id", "section_id", "subject_id", "staff_id")
    date_field = "homework_date"

    def ordering(self):
        return [Homework.homework_date.desc(), Homework.created_at.desc(), Homework.id]

    def _check_dates(self, set_on: date, due: date) -> None:
        if due < set_on:
            raise ValidationFailed("submission_date: Cannot be before the homework date", field="submission_date")

    def prepare_create(self, values, extra):
        values["homework_date"] = values.get("homework_date") or date.today()
        self._check_dates(values["homework_date"], values["submission_date"])
        self.require(SchoolClass, values["class_id"], "Class")
        ClassService(self.db, self.ctx).find_class_section(values["class_id"], values["section_id"])

    def prepare_update(self, obj, values, extra):
        self._check_dates(
            values.get("homework_date", obj.homework_date),
            values.get("submission_date", obj.submission_date),
        )
        if "class_id" in values or "section_id" in values:
            class_id = values.get("class_id", obj.class_id)
            self.require(SchoolClass, class_id, "Class")
            ClassService(self.db, self.ctx).find_class_section(class_id, values.get("section_id", obj.section_id))
        if values.get("max_marks") is not None:
            highest = self.db.execute(
                select(func.max(HomeworkSubmission.marks)).where(HomeworkSubmission.homework_id == obj.id)
            ).scalar()
            if highest is not None and values["max_marks"] < highest:
                raise ConflictError(
                    f"max_marks: Cannot be less than the {highest} marks already awarded",
                    field="max_marks",
                )


class SubmissionService(TenantCRUDService[HomeworkSubmission]):
    model = HomeworkSubmission
    resource_name = "Submission"
    filter_fields = ("homework_id", "student_id", "status")

    def ordering(self):
        return [HomeworkSubmission.submitted_at.desc(), HomeworkSubmission.id]

    def submit(self, homework_id: uuid.UUID, student_id: uuid.UUID, message=None) -> Tuple[HomeworkSubmission, bool]:
        """Record a student's submission; resubmitting replaces a pending or rejected one"""
        homework = self.require(Homework, homework_id, "Homework")
        student = self.require(Student, student_id, "Student")
        if student.class_id != homework.class_id or student.section_id != homework.section_id:
            raise ValidationFailed(
                "student_id: Student is not in the class and section this homework was set for",
                field="student_id",
            )

        obj = self.db.execute(
            self.scoped().where(HomeworkSubmission.homework_id == homework.id, HomeworkSubmission.student_id == student.id)
        ).scalar_one_or_none()
        if obj is not None and obj.status == "accepted":
            raise ConflictError("Submission has already been accepted")

        created = obj is None
        with self.atomic():
            if created:
                obj = HomeworkSubmission(school_id=self.ctx.school_id, homework_id=homework.id, student_id=student.id)
                self.db.add(obj)
            obj.message = message
            obj.status = "pending"
            obj.marks = None
            obj.feedback = None
            obj.submitted_at = utcnow()
            obj.evaluated_at = None
            obj.evaluated_by = None
            self.db.flush()

        logger.info(f"Homework submitted: {homework.id} for student {student.admission_no} by {self.ctx.username}")
        return self.get(obj.id), created

    def evaluate(self, submission_id: uuid.UUID, status: str, marks=None, feedback=None) -> HomeworkSubmission:
        obj = self.get_object(submission_id)
        limit = obj.homework.max_marks
        if marks is not None and limit is not None and marks > limit:
            raise ValidationFailed(f"marks: Cannot exceed the maximum of {limit} marks", field="marks")
        with self.atomic():
            obj.status = status
            obj.marks = marks
            obj.feedback = feedback
            obj.evaluated_at = utcnow()
            obj.evaluated_by = self.ctx.user_id
        logger.info(f"Submission {status}: {obj.id} by {self.ctx.username}")
        return self.get(obj.id)
