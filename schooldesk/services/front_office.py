# schooldesk/services/front_office.py - Visitor book, enquiries, complaints, call log and postal register
from datetime import date
from typing import Optional
import logging
import re
import uuid

from sqlalchemy import select

from schooldesk.core.errors import ValidationFailed
from schooldesk.models.base import utcnow
from schooldesk.models.front_office import Complaint, Enquiry, PhoneCall, PostalRecord, Visitor
from schooldesk.models.staff import Staff
from schooldesk.services.crud import Reference, TenantCRUDService, unique

logger = logging.getLogger(__name__)

POSTAL_PREFIXES = {"receive": "IN", "dispatch": "OUT"}


class VisitorService(TenantCRUDService[Visitor]):
    model = Visitor
    resource_name = "Visitor"
    search_fields = ("name", "phone", "purpose", "meeting_with")
    date_field = "visit_date"

    def ordering(self):
        return [Visitor.in_time.desc(), Visitor.id]

    def prepare_create(self, values, extra):
        values["visit_date"] = date.today()
        values["in_time"] = utcnow()

    def checkout(self, visitor_id: uuid.UUID) -> Visitor:
        obj = self.get_object(visitor_id)
        if obj.checked_out:
            raise ValidationFailed("Visitor has already checked out")
        with self.atomic():
            obj.out_time = utcnow()
        logger.info(f"Visitor checked out: {obj.name} by {self.ctx.username}")
        return self.get(obj.id)


class EnquiryService(TenantCRUDService[Enquiry]):
    model = Enquiry
    resource_name = "Enquiry"
    references = {"assigned_staff_id": Reference(Staff, "Staff member")}
    search_fields = ("name", "phone", "email", "class_interested")
    filter_fields = ("status", "source", "assigned_staff_id")
    date_field = "enquiry_date"

    def ordering(self):
        return [Enquiry.enquiry_date.desc(), Enquiry.created_at.desc(), Enquiry.id]

    def prepare_create(self, values, extra):
        values["enquiry_date"] = values.get("enquiry_date") or date.today()
        self._check_follow_up(values["enquiry_date"], values.get("follow_up_date"))

    def prepare_update(self, obj, values, extra):
        self._check_follow_up(values.get("enquiry_date", obj.enquiry_date), values.get("follow_up_date", obj.follow_up_date))

    def _check_follow_up(self, enquired: date, follow_up: Optional[date]) -> None:
        if follow_up is not None and follow_up < enquired:
            raise ValidationFailed("follow_up_date: Cannot be before the enquiry date", field="follow_up_date")


class ComplaintService(TenantCRUDService[Complaint]):
    model = Complaint
    resource_name = "Complaint"
    references = {"assigned_staff_id": Reference(Staff, "Staff member")}
    search_fields = ("name", "phone", "complaint_type", "description")
    filter_fields = ("status", "complaint_type", "source", "assigned_staff_id")
    date_field = "complaint_date"

    def ordering(self):
        return [Complaint.complaint_date.desc(), Complaint.created_at.desc(), Complaint.id]

    def prepare_create(self, values, extra):
        values["complaint_date"] = values.get("complaint_date") or date.today()


class PhoneCallService(TenantCRUDService[PhoneCall]):
    model = PhoneCall
    resource_name = "Phone call"
    search_fields = ("name", "phone", "description")
    filter_fields = ("call_type",)
    date_field = "call_date"

    def ordering(self):
        return [PhoneCall.call_date.desc(), PhoneCall.created_at.desc(), PhoneCall.id]

    def prepare_create(self, values, extra):
        values["call_date"] = values.get("call_date") or date.today()


class PostalService(TenantCRUDService[PostalRecord]):
    model = PostalRecord
    resource_name = "Postal record"
    unique_rules = (unique("reference_no", label="reference number"),)
    search_fields = ("reference_no", "from_title", "to_title")
    filter_fields = ("postal_type",)
    date_field = "postal_date"

    def ordering(self):
        return [PostalRecord.postal_date.desc(), PostalRecord.reference_no.desc(), PostalRecord.id]

    def prepare_create(self, values, extra):
        values["postal_date"] = values.get("postal_date") or date.today()
        values["reference_no"] = self.next_reference_no(values["postal_type"])

    def next_reference_no(self, postal_type: str) -> str:
        """IN-00001 for received post, OUT-00001 for dispatches"""
        prefix = POSTAL_PREFIXES[postal_type]
        numbers = self.db.execute(
            select(PostalRecord.reference_no).where(
                PostalRecord.school_id == self.ctx.school_id,
                PostalRecord.reference_no.like(f"{prefix}-%"),
            )
        ).scalars().all()

        highest = 0
        for number in numbers:
            match = re.fullmatch(rf"{prefix}-(\d+)", number)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}-{highest + 1:05d}"
