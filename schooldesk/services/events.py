# schooldesk/services/events.py - Events and notices
from datetime import date
from typing import Any
import logging

from sqlalchemy import Select, or_

from schooldesk.core.errors import ValidationFailed
from schooldesk.models.event import Event, Notice
from schooldesk.services.crud import TenantCRUDService

logger = logging.getLogger(__name__)


class EventService(TenantCRUDService[Event]):
    model = Event
    resource_name = "Event"
    search_fields = ("title", "location")
    filter_fields = ("event_for", "is_holiday")
    date_field = "start_date"

    def ordering(self):
        return [Event.start_date, Event.title, Event.id]

    def prepare_create(self, values, extra):
        values["end_date"] = values.get("end_date") or values["start_date"]
        self._check_dates(values["start_date"], values["end_date"])

    def prepare_update(self, obj, values, extra):
        self._check_dates(values.get("start_date", obj.start_date), values.get("end_date", obj.end_date))

    def _check_dates(self, start: date, end: date) -> None:
        if end < start:
            raise ValidationFailed("end_date: Cannot be before the start date", field="end_date")


class NoticeService(TenantCRUDService[Notice]):
    model = Notice
    resource_name = "Notice"
    search_fields = ("title",)
    filter_fields = ("notice_for", "published")
    filter_types = {"published": bool}
    date_field = "notice_date"

    def ordering(self):
        return [Notice.notice_date.desc(), Notice.created_at.desc(), Notice.id]

    def apply_filter(self, stmt: Select, name: str, value: Any) -> Select:
        if name == "published":
            visible = or_(Notice.publish_on.is_(None), Notice.publish_on <= date.today())
            return stmt.where(visible if value else ~visible)
        return super().apply_filter(stmt, name, value)

    def prepare_create(self, values, extra):
        values["notice_date"] = values.get("notice_date") or date.today()
