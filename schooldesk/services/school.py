# schooldesk/services/school.py - Tenant settings
import logging

from schooldesk.core.context import TenantContext
from schooldesk.core.errors import NotFoundError
from schooldesk.models.school import School
from schooldesk.schemas.school import SchoolUpdate

logger = logging.getLogger(__name__)


class SchoolService:
    def __init__(self, db, ctx: TenantContext):
        self.db = db
        self.ctx = ctx

    def get(self) -> School:
        school = self.db.get(School, self.ctx.school_id)
        if school is None:
            raise NotFoundError("School")
        return school

    def update(self, data: SchoolUpdate) -> School:
        school = self.get()
        values = data.model_dump(exclude_unset=True)
        for name, value in values.items():
            if value is None and not School.__table__.columns[name].nullable:
                continue
            setattr(school, name, value)
        self.db.commit()
        logger.info(f"School settings updated: {school.code} by {self.ctx.username}")
        return school
