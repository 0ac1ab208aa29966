# schooldesk/services/crud.py - Tenant-scoped CRUD with uniqueness, reference and delete guards
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar
import logging
import uuid

from pydantic import BaseModel
from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from schooldesk.core.context import TenantContext
from schooldesk.core.errors import ConflictError, NotFoundError, ValidationFailed
from schooldesk.core.pagination import ListQuery, Page, STATUS_VALUES

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


@dataclass(frozen=True)
class UniqueRule:
    """Fields whose combined value must be unique within one school"""
    fields: Tuple[str, ...]
    label: str


@dataclass(frozen=True)
class Reference:
    """A foreign key that must point at a row of the same school"""
    model: Any
    label: str


@dataclass(frozen=True)
class Dependent:
    """Rows of another table that block deletion while they point at a record"""
    model: Any
    column: str
    message: str  # formatted with {count}


@dataclass(frozen=True)
class RelatedCount:
    """Number of child rows per record, exposed on the record as `name`"""
    name: str
    model: Any
    column: str


def unique(*fields: str, label: Optional[str] = None) -> UniqueRule:
    return UniqueRule(fields=tuple(fields), label=label or fields[0].replace("_", " "))


class TenantCRUDService(Generic[ModelT]):
    """
    Base service for one tenant-owned resource.

    Subclasses declare the model and its rules; every query issued here is
    filtered by the caller's school, so rows of other schools behave as if
    they did not exist.
    """

    model: Type[ModelT]
    resource_name: str = "Record"

    unique_rules: Tuple[UniqueRule, ...] = ()
    references: Dict[str, Reference] = {}
    dependents: Tuple[Dependent, ...] = ()
    related_counts: Tuple[RelatedCount, ...] = ()

    search_fields: Tuple[str, ...] = ()
    filter_fields: Tuple[str, ...] = ()
    filter_types: Dict[str, type] = {}
    # Date column bounded by the from_date/to_date query parameters
    date_field: Optional[str] = None

    # Non-column input fields handed to after_create/after_update
    extra_fields: Tuple[str, ...] = ()

    def __init__(self, db: Session, ctx: TenantContext):
        self.db = db
        self.ctx = ctx

    # ------------------------------------------------------------------ queries

    def scoped(self, model: Any = None) -> Select:
        model = model or self.model
        return select(model).where(model.school_id == self.ctx.school_id)

    def ordering(self) -> List[Any]:
        return [self.model.created_at.desc(), self.model.id]

    def count_subqueries(self) -> List[Tuple[str, Any]]:
        """(name, subquery) pairs; each subquery yields parent_id and n"""
        subqueries = []
        for related in self.related_counts:
            fk = getattr(related.model, related.column)
            subqueries.append((
                related.name,
                select(fk.label("parent_id"), func.count(related.model.id).label("n"))
                .where(related.model.school_id == self.ctx.school_id)
                .group_by(fk)
                .subquery(),
            ))
        return subqueries

    def _select(self) -> Tuple[Select, List[str]]:
        """Base statement plus one aggregate subquery join per related count"""
        subqueries = self.count_subqueries()
        columns = [self.model] + [func.coalesce(sub.c.n, 0).label(name) for name, sub in subqueries]

        stmt = select(*columns)
        for _, sub in subqueries:
            stmt = stmt.outerjoin(sub, sub.c.parent_id == self.model.id)
        return stmt.where(self.model.school_id == self.ctx.school_id), [name for name, _ in subqueries]

    def _attach_counts(self, row: Any, names: List[str]) -> ModelT:
        obj = row[0]
        for index, name in enumerate(names, start=1):
            setattr(obj, name, int(row[index] or 0))
        return obj

    def get_object(self, record_id: uuid.UUID) -> ModelT:
        """Load a row of this school for writing, without related counts"""
        obj = self.db.execute(
            self.scoped().where(self.model.id == record_id)
        ).scalar_one_or_none()
        if obj is None:
            raise NotFoundError(self.resource_name)
        return obj

    def get(self, record_id: uuid.UUID) -> ModelT:
        stmt, names = self._select()
        row = self.db.execute(
            stmt.where(self.model.id == record_id).execution_options(populate_existing=True)
        ).first()
        if row is None:
            raise NotFoundError(self.resource_name)
        return self._attach_counts(row, names)

    def list(self, query: ListQuery) -> Page[ModelT]:
        stmt, names = self._select()
        stmt = self.apply_search(stmt, query.search)
        stmt = self.apply_status(stmt, query.status)
        for name, value in query.filters.items():
            stmt = self.apply_filter(stmt, name, value)

        total = self.db.execute(
            select(func.count()).select_from(stmt.with_only_columns(self.model.id).order_by(None).subquery())
        ).scalar_one()

        rows = self.db.execute(
            stmt.order_by(*self.ordering()).offset(query.offset).limit(query.limit)
        ).all()
        items = [self._attach_counts(row, names) for row in rows]
        return Page(items=items, total=total, page=query.page, limit=query.limit)

    def apply_search(self, stmt: Select, term: Optional[str]) -> Select:
        term = (term or "").strip()
        if not term or not self.search_fields:
            return stmt
        needle = term.lower()
        clauses = [
            func.lower(getattr(self.model, name)).contains(needle, autoescape=True)
            for name in self.search_fields
        ]
        return stmt.where(or_(*clauses))

    def apply_status(self, stmt: Select, status: Optional[str]) -> Select:
        if not status:
            return stmt
        if status not in STATUS_VALUES or not hasattr(self.model, "is_active"):
            raise ValidationFailed(f"status: Unsupported status filter '{status}'", field="status")
        return stmt.where(self.model.is_active.is_(status == "active"))

    def apply_filter(self, stmt: Select, name: str, value: Any) -> Select:
        if self.date_field and name in ("from_date", "to_date"):
            column = getattr(self.model, self.date_field)
            return stmt.where(column >= value if name == "from_date" else column <= value)
        return stmt.where(getattr(self.model, name) == value)

    def parse_filters(self, params: Mapping[str, str]) -> Dict[str, Any]:
        """Coerce the declared filter query parameters to their column types"""
        filters = {}
        for name in self.filter_fields:
            raw = params.get(name)
            if raw is None or raw == "":
                continue
            filters[name] = self._coerce(name, raw)
        if self.date_field:
            for name in ("from_date", "to_date"):
                if params.get(name):
                    filters[name] = self._coerce(name, params[name], date)
            if filters.get("from_date") and filters.get("to_date") and filters["to_date"] < filters["from_date"]:
                raise ValidationFailed("to_date: Cannot be before from_date", field="to_date")
        return filters

    def _coerce(self, name: str, raw: str, python_type: Optional[type] = None) -> Any:
        python_type = python_type or self.filter_types.get(name)
        if python_type is None:
            python_type = getattr(self.model, name).type.python_type
        try:
            if python_type is uuid.UUID:
                return uuid.UUID(raw)
            if python_type is bool:
                lowered = raw.lower()
                if lowered in ("true", "1", "yes"):
                    return True
                if lowered in ("false", "0", "no"):
                    return False
                raise ValueError(raw)
            if python_type is int:
                return int(raw)
            if python_type is date:
                return date.fromisoformat(raw)
        except ValueError:
            raise ValidationFailed(f"{name}: Invalid value '{raw}'", field=name)
        return raw

    # ------------------------------------------------------------------ guards

    def check_unique(self, values: Dict[str, Any], instance: Optional[ModelT] = None) -> None:
        """Reject values that collide with another row of this school, ignoring `instance`"""
        for rule in self.unique_rules:
            if instance is not None and not any(name in values for name in rule.fields):
                continue
            candidate = {
                name: values[name] if name in values else getattr(instance, name, None)
                for name in rule.fields
            }
            if any(value is None for value in candidate.values()):
                continue

            stmt = self.scoped()
            for name, value in candidate.items():
                column = getattr(self.model, name)
                if isinstance(value, str):
                    stmt = stmt.where(func.lower(column) == value.lower())
                else:
                    stmt = stmt.where(column == value)
            if instance is not None:
                stmt = stmt.where(self.model.id != instance.id)

            if self.db.execute(stmt.limit(1)).first() is not None:
                raise ConflictError(
                    f"{self.resource_name} with this {rule.label} already exists",
                    field=rule.fields[-1],
                )

    def check_references(self, values: Dict[str, Any]) -> None:
        for name, reference in self.references.items():
            value = values.get(name)
            if value is None:
                continue
            self.require(reference.model, value, reference.label)

    def require(self, model: Any, record_id: uuid.UUID, label: str) -> Any:
        """Fetch a referenced row of this school or fail validation"""
        obj = self.db.execute(
            self.scoped(model).where(model.id == record_id)
        ).scalar_one_or_none()
        if obj is None:
            raise ValidationFailed(f"{label} not found")
        return obj

    def count_dependents(self, obj: ModelT) -> List[Tuple[int, str]]:
        counts = []
        for dependent in self.dependents:
            count = self.db.execute(
                select(func.count())
                .select_from(dependent.model)
                .where(
                    getattr(dependent.model, dependent.column) == obj.id,
                    dependent.model.school_id == self.ctx.school_id,
                )
            ).scalar_one()
            counts.append((count, dependent.message))
        return counts

    def check_dependents(self, obj: ModelT) -> None:
        for count, message in self.count_dependents(obj):
            if count:
                raise ConflictError(
                    f"Cannot delete {self.resource_name.lower()}. {message.format(count=count)}.",
                    count=count,
                )

    # ------------------------------------------------------------------ writes

    @contextmanager
    def atomic(self):
        """Commit everything done inside the block, or nothing"""
        try:
            yield
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise self.conflict_from_integrity(exc) from exc
        except Exception:
            self.db.rollback()
            raise

    def conflict_from_integrity(self, exc: IntegrityError) -> ConflictError:
        detail = str(exc.orig).lower()
        logger.warning(f"{self.resource_name} write rejected by database: {exc.orig}")
        if "unique" in detail or "duplicate" in detail:
            for rule in sorted(self.unique_rules, key=lambda r: -len(r.fields)):
                if all(name in detail for name in rule.fields):
                    return ConflictError(
                        f"{self.resource_name} with this {rule.label} already exists",
                        field=rule.fields[-1],
                    )
            return ConflictError(f"{self.resource_name} already exists")
        if "foreign key" in detail:
            return ConflictError(f"{self.resource_name} is still referenced by other records")
        return ConflictError(f"{self.resource_name} conflicts with existing data")

    def _split(self, data: Any, partial: bool) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        if isinstance(data, BaseModel):
            values = data.model_dump(exclude_unset=partial)
        else:
            values = dict(data)
        extra = {name: values.pop(name) for name in self.extra_fields if name in values}
        columns = self.model.__table__.columns
        for name in list(values):
            if values[name] is None and name in columns and not columns[name].nullable:
                if partial:
                    raise ValidationFailed(f"{name}: Value cannot be empty", field=name)
                # Column default applies
                values.pop(name)
        return values, extra

    def prepare_create(self, values: Dict[str, Any], extra: Dict[str, Any]) -> None:
        """Hook: normalize or validate values before the guards run"""

    def prepare_update(self, obj: ModelT, values: Dict[str, Any], extra: Dict[str, Any]) -> None:
        """Hook: validate an update against the current row"""

    def after_create(self, obj: ModelT, extra: Dict[str, Any]) -> None:
        """Hook: extra writes inside the create transaction"""

    def after_update(self, obj: ModelT, extra: Dict[str, Any]) -> None:
        """Hook: extra writes inside the update transaction"""

    def before_delete(self, obj: ModelT) -> None:
        """Hook: extra writes inside the delete transaction"""

    def validate_delete(self, obj: ModelT) -> None:
        """Hook: refuse deletion for reasons other than dependent rows"""

    def create(self, data: Any) -> ModelT:
        values, extra = self._split(data, partial=False)
        self.prepare_create(values, extra)
        self.check_references(values)
        self.check_unique(values)

        obj = self.model(school_id=self.ctx.school_id, **values)
        with self.atomic():
            self.db.add(obj)
            self.db.flush()
            self.after_create(obj, extra)

        logger.info(f"{self.resource_name} created: {obj.id} by {self.ctx.username}")
        return self.get(obj.id)

    def update(self, record_id: uuid.UUID, data: Any) -> ModelT:
        obj = self.get_object(record_id)
        values, extra = self._split(data, partial=True)
        self.prepare_update(obj, values, extra)
        self.check_references(values)
        self.check_unique(values, instance=obj)

        with self.atomic():
            for name, value in values.items():
                setattr(obj, name, value)
            self.db.flush()
            self.after_update(obj, extra)

        logger.info(f"{self.resource_name} updated: {obj.id} by {self.ctx.username}")
        return self.get(obj.id)

    def delete(self, record_id: uuid.UUID) -> None:
        obj = self.get_object(record_id)
        self.validate_delete(obj)
        self.check_dependents(obj)

        with self.atomic():
            self.before_delete(obj)
            self.db.delete(obj)

        logger.info(f"{self.resource_name} deleted: {record_id} by {self.ctx.username}")
