# schooldesk/api/routers/resource.py - Standard list/create/get/update/delete routes for a tenant resource
from typing import Optional, Type
from uuid import UUID
import logging

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.core.config import settings
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.pagination import ListQuery
from schooldesk.core.responses import created_response, success_response
from schooldesk.services.crud import TenantCRUDService

logger = logging.getLogger(__name__)


def list_query(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None, max_length=100),
    status: Optional[str] = Query(None),
) -> ListQuery:
    """Pagination, search and status parameters; resource filters are parsed by the service"""
    query = ListQuery(page=page, limit=limit, search=search, status=status)
    query.filters = dict(request.query_params)
    return query


def build_resource_router(
    service_cls: Type[TenantCRUDService],
    create_schema: Optional[Type[BaseModel]],
    update_schema: Optional[Type[BaseModel]],
    out_schema: Type[BaseModel],
    module: str,
    router: Optional[APIRouter] = None,
) -> APIRouter:
    """
    Build the uniform REST surface for one resource.

    Passing None for create_schema or update_schema leaves that route out,
    for resources whose creation or edits go through dedicated actions.
    Routes are added to `router` when given, after any action routes it
    already holds, so static paths win over /{record_id}.
    """
    router = router if router is not None else APIRouter()
    name = service_cls.resource_name

    @router.get("")
    def list_records(
        query: ListQuery = Depends(list_query),
        ctx: TenantContext = Depends(require_permission(f"{module}.view")),
        db: Session = Depends(get_db),
    ):
        service = service_cls(db, ctx)
        query.filters = service.parse_filters(query.filters)
        page = service.list(query)
        return success_response(
            [out_schema.model_validate(item) for item in page.items],
            pagination=page.meta(),
        )

    if create_schema is not None:
        @router.post("", status_code=status.HTTP_201_CREATED)
        def create_record(
            payload: create_schema,
            ctx: TenantContext = Depends(require_permission(f"{module}.create")),
            db: Session = Depends(get_db),
        ):
            record = service_cls(db, ctx).create(payload)
            return created_response(out_schema.model_validate(record), message=f"{name} created successfully")

    @router.get("/{record_id}")
    def get_record(
        record_id: UUID,
        ctx: TenantContext = Depends(require_permission(f"{module}.view")),
        db: Session = Depends(get_db),
    ):
        record = service_cls(db, ctx).get(record_id)
        return success_response(out_schema.model_validate(record))

    if update_schema is not None:
        @router.put("/{record_id}")
        def update_record(
            record_id: UUID,
            payload: update_schema,
            ctx: TenantContext = Depends(require_permission(f"{module}.edit")),
            db: Session = Depends(get_db),
        ):
            record = service_cls(db, ctx).update(record_id, payload)
            return success_response(out_schema.model_validate(record), message=f"{name} updated successfully")

    @router.delete("/{record_id}")
    def delete_record(
        record_id: UUID,
        ctx: TenantContext = Depends(require_permission(f"{module}.delete")),
        db: Session = Depends(get_db),
    ):
        service_cls(db, ctx).delete(record_id)
        return success_response(None, message=f"{name} deleted successfully")

    return router
