# schooldesk/api/routers/students.py - Students, parents, categories and houses
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schooldesk.api.deps.tenancy import require_permission
from schooldesk.api.routers.resource import build_resource_router
from schooldesk.core.context import TenantContext
from schooldesk.core.db import get_db
from schooldesk.core.responses import success_response
from schooldesk.schemas.student import (
    ParentCreate, ParentOut, ParentUpdate, SchoolHouseCreate, SchoolHouseOut, SchoolHouseUpdate,
    StudentCategoryCreate, StudentCategoryOut, StudentCategoryUpdate, StudentCreate, StudentOut, StudentUpdate,
)
from schooldesk.services.students import ParentService, SchoolHouseService, StudentCategoryService, StudentService

router = APIRouter()
parents_router = build_resource_router(ParentService, ParentCreate, ParentUpdate, ParentOut, "parents")


@router.get("/generate-admission-no")
def generate_admission_no(
    ctx: TenantContext = Depends(require_permission("students.create")),
    db: Session = Depends(get_db),
):
    return success_response({"admission_no": StudentService(db, ctx).generate_admission_no()})


router.include_router(
    build_resource_router(
        StudentCategoryService, StudentCategoryCreate, StudentCategoryUpdate, StudentCategoryOut, "students"
    ),
    prefix="/categories",
)
router.include_router(
    build_resource_router(SchoolHouseService, SchoolHouseCreate, SchoolHouseUpdate, SchoolHouseOut, "students"),
    prefix="/houses",
)
build_resource_router(StudentService, StudentCreate, StudentUpdate, StudentOut, "students", router=router)
