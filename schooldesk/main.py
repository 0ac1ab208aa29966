# schooldesk/main.py - FastAPI application: middleware, error handlers and routers
from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from schooldesk.core.config import settings
from schooldesk.core import db
from schooldesk.core.db import db_manager, get_engine
from schooldesk.core.errors import register_exception_handlers
from schooldesk.models import Base
from schooldesk.api.routers import academics, attendance, auth, dashboard, events, exams, fees, finance, front_office
from schooldesk.api.routers import homework, hostel, inventory, library, staff, students, transport, users
from schooldesk.api.routers import settings as settings_router


# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.API_TITLE}...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Database URL: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'local'}")

    # Alembic owns the schema outside development
    if settings.is_development:
        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=get_engine())
        logger.info("Database tables created successfully")

    yield

    logger.info(f"Shutting down {settings.API_TITLE}...")
    db_manager.close()


app = FastAPI(
    title=settings.API_TITLE,
    description="Multi-tenant school management API",
    version=settings.API_VERSION,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
    lifespan=lifespan
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and timing for every request"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    return response


app.add_middleware(CORSMiddleware, **settings.get_cors_config())

register_exception_handlers(app)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "environment": settings.ENV,
        "version": settings.API_VERSION,
        "database": db.health_check(),
    }


logger.info("Registering API routers...")
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.users_router, prefix="/api/users", tags=["Users"])
app.include_router(users.roles_router, prefix="/api/roles", tags=["Roles"])
app.include_router(users.permissions_router, prefix="/api/permissions", tags=["Roles"])
app.include_router(settings_router.router, prefix="/api/settings", tags=["Settings"])
app.include_router(academics.sessions_router, prefix="/api/sessions", tags=["Academics"])
app.include_router(academics.router, prefix="/api/academics", tags=["Academics"])
app.include_router(staff.router, prefix="/api/staff", tags=["Staff"])
app.include_router(students.parents_router, prefix="/api/parents", tags=["Parents"])
app.include_router(students.router, prefix="/api/students", tags=["Students"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(exams.router, prefix="/api/exams", tags=["Exams"])
app.include_router(homework.router, prefix="/api/homework", tags=["Homework"])
app.include_router(fees.router, prefix="/api/fees", tags=["Fees"])
app.include_router(finance.router, prefix="/api/finance", tags=["Finance"])
app.include_router(hostel.router, prefix="/api/hostel", tags=["Hostel"])
app.include_router(transport.router, prefix="/api/transport", tags=["Transport"])
app.include_router(inventory.router, prefix="/api/inventory", tags=["Inventory"])
app.include_router(library.router, prefix="/api/library", tags=["Library"])
app.include_router(front_office.router, prefix="/api/front-office", tags=["Front Office"])
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
logger.info("All routers registered successfully")
