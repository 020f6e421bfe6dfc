"""
Placement Tracker - Main Application

FastAPI backend with:
- PostgreSQL for accounts and departments
- MongoDB for student documents (with embedded placement records)
- Spreadsheet import/export (XLSX, XLS, CSV)
- JWT authentication (admin and mentor roles)

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import PlacementTrackerError
from app.core.logging_config import setup_logging

settings = get_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Placement Tracker",
    description="""
    Placement tracking dashboard backend for a university.

    ## Features
    - **Authentication**: JWT-based auth for admins and mentors
    - **Students**: Records, academic eligibility, placement records
    - **Imports / Exports**: Spreadsheet upload with header aliasing, XLSX/CSV download
    - **Statistics**: KPIs, department, monthly, company and package breakdowns
    - **Departments / Mentors**: Catalogue and account management

    ## Databases
    - PostgreSQL: users, departments
    - MongoDB: students
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(PlacementTrackerError)
async def placement_tracker_error_handler(request: Request, exc: PlacementTrackerError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables and indexes, seed default departments and the admin account."""
    from app.api.deps import get_department_repository, get_student_repository, get_user_repository
    from app.db.mongodb import init_mongo_indexes
    from app.db.postgres import init_postgres_tables
    from app.services.department_service import DepartmentService
    from app.services.mentor_service import MentorService

    try:
        init_postgres_tables()
        users = get_user_repository()
        departments = get_department_repository()
        students = get_student_repository()
        DepartmentService(departments, students, users).seed_defaults()
        MentorService(users, students).ensure_admin()
        logger.info("PostgreSQL tables ready")
    except Exception as e:
        logger.warning("PostgreSQL initialization failed: %s", e)

    try:
        init_mongo_indexes()
        logger.info("MongoDB indexes initialized")
    except Exception as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Placement Tracker", "docs": "/docs"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection
    from app.db.mongodb import test_mongo_connection

    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
