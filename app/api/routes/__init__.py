"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.student_routes import router as student_router
from app.api.routes.import_routes import router as import_router
from app.api.routes.export_routes import router as export_router
from app.api.routes.stats_routes import router as stats_router
from app.api.routes.department_routes import router as department_router
from app.api.routes.mentor_routes import router as mentor_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(student_router)
api_router.include_router(import_router)
api_router.include_router(export_router)
api_router.include_router(stats_router)
api_router.include_router(department_router)
api_router.include_router(mentor_router)
