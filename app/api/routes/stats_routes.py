"""
Statistics Routes

GET /stats/dashboard - KPIs and chart series for the dashboard
GET /stats/mentors - Per-mentor breakdown (admin)
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_admin, get_current_user, get_filter_options, get_student_service
from app.schemas.schemas import DashboardReport, FilterOptions, MentorStats, User
from app.services import stats_service
from app.services.student_service import StudentService

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/dashboard", response_model=DashboardReport)
async def dashboard(
    filters: FilterOptions = Depends(get_filter_options),
    my_students_only: bool = Query(False),
    show_inactive_departments: bool = Query(False),
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """
    Dashboard figures. Admins get figures for the filtered view; mentors
    always get figures for all of their assigned students.
    """
    students = service.dashboard_students(
        user, filters,
        show_inactive_departments=show_inactive_departments,
        my_students_only=my_students_only,
    )
    return stats_service.build_dashboard_report(students)


@router.get("/mentors", response_model=List[MentorStats])
async def mentor_stats(
    admin: User = Depends(get_current_admin),
    service: StudentService = Depends(get_student_service),
):
    return service.mentor_stats()
