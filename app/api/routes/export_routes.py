"""
Export Routes

GET /exports/students?format=xlsx|csv - Download students as a spreadsheet
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response

from app.api.deps import get_current_user, get_filter_options, get_student_service
from app.schemas.schemas import FilterOptions, User
from app.services.export_service import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE, export_filename, export_students
from app.services.student_service import StudentService

router = APIRouter(prefix="/exports", tags=["Exports"])


@router.get("/students")
async def export_student_data(
    export_format: Literal["xlsx", "csv"] = Query("xlsx", alias="format"),
    filters: FilterOptions = Depends(get_filter_options),
    show_inactive_departments: bool = Query(False),
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """
    Admins export the filtered view; mentors export their own students
    (filters still apply).
    """
    students = service.export_students(user, filters, show_inactive_departments=show_inactive_departments)
    content = export_students(students, export_format)
    filename = export_filename(user, export_format)

    return Response(
        content=content,
        media_type=CSV_MEDIA_TYPE if export_format == "csv" else XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
