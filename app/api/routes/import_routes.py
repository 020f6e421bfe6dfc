"""
Import Routes

POST /imports/students - Upload a student spreadsheet (XLSX/XLS/CSV)
POST /imports/preview-columns - Show how a sheet's headers would be mapped
GET /imports/template - Download the import template
GET /imports/formats - Get supported formats
"""

from fastapi import APIRouter, Depends, File, Response, UploadFile

from app.api.deps import get_current_user, get_student_service
from app.schemas.schemas import ColumnPreviewResponse, ImportResponse, User
from app.services import column_mapper
from app.services.export_service import XLSX_MEDIA_TYPE, build_template
from app.services.student_service import StudentService
from app.utils.file_upload import get_supported_formats, read_rows_from_upload

router = APIRouter(prefix="/imports", tags=["Imports"])


@router.post("/students", response_model=ImportResponse)
async def import_students(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """
    Import students from a spreadsheet.

    Headers are matched case-insensitively against known aliases. Rows are
    never rejected for bad cells: they are imported with defaults and the
    substitutions are listed in `warnings`.
    """
    rows, filename = await read_rows_from_upload(file)
    result = service.import_students(rows, user)

    return ImportResponse(
        success=True,
        message=f"Imported {result.count} students from {filename}",
        imported=result.count,
        warnings=result.warnings,
        students=result.students,
    )


@router.post("/preview-columns", response_model=ColumnPreviewResponse)
async def preview_columns(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
):
    rows, _ = await read_rows_from_upload(file)
    headers = list(rows[0].keys()) if rows else []
    mapping = column_mapper.resolve(headers)
    return ColumnPreviewResponse(
        mapping=mapping,
        unmapped_headers=column_mapper.unmapped_headers(headers, mapping),
    )


@router.get("/template")
async def download_template(user: User = Depends(get_current_user)):
    return Response(
        content=build_template(),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": 'attachment; filename="student_import_template.xlsx"'},
    )


@router.get("/formats")
async def supported_formats():
    return get_supported_formats()
