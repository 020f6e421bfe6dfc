"""
Department Routes

GET /departments - List departments
POST /departments - Create department (admin)
PUT /departments/{department_id} - Update / rename department (admin)
DELETE /departments/{department_id} - Delete department (admin)
POST /departments/{department_id}/toggle - Activate / deactivate (admin)
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_admin, get_current_user, get_department_service
from app.schemas.schemas import Department, DepartmentCreate, DepartmentUpdate, MessageResponse, User
from app.services.department_service import DepartmentService

router = APIRouter(prefix="/departments", tags=["Departments"])


@router.get("", response_model=List[Department])
async def list_departments(
    active_only: bool = Query(False),
    user: User = Depends(get_current_user),
    service: DepartmentService = Depends(get_department_service),
):
    return service.list_departments(active_only=active_only)


@router.post("", response_model=Department, status_code=201)
async def create_department(
    data: DepartmentCreate,
    admin: User = Depends(get_current_admin),
    service: DepartmentService = Depends(get_department_service),
):
    return service.create_department(data)


@router.put("/{department_id}", response_model=Department)
async def update_department(
    department_id: str,
    data: DepartmentUpdate,
    admin: User = Depends(get_current_admin),
    service: DepartmentService = Depends(get_department_service),
):
    """Renaming a department also renames it on its students and mentors."""
    return service.update_department(department_id, data)


@router.delete("/{department_id}", response_model=MessageResponse)
async def delete_department(
    department_id: str,
    force: bool = Query(False, description="Delete even if students or mentors still use it"),
    admin: User = Depends(get_current_admin),
    service: DepartmentService = Depends(get_department_service),
):
    service.delete_department(department_id, force=force)
    return MessageResponse(message="Department deleted")


@router.post("/{department_id}/toggle", response_model=Department)
async def toggle_department(
    department_id: str,
    admin: User = Depends(get_current_admin),
    service: DepartmentService = Depends(get_department_service),
):
    return service.toggle_department(department_id)
