"""
Student Routes

GET /students - List students (filters as query params)
POST /students - Create student
GET /students/{student_id} - Get student
PUT /students/{student_id} - Update student
DELETE /students/{student_id} - Delete student (admin)
PUT /students/{student_id}/status - Change status
POST /students/{student_id}/placement - Record placement
PUT /students/{student_id}/placement - Update placement record
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user, get_filter_options, get_student_service
from app.schemas.schemas import (
    FilterOptions, MessageResponse, PlacementCreate, PlacementUpdate,
    StatusUpdate, Student, StudentCreate, StudentUpdate, User,
)
from app.services.student_service import StudentService

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=List[Student])
async def list_students(
    filters: FilterOptions = Depends(get_filter_options),
    my_students_only: bool = Query(False),
    show_inactive_departments: bool = Query(False),
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """Students matching every given filter, in insertion order."""
    return service.list_students(
        user, filters,
        show_inactive_departments=show_inactive_departments,
        my_students_only=my_students_only,
    )


@router.post("", response_model=Student, status_code=201)
async def create_student(
    data: StudentCreate,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """
    Create a student. Status is derived from the academic details;
    `higher_studies` may be requested for eligible students.
    """
    return service.create_student(data, user)


@router.get("/{student_id}", response_model=Student)
async def get_student(
    student_id: str,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    return service.get_student(student_id)


@router.put("/{student_id}", response_model=Student)
async def update_student(
    student_id: str,
    data: StudentUpdate,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """Update provided fields only. Changing scores re-runs the eligibility check."""
    return service.update_student(student_id, data, user)


@router.delete("/{student_id}", response_model=MessageResponse)
async def delete_student(
    student_id: str,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    service.delete_student(student_id, user)
    return MessageResponse(message="Student deleted")


@router.put("/{student_id}/status", response_model=Student)
async def change_status(
    student_id: str,
    data: StatusUpdate,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    return service.change_status(student_id, data.status.value, user)


@router.post("/{student_id}/placement", response_model=Student, status_code=201)
async def add_placement(
    student_id: str,
    data: PlacementCreate,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    """Record a placement for an eligible student; status becomes `placed`."""
    return service.add_placement(student_id, data, user)


@router.put("/{student_id}/placement", response_model=Student)
async def update_placement(
    student_id: str,
    data: PlacementUpdate,
    user: User = Depends(get_current_user),
    service: StudentService = Depends(get_student_service),
):
    return service.update_placement(student_id, data, user)
