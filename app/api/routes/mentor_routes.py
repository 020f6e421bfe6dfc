"""
Mentor Routes

GET /mentors - List mentors
POST /mentors - Create mentor (admin)
PUT /mentors/{mentor_id} - Update mentor (admin, username is fixed)
DELETE /mentors/{mentor_id} - Delete mentor (admin)
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_admin, get_current_user, get_mentor_service
from app.schemas.schemas import MentorCreate, MentorUpdate, MessageResponse, User
from app.services.mentor_service import MentorService

router = APIRouter(prefix="/mentors", tags=["Mentors"])


@router.get("", response_model=List[User])
async def list_mentors(
    active_only: bool = Query(False),
    user: User = Depends(get_current_user),
    service: MentorService = Depends(get_mentor_service),
):
    return service.list_mentors(active_only=active_only)


@router.post("", response_model=User, status_code=201)
async def create_mentor(
    data: MentorCreate,
    admin: User = Depends(get_current_admin),
    service: MentorService = Depends(get_mentor_service),
):
    """Create a mentor. Without a password the configured default is used."""
    return service.create_mentor(data)


@router.put("/{mentor_id}", response_model=User)
async def update_mentor(
    mentor_id: str,
    data: MentorUpdate,
    admin: User = Depends(get_current_admin),
    service: MentorService = Depends(get_mentor_service),
):
    return service.update_mentor(mentor_id, data)


@router.delete("/{mentor_id}", response_model=MessageResponse)
async def delete_mentor(
    mentor_id: str,
    admin: User = Depends(get_current_admin),
    service: MentorService = Depends(get_mentor_service),
):
    orphaned = service.delete_mentor(mentor_id)
    message = "Mentor deleted"
    if orphaned:
        message += f"; {orphaned} students need a new mentor"
    return MessageResponse(message=message)
