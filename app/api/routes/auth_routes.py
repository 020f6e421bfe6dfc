"""
Authentication Routes

POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
POST /auth/change-password - Change own password
"""

from fastapi import APIRouter, HTTPException, Depends

from app.api.deps import get_current_user, get_mentor_service, get_user_repository
from app.core.auth import authenticate, token_for
from app.repositories.base import UserRepository
from app.schemas.schemas import LoginRequest, MessageResponse, PasswordChange, TokenResponse, User
from app.services.mentor_service import MentorService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    """
    Login with username or email and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = authenticate(users, request.username, request.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return TokenResponse(access_token=token_for(user), user_id=user.id, role=user.role.value)


@router.get("/me", response_model=User)
async def get_me(user: User = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return user


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    user: User = Depends(get_current_user),
    service: MentorService = Depends(get_mentor_service),
):
    service.change_password(user, data.current_password, data.new_password)
    return MessageResponse(message="Password updated")
