"""
Mentor Service - mentor accounts and the bootstrap admin.

Usernames are unique (case-insensitive) across all accounts and cannot be
changed once created. Deleting a mentor leaves their students' mentor_id
untouched so an admin can reassign them later.
"""

import logging
from typing import List, Optional

from app.core.auth import hash_password, verify_password
from app.core.config import get_settings
from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.repositories.base import StudentRepository, UserRepository
from app.schemas.schemas import MentorCreate, MentorUpdate, User, UserRole, utcnow

logger = logging.getLogger(__name__)


class MentorService:

    def __init__(self, users: UserRepository, students: StudentRepository):
        self.users = users
        self.students = students

    def list_mentors(self, active_only: bool = False) -> List[User]:
        mentors = self.users.list_mentors()
        if active_only:
            return [m for m in mentors if m.is_active]
        return mentors

    def get_mentor(self, mentor_id: str) -> User:
        user = self.users.get(mentor_id)
        if not user or user.role != UserRole.mentor:
            raise NotFoundError("Mentor", mentor_id)
        return user

    def _ensure_username_free(self, username: str) -> None:
        wanted = username.lower()
        if any(u.username.lower() == wanted for u in self.users.list_all()):
            raise ConflictError(f"Username '{username}' is already taken")

    def create_mentor(self, data: MentorCreate) -> User:
        username = data.username.strip()
        self._ensure_username_free(username)

        mentor = User(
            username=username,
            role=UserRole.mentor,
            name=data.name.strip(),
            email=data.email,
            phone=data.phone,
            department=data.department,
        )
        password = data.password or get_settings().default_mentor_password
        self.users.add(mentor, hash_password(password))
        logger.info("Mentor %s created", username)
        return mentor

    def update_mentor(self, mentor_id: str, data: MentorUpdate) -> User:
        mentor = self.get_mentor(mentor_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        updated = mentor.model_copy(update={**changes, "updated_at": utcnow()})
        self.users.save(updated)
        logger.info("Mentor %s updated", mentor.username)
        return updated

    def delete_mentor(self, mentor_id: str) -> int:
        """Delete a mentor. Returns how many students are left pointing at them."""
        mentor = self.get_mentor(mentor_id)
        self.users.delete(mentor_id)
        orphaned = sum(1 for s in self.students.list_all() if s.mentor_id == mentor_id)
        logger.info("Mentor %s deleted, %d students need reassignment", mentor.username, orphaned)
        return orphaned

    def change_password(self, user: User, current_password: str, new_password: str) -> None:
        password_hash = self.users.get_password_hash(user.id)
        if not password_hash or not verify_password(current_password, password_hash):
            raise ValidationFailedError("Current password is incorrect")
        self.users.set_password_hash(user.id, hash_password(new_password))
        logger.info("Password changed for %s", user.username)

    def ensure_admin(self, username: Optional[str] = None, password: Optional[str] = None) -> Optional[User]:
        """Create the default admin account when no admin exists yet."""
        if any(u.role == UserRole.admin for u in self.users.list_all()):
            return None
        settings = get_settings()
        admin = User(
            username=username or settings.default_admin_username,
            role=UserRole.admin,
            name="Administrator",
        )
        self.users.add(admin, hash_password(password or settings.default_admin_password))
        logger.warning("Created default admin account '%s'; change its password", admin.username)
        return admin
