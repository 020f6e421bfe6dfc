"""
Department Service - department catalogue management.

Students and mentors reference departments by name (students also carry
`department_id`), so renames are cascaded onto both to keep name-based
filtering consistent.
"""

import logging
from typing import Dict, List, Optional

from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.repositories.base import DepartmentRepository, StudentRepository, UserRepository
from app.schemas.schemas import Department, DepartmentCreate, DepartmentUpdate, utcnow

logger = logging.getLogger(__name__)


DEFAULT_DEPARTMENTS = [
    ("Computer Science", "CS", "Computer Science and Engineering"),
    ("Information Technology", "IT", "Information Technology"),
    ("Electronics & Communication", "EC", "Electronics and Communication Engineering"),
    ("Mechanical Engineering", "ME", "Mechanical Engineering"),
    ("Civil Engineering", "CE", "Civil Engineering"),
    ("Electrical Engineering", "EE", "Electrical Engineering"),
    ("Chemical Engineering", "CH", "Chemical Engineering"),
    ("Biotechnology", "BT", "Biotechnology"),
]


class DepartmentService:

    def __init__(
        self,
        departments: DepartmentRepository,
        students: StudentRepository,
        users: UserRepository,
    ):
        self.departments = departments
        self.students = students
        self.users = users

    def list_departments(self, active_only: bool = False) -> List[Department]:
        departments = self.departments.list_all()
        if active_only:
            return [d for d in departments if d.is_active]
        return departments

    def get_department(self, department_id: str) -> Department:
        dept = self.departments.get(department_id)
        if not dept:
            raise NotFoundError("Department", department_id)
        return dept

    def _ensure_unique(self, name: Optional[str], code: Optional[str], exclude_id: Optional[str] = None) -> None:
        for dept in self.departments.list_all():
            if dept.id == exclude_id:
                continue
            if name and dept.name.lower() == name.lower():
                raise ValidationFailedError(f"Department name '{name}' already exists")
            if code and dept.code.lower() == code.lower():
                raise ValidationFailedError(f"Department code '{code}' already exists")

    def create_department(self, data: DepartmentCreate) -> Department:
        name = data.name.strip()
        code = data.code.strip().upper()
        self._ensure_unique(name, code)

        dept = Department(name=name, code=code, description=data.description, is_active=data.is_active)
        self.departments.add(dept)
        logger.info("Department %s (%s) created", dept.name, dept.code)
        return dept

    def update_department(self, department_id: str, data: DepartmentUpdate) -> Department:
        dept = self.get_department(department_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        if "code" in changes:
            changes["code"] = changes["code"].strip().upper()
        self._ensure_unique(changes.get("name"), changes.get("code"), exclude_id=department_id)

        updated = dept.model_copy(update={**changes, "updated_at": utcnow()})
        self.departments.save(updated)

        if updated.name != dept.name:
            self._cascade_rename(dept, updated.name)
        logger.info("Department %s updated", department_id)
        return updated

    def _cascade_rename(self, dept: Department, new_name: str) -> None:
        moved = 0
        for student in self.students.list_all():
            if student.department_id == dept.id or (not student.department_id and student.department == dept.name):
                self.students.save(student.model_copy(update={
                    "department": new_name,
                    "department_id": dept.id,
                    "updated_at": utcnow(),
                }).with_synced_record())
                moved += 1
        for user in self.users.list_all():
            if user.department == dept.name:
                self.users.save(user.model_copy(update={"department": new_name, "updated_at": utcnow()}))
        logger.info("Department rename %r -> %r applied to %d students", dept.name, new_name, moved)

    def toggle_department(self, department_id: str) -> Department:
        dept = self.get_department(department_id)
        updated = dept.model_copy(update={"is_active": not dept.is_active, "updated_at": utcnow()})
        self.departments.save(updated)
        logger.info("Department %s is now %s", dept.name, "active" if updated.is_active else "inactive")
        return updated

    def usage(self, dept: Department) -> Dict[str, int]:
        students = sum(
            1 for s in self.students.list_all()
            if s.department_id == dept.id or s.department == dept.name
        )
        mentors = sum(1 for u in self.users.list_mentors() if u.department == dept.name)
        return {"students": students, "mentors": mentors}

    def delete_department(self, department_id: str, force: bool = False) -> None:
        """Delete a department; refuses while referenced unless forced."""
        dept = self.get_department(department_id)
        usage = self.usage(dept)
        if (usage["students"] or usage["mentors"]) and not force:
            raise ConflictError(
                f"Department '{dept.name}' is used by {usage['students']} students "
                f"and {usage['mentors']} mentors",
                details=usage
            )
        self.departments.delete(department_id)
        logger.info("Department %s deleted (force=%s)", dept.name, force)

    def seed_defaults(self) -> int:
        """Create the default departments when none exist. Returns count added."""
        if self.departments.list_all():
            return 0
        for name, code, description in DEFAULT_DEPARTMENTS:
            self.departments.add(Department(name=name, code=code, description=description))
        logger.info("Seeded %d default departments", len(DEFAULT_DEPARTMENTS))
        return len(DEFAULT_DEPARTMENTS)
