"""
In-memory repositories.

Used by the test-suite and the demo seed script. Models are copied on the
way in and out so callers can never mutate stored state by accident.
"""

from typing import Dict, Iterable, List, Optional

from app.repositories.base import DepartmentRepository, StudentRepository, UserRepository
from app.schemas.schemas import Department, Student, User


class InMemoryStudentRepository(StudentRepository):

    def __init__(self, students: Iterable[Student] = ()):
        self._students: Dict[str, Student] = {}
        self.add_many(students)

    def list_all(self) -> List[Student]:
        return [s.model_copy(deep=True) for s in self._students.values()]

    def get(self, student_id: str) -> Optional[Student]:
        student = self._students.get(student_id)
        return student.model_copy(deep=True) if student else None

    def add(self, student: Student) -> Student:
        self._students[student.id] = student.model_copy(deep=True)
        return student

    def add_many(self, students: Iterable[Student]) -> int:
        count = 0
        for student in students:
            self.add(student)
            count += 1
        return count

    def save(self, student: Student) -> Student:
        self._students[student.id] = student.model_copy(deep=True)
        return student

    def delete(self, student_id: str) -> bool:
        return self._students.pop(student_id, None) is not None


class InMemoryDepartmentRepository(DepartmentRepository):

    def __init__(self, departments: Iterable[Department] = ()):
        self._departments: Dict[str, Department] = {d.id: d.model_copy() for d in departments}

    def list_all(self) -> List[Department]:
        return [d.model_copy() for d in self._departments.values()]

    def get(self, department_id: str) -> Optional[Department]:
        dept = self._departments.get(department_id)
        return dept.model_copy() if dept else None

    def add(self, department: Department) -> Department:
        self._departments[department.id] = department.model_copy()
        return department

    def save(self, department: Department) -> Department:
        self._departments[department.id] = department.model_copy()
        return department

    def delete(self, department_id: str) -> bool:
        return self._departments.pop(department_id, None) is not None


class InMemoryUserRepository(UserRepository):

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._hashes: Dict[str, str] = {}

    def list_all(self) -> List[User]:
        return [u.model_copy() for u in self._users.values()]

    def get(self, user_id: str) -> Optional[User]:
        user = self._users.get(user_id)
        return user.model_copy() if user else None

    def get_by_login(self, username_or_email: str) -> Optional[User]:
        wanted = (username_or_email or "").strip().lower()
        for user in self._users.values():
            if user.username.lower() == wanted or (user.email and user.email.lower() == wanted):
                return user.model_copy()
        return None

    def add(self, user: User, password_hash: str) -> User:
        self._users[user.id] = user.model_copy()
        self._hashes[user.id] = password_hash
        return user

    def save(self, user: User) -> User:
        self._users[user.id] = user.model_copy()
        return user

    def delete(self, user_id: str) -> bool:
        self._hashes.pop(user_id, None)
        return self._users.pop(user_id, None) is not None

    def get_password_hash(self, user_id: str) -> Optional[str]:
        return self._hashes.get(user_id)

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        if user_id not in self._users:
            return False
        self._hashes[user_id] = password_hash
        return True
