"""
Repository interfaces.

The services load plain snapshots through these and write changes back
explicitly; nothing in the core reaches storage on its own.
Writes are last-write-wins.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from app.schemas.schemas import Department, Student, User


class StudentRepository(ABC):

    @abstractmethod
    def list_all(self) -> List[Student]:
        """Snapshot of every student, in insertion order."""

    @abstractmethod
    def get(self, student_id: str) -> Optional[Student]:
        ...

    @abstractmethod
    def add(self, student: Student) -> Student:
        ...

    @abstractmethod
    def add_many(self, students: Iterable[Student]) -> int:
        ...

    @abstractmethod
    def save(self, student: Student) -> Student:
        """Replace the stored student with the same id."""

    @abstractmethod
    def delete(self, student_id: str) -> bool:
        ...


class DepartmentRepository(ABC):

    @abstractmethod
    def list_all(self) -> List[Department]:
        ...

    @abstractmethod
    def get(self, department_id: str) -> Optional[Department]:
        ...

    @abstractmethod
    def add(self, department: Department) -> Department:
        ...

    @abstractmethod
    def save(self, department: Department) -> Department:
        ...

    @abstractmethod
    def delete(self, department_id: str) -> bool:
        ...


class UserRepository(ABC):

    @abstractmethod
    def list_all(self) -> List[User]:
        ...

    @abstractmethod
    def get(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_by_login(self, username_or_email: str) -> Optional[User]:
        """Case-insensitive lookup by username or email."""

    @abstractmethod
    def add(self, user: User, password_hash: str) -> User:
        ...

    @abstractmethod
    def save(self, user: User) -> User:
        ...

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        ...

    @abstractmethod
    def get_password_hash(self, user_id: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        ...

    def list_mentors(self) -> List[User]:
        return [u for u in self.list_all() if u.role == "mentor"]
