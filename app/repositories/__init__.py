"""
Repositories - storage behind the student, department and user services.

- StudentRepository: MongoDB (app.repositories.mongo)
- DepartmentRepository, UserRepository: PostgreSQL (app.repositories.postgres)
- In-memory versions of all three (app.repositories.memory)
"""
from app.repositories.base import DepartmentRepository, StudentRepository, UserRepository
from app.repositories.memory import (
    InMemoryDepartmentRepository, InMemoryStudentRepository, InMemoryUserRepository,
)

__all__ = [
    "StudentRepository",
    "DepartmentRepository",
    "UserRepository",
    "InMemoryStudentRepository",
    "InMemoryDepartmentRepository",
    "InMemoryUserRepository",
]
