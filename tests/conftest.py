"""
Placement Tracker - Test Configuration and Fixtures

Every test runs against in-memory repositories; the API client swaps the
database-backed providers out through dependency overrides.
"""
import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Set testing environment
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_LEVEL'] = 'WARNING'
os.environ['DEFAULT_MENTOR_PASSWORD'] = 'mentor123'

from app.main import app
from app.api.deps import get_department_repository, get_student_repository, get_user_repository
from app.core.auth import hash_password, token_for
from app.repositories.memory import (
    InMemoryDepartmentRepository, InMemoryStudentRepository, InMemoryUserRepository,
)
from app.schemas.schemas import (
    AcademicDetails, Department, PlacedState, PlacementRecord, Student, User, UserRole,
)
from app.services.eligibility_service import classify


@pytest.fixture
def departments():
    return [
        Department(name="Computer Science", code="CS"),
        Department(name="Information Technology", code="IT"),
        Department(name="Mechanical Engineering", code="ME", is_active=False),
    ]


@pytest.fixture
def admin_user() -> User:
    return User(username="admin", role=UserRole.admin, name="Dr. Admin", email="admin@university.edu")


@pytest.fixture
def mentor_user() -> User:
    return User(username="mentor1", role=UserRole.mentor, name="Dr. Rajesh Kumar",
                email="rajesh.kumar@university.edu", department="Computer Science")


@pytest.fixture
def other_mentor() -> User:
    return User(username="mentor2", role=UserRole.mentor, name="Prof. Priya Sharma",
                department="Information Technology")


@pytest.fixture
def make_student():
    """Factory for students; status follows the classifier unless a placement is given."""
    def _make(
        roll_number,
        tenth=70.0,
        twelfth=70.0,
        ug=7.0,
        cgpa=None,
        department="Computer Science",
        section="A",
        mentor_id="",
        student_name=None,
        company=None,
        package=None,
        placement_date=None,
        status=None,
    ) -> Student:
        academics = AcademicDetails(
            tenth_percentage=tenth, twelfth_percentage=twelfth, ug_percentage=ug, cgpa=cgpa,
        )
        name = student_name or f"Student {roll_number}"
        if company is not None:
            placement = PlacedState(record=PlacementRecord(
                student_name=name,
                roll_number=roll_number,
                department=department,
                mentor_id=mentor_id,
                company=company,
                package=package or 0,
                placement_date=placement_date or date(2024, 3, 1),
            ))
        else:
            placement = {"status": status or classify(tenth, twelfth, ug, cgpa)}
        return Student(
            roll_number=roll_number,
            student_name=name,
            department=department,
            section=section,
            mentor_id=mentor_id,
            academic_details=academics,
            placement=placement,
        )
    return _make


@pytest.fixture
def scenario_students(make_student):
    """A eligible, B placed at Acme for 10 LPA, C ineligible on 10th marks."""
    return [
        make_student("A001", student_name="Asha"),
        make_student("B002", student_name="Bala", company="Acme", package=10, placement_date=date(2024, 3, 1)),
        make_student("C003", student_name="Chitra", tenth=50),
    ]


@pytest.fixture
def student_repo():
    return InMemoryStudentRepository()


@pytest.fixture
def department_repo(departments):
    return InMemoryDepartmentRepository(departments)


@pytest.fixture
def user_repo(admin_user, mentor_user, other_mentor):
    repo = InMemoryUserRepository()
    repo.add(admin_user, hash_password("admin123"))
    repo.add(mentor_user, hash_password("mentor123"))
    repo.add(other_mentor, hash_password("mentor123"))
    return repo


@pytest.fixture
def client(student_repo, department_repo, user_repo):
    """Test client wired to the in-memory repositories."""
    app.dependency_overrides[get_student_repository] = lambda: student_repo
    app.dependency_overrides[get_department_repository] = lambda: department_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return {'Authorization': f'Bearer {token_for(admin_user)}'}


@pytest.fixture
def mentor_headers(mentor_user) -> dict:
    return {'Authorization': f'Bearer {token_for(mentor_user)}'}
