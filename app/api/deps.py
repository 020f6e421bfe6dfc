"""
FastAPI dependencies - repositories, services and the current user.

Routes only ever ask for services; tests swap the repository providers for
in-memory ones through `app.dependency_overrides`.
"""

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.auth import decode_token
from app.repositories.base import DepartmentRepository, StudentRepository, UserRepository
from app.schemas.schemas import DateRange, FilterOptions, PackageRange, User, UserRole
from app.services.department_service import DepartmentService
from app.services.mentor_service import MentorService
from app.services.student_service import StudentService

# Bearer token extractor
bearer_scheme = HTTPBearer()


# ============================================================
# REPOSITORIES
# ============================================================

def get_student_repository() -> StudentRepository:
    from app.repositories.mongo import MongoStudentRepository
    return MongoStudentRepository()


def get_department_repository() -> DepartmentRepository:
    from app.repositories.postgres import SqlDepartmentRepository
    return SqlDepartmentRepository()


def get_user_repository() -> UserRepository:
    from app.repositories.postgres import SqlUserRepository
    return SqlUserRepository()


# ============================================================
# SERVICES
# ============================================================

def get_student_service(
    students: StudentRepository = Depends(get_student_repository),
    departments: DepartmentRepository = Depends(get_department_repository),
    users: UserRepository = Depends(get_user_repository),
) -> StudentService:
    return StudentService(students, departments, users)


def get_department_service(
    departments: DepartmentRepository = Depends(get_department_repository),
    students: StudentRepository = Depends(get_student_repository),
    users: UserRepository = Depends(get_user_repository),
) -> DepartmentService:
    return DepartmentService(departments, students, users)


def get_mentor_service(
    users: UserRepository = Depends(get_user_repository),
    students: StudentRepository = Depends(get_student_repository),
) -> MentorService:
    return MentorService(users, students)


# ============================================================
# AUTH
# ============================================================

def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    users: UserRepository = Depends(get_user_repository),
) -> User:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    user = users.get(user_id)
    if not user:
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return user


def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency - Require admin role."""
    if user.role != UserRole.admin:
        raise HTTPException(status_code=403, detail="Admins only")
    return user


# ============================================================
# QUERY PARAMETERS
# ============================================================

def get_filter_options(
    department: str = Query("", description="Substring of the department name"),
    section: str = Query(""),
    company: str = Query("", description="Substring of the placement company"),
    year: str = Query("", description="Placement year, e.g. 2024"),
    mentor: str = Query("", description="Mentor id"),
    status_filter: str = Query("", alias="status"),
    package_min: float = Query(0, ge=0),
    package_max: float = Query(0, ge=0, description="0 means no upper bound"),
    date_start: str = Query("", description="YYYY-MM-DD"),
    date_end: str = Query("", description="YYYY-MM-DD"),
    search: str = Query(""),
) -> FilterOptions:
    return FilterOptions(
        department=department,
        section=section,
        company=company,
        year=year,
        mentor=mentor,
        status=status_filter,
        package_range=PackageRange(min=package_min, max=package_max),
        date_range=DateRange(start=date_start, end=date_end),
        search=search,
    )
