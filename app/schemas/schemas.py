"""
Pydantic Schemas - Domain models, Request/Response Validation

All schemas in one file for simplicity. The same models flow through the
core services (filtering, aggregation, import) and the API layer.
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, EmailStr, Field, computed_field


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    mentor = "mentor"


class StudentStatus(str, Enum):
    placed = "placed"
    eligible = "eligible"
    higher_studies = "higher_studies"
    ineligible = "ineligible"


class Gender(str, Enum):
    male = "Male"
    female = "Female"
    other = "Other"


STATUS_LABELS = {
    "placed": "Placed",
    "eligible": "Eligible",
    "ineligible": "Ineligible",
    "higher_studies": "Higher Studies",
}


# ============================================================
# PLACEMENT SCHEMAS
# ============================================================

class PlacementRecord(BaseModel):
    id: str = Field(default_factory=new_id)
    student_name: str = ""
    roll_number: str = ""
    department: str = ""
    mentor_id: str = ""
    company: str
    package: float = Field(..., ge=0, description="Lakhs per annum")
    placement_date: date
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PlacementCreate(BaseModel):
    company: str = Field(..., min_length=1, max_length=200)
    package: float = Field(..., ge=0)
    placement_date: date


class PlacementUpdate(BaseModel):
    company: Optional[str] = Field(None, min_length=1, max_length=200)
    package: Optional[float] = Field(None, ge=0)
    placement_date: Optional[date] = None


# A student's placement state. Only the placed state carries a record, so
# "placed" without a record (or a record on a non-placed student) cannot be
# represented.

class EligibleState(BaseModel):
    status: Literal["eligible"] = "eligible"


class IneligibleState(BaseModel):
    status: Literal["ineligible"] = "ineligible"


class HigherStudiesState(BaseModel):
    status: Literal["higher_studies"] = "higher_studies"


class PlacedState(BaseModel):
    status: Literal["placed"] = "placed"
    record: PlacementRecord


StudentPlacement = Annotated[
    Union[EligibleState, IneligibleState, HigherStudiesState, PlacedState],
    Field(discriminator="status"),
]


def state_for(status: str) -> BaseModel:
    """Build a record-less placement state. `placed` needs a record and is rejected."""
    states = {
        "eligible": EligibleState,
        "ineligible": IneligibleState,
        "higher_studies": HigherStudiesState,
    }
    if status not in states:
        raise ValueError(f"Cannot build a '{status}' state without a placement record")
    return states[status]()


# ============================================================
# STUDENT SCHEMAS
# ============================================================

class AcademicDetails(BaseModel):
    tenth_percentage: float = Field(0, ge=0, le=100)
    twelfth_percentage: float = Field(0, ge=0, le=100)
    ug_percentage: float = Field(0, ge=0, le=10, description="10-point scale")
    cgpa: Optional[float] = Field(None, ge=0, le=10)


class Student(BaseModel):
    id: str = Field(default_factory=new_id)
    roll_number: str
    student_name: str = ""
    email: str = ""
    personal_email: Optional[str] = None
    mobile_number: str = ""
    department: str = ""
    department_id: Optional[str] = None
    section: str = "A"
    mentor_id: str = ""
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    number_of_backlogs: Optional[int] = Field(None, ge=0)
    resume_link: Optional[str] = None
    photo_url: Optional[str] = None
    academic_details: AcademicDetails = Field(default_factory=AcademicDetails)
    placement: StudentPlacement = Field(default_factory=EligibleState)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def status(self) -> str:
        return self.placement.status

    @property
    def placement_record(self) -> Optional[PlacementRecord]:
        if isinstance(self.placement, PlacedState):
            return self.placement.record
        return None

    def with_synced_record(self) -> "Student":
        """Copy of the student whose placement record repeats its current name, roll, department and mentor."""
        record = self.placement_record
        if record is None:
            return self
        synced = record.model_copy(update={
            "student_name": self.student_name,
            "roll_number": self.roll_number,
            "department": self.department,
            "mentor_id": self.mentor_id,
        })
        return self.model_copy(update={"placement": PlacedState(record=synced)})


class StudentCreate(BaseModel):
    roll_number: str = Field(..., min_length=1, max_length=50)
    student_name: str = Field(..., min_length=1, max_length=100)
    email: str = ""
    personal_email: Optional[str] = None
    mobile_number: str = ""
    department: str = Field(..., min_length=1)
    section: str = Field("A", min_length=1, max_length=5)
    mentor_id: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    number_of_backlogs: Optional[int] = Field(None, ge=0)
    resume_link: Optional[str] = None
    photo_url: Optional[str] = None
    academic_details: AcademicDetails
    status: Optional[StudentStatus] = None


class StudentUpdate(BaseModel):
    student_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    personal_email: Optional[str] = None
    mobile_number: Optional[str] = None
    department: Optional[str] = None
    section: Optional[str] = Field(None, min_length=1, max_length=5)
    mentor_id: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    number_of_backlogs: Optional[int] = Field(None, ge=0)
    resume_link: Optional[str] = None
    photo_url: Optional[str] = None
    academic_details: Optional[AcademicDetails] = None


class StatusUpdate(BaseModel):
    status: StudentStatus


# ============================================================
# DEPARTMENT SCHEMAS
# ============================================================

class Department(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    code: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    code: str = Field(..., min_length=1, max_length=10)
    description: Optional[str] = None
    is_active: bool = True


class DepartmentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    code: Optional[str] = Field(None, min_length=1, max_length=10)
    description: Optional[str] = None
    is_active: Optional[bool] = None


# ============================================================
# USER / MENTOR SCHEMAS
# ============================================================

class User(BaseModel):
    id: str = Field(default_factory=new_id)
    username: str
    role: UserRole
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class MentorCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    name: str = Field(..., min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)


class MentorUpdate(BaseModel):
    # username is intentionally absent: it cannot change after creation
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    department: Optional[str] = None
    is_active: Optional[bool] = None


class LoginRequest(BaseModel):
    username: str = Field(..., description="Username or email")
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    role: str


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=6)


# ============================================================
# FILTER SCHEMAS
# ============================================================

class PackageRange(BaseModel):
    min: float = 0
    max: float = 0


class DateRange(BaseModel):
    start: str = ""
    end: str = ""


class FilterOptions(BaseModel):
    department: str = ""
    section: str = ""
    company: str = ""
    year: str = ""
    mentor: str = ""
    status: str = ""
    package_range: PackageRange = Field(default_factory=PackageRange)
    date_range: DateRange = Field(default_factory=DateRange)
    search: str = ""


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class KPIData(BaseModel):
    total_students: int = 0
    total_placed: int = 0
    total_eligible: int = 0
    total_ineligible: int = 0
    higher_studies: int = 0
    average_package: float = 0.0
    top_company: str = ""
    top_package: float = 0.0
    placement_rate: float = 0.0


class DepartmentStats(BaseModel):
    department: str
    placed: int = 0
    eligible: int = 0
    ineligible: int = 0
    higher_studies: int = 0
    average_package: float = 0.0
    top_package: float = 0.0


class MonthlyPlacement(BaseModel):
    month: str
    placed: int
    average_package: float


class ChartData(BaseModel):
    name: str
    value: int
    package: Optional[float] = None


class MentorStats(BaseModel):
    mentor_id: str
    mentor_name: str
    total_students: int = 0
    placed: int = 0
    eligible: int = 0
    ineligible: int = 0
    higher_studies: int = 0
    placement_rate: float = 0.0


class DashboardReport(BaseModel):
    kpis: KPIData
    department_stats: List[DepartmentStats]
    monthly_placements: List[MonthlyPlacement]
    company_data: List[ChartData]
    package_distribution: List[ChartData]
    status_distribution: List[ChartData]


# ============================================================
# IMPORT SCHEMAS
# ============================================================

class ImportResponse(BaseModel):
    success: bool
    message: str
    imported: int = 0
    warnings: List[str] = []
    students: List[Student] = []


class ColumnPreviewResponse(BaseModel):
    mapping: dict
    unmapped_headers: List[str] = []


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None
