"""
Record Import Service

Turns raw spreadsheet rows (header -> cell value dicts) into validated
Student models.

SAFE IMPORT:
A bad cell never aborts the import. Unparseable numbers become 0,
unparseable dates become absent, missing text becomes "", and every
substitution worth knowing about is reported in `ImportResult.warnings`.

PIPELINE (per row):
1. Column mapper resolves headers to canonical fields (once per batch)
2. Defaults: auto roll number, section "A", first mentor
3. Department name normalized against the configured departments
4. Scores parsed; UG/CGPA rescaled from percentages when > 10
5. Dates from free-form strings, datetimes or spreadsheet serials
6. Status from the eligibility classifier, explicit placed/higher studies
   honoured only for eligible students
7. Placed rows with company + package get a PlacementRecord

Photo URLs are never imported - photos are uploaded per student.
"""

import logging
import math
import numbers
import re
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from dateutil import parser as date_parser

from app.schemas.schemas import (
    AcademicDetails, Department, Gender, PlacedState, PlacementRecord,
    Student, User, state_for,
)
from app.services import column_mapper
from app.services.eligibility_service import (
    classify, normalize_ten_point, resolve_status,
)

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "A"
UNKNOWN_DEPARTMENT = "Unknown"

# Common spellings of department names, keyed by the standard name.
DEPARTMENT_VARIANTS: Dict[str, List[str]] = {
    "Computer Science": ["cs", "cse", "computer science", "computer science and engineering", "comp sci"],
    "Electronics and Communication": ["ece", "ec", "electronics", "electronics and communication",
                                      "electronics and communication engineering", "electronics & communication"],
    "Mechanical Engineering": ["me", "mech", "mechanical", "mechanical engineering"],
    "Civil Engineering": ["ce", "civil", "civil engineering"],
    "Electrical Engineering": ["ee", "eee", "electrical", "electrical engineering"],
    "Information Technology": ["it", "info tech", "information technology"],
    "Chemical Engineering": ["che", "ch", "chemical", "chemical engineering"],
    "Biotechnology": ["bt", "biotech", "biotechnology"],
    "Aerospace Engineering": ["ae", "aero", "aerospace", "aerospace engineering"],
    "Automobile Engineering": ["auto", "automobile", "automobile engineering"],
}

STATUS_ALIASES = {
    "placed": "placed",
    "higher_studies": "higher_studies",
    "higher studies": "higher_studies",
    "higher-studies": "higher_studies",
}

GENDER_ALIASES = {
    "male": Gender.male,
    "m": Gender.male,
    "female": Gender.female,
    "f": Gender.female,
    "other": Gender.other,
    "o": Gender.other,
}

# Spreadsheet (1900 date system) day zero. Serials before the fictitious
# 1900-02-29 (serial 60) are off by one from this epoch.
SPREADSHEET_EPOCH = date(1899, 12, 30)
# "2024-03-01" and "2024/03/01" are year-first; everything else is read day-first.
YEAR_FIRST = re.compile(r"^\d{4}\D")


@dataclass
class ImportResult:
    students: List[Student] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.students)


# ============================================================
# CELL PARSING
# ============================================================

def is_blank(value: Any) -> bool:
    """None, NaN/NaT and whitespace-only strings are blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return value != value  # NaN, NaT
    except (TypeError, ValueError):
        return False


def parse_text(value: Any) -> str:
    if is_blank(value):
        return ""
    # pandas reads phone numbers and ids as floats: 9876543210.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_number(value: Any) -> float:
    """Parse a numeric cell; anything unparseable is 0."""
    if is_blank(value) or isinstance(value, bool):
        return 0.0
    if isinstance(value, numbers.Real):
        number = float(value)
    else:
        cleaned = str(value).strip().replace("%", "").replace(",", "")
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def serial_to_date(serial: float) -> Optional[date]:
    """Convert a spreadsheet day serial to a date (None if out of range)."""
    days = int(math.floor(serial))
    if days <= 0:
        return None
    try:
        if days < 60:
            return SPREADSHEET_EPOCH + timedelta(days=days + 1)
        return SPREADSHEET_EPOCH + timedelta(days=days)
    except OverflowError:
        return None


def parse_date(value: Any) -> Optional[date]:
    """
    Date/datetime (incl. pandas Timestamp), spreadsheet serials or strings
    such as "2024-03-01", "01/03/2024", "01-Mar-2024" and "March 1, 2024".
    A missing day of month means the 1st.
    """
    if is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, numbers.Real):
        return serial_to_date(float(value))

    text = str(value).strip()
    try:
        return serial_to_date(float(text))
    except ValueError:
        pass
    year_first = bool(YEAR_FIRST.match(text))
    try:
        parsed = date_parser.parse(
            text,
            dayfirst=not year_first,
            yearfirst=year_first,
            default=datetime(date.today().year, 1, 1),
        )
    except (ValueError, OverflowError):
        return None
    return parsed.date()


def parse_gender(value: Any) -> Optional[Gender]:
    return GENDER_ALIASES.get(parse_text(value).lower())


def parse_status(value: Any) -> Optional[str]:
    return STATUS_ALIASES.get(parse_text(value).lower())


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ============================================================
# DEPARTMENT NAME NORMALIZER
# ============================================================

def _department_key(name: str) -> str:
    """Lowercase, "&" spelled "and", single spaces."""
    return " ".join((name or "").lower().replace("&", " and ").split())


def match_department(raw_name: str, departments: Sequence[Department]) -> Optional[Department]:
    """
    Find the configured department an imported name refers to.

    Order: exact (case-insensitive) name or code, known variants, substring
    either way, then the first department. None only if none configured.
    """
    if not departments:
        return None

    wanted = _department_key(raw_name)
    if not wanted:
        return departments[0]

    for dept in departments:
        if _department_key(dept.name) == wanted or dept.code.lower() == wanted:
            return dept

    for standard_name, variants in DEPARTMENT_VARIANTS.items():
        if wanted in (_department_key(v) for v in variants):
            standard = _department_key(standard_name)
            for dept in departments:
                name = _department_key(dept.name)
                if standard in name or name in standard:
                    return dept

    for dept in departments:
        name = _department_key(dept.name)
        if wanted in name or name in wanted:
            return dept

    return departments[0]


def normalize_department(raw_name: str, departments: Sequence[Department]) -> str:
    """Department name to store for an imported value."""
    dept = match_department(raw_name, departments)
    if dept:
        return dept.name
    return (raw_name or "").strip() or UNKNOWN_DEPARTMENT


def _resolve_mentor(raw: str, mentors: Sequence[User]) -> Optional[str]:
    if not raw:
        return None
    for mentor in mentors:
        if mentor.id == raw:
            return mentor.id
    lowered = raw.lower()
    for mentor in mentors:
        if mentor.username.lower() == lowered:
            return mentor.id
    return None


# ============================================================
# IMPORTER
# ============================================================

class RecordImporter:
    """
    Converts one batch of rows into students.

    One instance per upload: the column mapping and the auto roll number
    stamp are fixed for the batch.
    """

    def __init__(
        self,
        available_departments: Sequence[Department] = (),
        available_mentors: Sequence[User] = (),
        today: Optional[date] = None,
    ):
        self.departments = list(available_departments)
        self.mentors = list(available_mentors)
        self.today = today or date.today()
        self.batch_stamp = int(time.time() * 1000)

    def import_rows(self, rows: Iterable[Dict[str, Any]]) -> ImportResult:
        rows = list(rows)
        result = ImportResult()
        if not rows:
            return result

        headers: List[str] = []
        for row in rows:
            for header in row.keys():
                if header not in headers:
                    headers.append(header)
        mapping = column_mapper.resolve(headers)

        if mapping.get("photo_url"):
            result.warnings.append(
                f"Column '{mapping['photo_url']}' ignored: photos must be uploaded individually"
            )

        for index, row in enumerate(rows):
            try:
                student = self._build_student(index, row, mapping, result.warnings)
            except Exception as e:
                # a single row must never abort the batch
                logger.warning("Row %d unusable, importing blank record: %s", index + 2, e, exc_info=True)
                result.warnings.append(f"Row {index + 2}: could not be read ({e}); blank record imported")
                student = Student(
                    roll_number=self._auto_roll_number(index),
                    department=normalize_department("", self.departments),
                    mentor_id=self.mentors[0].id if self.mentors else "",
                    placement=state_for("ineligible"),
                )
            result.students.append(student)

        logger.info("Imported %d student rows with %d warnings", result.count, len(result.warnings))
        return result

    def _auto_roll_number(self, index: int) -> str:
        return f"IMP{self.batch_stamp}{index + 1:04d}"

    def _build_student(self, index: int, row: Dict[str, Any], mapping: Dict[str, Optional[str]],
                       warnings: List[str]) -> Student:
        line = index + 2  # header is spreadsheet row 1

        def cell(field_name: str) -> Any:
            header = mapping.get(field_name)
            return row.get(header) if header is not None else None

        roll_number = parse_text(cell("roll_number"))
        if not roll_number:
            roll_number = self._auto_roll_number(index)
            warnings.append(f"Row {line}: missing roll number, generated {roll_number}")

        raw_dept = parse_text(cell("department"))
        dept = match_department(raw_dept, self.departments)
        department = dept.name if dept else (raw_dept or UNKNOWN_DEPARTMENT)
        if raw_dept and department.lower() != raw_dept.lower():
            logger.debug("Row %d: department '%s' mapped to '%s'", line, raw_dept, department)

        mentor_raw = parse_text(cell("mentor_id"))
        mentor_id = _resolve_mentor(mentor_raw, self.mentors)
        if mentor_id is None:
            if mentor_raw:
                mentor_id = mentor_raw
                warnings.append(f"Row {line}: mentor '{mentor_raw}' is not a known mentor")
            else:
                mentor_id = self.mentors[0].id if self.mentors else ""

        tenth = clamp(parse_number(cell("tenth_percentage")), 0, 100)
        twelfth = clamp(parse_number(cell("twelfth_percentage")), 0, 100)
        ug = clamp(normalize_ten_point(parse_number(cell("ug_percentage"))), 0, 10)
        raw_cgpa = cell("cgpa")
        cgpa = None if is_blank(raw_cgpa) else clamp(normalize_ten_point(parse_number(raw_cgpa)), 0, 10)

        backlogs_cell = cell("number_of_backlogs")
        backlogs = None if is_blank(backlogs_cell) else max(0, int(parse_number(backlogs_cell)))

        dob_cell = cell("date_of_birth")
        date_of_birth = parse_date(dob_cell)
        if date_of_birth is None and not is_blank(dob_cell):
            warnings.append(f"Row {line}: unreadable date of birth '{dob_cell}'")

        academic = AcademicDetails(
            tenth_percentage=tenth,
            twelfth_percentage=twelfth,
            ug_percentage=ug,
            cgpa=cgpa,
        )
        verdict = classify(tenth, twelfth, ug, cgpa)
        requested = parse_status(cell("status"))
        status = resolve_status(verdict, requested)
        if requested and status != requested:
            warnings.append(f"Row {line}: status '{requested}' overridden, student is {status}")

        student_name = parse_text(cell("student_name"))
        placement = None
        if status == "placed":
            company = parse_text(cell("company"))
            package = parse_number(cell("package"))
            if company and package > 0:
                date_cell = cell("placement_date")
                placement_date = parse_date(date_cell)
                if placement_date is None:
                    if not is_blank(date_cell):
                        warnings.append(f"Row {line}: unreadable placement date '{date_cell}', using today")
                    placement_date = self.today
                placement = PlacedState(record=PlacementRecord(
                    student_name=student_name,
                    roll_number=roll_number,
                    department=department,
                    mentor_id=mentor_id,
                    company=company,
                    package=package,
                    placement_date=placement_date,
                ))
            else:
                warnings.append(f"Row {line}: marked placed without company and package, kept as eligible")
                status = "eligible"
        if placement is None:
            placement = state_for(status)

        return Student(
            roll_number=roll_number,
            student_name=student_name,
            email=parse_text(cell("email")),
            personal_email=parse_text(cell("personal_email")) or None,
            mobile_number=parse_text(cell("mobile_number")),
            department=department,
            department_id=dept.id if dept else None,
            section=parse_text(cell("section")) or DEFAULT_SECTION,
            mentor_id=mentor_id,
            gender=parse_gender(cell("gender")),
            date_of_birth=date_of_birth,
            number_of_backlogs=backlogs,
            resume_link=parse_text(cell("resume_link")) or None,
            photo_url=None,
            academic_details=academic,
            placement=placement,
        )


def import_rows(
    rows: Iterable[Dict[str, Any]],
    available_departments: Sequence[Department] = (),
    available_mentors: Sequence[User] = (),
    today: Optional[date] = None,
) -> ImportResult:
    """Import a batch of spreadsheet rows. Never raises for bad rows."""
    importer = RecordImporter(available_departments, available_mentors, today=today)
    return importer.import_rows(rows)
