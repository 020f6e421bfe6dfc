"""
Placement Stats Service

Computes dashboard figures from a (usually already filtered) student list:
- KPIs (counts by status, average/top package, top company, placement rate)
- Department-wise statistics
- Monthly placement trend
- Company-wise placement counts (top 10)
- Package distribution buckets
- Status distribution
- Mentor-wise statistics (admin reporting)

All functions are pure; results are recomputed on every call.
Monetary and percentage values are rounded half away from zero to
2 decimals. Counts are always integers.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Sequence, Tuple

from app.schemas.schemas import (
    STATUS_LABELS, ChartData, DashboardReport, DepartmentStats, KPIData,
    MentorStats, MonthlyPlacement, Student, User,
)

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
                "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# (label, inclusive lower bound, exclusive upper bound) in LPA
PACKAGE_BUCKETS: List[Tuple[str, float, float]] = [
    ("0-5 LPA", 0, 5),
    ("5-10 LPA", 5, 10),
    ("10-15 LPA", 10, 15),
    ("15-25 LPA", 15, 25),
    ("25-50 LPA", 25, 50),
    ("50+ LPA", 50, float("inf")),
]

TOP_COMPANIES_LIMIT = 10


def round2(value: float) -> float:
    """Round half away from zero to 2 decimals."""
    if not math.isfinite(value):
        return value
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def placed_students(students: Iterable[Student]) -> List[Student]:
    return [s for s in students if s.placement_record is not None]


def _packages(students: Iterable[Student]) -> List[float]:
    return [s.placement_record.package for s in placed_students(students)]


def _average(values: Sequence[float]) -> float:
    return round2(sum(values) / len(values)) if values else 0.0


def _status_counts(students: Iterable[Student]) -> Dict[str, int]:
    counts = {"placed": 0, "eligible": 0, "ineligible": 0, "higher_studies": 0}
    for student in students:
        counts[student.status] = counts.get(student.status, 0) + 1
    return counts


def _rate(part: int, total: int) -> float:
    return round2(100 * part / total) if total else 0.0


# ============================================================
# KPIs
# ============================================================

def calculate_kpis(students: Sequence[Student]) -> KPIData:
    students = list(students)
    counts = _status_counts(students)
    packages = _packages(students)

    company_counts: Dict[str, int] = {}
    for student in placed_students(students):
        company = student.placement_record.company
        if company:
            company_counts[company] = company_counts.get(company, 0) + 1

    # ties go to the company encountered first
    top_company = ""
    best = 0
    for company, count in company_counts.items():
        if count > best:
            top_company, best = company, count

    return KPIData(
        total_students=len(students),
        total_placed=counts["placed"],
        total_eligible=counts["eligible"],
        total_ineligible=counts["ineligible"],
        higher_studies=counts["higher_studies"],
        average_package=_average(packages),
        top_company=top_company,
        top_package=max(packages) if packages else 0.0,
        placement_rate=_rate(counts["placed"], len(students)),
    )


# ============================================================
# BREAKDOWNS
# ============================================================

def get_department_stats(students: Iterable[Student]) -> List[DepartmentStats]:
    """Per-department counts and package figures, in first-seen order."""
    groups: Dict[str, List[Student]] = {}
    for student in students:
        groups.setdefault(student.department, []).append(student)

    stats = []
    for department, members in groups.items():
        counts = _status_counts(members)
        packages = _packages(members)
        stats.append(DepartmentStats(
            department=department,
            placed=counts["placed"],
            eligible=counts["eligible"],
            ineligible=counts["ineligible"],
            higher_studies=counts["higher_studies"],
            average_package=_average(packages),
            top_package=max(packages) if packages else 0.0,
        ))
    return stats


def get_monthly_placements(students: Iterable[Student]) -> List[MonthlyPlacement]:
    """Placements per calendar month ("Mar 2024"), oldest first."""
    months: Dict[Tuple[int, int], List[float]] = {}
    for student in placed_students(students):
        placed_on = student.placement_record.placement_date
        months.setdefault((placed_on.year, placed_on.month), []).append(student.placement_record.package)

    return [
        MonthlyPlacement(
            month=f"{MONTH_LABELS[month - 1]} {year}",
            placed=len(packages),
            average_package=_average(packages),
        )
        for (year, month), packages in sorted(months.items())
    ]


def get_company_wise_data(students: Iterable[Student]) -> List[ChartData]:
    """Top companies by placed-student count with their average package."""
    companies: Dict[str, List[float]] = {}
    for student in placed_students(students):
        record = student.placement_record
        if record.company:
            companies.setdefault(record.company, []).append(record.package)

    data = [
        ChartData(name=company, value=len(packages), package=_average(packages))
        for company, packages in companies.items()
    ]
    data.sort(key=lambda item: -item.value)
    return data[:TOP_COMPANIES_LIMIT]


def get_package_distribution(students: Iterable[Student]) -> List[ChartData]:
    """Placed-student counts per package bucket, zero buckets included."""
    packages = _packages(students)
    return [
        ChartData(name=label, value=sum(1 for p in packages if low <= p < high))
        for label, low, high in PACKAGE_BUCKETS
    ]


def get_status_distribution(students: Iterable[Student]) -> List[ChartData]:
    """Student counts per status with human-readable labels."""
    counts: Dict[str, int] = {}
    for student in students:
        counts[student.status] = counts.get(student.status, 0) + 1
    return [
        ChartData(name=STATUS_LABELS.get(status, status), value=count)
        for status, count in counts.items()
    ]


def get_mentor_stats(students: Sequence[Student], mentors: Iterable[User]) -> List[MentorStats]:
    """Per-mentor status counts over each mentor's assigned students."""
    students = list(students)
    stats = []
    for mentor in mentors:
        assigned = [s for s in students if s.mentor_id == mentor.id]
        counts = _status_counts(assigned)
        stats.append(MentorStats(
            mentor_id=mentor.id,
            mentor_name=mentor.name,
            total_students=len(assigned),
            placed=counts["placed"],
            eligible=counts["eligible"],
            ineligible=counts["ineligible"],
            higher_studies=counts["higher_studies"],
            placement_rate=_rate(counts["placed"], len(assigned)),
        ))
    return stats


def build_dashboard_report(students: Sequence[Student]) -> DashboardReport:
    students = list(students)
    return DashboardReport(
        kpis=calculate_kpis(students),
        department_stats=get_department_stats(students),
        monthly_placements=get_monthly_placements(students),
        company_data=get_company_wise_data(students),
        package_distribution=get_package_distribution(students),
        status_distribution=get_status_distribution(students),
    )
