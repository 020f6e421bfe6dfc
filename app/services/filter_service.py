"""
Student Filter Service

Applies a multi-field FilterOptions query to a student collection.

Pure and order-preserving: the input list is never modified and the result
keeps the input order. Every predicate whose query value is empty (or 0 for
package bounds) matches everything. Unknown departments, mentors or
companies simply match nothing.
"""

from datetime import date
from typing import Callable, Collection, Iterable, List, Optional

from app.schemas.schemas import FilterOptions, Student, User

Predicate = Callable[[Student], bool]


def _parse_bound(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value.strip()[:10])
    except (AttributeError, ValueError):
        return None


def _contains(haystack: Optional[str], needle: str) -> bool:
    return needle in (haystack or "").lower()


def build_predicates(
    query: FilterOptions,
    viewer_role: Optional[str] = None,
    viewer_id: Optional[str] = None,
    show_inactive_departments: bool = False,
    active_department_names: Optional[Collection[str]] = None,
    my_students_only: bool = False,
) -> List[Predicate]:
    """Translate a query and viewer context into the list of active predicates."""
    predicates: List[Predicate] = []

    if not show_inactive_departments and active_department_names is not None:
        active = set(active_department_names)
        predicates.append(lambda s: s.department in active)

    if my_students_only and viewer_role == "mentor":
        predicates.append(lambda s: s.mentor_id == viewer_id)

    if query.department:
        department = query.department.lower()
        predicates.append(lambda s: _contains(s.department, department))

    if query.section:
        predicates.append(lambda s: s.section == query.section)

    if query.company:
        company = query.company.lower()
        predicates.append(
            lambda s: s.placement_record is not None and _contains(s.placement_record.company, company)
        )

    if query.year:
        year = query.year.strip()
        predicates.append(
            lambda s: s.placement_record is not None
            and f"{s.placement_record.placement_date.year:04d}" == year
        )

    if query.mentor and viewer_role == "admin":
        predicates.append(lambda s: s.mentor_id == query.mentor)

    if query.status:
        predicates.append(lambda s: s.status == query.status)

    package_min = query.package_range.min or 0
    package_max = query.package_range.max or 0
    if package_min > 0 or package_max > 0:
        upper = package_max if package_max > 0 else float("inf")
        predicates.append(
            lambda s: s.placement_record is not None
            and package_min <= s.placement_record.package <= upper
        )

    if query.date_range.start and query.date_range.end:
        # an unreadable bound leaves that side open
        start = _parse_bound(query.date_range.start) or date.min
        end = _parse_bound(query.date_range.end) or date.max
        predicates.append(
            lambda s: s.placement_record is not None
            and start <= s.placement_record.placement_date <= end
        )

    if query.search:
        term = query.search.lower()
        predicates.append(
            lambda s: _contains(s.student_name, term)
            or _contains(s.roll_number, term)
            or _contains(s.department, term)
            or (s.placement_record is not None and _contains(s.placement_record.company, term))
        )

    return predicates


def filter_students(
    students: Iterable[Student],
    query: Optional[FilterOptions] = None,
    viewer_role: Optional[str] = None,
    viewer_id: Optional[str] = None,
    show_inactive_departments: bool = False,
    active_department_names: Optional[Collection[str]] = None,
    my_students_only: bool = False,
) -> List[Student]:
    """
    Return the students matching every active predicate.

    Args:
        students: Snapshot of the student collection
        query: FilterOptions; None means no query
        viewer_role: "admin" or "mentor"; the mentor field is admin-only
        viewer_id: Viewer's user id, used for mentor scoping
        show_inactive_departments: Keep students of inactive departments
        active_department_names: Names of active departments; None disables
            the inactive-department check
        my_students_only: For mentors, keep only their assigned students
    """
    predicates = build_predicates(
        query or FilterOptions(),
        viewer_role=viewer_role,
        viewer_id=viewer_id,
        show_inactive_departments=show_inactive_departments,
        active_department_names=active_department_names,
        my_students_only=my_students_only,
    )
    return [s for s in students if all(p(s) for p in predicates)]


def mentor_students(students: Iterable[Student], mentor_id: str) -> List[Student]:
    """Students assigned to one mentor."""
    return [s for s in students if s.mentor_id == mentor_id]


def kpi_scope(
    students: List[Student],
    filtered: List[Student],
    viewer: User,
) -> List[Student]:
    """
    Students the dashboard KPIs are computed over.

    Mentors always see figures for all of their assigned students;
    admins see figures for the current filtered view.
    """
    if viewer.role == "mentor":
        return mentor_students(students, viewer.id)
    return filtered


def export_scope(
    students: List[Student],
    query: FilterOptions,
    viewer: User,
    show_inactive_departments: bool = False,
    active_department_names: Optional[Collection[str]] = None,
) -> List[Student]:
    """
    Students an export should contain.

    Mentors export only their own students with the query applied except
    for section, inactive departments included; admins export the regular
    filtered view.
    """
    if viewer.role == "mentor":
        query = (query or FilterOptions()).model_copy(update={"section": ""})
        return filter_students(
            students, query,
            viewer_role=viewer.role,
            viewer_id=viewer.id,
            show_inactive_departments=True,
            my_students_only=True,
        )
    return filter_students(
        students, query,
        viewer_role=viewer.role,
        viewer_id=viewer.id,
        show_inactive_departments=show_inactive_departments,
        active_department_names=active_department_names,
    )
