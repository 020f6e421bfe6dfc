"""
Student Service - the mutating layer over the student repository.

Responsibilities:
- Create / update / delete students (admin, or the owning mentor)
- Keep status and placement record consistent: placement records are only
  added to eligible students and flip them to `placed`
- Re-run the eligibility classifier whenever academic details change
- Bulk import from spreadsheet rows (duplicates by roll number skipped)
- Provide filtered snapshots for listing, dashboards and exports

Every read goes through a fresh repository snapshot; the pure core
(filter_service, stats_service, import_service) does the actual work.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from app.core.exceptions import (
    ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError,
)
from app.repositories.base import DepartmentRepository, StudentRepository, UserRepository
from app.schemas.schemas import (
    FilterOptions, MentorStats, PlacedState, PlacementCreate, PlacementRecord, PlacementUpdate,
    Student, StudentCreate, StudentUpdate, User, state_for, utcnow,
)
from app.services import filter_service, stats_service
from app.services.eligibility_service import can_override, classify_academics
from app.services.import_service import ImportResult, import_rows

logger = logging.getLogger(__name__)


class StudentService:

    def __init__(
        self,
        students: StudentRepository,
        departments: DepartmentRepository,
        users: UserRepository,
    ):
        self.students = students
        self.departments = departments
        self.users = users

    # ============================================================
    # READS
    # ============================================================

    def active_department_names(self) -> Optional[List[str]]:
        """Active department names; None when no departments are configured."""
        departments = self.departments.list_all()
        if not departments:
            return None
        return [d.name for d in departments if d.is_active]

    def list_students(
        self,
        viewer: User,
        query: Optional[FilterOptions] = None,
        show_inactive_departments: bool = False,
        my_students_only: bool = False,
    ) -> List[Student]:
        return filter_service.filter_students(
            self.students.list_all(),
            query,
            viewer_role=viewer.role,
            viewer_id=viewer.id,
            show_inactive_departments=show_inactive_departments,
            active_department_names=self.active_department_names(),
            my_students_only=my_students_only,
        )

    def dashboard_students(
        self,
        viewer: User,
        query: Optional[FilterOptions] = None,
        show_inactive_departments: bool = False,
        my_students_only: bool = False,
    ) -> List[Student]:
        """Students the dashboard figures are computed over."""
        snapshot = self.students.list_all()
        filtered = filter_service.filter_students(
            snapshot,
            query,
            viewer_role=viewer.role,
            viewer_id=viewer.id,
            show_inactive_departments=show_inactive_departments,
            active_department_names=self.active_department_names(),
            my_students_only=my_students_only,
        )
        return filter_service.kpi_scope(snapshot, filtered, viewer)

    def export_students(
        self,
        viewer: User,
        query: Optional[FilterOptions] = None,
        show_inactive_departments: bool = False,
    ) -> List[Student]:
        return filter_service.export_scope(
            self.students.list_all(),
            query or FilterOptions(),
            viewer,
            show_inactive_departments=show_inactive_departments,
            active_department_names=self.active_department_names(),
        )

    def mentor_stats(self) -> List[MentorStats]:
        return stats_service.get_mentor_stats(self.students.list_all(), self.users.list_mentors())

    def get_student(self, student_id: str) -> Student:
        student = self.students.get(student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    # ============================================================
    # GUARDS
    # ============================================================

    @staticmethod
    def ensure_can_edit(student: Student, viewer: User) -> None:
        """Admins edit everyone; mentors only their assigned students."""
        if viewer.role == "admin":
            return
        if viewer.role == "mentor" and student.mentor_id == viewer.id:
            return
        raise PermissionDeniedError("Mentors can only manage their assigned students")

    def _ensure_unique_roll_number(self, roll_number: str, exclude_id: Optional[str] = None) -> None:
        wanted = roll_number.strip().lower()
        for student in self.students.list_all():
            if student.id != exclude_id and student.roll_number.strip().lower() == wanted:
                raise ConflictError(
                    f"Roll number '{roll_number}' already exists",
                    details={"student_id": student.id}
                )

    def _resolve_department(self, name: str):
        wanted = name.strip().lower()
        for dept in self.departments.list_all():
            if dept.name.lower() == wanted:
                return dept
        raise ValidationFailedError(f"Unknown department '{name}'")

    def _resolve_mentor(self, mentor_id: Optional[str], viewer: User) -> str:
        if viewer.role == "mentor":
            if mentor_id and mentor_id != viewer.id:
                raise PermissionDeniedError("Mentors can only assign students to themselves")
            return viewer.id
        if not mentor_id:
            raise ValidationFailedError("mentor_id is required")
        mentor = self.users.get(mentor_id)
        if not mentor or mentor.role != "mentor":
            raise ValidationFailedError(f"Unknown mentor '{mentor_id}'")
        return mentor_id

    # ============================================================
    # STUDENT CRUD
    # ============================================================

    def create_student(self, data: StudentCreate, viewer: User) -> Student:
        self._ensure_unique_roll_number(data.roll_number)
        dept = self._resolve_department(data.department)
        mentor_id = self._resolve_mentor(data.mentor_id, viewer)

        verdict = classify_academics(data.academic_details)
        requested = data.status.value if data.status else verdict
        if requested == "placed":
            raise ValidationFailedError("Record a placement to mark a student as placed")
        if not can_override(verdict, requested):
            raise ValidationFailedError(
                f"Student is {verdict} by academic criteria and cannot be marked {requested}"
            )

        student = Student(
            **data.model_dump(exclude={"status", "department", "mentor_id"}),
            department=dept.name,
            department_id=dept.id,
            mentor_id=mentor_id,
            placement=state_for(requested),
        )
        self.students.add(student)
        logger.info("Student %s (%s) created by %s", student.id, student.roll_number, viewer.username)
        return student

    def update_student(self, student_id: str, data: StudentUpdate, viewer: User) -> Student:
        student = self.get_student(student_id)
        self.ensure_can_edit(student, viewer)

        changes: Dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if changes.get("mentor_id", student.mentor_id) != student.mentor_id:
            if viewer.role != "admin":
                raise PermissionDeniedError("Only admins can reassign mentors")
            changes["mentor_id"] = self._resolve_mentor(changes["mentor_id"], viewer)
        if "department" in changes:
            dept = self._resolve_department(changes["department"])
            changes["department"] = dept.name
            changes["department_id"] = dept.id
        if "academic_details" in changes:
            changes["academic_details"] = data.academic_details

        updated = student.model_copy(update=changes)
        updated = updated.model_copy(update={
            "placement": self._reclassified_placement(updated),
            "updated_at": utcnow(),
        })
        updated = updated.with_synced_record()
        self.students.save(updated)
        logger.info("Student %s updated by %s", student_id, viewer.username)
        return updated

    @staticmethod
    def _reclassified_placement(student: Student):
        """Placement state after an edit, given the current academics."""
        verdict = classify_academics(student.academic_details)
        if student.status in ("placed", "higher_studies"):
            if verdict != "eligible":
                raise ValidationFailedError(
                    f"Updated scores make this {student.status.replace('_', ' ')} student ineligible; "
                    f"change the status first"
                )
            return student.placement
        return state_for(verdict)

    def delete_student(self, student_id: str, viewer: User) -> None:
        if viewer.role != "admin":
            raise PermissionDeniedError("Only admins can delete students")
        if not self.students.delete(student_id):
            raise NotFoundError("Student", student_id)
        logger.info("Student %s deleted by %s", student_id, viewer.username)

    def change_status(self, student_id: str, status: str, viewer: User) -> Student:
        """
        Manually move a student between eligible / higher studies.

        `placed` is reached only by recording a placement. Moving a placed
        student back to eligible drops the placement record.
        """
        student = self.get_student(student_id)
        self.ensure_can_edit(student, viewer)

        if status == "placed":
            raise ValidationFailedError("Record a placement to mark a student as placed")
        verdict = classify_academics(student.academic_details)
        if not can_override(verdict, status):
            raise ValidationFailedError(
                f"Student is {verdict} by academic criteria and cannot be marked {status}"
            )

        updated = student.model_copy(update={"placement": state_for(status), "updated_at": utcnow()})
        self.students.save(updated)
        logger.info("Student %s status %s -> %s", student_id, student.status, status)
        return updated

    # ============================================================
    # PLACEMENT RECORDS
    # ============================================================

    def add_placement(self, student_id: str, data: PlacementCreate, viewer: User) -> Student:
        student = self.get_student(student_id)
        self.ensure_can_edit(student, viewer)

        if student.placement_record is not None:
            raise ConflictError("Student already has a placement record; update it instead")
        if classify_academics(student.academic_details) != "eligible":
            raise ValidationFailedError("Ineligible students cannot be placed")

        record = PlacementRecord(
            student_name=student.student_name,
            roll_number=student.roll_number,
            department=student.department,
            mentor_id=student.mentor_id,
            company=data.company.strip(),
            package=data.package,
            placement_date=data.placement_date,
        )
        updated = student.model_copy(update={"placement": PlacedState(record=record), "updated_at": utcnow()})
        self.students.save(updated)
        logger.info("Placement recorded for %s at %s (%.2f LPA)", student.roll_number, record.company, record.package)
        return updated

    def update_placement(self, student_id: str, data: PlacementUpdate, viewer: User) -> Student:
        student = self.get_student(student_id)
        self.ensure_can_edit(student, viewer)

        record = student.placement_record
        if record is None:
            raise NotFoundError("PlacementRecord", student_id)

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "company" in changes:
            changes["company"] = changes["company"].strip()
        now = utcnow()
        record = record.model_copy(update={**changes, "updated_at": now})
        updated = student.model_copy(update={"placement": PlacedState(record=record), "updated_at": now})
        self.students.save(updated)
        logger.info("Placement record updated for %s", student.roll_number)
        return updated

    # ============================================================
    # BULK IMPORT
    # ============================================================

    def import_students(self, rows: Iterable[Dict[str, Any]], viewer: User) -> ImportResult:
        """
        Import spreadsheet rows and append them to the store.

        Mentors' imports are always assigned to the importing mentor.
        Rows whose roll number already exists (in the store or earlier in
        the same sheet) are skipped and reported.
        """
        all_departments = self.departments.list_all()
        departments = [d for d in all_departments if d.is_active] or all_departments
        if viewer.role == "mentor":
            mentors = [viewer]
        else:
            mentors = [u for u in self.users.list_mentors() if u.is_active]

        result = import_rows(rows, departments, mentors)

        seen = {s.roll_number.strip().lower() for s in self.students.list_all()}
        accepted: List[Student] = []
        for student in result.students:
            key = student.roll_number.strip().lower()
            if key in seen:
                result.warnings.append(f"Roll number '{student.roll_number}' already exists, row skipped")
                continue
            seen.add(key)
            if viewer.role == "mentor" and student.mentor_id != viewer.id:
                student = student.model_copy(update={"mentor_id": viewer.id}).with_synced_record()
            accepted.append(student)

        self.students.add_many(accepted)
        result.students = accepted
        logger.info("%s imported %d students (%d warnings)", viewer.username, len(accepted), len(result.warnings))
        return result

