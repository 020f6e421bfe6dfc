"""
Custom Exceptions for the Placement Tracker
===========================================

Raised by the mutating service layer (students, departments, mentors) and
rendered by the exception handler registered in `app.main`.

The pure core (eligibility, filtering, aggregation, column mapping) never
raises these - bad input there degrades to defaults or empty results.

Usage:
    from app.core.exceptions import NotFoundError

    student = repo.get(student_id)
    if not student:
        raise NotFoundError("Student", student_id)
"""

from typing import Optional, Any, Dict


class PlacementTrackerError(Exception):
    """Base exception for all placement tracker errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "detail": self.message,
            "details": self.details
        }


class NotFoundError(PlacementTrackerError):
    """Requested record does not exist"""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity} '{entity_id}' not found",
            code="NOT_FOUND",
            details={"entity": entity, "id": entity_id}
        )


class ValidationFailedError(PlacementTrackerError):
    """Business rule rejected the change"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_FAILED", details=details)


class PermissionDeniedError(PlacementTrackerError):
    """Role or ownership check failed"""

    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message, code="PERMISSION_DENIED")


class ConflictError(PlacementTrackerError):
    """Change collides with existing data (duplicates, records in use)"""

    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFLICT", details=details)


class SpreadsheetError(PlacementTrackerError):
    """Uploaded spreadsheet could not be decoded"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="SPREADSHEET_ERROR")
