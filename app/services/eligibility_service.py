"""
Eligibility Service

Classifies a student's placement eligibility from academic scores.

RULE:
A student is ineligible when any of these hold:
- 10th percentage below 60
- 12th percentage below 60
- UG score below 6.0 (10-point scale)
- CGPA present and below 6.0

`placed` and `higher_studies` are later, manually or import-driven states.
They may only replace `eligible`; an ineligible verdict is never overridden.

Every function here is total: None, NaN and junk inputs count as 0.
"""

import math
from typing import Optional

MIN_TENTH = 60.0
MIN_TWELFTH = 60.0
MIN_UG = 6.0
MIN_CGPA = 6.0

ELIGIBLE = "eligible"
INELIGIBLE = "ineligible"
OVERRIDABLE_STATUSES = {"placed", "higher_studies"}


def _score(value) -> float:
    """Coerce a score to float; missing or unparseable values become 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number):
        return 0.0
    return number


def _optional_score(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def classify(tenth, twelfth, ug, cgpa=None) -> str:
    """
    Return "eligible" or "ineligible".

    `ug` and `cgpa` must already be on the 10-point scale; percentage
    inputs are normalized by the importer, not here.
    """
    if _score(tenth) < MIN_TENTH:
        return INELIGIBLE
    if _score(twelfth) < MIN_TWELFTH:
        return INELIGIBLE
    if _score(ug) < MIN_UG:
        return INELIGIBLE

    cgpa_value = _optional_score(cgpa)
    if cgpa_value is not None and cgpa_value < MIN_CGPA:
        return INELIGIBLE
    return ELIGIBLE


def classify_academics(academic_details) -> str:
    """Classify an `AcademicDetails` model."""
    return classify(
        academic_details.tenth_percentage,
        academic_details.twelfth_percentage,
        academic_details.ug_percentage,
        academic_details.cgpa,
    )


def normalize_ten_point(value) -> float:
    """
    Bring a UG/CGPA score onto the 10-point scale.

    Values above 10 are taken to be percentages and divided by 10.
    A perfect 10.0 and a raw 10% look the same; 10.0 is kept as-is.
    """
    number = _score(value)
    if number > 10:
        return number / 10
    return number


def resolve_status(verdict: str, requested: Optional[str]) -> str:
    """
    Combine a classifier verdict with an explicitly requested status.

    `placed`/`higher_studies` win only over an eligible verdict; anything
    else falls back to the verdict.
    """
    if verdict == INELIGIBLE:
        return INELIGIBLE
    if requested in OVERRIDABLE_STATUSES:
        return requested
    return verdict


def can_override(verdict: str, target_status: str) -> bool:
    """Whether a student with this verdict may be moved to `target_status`."""
    if target_status in OVERRIDABLE_STATUSES:
        return verdict == ELIGIBLE
    return target_status == verdict
