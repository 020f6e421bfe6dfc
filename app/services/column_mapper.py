"""
Spreadsheet Column Mapper

Resolves inconsistently named spreadsheet headers ("Roll No", "REG NO",
"OFFICIAL MAIL.ID", ...) to canonical student field names.

MATCHING:
- Header and alias are compared trimmed and case-insensitively
- Exact equality only, no fuzzy matching
- Fields are resolved in declaration order; each field scans its aliases
  in priority order and takes the first one present
- A header column is claimed by at most one field. When two fields share
  an alias (e.g. "CGPA" for both ug_percentage and cgpa) the field declared
  first wins and the later field moves on to its next alias
"""

from typing import Dict, Iterable, List, Optional

# Declaration order is the claim order - do not reorder casually.
STUDENT_ALIASES: Dict[str, List[str]] = {
    "roll_number": ["Roll Number", "Roll No", "Roll No.", "Student ID", "ID", "REG NO", "Register Number", "roll_number"],
    "student_name": ["Student Name", "Name", "Full Name", "NAME", "student_name"],
    "email": ["Email", "Email Address", "Official Email", "OFFICIAL MAIL.ID", "Official Mail ID", "email"],
    "personal_email": ["Personal Email", "PERSONAL MAIL ID", "Personal Mail ID", "personal_email"],
    "mobile_number": ["Mobile Number", "Mobile", "Phone", "Phone Number", "Contact", "MOBILE NUMBER", "mobile_number"],
    "department": ["Department", "Dept", "Branch", "DEPARTMENT", "department"],
    "section": ["Section", "Class", "SECTION", "section"],
    "gender": ["Gender", "Sex", "GENDER", "gender"],
    "date_of_birth": ["Date of Birth", "DOB", "Birth Date", "D.O.B", "date_of_birth"],
    "number_of_backlogs": ["Number of Backlogs", "Backlogs", "NO OF BACKLOG", "No of Backlogs", "number_of_backlogs"],
    "resume_link": ["Resume Link", "CV Link", "RESUME LINK", "Resume", "resume_link"],
    "photo_url": ["Photo URL", "Photo Link", "Image URL", "Photo", "photo_url"],
    "mentor_id": ["Mentor ID", "Mentor", "MENTOR ID", "mentor_id"],
    "tenth_percentage": ["10th Percentage", "10th %", "10th", "Class 10", "SSC", "SSC %", "tenth_percentage"],
    "twelfth_percentage": ["12th Percentage", "12th %", "12th", "HSC", "HSC %", "Intermediate", "twelfth_percentage"],
    "ug_percentage": ["UG Percentage", "UG %", "UG", "Graduation", "ug_percentage", "CGPA", "GPA"],
    "cgpa": ["CGPA", "GPA", "cgpa"],
    "status": ["Status", "Placement Status", "STATUS", "status"],
    "company": ["Company", "Company Name", "Organization", "Employer", "COMPANY", "company"],
    "package": ["Package", "Package (LPA)", "Package LPA", "CTC", "CTC (LPA)", "Salary", "PACKAGE", "package"],
    "placement_date": ["Placement Date", "Date of Placement", "Offer Date", "PLACEMENT DATE", "placement_date"],
}


def normalize_header(header) -> str:
    """Trim and lowercase a header for comparison."""
    if header is None:
        return ""
    return str(header).strip().lower()


def resolve(
    excel_headers: Iterable,
    alias_table: Optional[Dict[str, List[str]]] = None,
) -> Dict[str, Optional[str]]:
    """
    Map each canonical field to the original header that supplies it.

    Args:
        excel_headers: Header row as read from the spreadsheet
        alias_table: canonical field -> aliases in priority order

    Returns:
        canonical field -> matched header (original spelling) or None
    """
    table = STUDENT_ALIASES if alias_table is None else alias_table

    # first spelling wins if a sheet repeats a header
    by_normalized: Dict[str, str] = {}
    for header in excel_headers:
        key = normalize_header(header)
        if key and key not in by_normalized:
            by_normalized[key] = header

    claimed = set()
    mapping: Dict[str, Optional[str]] = {}
    for field, aliases in table.items():
        mapping[field] = None
        for alias in aliases:
            key = normalize_header(alias)
            if key in by_normalized and key not in claimed:
                mapping[field] = by_normalized[key]
                claimed.add(key)
                break
    return mapping


def unmapped_headers(excel_headers: Iterable, mapping: Dict[str, Optional[str]]) -> List[str]:
    """Headers that no canonical field claimed, in sheet order."""
    used = {normalize_header(h) for h in mapping.values() if h is not None}
    return [h for h in excel_headers if normalize_header(h) not in used]


def template_headers(
    alias_table: Optional[Dict[str, List[str]]] = None,
    skip: Iterable[str] = (),
) -> List[str]:
    """Primary (first) alias of every field - the import template's header row."""
    table = STUDENT_ALIASES if alias_table is None else alias_table
    skipped = set(skip)
    return [aliases[0] for field, aliases in table.items() if aliases and field not in skipped]
