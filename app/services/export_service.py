"""
Export Service

Flattens students into spreadsheet rows and writes them (and the import
template) as XLSX or CSV bytes with pandas.
"""

import io
from datetime import date
from typing import Dict, Iterable, List, Optional

import pandas as pd

from app.schemas.schemas import Student, User
from app.services.column_mapper import template_headers

EXPORT_COLUMNS = [
    "Roll Number", "Student Name", "Email", "Mobile Number", "Department",
    "Section", "Status", "10th Percentage", "12th Percentage",
    "UG Percentage", "CGPA", "Mentor ID", "Company", "Package (LPA)",
    "Placement Date",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"

TEMPLATE_EXAMPLES: List[Dict[str, object]] = [
    {
        "Roll Number": "CS001", "Student Name": "John Doe", "Email": "john.doe@college.edu",
        "Personal Email": "john.doe@gmail.com", "Mobile Number": "9876543210",
        "Department": "Computer Science", "Section": "A", "Gender": "Male",
        "Date of Birth": "2002-01-15", "Number of Backlogs": 0,
        "Resume Link": "https://example.com/resume.pdf", "Mentor ID": "mentor1",
        "10th Percentage": 85.5, "12th Percentage": 88.2, "UG Percentage": 75.8,
        "CGPA": 7.58, "Status": "eligible",
    },
    {
        "Roll Number": "IT014", "Student Name": "Priya Sharma", "Email": "priya.sharma@college.edu",
        "Mobile Number": "9123456780", "Department": "IT", "Section": "B", "Gender": "Female",
        "Date of Birth": "2002-06-30", "Number of Backlogs": 0, "Mentor ID": "mentor2",
        "10th Percentage": 92, "12th Percentage": 90.4, "UG Percentage": 8.9, "CGPA": 8.9,
        "Status": "placed", "Company": "Infosys", "Package": 6.5, "Placement Date": "2024-03-01",
    },
    {
        "Roll Number": "ME031", "Student Name": "Arjun Rao", "Email": "arjun.rao@college.edu",
        "Mobile Number": "9988776655", "Department": "Mechanical", "Section": "A", "Gender": "Male",
        "Number of Backlogs": 1, "Mentor ID": "mentor1",
        "10th Percentage": 78, "12th Percentage": 81, "UG Percentage": 68, "CGPA": 6.8,
        "Status": "higher studies",
    },
]


def to_export_row(student: Student) -> Dict[str, object]:
    """Flat header -> value mapping for one student."""
    record = student.placement_record
    academic = student.academic_details
    return {
        "Roll Number": student.roll_number,
        "Student Name": student.student_name,
        "Email": student.email,
        "Mobile Number": student.mobile_number,
        "Department": student.department,
        "Section": student.section,
        "Status": student.status,
        "10th Percentage": academic.tenth_percentage,
        "12th Percentage": academic.twelfth_percentage,
        "UG Percentage": academic.ug_percentage,
        "CGPA": academic.cgpa if academic.cgpa is not None else "",
        "Mentor ID": student.mentor_id,
        "Company": record.company if record else "",
        "Package (LPA)": record.package if record else "",
        "Placement Date": record.placement_date.isoformat() if record else "",
    }


def export_filename(viewer: Optional[User], fmt: str, today: Optional[date] = None) -> str:
    """student_data_<date> for admins, <Mentor_Name>_assigned_students_<date> for mentors."""
    stamp = (today or date.today()).isoformat()
    if viewer is not None and viewer.role == "mentor":
        name = "_".join(viewer.name.split()) or viewer.username
        return f"{name}_assigned_students_{stamp}.{fmt}"
    return f"student_data_{stamp}.{fmt}"


def _frame(rows: Iterable[Dict[str, object]], columns: List[str]) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=columns)


def write_xlsx(rows: Iterable[Dict[str, object]], columns: List[str], sheet_name: str = "Students") -> bytes:
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        _frame(rows, columns).to_excel(writer, sheet_name=sheet_name, index=False)
    output.seek(0)
    return output.read()


def write_csv(rows: Iterable[Dict[str, object]], columns: List[str]) -> bytes:
    return _frame(rows, columns).to_csv(index=False).encode("utf-8")


def export_students(students: Iterable[Student], fmt: str = "xlsx") -> bytes:
    """Serialize students as XLSX or CSV bytes."""
    rows = [to_export_row(s) for s in students]
    if fmt == "csv":
        return write_csv(rows, EXPORT_COLUMNS)
    return write_xlsx(rows, EXPORT_COLUMNS)


def build_template() -> bytes:
    """Import template: every importable column plus a few example rows."""
    # photos are uploaded per student, never through the sheet
    return write_xlsx(TEMPLATE_EXAMPLES, template_headers(skip=("photo_url",)), sheet_name="Students")
