"""
Tests for spreadsheet header resolution.
"""
from app.services.column_mapper import (
    STUDENT_ALIASES, resolve, template_headers, unmapped_headers,
)


class TestResolve:

    def test_basic_headers(self):
        mapping = resolve(["Roll No", "NAME", "Email Address"])

        assert mapping["roll_number"] == "Roll No"
        assert mapping["student_name"] == "NAME"
        assert mapping["email"] == "Email Address"
        others = {k: v for k, v in mapping.items() if k not in ("roll_number", "student_name", "email")}
        assert all(v is None for v in others.values())

    def test_every_field_is_present(self):
        mapping = resolve([])
        assert list(mapping) == list(STUDENT_ALIASES)

    def test_case_and_whitespace_insensitive(self):
        mapping = resolve(["  roll number ", "official mail.id", "10TH %"])
        assert mapping["roll_number"] == "  roll number "
        assert mapping["email"] == "official mail.id"
        assert mapping["tenth_percentage"] == "10TH %"

    def test_no_fuzzy_matching(self):
        mapping = resolve(["Roll Num", "Emial"])
        assert mapping["roll_number"] is None
        assert mapping["email"] is None

    def test_alias_priority(self):
        mapping = resolve(["Student ID", "Roll Number"])
        assert mapping["roll_number"] == "Roll Number"

    def test_deterministic(self):
        headers = ["Dept", "Roll No", "Company Name", "CTC", "DOB"]
        assert resolve(headers) == resolve(list(headers))

    def test_non_string_headers(self):
        mapping = resolve([None, 2024, "Name"])
        assert mapping["student_name"] == "Name"

    def test_custom_alias_table(self):
        table = {"code": ["Code", "Dept Code"], "title": ["Title"]}
        assert resolve(["dept code"], table) == {"code": "dept code", "title": None}


class TestCollisions:

    def test_single_cgpa_column_goes_to_ug(self):
        mapping = resolve(["CGPA"])
        assert mapping["ug_percentage"] == "CGPA"
        assert mapping["cgpa"] is None

    def test_ug_and_cgpa_columns_both_mapped(self):
        mapping = resolve(["UG %", "CGPA"])
        assert mapping["ug_percentage"] == "UG %"
        assert mapping["cgpa"] == "CGPA"

    def test_later_field_moves_to_next_alias(self):
        mapping = resolve(["CGPA", "GPA"])
        assert mapping["ug_percentage"] == "CGPA"
        assert mapping["cgpa"] == "GPA"

    def test_header_claimed_once(self):
        mapping = resolve(["CGPA"])
        claimed = [v for v in mapping.values() if v == "CGPA"]
        assert len(claimed) == 1


class TestHelpers:

    def test_unmapped_headers_keep_sheet_order(self):
        headers = ["Hostel", "Name", "Blood Group"]
        assert unmapped_headers(headers, resolve(headers)) == ["Hostel", "Blood Group"]

    def test_template_headers_use_primary_alias(self):
        headers = template_headers()
        assert headers[0] == "Roll Number"
        assert "Student Name" in headers
        assert len(headers) == len(STUDENT_ALIASES)

    def test_template_headers_skip(self):
        assert "Photo URL" not in template_headers(skip=("photo_url",))
