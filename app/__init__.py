"""
Placement Tracker
A placement-tracking dashboard backend for universities.

Architecture:
- PostgreSQL: Accounts (admins, mentors) and departments
- MongoDB: Student documents with embedded placement records
- Pure services: eligibility, column mapping, import, filtering, statistics
"""

__version__ = "1.0.0"
