#!/usr/bin/env python3
"""
Demo Data Seed Script

Creates the default departments, four demo mentors and 200 students with a
realistic mix of placed / eligible / higher studies / ineligible records.
The data is deterministic for a given --seed.

Run: python scripts/seed_demo_data.py            (writes to PostgreSQL + MongoDB)
     python scripts/seed_demo_data.py --dry-run  (in memory, prints the KPIs)
"""
import argparse
import random
import sys
from datetime import date, timedelta
sys.path.insert(0, '.')

from app.core.logging_config import setup_logging
from app.repositories.memory import (
    InMemoryDepartmentRepository, InMemoryStudentRepository, InMemoryUserRepository,
)
from app.schemas.schemas import (
    AcademicDetails, MentorCreate, PlacedState, PlacementRecord, Student, state_for,
)
from app.services.department_service import DepartmentService
from app.services.eligibility_service import classify_academics, normalize_ten_point
from app.services.mentor_service import MentorService
from app.services.stats_service import calculate_kpis

COMPANIES = [
    "Google", "Microsoft", "Amazon", "Apple", "Meta", "Netflix", "Tesla", "Uber",
    "Airbnb", "Spotify", "Adobe", "Salesforce", "Oracle", "IBM", "Intel", "NVIDIA",
    "Cisco", "VMware", "ServiceNow", "Palantir", "Infosys", "TCS", "Wipro",
    "Accenture", "Deloitte",
]

FIRST_NAMES = [
    "Aarav", "Vivaan", "Aditya", "Vihaan", "Arjun", "Sai", "Reyansh", "Ayaan", "Krishna", "Ishaan",
    "Ananya", "Diya", "Priya", "Kavya", "Aanya", "Ira", "Myra", "Sara", "Riya", "Aditi",
    "Rahul", "Rohan", "Amit", "Vikram", "Suresh", "Rajesh", "Kiran", "Deepak", "Manoj", "Sandeep",
    "Sneha", "Pooja", "Meera", "Nisha", "Kavita", "Sunita", "Rekha", "Geeta", "Sita", "Rita",
]

LAST_NAMES = [
    "Sharma", "Verma", "Gupta", "Singh", "Kumar", "Agarwal", "Jain", "Patel", "Shah", "Mehta",
    "Reddy", "Rao", "Nair", "Iyer", "Menon", "Pillai", "Das", "Roy", "Ghosh", "Banerjee",
]

PACKAGES = [
    3.5, 4.0, 4.5, 5.0, 5.5, 6.0, 6.5, 7.0, 7.5, 8.0, 8.5, 9.0, 9.5, 10.0,
    12.0, 15.0, 18.0, 20.0, 25.0, 30.0, 35.0, 40.0, 45.0, 50.0, 60.0, 75.0, 100.0,
]

DEMO_MENTORS = [
    MentorCreate(username="mentor1", name="Dr. Rajesh Kumar", department="Computer Science",
                 email="rajesh.kumar@university.edu"),
    MentorCreate(username="mentor2", name="Prof. Priya Sharma", department="Information Technology",
                 email="priya.sharma@university.edu"),
    MentorCreate(username="mentor3", name="Dr. Amit Patel", department="Electronics & Communication",
                 email="amit.patel@university.edu"),
    MentorCreate(username="mentor4", name="Prof. Sneha Gupta", department="Mechanical Engineering",
                 email="sneha.gupta@university.edu"),
]

PLACEMENT_START = date(2023, 1, 1)
PLACEMENT_END = date(2024, 12, 31)


def percentage(rng: random.Random, low: float, high: float) -> float:
    return round(rng.uniform(low, high), 2)


def build_students(departments, mentors, count: int = 200, seed: int = 42):
    """Generate `count` students spread across departments and mentors."""
    rng = random.Random(seed)
    year = date.today().year
    span = (PLACEMENT_END - PLACEMENT_START).days
    students = []

    for i in range(count):
        first, last = rng.choice(FIRST_NAMES), rng.choice(LAST_NAMES)
        dept = rng.choice(departments)
        mentor = rng.choice(mentors)

        academics = AcademicDetails(
            tenth_percentage=percentage(rng, 50, 95),
            twelfth_percentage=percentage(rng, 50, 95),
            ug_percentage=normalize_ten_point(percentage(rng, 55, 90)),
        )

        student = Student(
            roll_number=f"{year}{dept.code}{i + 1:03d}",
            student_name=f"{first} {last}",
            email=f"{first.lower()}.{last.lower()}@student.university.edu",
            mobile_number=f"9{rng.randint(100000000, 999999999)}",
            department=dept.name,
            department_id=dept.id,
            section=rng.choice("ABC"),
            mentor_id=mentor.id,
            number_of_backlogs=rng.choice([0, 0, 0, 1, 2]),
            academic_details=academics,
        )

        verdict = classify_academics(academics)
        roll = rng.random()
        if verdict == "ineligible":
            placement = state_for("ineligible")
        elif roll < 0.4:
            placement = PlacedState(record=PlacementRecord(
                student_name=student.student_name,
                roll_number=student.roll_number,
                department=student.department,
                mentor_id=student.mentor_id,
                company=rng.choice(COMPANIES),
                package=rng.choice(PACKAGES),
                placement_date=PLACEMENT_START + timedelta(days=rng.randint(0, span)),
            ))
        elif roll < 0.7:
            placement = state_for("eligible")
        else:
            placement = state_for("higher_studies")

        students.append(student.model_copy(update={"placement": placement}))

    return sorted(students, key=lambda s: s.roll_number)


def get_repositories(dry_run: bool):
    if dry_run:
        return InMemoryStudentRepository(), InMemoryDepartmentRepository(), InMemoryUserRepository()

    from app.db.postgres import init_postgres_tables
    from app.db.mongodb import init_mongo_indexes
    from app.repositories.mongo import MongoStudentRepository
    from app.repositories.postgres import SqlDepartmentRepository, SqlUserRepository

    init_postgres_tables()
    init_mongo_indexes()
    return MongoStudentRepository(), SqlDepartmentRepository(), SqlUserRepository()


def main():
    parser = argparse.ArgumentParser(description="Seed demo placement data")
    parser.add_argument("--count", type=int, default=200)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--dry-run", action="store_true", help="Build everything in memory only")
    args = parser.parse_args()

    setup_logging()
    students_repo, departments_repo, users_repo = get_repositories(args.dry_run)

    print("=" * 60)
    print("PLACEMENT TRACKER - DEMO DATA")
    print("=" * 60)

    DepartmentService(departments_repo, students_repo, users_repo).seed_defaults()
    departments = [d for d in departments_repo.list_all() if d.is_active]

    mentor_service = MentorService(users_repo, students_repo)
    mentor_service.ensure_admin()
    existing = {m.username.lower() for m in mentor_service.list_mentors()}
    for data in DEMO_MENTORS:
        if data.username.lower() not in existing:
            mentor_service.create_mentor(data)
    mentors = mentor_service.list_mentors(active_only=True)

    students = build_students(departments, mentors, count=args.count, seed=args.seed)
    students_repo.add_many(students)

    kpis = calculate_kpis(students)
    print(f"\nDepartments: {len(departments)}")
    print(f"Mentors:     {len(mentors)}")
    print(f"Students:    {kpis.total_students}")
    print(f"  placed {kpis.total_placed} | eligible {kpis.total_eligible} | "
          f"higher studies {kpis.higher_studies} | ineligible {kpis.total_ineligible}")
    print(f"  average package {kpis.average_package} LPA, top {kpis.top_package} LPA at {kpis.top_company}")
    print(f"  placement rate {kpis.placement_rate}%")
    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
