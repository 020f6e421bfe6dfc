#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify both database connections are working.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import test_postgres_connection
from app.db.mongodb import test_mongo_connection
from app.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("PLACEMENT TRACKER - CONNECTION CHECK")
    print("=" * 50)

    ok = True

    print("\n[1] PostgreSQL (users, departments)...")
    print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    PostgreSQL: CONNECTED")
    else:
        print("    PostgreSQL: FAILED")
        ok = False

    print("\n[2] MongoDB (students)...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
    else:
        print("    MongoDB: FAILED")
        ok = False

    print("\n" + "=" * 50)
    print("All connections OK" if ok else "Some connections failed")
    print("=" * 50)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
