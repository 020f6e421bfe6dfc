"""
PostgreSQL repositories for departments and users.

Plain SQL through SQLAlchemy `text()`; rows come back as dicts and are
validated into the pydantic models.
"""

from typing import List, Optional

from app.db.postgres import execute_raw_sql
from app.repositories.base import DepartmentRepository, UserRepository
from app.schemas.schemas import Department, User

DEPARTMENT_COLUMNS = "id, name, code, description, is_active, created_at, updated_at"
USER_COLUMNS = "id, username, role, name, email, phone, department, is_active, created_at, updated_at"


class SqlDepartmentRepository(DepartmentRepository):

    def list_all(self) -> List[Department]:
        rows = execute_raw_sql(f"SELECT {DEPARTMENT_COLUMNS} FROM departments ORDER BY created_at, name")
        return [Department(**row) for row in rows]

    def get(self, department_id: str) -> Optional[Department]:
        rows = execute_raw_sql(
            f"SELECT {DEPARTMENT_COLUMNS} FROM departments WHERE id = :id",
            {"id": department_id}
        )
        return Department(**rows[0]) if rows else None

    def add(self, department: Department) -> Department:
        execute_raw_sql("""
            INSERT INTO departments (id, name, code, description, is_active, created_at, updated_at)
            VALUES (:id, :name, :code, :description, :is_active, :created_at, :updated_at)
        """, department.model_dump())
        return department

    def save(self, department: Department) -> Department:
        execute_raw_sql("""
            UPDATE departments
            SET name = :name, code = :code, description = :description,
                is_active = :is_active, updated_at = :updated_at
            WHERE id = :id
        """, department.model_dump())
        return department

    def delete(self, department_id: str) -> bool:
        rows = execute_raw_sql("DELETE FROM departments WHERE id = :id RETURNING id", {"id": department_id})
        return bool(rows)


class SqlUserRepository(UserRepository):

    def list_all(self) -> List[User]:
        rows = execute_raw_sql(f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at, username")
        return [User(**row) for row in rows]

    def get(self, user_id: str) -> Optional[User]:
        rows = execute_raw_sql(f"SELECT {USER_COLUMNS} FROM users WHERE id = :id", {"id": user_id})
        return User(**rows[0]) if rows else None

    def get_by_login(self, username_or_email: str) -> Optional[User]:
        rows = execute_raw_sql(f"""
            SELECT {USER_COLUMNS} FROM users
            WHERE LOWER(username) = LOWER(:login) OR LOWER(email) = LOWER(:login)
            ORDER BY created_at LIMIT 1
        """, {"login": (username_or_email or "").strip()})
        return User(**rows[0]) if rows else None

    def add(self, user: User, password_hash: str) -> User:
        params = user.model_dump(mode="json")
        params.update(password_hash=password_hash, created_at=user.created_at, updated_at=user.updated_at)
        execute_raw_sql("""
            INSERT INTO users (id, username, password_hash, role, name, email, phone,
                               department, is_active, created_at, updated_at)
            VALUES (:id, :username, :password_hash, :role, :name, :email, :phone,
                    :department, :is_active, :created_at, :updated_at)
        """, params)
        return user

    def save(self, user: User) -> User:
        # username is never updated
        params = user.model_dump(mode="json")
        params["updated_at"] = user.updated_at
        execute_raw_sql("""
            UPDATE users
            SET name = :name, email = :email, phone = :phone, department = :department,
                is_active = :is_active, updated_at = :updated_at
            WHERE id = :id
        """, params)
        return user

    def delete(self, user_id: str) -> bool:
        rows = execute_raw_sql("DELETE FROM users WHERE id = :id RETURNING id", {"id": user_id})
        return bool(rows)

    def get_password_hash(self, user_id: str) -> Optional[str]:
        rows = execute_raw_sql("SELECT password_hash FROM users WHERE id = :id", {"id": user_id})
        return rows[0]["password_hash"] if rows else None

    def set_password_hash(self, user_id: str, password_hash: str) -> bool:
        rows = execute_raw_sql("""
            UPDATE users SET password_hash = :hash, updated_at = CURRENT_TIMESTAMP
            WHERE id = :id RETURNING id
        """, {"id": user_id, "hash": password_hash})
        return bool(rows)
