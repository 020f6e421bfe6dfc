"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- Credential checks against the user repository

The FastAPI dependencies that resolve the current user live in
`app.api.deps`, next to the repository providers they need.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import get_settings
from app.repositories.base import UserRepository
from app.schemas.schemas import User

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def authenticate(users: UserRepository, login: str, password: str) -> Optional[User]:
    """
    Look up a user by username or email and check the password.

    Returns None on unknown login or wrong password. Inactive accounts are
    returned as-is; the caller decides how to reject them.
    """
    user = users.get_by_login(login)
    if not user:
        return None
    password_hash = users.get_password_hash(user.id)
    if not password_hash or not verify_password(password, password_hash):
        return None
    return user


def token_for(user: User) -> str:
    return create_access_token(data={"sub": user.id, "role": user.role.value})
