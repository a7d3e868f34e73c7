"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- FastAPI dependencies for protected routes:
    get_current_user     - bearer token -> principal
    authorize_user       - principal must own /users/{user_id} (or be admin)
    get_current_employer - principal must be an employer (or admin)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from loguru import logger

from jobboard.core.config import get_settings
from jobboard.core.errors import ForbiddenError, UnauthenticatedError
from jobboard.services.document_store import DocumentStore, get_user_store

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor; missing credentials are reported by us as 401
bearer_scheme = HTTPBearer(auto_error=False)


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


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    users: DocumentStore = Depends(get_user_store),
) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @app.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise UnauthenticatedError("Not authorized, no token")

    payload = decode_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        logger.warning("Rejected bearer token: invalid or expired")
        raise UnauthenticatedError("Not authorized, token failed")

    user = users.find_by_id(payload["sub"], {"name": 1, "email": 1, "role": 1, "profile": 1})
    if not user:
        logger.warning(f"Rejected bearer token: user {payload['sub']} not found")
        raise UnauthenticatedError("User not found")

    return {
        "user_id": str(user["_id"]),
        "name": user.get("name"),
        "email": user.get("email"),
        "role": user.get("role"),
        "profile": user.get("profile") or {},
    }


async def authorize_user(user_id: str, user: dict = Depends(get_current_user)) -> dict:
    """Dependency - the principal must be the user in the path, or an admin."""
    if user["user_id"] != user_id and user["role"] != "admin":
        raise ForbiddenError("Not authorized to access this resource")
    return user


async def get_current_employer(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require employer role."""
    if user["role"] not in ("employer", "admin"):
        raise ForbiddenError("Employers only")
    return user
