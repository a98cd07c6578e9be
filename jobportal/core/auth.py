"""
Authentication Utility - JWT, password handling and access control.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification
- The access control gate: authenticate / authorize_role / authorize_ownership
- FastAPI dependencies for protected routes

Current user is passed around as a plain dict:
    {"user_id": "<ObjectId hex>", "name": ..., "email": ..., "role": "student" | "recruiter"}
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobportal.core.config import get_settings
from jobportal.core.errors import Unauthenticated, Forbidden
from jobportal.db.mongodb import get_collection, COLLECTIONS
from jobportal.services.mongo_service import parse_object_id

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor (missing header is reported as 401 by authenticate())
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
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


# ============================================================
# ACCESS CONTROL GATE
# ============================================================

def authenticate(token: Optional[str]) -> dict:
    """
    Resolve a bearer token to the identity it was issued for.

    Raises Unauthenticated when the token is missing, malformed or expired,
    or when the user it names no longer exists.
    """
    if not token:
        raise Unauthenticated("Not authorized, no token")

    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        raise Unauthenticated("Not authorized, token failed")

    user_oid = parse_object_id(payload["sub"])
    if user_oid is None:
        raise Unauthenticated("Not authorized, token failed")

    user = get_collection(COLLECTIONS["users"]).find_one(
        {"_id": user_oid},
        {"name": 1, "email": 1, "role": 1}
    )
    if not user:
        raise Unauthenticated("Not authorized, user not found")

    return {
        "user_id": str(user["_id"]),
        "name": user["name"],
        "email": user["email"],
        "role": user["role"]
    }


def authorize_role(user: dict, required_role: str) -> None:
    """Raise Forbidden unless the user has the required role."""
    if user["role"] != required_role:
        raise Forbidden(f"User role {user['role']} is not authorized to access this route")


def authorize_ownership(user: dict, owner_id) -> None:
    """Raise Forbidden unless the user is the owner of the resource."""
    if user["user_id"] != str(owner_id):
        raise Forbidden("Not authorized")


# ============================================================
# FASTAPI DEPENDENCIES
# ============================================================

def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        def route(user: dict = Depends(get_current_user)):
            return user
    """
    return authenticate(credentials.credentials if credentials else None)


def get_current_student(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require student role."""
    authorize_role(user, "student")
    return user


def get_current_recruiter(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require recruiter role."""
    authorize_role(user, "recruiter")
    return user
