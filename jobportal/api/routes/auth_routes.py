"""
Authentication Routes

POST /auth/register - Register new user (returns token)
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, Depends

from jobportal.core.auth import get_current_user
from jobportal.services.auth_service import get_auth_service
from jobportal.schemas.schemas import (
    RegisterRequest, LoginRequest, AuthResponse, UserResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new user account.

    Students may include `skills`, recruiters may include `company`.
    The response already carries a token, no separate login needed.
    """
    return get_auth_service().register(request.root)


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    return get_auth_service().login(request.email, request.password)


@router.get("/me", response_model=UserResponse)
def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    return get_auth_service().get_user(user["user_id"])
