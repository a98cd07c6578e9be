"""
Recruiter Profile Routes

GET /recruiter/profile - Get own profile
POST /recruiter/profile - Create profile (once)
PUT /recruiter/profile - Update profile (active profiles only)
DELETE /recruiter/profile - Deactivate profile (soft delete)
"""

from fastapi import APIRouter, Depends

from jobportal.core.auth import get_current_recruiter
from jobportal.services.profile_service import get_profile_service
from jobportal.schemas.schemas import (
    RecruiterProfileFields, RecruiterProfileResponse, MessageResponse
)

router = APIRouter(prefix="/recruiter", tags=["Recruiter Profile"])


@router.get("/profile", response_model=RecruiterProfileResponse)
def get_profile(recruiter: dict = Depends(get_current_recruiter)):
    """Get current recruiter's profile."""
    return get_profile_service().get_recruiter_profile(recruiter)


@router.post("/profile", response_model=RecruiterProfileResponse, status_code=201)
def create_profile(data: RecruiterProfileFields, recruiter: dict = Depends(get_current_recruiter)):
    """Create recruiter profile. All company and contact fields are mandatory."""
    return get_profile_service().create_recruiter_profile(recruiter, data.model_dump(exclude_unset=True))


@router.put("/profile", response_model=RecruiterProfileResponse)
def update_profile(data: RecruiterProfileFields, recruiter: dict = Depends(get_current_recruiter)):
    """Update recruiter profile. Only provided fields are changed."""
    return get_profile_service().update_recruiter_profile(recruiter, data.model_dump(exclude_unset=True))


@router.delete("/profile", response_model=MessageResponse)
def delete_profile(recruiter: dict = Depends(get_current_recruiter)):
    """Deactivate recruiter profile."""
    get_profile_service().deactivate_recruiter_profile(recruiter)
    return MessageResponse(message="Recruiter profile deactivated")
