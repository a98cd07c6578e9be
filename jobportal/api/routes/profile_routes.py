"""
Student Profile Routes

GET /profile - Get own profile (default profile if never saved)
PUT /profile - Create or update own profile
"""

from fastapi import APIRouter, Depends

from jobportal.core.auth import get_current_student
from jobportal.services.profile_service import get_profile_service
from jobportal.schemas.schemas import StudentProfileUpdate, StudentProfileResponse

router = APIRouter(prefix="/profile", tags=["Student Profile"])


@router.get("", response_model=StudentProfileResponse)
def get_profile(student: dict = Depends(get_current_student)):
    """Get current student's profile."""
    return get_profile_service().get_student_profile(student)


@router.put("", response_model=StudentProfileResponse)
def update_profile(data: StudentProfileUpdate, student: dict = Depends(get_current_student)):
    """Update student profile. Only provided fields are changed; created on first save."""
    return get_profile_service().upsert_student_profile(student, data.model_dump(mode="json", exclude_unset=True))
