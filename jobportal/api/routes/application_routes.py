"""
Application Routes

POST /applications/apply/{job_id} - Apply to a job (student only)
GET /applications/student - My applications, with job summary (student only)
GET /applications/job/{job_id} - Applicants for my job (owning recruiter only)
PATCH /applications/status/{application_id} - Change status (owning recruiter only)
"""

from fastapi import APIRouter, Depends
from typing import List

from jobportal.core.auth import get_current_student, get_current_recruiter
from jobportal.services.application_service import get_application_service
from jobportal.schemas.schemas import (
    ApplicationResponse, StudentApplicationResponse, EnrichedApplicationResponse,
    ApplicationStatusUpdate
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("/apply/{job_id}", response_model=ApplicationResponse, status_code=201)
def apply_to_job(job_id: str, student: dict = Depends(get_current_student)):
    """Apply to a job. Cannot apply twice to the same job."""
    return get_application_service().apply(student, job_id)


@router.get("/student", response_model=List[StudentApplicationResponse])
def get_my_applications(student: dict = Depends(get_current_student)):
    """Get all job applications for current student."""
    return get_application_service().list_for_student(student)


@router.get("/job/{job_id}", response_model=List[EnrichedApplicationResponse])
def get_job_applicants(job_id: str, recruiter: dict = Depends(get_current_recruiter)):
    """Get applicants for one of this recruiter's jobs, with their profiles."""
    return get_application_service().list_for_job(recruiter, job_id)


@router.patch("/status/{application_id}", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    recruiter: dict = Depends(get_current_recruiter)
):
    """Update status of a job application (Applied, Shortlisted, Interviewing, Rejected)."""
    return get_application_service().update_status(recruiter, application_id, update.status)
