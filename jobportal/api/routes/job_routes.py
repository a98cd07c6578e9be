"""
Job Routes

GET /jobs - List all jobs (any signed-in user)
POST /jobs - Create job posting (recruiter only)
GET /jobs/mine - Jobs posted by the current recruiter
GET /jobs/{job_id} - Get job details
"""

from fastapi import APIRouter, Depends
from typing import List

from jobportal.core.auth import get_current_user, get_current_recruiter
from jobportal.services.job_service import get_job_service
from jobportal.schemas.schemas import JobCreate, JobResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("", response_model=List[JobResponse])
def list_jobs(user: dict = Depends(get_current_user)):
    """List all job postings."""
    return get_job_service().list_jobs()


@router.post("", response_model=JobResponse, status_code=201)
def create_job(job: JobCreate, recruiter: dict = Depends(get_current_recruiter)):
    """Create a new job posting. Title, company and description are required."""
    return get_job_service().create_job(recruiter, job.model_dump())


@router.get("/mine", response_model=List[JobResponse])
def list_my_jobs(recruiter: dict = Depends(get_current_recruiter)):
    """Get all jobs posted by this recruiter."""
    return get_job_service().list_owned_jobs(recruiter)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, user: dict = Depends(get_current_user)):
    """Get details of a specific job."""
    return get_job_service().get_job(job_id)
