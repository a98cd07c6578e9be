"""
Job Catalog Service

Recruiters post jobs; everyone signed in can browse them. The catalog is
append-only: a job's owner (recruiter_id) never changes and jobs are
never edited or deleted.
"""

import logging
from typing import List

from jobportal.core.auth import authorize_role
from jobportal.core.errors import ValidationError, NotFound
from jobportal.services.mongo_service import JobCollection

logger = logging.getLogger(__name__)

REQUIRED_JOB_FIELDS = ("title", "company", "description")
OPTIONAL_JOB_FIELDS = ("salary", "location")


class JobCatalogService:

    def __init__(self):
        self.jobs = JobCollection()

    def create_job(self, user: dict, fields: dict) -> dict:
        """Create a job owned by the calling recruiter."""
        authorize_role(user, "recruiter")

        missing = [name for name in REQUIRED_JOB_FIELDS if not (fields.get(name) or "").strip()]
        if missing:
            raise ValidationError(
                "Please add all required fields",
                errors=[f"{name} is required" for name in missing]
            )

        job = {name: fields[name].strip() for name in REQUIRED_JOB_FIELDS}
        for name in OPTIONAL_JOB_FIELDS:
            job[name] = fields.get(name)
        job["skills_required"] = [s.strip() for s in fields.get("skills_required") or [] if s.strip()]

        created = self.jobs.insert(user["user_id"], job)
        logger.info("Job %s created by recruiter %s", created["id"], user["user_id"])
        return created

    def list_jobs(self) -> List[dict]:
        return self.jobs.list_all()

    def list_owned_jobs(self, user: dict) -> List[dict]:
        authorize_role(user, "recruiter")
        return self.jobs.list_by_recruiter(user["user_id"])

    def get_job(self, job_id: str) -> dict:
        job = self.jobs.get_by_id(job_id)
        if not job:
            raise NotFound("Job not found")
        return job


def get_job_service() -> JobCatalogService:
    """Get job catalog service instance."""
    return JobCatalogService()
