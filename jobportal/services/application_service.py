"""
Application Workflow Service

LIFECYCLE:
    Applied ──> Shortlisted / Interviewing / Rejected
Every application starts as Applied. After that the recruiter who owns
the job may move it to any of the four statuses, in any order; there is
no terminal state. Each change is appended to status_history.

RULES:
1. Only students apply, and at most once per job. The pre-check gives a
   friendly error; the unique (job_id, student_id) index is what holds
   under concurrent requests, and its DuplicateKeyError maps to the
   same Conflict.
2. Only the recruiter who owns the job (application -> job -> recruiter_id)
   can list its applicants or change an application's status.
3. Listings are joined with jobs / users / student profiles at read time;
   nothing from the join is written back.
"""

import logging
from datetime import datetime
from typing import List

from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import authorize_role, authorize_ownership
from jobportal.core.errors import Conflict, NotFound, ValidationError
from jobportal.schemas.schemas import ApplicationStatus
from jobportal.services.mongo_service import (
    ApplicationCollection,
    JobCollection,
    UserCollection,
    StudentProfileCollection
)

logger = logging.getLogger(__name__)

ALREADY_APPLIED = "You have already applied for this job"


def parse_status(value) -> ApplicationStatus:
    """Map a client-supplied status onto the closed set, or raise ValidationError."""
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(status.value for status in ApplicationStatus)
        raise ValidationError(
            f"Invalid status '{value}'",
            errors=[f"status must be one of: {allowed}"]
        )


def _history_entry(status: ApplicationStatus, changed_by: str) -> dict:
    return {"status": status.value, "changed_at": datetime.utcnow(), "changed_by": changed_by}


def _job_summary(job: dict) -> dict:
    """
    Job fields shown next to a student's application.

    Jobs carry no status of their own; the status the student sees is the
    application's own `status`, which stays on the application next to `job`.
    """
    return {
        "id": job["id"],
        "title": job["title"],
        "company": job["company"],
        "location": job.get("location")
    }


class ApplicationWorkflowService:

    def __init__(self):
        self.applications = ApplicationCollection()
        self.jobs = JobCollection()
        self.users = UserCollection()
        self.student_profiles = StudentProfileCollection()

    def apply(self, user: dict, job_id: str) -> dict:
        """Create an Applied application for the calling student."""
        authorize_role(user, "student")
        student_id = user["user_id"]

        job = self.jobs.get_by_id(job_id)
        if not job:
            raise NotFound("Job not found")

        if self.applications.find_for_pair(job["id"], student_id):
            logger.warning("Duplicate application by %s for job %s rejected", student_id, job["id"])
            raise Conflict(ALREADY_APPLIED)

        entry = _history_entry(ApplicationStatus.applied, student_id)
        try:
            application = self.applications.insert(
                job["id"], student_id, ApplicationStatus.applied.value, entry
            )
        except DuplicateKeyError:
            logger.warning("Concurrent duplicate application by %s for job %s rejected", student_id, job["id"])
            raise Conflict(ALREADY_APPLIED)

        logger.info("Application %s: student %s applied to job %s", application["id"], student_id, job["id"])
        return application

    def list_for_student(self, user: dict) -> List[dict]:
        """The student's applications, each with a summary of its job under 'job'."""
        authorize_role(user, "student")
        applications = self.applications.list_by_student(user["user_id"])

        job_ids = {app["job_id"] for app in applications}
        jobs = {job["id"]: job for job in self.jobs.get_many(job_ids)}

        for app in applications:
            job = jobs.get(app["job_id"])
            if job is None:
                logger.warning("Application %s references missing job %s", app["id"], app["job_id"])
            app["job"] = _job_summary(job) if job else None
        return applications

    def list_for_job(self, user: dict, job_id: str) -> List[dict]:
        """
        Applicants for one of the recruiter's jobs.

        Each application gets 'student' ({id, name, email}) and
        'student_profile' (the saved profile, or {} if there is none).
        """
        authorize_role(user, "recruiter")

        job = self.jobs.get_by_id(job_id)
        if not job:
            raise NotFound("Job not found")
        authorize_ownership(user, job["recruiter_id"])

        applications = self.applications.list_by_job(job["id"])

        # Batch the lookups: one query per collection, whatever the applicant count
        student_ids = list(dict.fromkeys(app["student_id"] for app in applications))
        students = {u["id"]: u for u in self.users.get_many(student_ids, fields=("name", "email"))}
        profiles = {p["user_id"]: p for p in self.student_profiles.get_many_by_users(student_ids)}

        for app in applications:
            app["student"] = students.get(app["student_id"])
            app["student_profile"] = profiles.get(app["student_id"], {})
        return applications

    def update_status(self, user: dict, application_id: str, new_status) -> dict:
        """Move an application to new_status. Only the owner of its job may do this."""
        authorize_role(user, "recruiter")

        application = self.applications.get_by_id(application_id)
        if not application:
            raise NotFound("Application not found")

        job = self.jobs.get_by_id(application["job_id"])
        if not job:
            # Jobs are never deleted, so this is a data integrity problem
            logger.error(
                "Integrity error: application %s references missing job %s",
                application["id"], application["job_id"]
            )
            raise NotFound("Job for this application no longer exists")

        authorize_ownership(user, job["recruiter_id"])
        status = parse_status(new_status)

        if application["status"] == status.value:
            return application

        updated = self.applications.set_status(
            application["id"], status.value, _history_entry(status, user["user_id"])
        )
        if updated is None:
            raise NotFound("Application not found")

        logger.info(
            "Application %s: %s -> %s by %s",
            application["id"], application["status"], status.value, user["user_id"]
        )
        return updated


def get_application_service() -> ApplicationWorkflowService:
    """Get application workflow service instance."""
    return ApplicationWorkflowService()
