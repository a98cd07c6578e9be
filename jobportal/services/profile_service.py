"""
Profile Service - student and recruiter profiles.

STUDENT PROFILES:
- Always readable: a student without a saved profile gets a default one
  (not persisted) so the UI always has something to render.
- Saved with an upsert keyed by user_id.

RECRUITER PROFILES:
- Created once, as an onboarding step. Reading before that is a 404.
- Updated only while active; DELETE is a soft delete (is_active=False).
- profile_completion is derived here, on every write, from the 12
  mandatory fields. Clients only display it.
- full_name/email are copied onto the user record after a successful
  write, so the two stay in sync. If that copy fails (email taken in a
  race) the profile write is undone before the Conflict is raised.
"""

import copy
import logging
from typing import Dict, List, Optional

from pymongo.errors import DuplicateKeyError

from jobportal.core.auth import authorize_role
from jobportal.core.errors import Conflict, Forbidden, NotFound, ValidationError
from jobportal.schemas.schemas import CompanySize, VerificationStatus
from jobportal.services.mongo_service import (
    UserCollection,
    StudentProfileCollection,
    RecruiterProfileCollection
)
from jobportal.utils.file_upload import check_resume_attachment

logger = logging.getLogger(__name__)


# ============================================================
# STUDENT PROFILE DEFAULTS
# ============================================================

DEFAULT_STUDENT_PROFILE = {
    "title": "Aspiring Professional",
    "bio": "",
    "location": "",
    "phone": "",
    "skills": [],
    "education": [],
    "projects": [],
    "certifications": [],
    "social_links": {"linkedin": "", "github": "", "portfolio": ""},
    "resume_filename": "",
    "resume_blob": ""
}

STUDENT_PROFILE_FIELDS = tuple(DEFAULT_STUDENT_PROFILE)


def default_student_profile(user_id: str) -> dict:
    profile = copy.deepcopy(DEFAULT_STUDENT_PROFILE)
    profile["user_id"] = user_id
    return profile


# ============================================================
# RECRUITER PROFILE COMPLETION
# ============================================================

# Order matters only for error messages
MANDATORY_RECRUITER_FIELDS = [
    "full_name", "email", "phone", "designation",
    "company_name", "company_website", "industry", "company_size",
    "company_location", "company_description",
    "company_email_domain", "linked_in_url"
]

RECRUITER_FIELD_LABELS = {
    "full_name": "Full Name",
    "email": "Official Email",
    "phone": "Phone Number",
    "designation": "Designation",
    "company_name": "Company Name",
    "company_website": "Company Website",
    "industry": "Industry",
    "company_size": "Company Size",
    "company_location": "Location",
    "company_description": "Company Description",
    "company_email_domain": "Company Email Domain",
    "linked_in_url": "LinkedIn URL"
}

RECRUITER_EDITABLE_FIELDS = MANDATORY_RECRUITER_FIELDS + ["registration_id"]

COMPANY_SIZES = [size.value for size in CompanySize]


def _is_filled(value) -> bool:
    return isinstance(value, str) and value.strip() != ""


def compute_profile_completion(profile: dict) -> int:
    """Percentage (0-100) of mandatory recruiter fields that are non-blank."""
    filled = sum(1 for field in MANDATORY_RECRUITER_FIELDS if _is_filled(profile.get(field)))
    return round(100 * filled / len(MANDATORY_RECRUITER_FIELDS))


def validate_recruiter_fields(fields: dict, require_all: bool) -> List[str]:
    """Return one message per invalid field (empty list when valid)."""
    errors = []
    if require_all:
        for field in MANDATORY_RECRUITER_FIELDS:
            if not _is_filled(fields.get(field)):
                errors.append(f"{RECRUITER_FIELD_LABELS[field]} is required")

    size = fields.get("company_size")
    if _is_filled(size) and size not in COMPANY_SIZES:
        errors.append(f"{size} is not a valid company size")
    return errors


# ============================================================
# SERVICE
# ============================================================

class ProfileService:

    def __init__(self):
        self.users = UserCollection()
        self.student_profiles = StudentProfileCollection()
        self.recruiter_profiles = RecruiterProfileCollection()

    # ---------------- students ----------------

    def get_student_profile(self, user: dict) -> dict:
        authorize_role(user, "student")
        profile = self.student_profiles.get_by_user(user["user_id"])
        return profile or default_student_profile(user["user_id"])

    def upsert_student_profile(self, user: dict, fields: dict) -> dict:
        authorize_role(user, "student")
        updates = {
            name: value for name, value in fields.items()
            if name in STUDENT_PROFILE_FIELDS and value is not None
        }
        if updates.get("resume_filename") or updates.get("resume_blob"):
            check_resume_attachment(updates.get("resume_filename"), updates.get("resume_blob"))

        try:
            return self.student_profiles.upsert(user["user_id"], updates, DEFAULT_STUDENT_PROFILE)
        except DuplicateKeyError:
            # A concurrent first save inserted the profile; this write now updates it
            return self.student_profiles.upsert(user["user_id"], updates, DEFAULT_STUDENT_PROFILE)

    # ---------------- recruiters ----------------

    def get_recruiter_profile(self, user: dict) -> dict:
        authorize_role(user, "recruiter")
        profile = self.recruiter_profiles.get_by_user(user["user_id"])
        if not profile:
            raise NotFound("Recruiter profile not found")
        return profile

    def create_recruiter_profile(self, user: dict, fields: dict) -> dict:
        authorize_role(user, "recruiter")
        user_id = user["user_id"]

        if self.recruiter_profiles.get_by_user(user_id):
            raise Conflict("Recruiter profile already exists")

        profile = _pick_editable(fields)
        errors = validate_recruiter_fields(profile, require_all=True)
        if errors:
            raise ValidationError(", ".join(errors), errors=errors)

        self._ensure_email_available(user_id, profile["email"])

        profile.update({
            "is_verified": False,
            "verification_status": VerificationStatus.pending.value,
            "is_active": True
        })
        profile["profile_completion"] = compute_profile_completion(profile)

        try:
            created = self.recruiter_profiles.insert(user_id, profile)
        except DuplicateKeyError:
            raise Conflict("Recruiter profile already exists")

        try:
            self._sync_identity(user_id, {"name": profile["full_name"], "email": profile["email"]})
        except Conflict:
            self.recruiter_profiles.delete(created["id"])
            raise

        logger.info("Recruiter profile created for %s (%s%% complete)", user_id, created["profile_completion"])
        return created

    def update_recruiter_profile(self, user: dict, fields: dict) -> dict:
        authorize_role(user, "recruiter")
        user_id = user["user_id"]

        profile = self.recruiter_profiles.get_by_user(user_id)
        if not profile:
            raise NotFound("Recruiter profile not found")
        if profile.get("is_active") is False:
            raise Forbidden("Profile is deactivated. Contact support.")

        changes = _pick_editable(fields)
        errors = validate_recruiter_fields(changes, require_all=False)
        if errors:
            raise ValidationError(", ".join(errors), errors=errors)

        contact = {}
        if _is_filled(changes.get("full_name")):
            contact["name"] = changes["full_name"]
        if _is_filled(changes.get("email")):
            contact["email"] = changes["email"]
            self._ensure_email_available(user_id, changes["email"])

        changes["profile_completion"] = compute_profile_completion(dict(profile, **changes))
        previous = {name: profile.get(name) for name in changes}
        saved = self.recruiter_profiles.save(profile["id"], changes)
        if saved is None:
            raise NotFound("Recruiter profile not found")

        if contact:
            try:
                self._sync_identity(user_id, contact)
            except Conflict:
                self.recruiter_profiles.save(profile["id"], previous)
                raise
        return saved

    def deactivate_recruiter_profile(self, user: dict) -> dict:
        """Soft delete. Deactivating an inactive profile is not an error."""
        authorize_role(user, "recruiter")
        profile = self.recruiter_profiles.get_by_user(user["user_id"])
        if not profile:
            raise NotFound("Recruiter profile not found")

        if profile.get("is_active") is False:
            return profile

        logger.info("Recruiter profile deactivated for %s", user["user_id"])
        return self.recruiter_profiles.save(profile["id"], {"is_active": False})

    # ---------------- helpers ----------------

    def _ensure_email_available(self, user_id: str, email: str) -> None:
        if self.users.email_taken_by_other(email, user_id):
            raise Conflict("Email is already used by another account")

    def _sync_identity(self, user_id: str, contact: Dict[str, str]) -> None:
        try:
            self.users.update_contact(user_id, contact)
        except DuplicateKeyError:
            # Another account took the email between the check and the write
            logger.warning("Identity sync for %s lost an email race", user_id)
            raise Conflict("Email is already used by another account")


def _pick_editable(fields: dict) -> Dict[str, Optional[str]]:
    return {
        name: fields[name] for name in RECRUITER_EDITABLE_FIELDS
        if fields.get(name) is not None
    }


def get_profile_service() -> ProfileService:
    """Get profile service instance."""
    return ProfileService()
