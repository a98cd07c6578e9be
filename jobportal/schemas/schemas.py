"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Field names are snake_case in Python (and in MongoDB documents); on the
wire they are camelCase, which is what the React frontend sends and reads.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, RootModel, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any, Dict, Union, Literal, Annotated
from datetime import datetime
from enum import Enum


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    recruiter = "recruiter"


class ApplicationStatus(str, Enum):
    applied = "Applied"
    shortlisted = "Shortlisted"
    interviewing = "Interviewing"
    rejected = "Rejected"


class CompanySize(str, Enum):
    tiny = "1-10"
    small = "11-50"
    medium = "51-200"
    large = "200+"


class SkillLevel(str, Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    expert = "Expert"


class VerificationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegistrationBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)


class StudentRegistration(RegistrationBase):
    role: Literal["student"]
    skills: List[str] = []


class RecruiterRegistration(RegistrationBase):
    role: Literal["recruiter"]
    company: Optional[str] = None


class RegisterRequest(RootModel[Annotated[
    Union[StudentRegistration, RecruiterRegistration],
    Field(discriminator="role")
]]):
    """Registration body; `role` selects which variant (and which extra field) applies."""


class LoginRequest(CamelModel):
    email: EmailStr
    password: str


class AuthResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    token: str


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    company: Optional[str] = None
    skills: Optional[List[str]] = None
    created_at: Optional[datetime] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    # Required fields are checked by the job service so the error
    # lists every missing field in one response.
    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    salary: Optional[str] = None
    location: Optional[str] = None
    skills_required: List[str] = []

    @field_validator("salary", mode="before")
    @classmethod
    def salary_as_text(cls, value):
        if isinstance(value, (int, float)):
            return str(value)
        return value


class JobResponse(CamelModel):
    id: str
    title: str
    company: str
    description: str
    salary: Optional[str] = None
    location: Optional[str] = None
    skills_required: List[str] = []
    recruiter_id: str
    created_at: datetime


class JobSummary(CamelModel):
    id: str
    title: str
    company: str
    location: Optional[str] = None


# ============================================================
# STUDENT PROFILE SCHEMAS
# ============================================================

class SkillItem(CamelModel):
    name: str = ""
    level: SkillLevel = SkillLevel.intermediate


class EducationItem(CamelModel):
    degree: str = ""
    school: str = ""
    year: str = ""
    grade: str = ""


class ProjectItem(CamelModel):
    title: str = ""
    desc: str = ""
    link: str = ""


class CertificationItem(CamelModel):
    title: str = ""
    issuer: str = ""
    year: str = ""


class SocialLinks(CamelModel):
    linkedin: str = ""
    github: str = ""
    portfolio: str = ""


class StudentProfileUpdate(CamelModel):
    title: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    skills: Optional[List[SkillItem]] = None
    education: Optional[List[EducationItem]] = None
    projects: Optional[List[ProjectItem]] = None
    certifications: Optional[List[CertificationItem]] = None
    social_links: Optional[SocialLinks] = None
    resume_filename: Optional[str] = None
    resume_blob: Optional[str] = None


class StudentProfileResponse(CamelModel):
    id: Optional[str] = None  # None for the unsaved default profile
    user_id: str
    title: str = ""
    bio: str = ""
    location: str = ""
    phone: str = ""
    skills: List[SkillItem] = []
    education: List[EducationItem] = []
    projects: List[ProjectItem] = []
    certifications: List[CertificationItem] = []
    social_links: SocialLinks = SocialLinks()
    resume_filename: str = ""
    resume_blob: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# RECRUITER PROFILE SCHEMAS
# ============================================================

class RecruiterProfileFields(CamelModel):
    """Allowlisted recruiter profile fields. Anything else in the body is ignored."""
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    designation: Optional[str] = None
    company_name: Optional[str] = None
    company_website: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[str] = None
    company_location: Optional[str] = None
    company_description: Optional[str] = None
    company_email_domain: Optional[str] = None
    linked_in_url: Optional[str] = None
    registration_id: Optional[str] = None


class RecruiterProfileResponse(RecruiterProfileFields):
    id: str
    user_id: str
    is_verified: bool = False
    verification_status: VerificationStatus = VerificationStatus.pending
    profile_completion: int = 0
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(CamelModel):
    # Plain str: the workflow rejects unknown values itself
    status: str


class StatusChange(CamelModel):
    status: ApplicationStatus
    changed_at: datetime
    changed_by: str


class ApplicationResponse(CamelModel):
    id: str
    job_id: str
    student_id: str
    status: ApplicationStatus
    applied_at: datetime
    updated_at: Optional[datetime] = None
    status_history: List[StatusChange] = []


class StudentApplicationResponse(ApplicationResponse):
    job: Optional[JobSummary] = None


class ApplicantSummary(CamelModel):
    id: str
    name: str
    email: str


class EnrichedApplicationResponse(ApplicationResponse):
    student: Optional[ApplicantSummary] = None
    # {} when the applicant never saved a profile
    student_profile: Union[StudentProfileResponse, Dict[str, Any]] = Field(
        default_factory=dict, union_mode="left_to_right"
    )


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    errors: List[str] = []
