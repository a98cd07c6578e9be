"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from jobportal.api.routes.auth_routes import router as auth_router
from jobportal.api.routes.job_routes import router as job_router
from jobportal.api.routes.application_routes import router as application_router
from jobportal.api.routes.profile_routes import router as profile_router
from jobportal.api.routes.recruiter_routes import router as recruiter_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(profile_router)
api_router.include_router(recruiter_router)
