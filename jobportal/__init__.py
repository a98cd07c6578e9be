"""
Job Portal
A job board backend for students and recruiters.

Architecture:
- MongoDB: every entity (users, jobs, applications, profiles)
- FastAPI: REST API under /api, consumed by the React frontend
"""

__version__ = "1.0.0"
