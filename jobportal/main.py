"""
Job Portal - Main Application

FastAPI backend with:
- MongoDB for all data (users, jobs, applications, profiles)
- JWT authentication for students and recruiters
- React frontend served from the built bundle, when present

Run: uvicorn jobportal.main:app --reload
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from jobportal.api.routes import api_router
from jobportal.core.config import get_settings
from jobportal.core.errors import PortalError, Unauthenticated
from jobportal.db.mongodb import init_mongo_indexes, test_mongo_connection
from jobportal.schemas.schemas import ErrorResponse

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, settings.frontend_dir)

# Create FastAPI app
app = FastAPI(
    title="Job Portal",
    description="""
    Job board API for students and recruiters.

    ## Features
    - **Authentication**: JWT-based auth, role chosen at registration
    - **Jobs**: Recruiters post jobs, everyone browses them
    - **Applications**: Students apply once per job; the job's recruiter moves
      applications through Applied / Shortlisted / Interviewing / Rejected
    - **Profiles**: Student profiles (with inline resume) and recruiter
      company profiles with a server-computed completion score
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# ERROR HANDLERS
# ============================================================

@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Render domain errors raised by the services."""
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.message, errors=exc.errors).model_dump(),
        headers=headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a 400 with one message per field."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"] if part != "body")
        errors.append(f"{location}: {error['msg']}" if location else error["msg"])
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(detail="Invalid input", errors=errors).model_dump()
    )


# Include API routes
app.include_router(api_router, prefix="/api")

# Serve static files (for the built frontend assets)
if os.path.exists(FRONTEND_DIR):
    app.mount("/static", StaticFiles(directory=FRONTEND_DIR), name="static")


# Startup event
@app.on_event("startup")
def startup_event():
    """
    Initialize MongoDB indexes on startup.

    The unique indexes are what stop duplicate applications, emails and
    profiles under concurrent writes, so the API refuses to start without them.
    """
    try:
        init_mongo_indexes()
    except Exception:
        logger.exception("MongoDB index initialization failed, refusing to start")
        raise


# Serve React frontend for root path
@app.get("/", tags=["Frontend"])
def serve_frontend():
    """Serve the React frontend."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"status": "healthy", "app": "Job Portal", "message": "Frontend not found. API is running."}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
