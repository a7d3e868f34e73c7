"""
Job Board API - Main Application

FastAPI backend with:
- MongoDB for users and jobs (profile sections and applications embedded)
- JWT authentication
- Local disk storage for uploaded resumes and profile pictures

Run: uvicorn jobboard.main:app --reload
"""

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger
from pymongo.errors import PyMongoError

from jobboard import __version__
from jobboard.api.routes import api_router
from jobboard.core.config import get_settings
from jobboard.core.errors import register_exception_handlers
from jobboard.core.logger import setup_logger
from jobboard.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
setup_logger(settings.log_level, settings.log_file)

# Create FastAPI app
app = FastAPI(
    title="Job Board API",
    description="""
    A job board backed by a document store.

    ## Features
    - **Authentication**: JWT-based auth for job seekers, employers and admins
    - **Profiles**: Employments, educations, skills, projects, accomplishments
      and certifications, each editable item by item
    - **Jobs**: Employers post and manage jobs
    - **Applications**: Job seekers apply; employers accept or reject

    Every response uses the envelope `{success, message?, ...payload}`.
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve uploaded files
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    logger.info(f"Starting Job Board API {__version__} (database '{settings.mongodb_db}')")
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning(f"MongoDB index initialization failed: {e}")


@app.get("/api/test", tags=["Health"])
async def api_test():
    return {"success": True, "message": "API is working!"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    mongo_ok = test_mongo_connection()
    return {
        "status": "healthy" if mongo_ok else "degraded",
        "mongodb": "connected" if mongo_ok else "disconnected"
    }
