"""
Application Routes

GET /applications/employer - Applications across the employer's jobs
PUT /applications/{application_id} - Set status (pending | accepted | rejected)
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from jobboard.core.auth import get_current_user, get_current_employer
from jobboard.services.embedded_service import EmbeddedCollectionService, get_embedded_service
from jobboard.services.job_service import JobService, get_job_service

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/employer")
async def get_employer_applications(
    employer: dict = Depends(get_current_employer),
    jobs: JobService = Depends(get_job_service),
):
    """Flattened list: every application carries job_title and job_id."""
    applications = jobs.list_employer_applications(employer["user_id"])
    return {"success": True, "applications": applications, "total": len(applications)}


@router.put("/{application_id}")
async def update_application_status(
    application_id: str,
    body: Any = Body(default=None),
    user: dict = Depends(get_current_user),
    service: EmbeddedCollectionService = Depends(get_embedded_service),
):
    """
    Update status of a job application.

    Only the employer who owns the job may do this; the job is found from
    the application id alone. The body is read as-is so that a caller who
    does not own the job is refused whatever status (or body) they sent.
    """
    status = body.get("status") if isinstance(body, dict) else None
    application = service.transition_application_status(application_id, status, user)
    return {
        "success": True,
        "message": f"Application {application['status']} successfully",
        "application": application,
    }
