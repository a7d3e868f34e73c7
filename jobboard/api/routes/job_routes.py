"""
Job Routes

GET /jobs - List active jobs (public)
GET /jobs/employer/my-jobs - Employer's own jobs with applications
GET /jobs/{job_id} - Job details (public)
POST /jobs - Create job (employer)
PUT /jobs/{job_id} - Update job (owning employer)
DELETE /jobs/{job_id} - Delete job (owning employer)
POST /jobs/{job_id}/apply - Apply to a job
PUT /jobs/{job_id}/applications/{application_id} - Edit own application
DELETE /jobs/{job_id}/applications/{application_id} - Withdraw / remove application
"""

from typing import Dict, Any

from fastapi import APIRouter, Body, Depends

from jobboard.core.auth import get_current_user, get_current_employer
from jobboard.services.job_service import JobService, get_job_service
from jobboard.schemas.schemas import JobCreate, JobUpdate, MessageResponse

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.get("")
async def list_jobs(jobs: JobService = Depends(get_job_service)):
    """Active jobs, newest first."""
    results = jobs.list_active_jobs()
    return {"success": True, "count": len(results), "jobs": results}


@router.get("/employer/my-jobs")
async def get_my_jobs(
    employer: dict = Depends(get_current_employer),
    jobs: JobService = Depends(get_job_service),
):
    """All jobs posted by the current employer, applications included."""
    results = jobs.list_employer_jobs(employer["user_id"])
    return {"success": True, "count": len(results), "jobs": results}


@router.get("/{job_id}")
async def get_job(job_id: str, jobs: JobService = Depends(get_job_service)):
    return {"success": True, "job": jobs.get_job(job_id)}


@router.post("", status_code=201)
async def create_job(
    data: JobCreate,
    employer: dict = Depends(get_current_employer),
    jobs: JobService = Depends(get_job_service),
):
    return {"success": True, "message": "Job created successfully", "job": jobs.create_job(data, employer)}


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    data: JobUpdate,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    return {"success": True, "message": "Job updated successfully", "job": jobs.update_job(job_id, data, user)}


@router.delete("/{job_id}", response_model=MessageResponse)
async def delete_job(
    job_id: str,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    jobs.delete_job(job_id, user)
    return MessageResponse(message="Job deleted successfully")


# ============================================================
# APPLICATIONS (embedded in the job)
# ============================================================

@router.post("/{job_id}/apply", status_code=201)
async def apply_to_job(
    job_id: str,
    fields: Dict[str, Any] = Body(...),
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Submit an application (resume, optional cover letter). Starts as pending."""
    job = jobs.apply(job_id, user, fields)
    return {"success": True, "message": "Application submitted", "job": job}


@router.put("/{job_id}/applications/{application_id}")
async def edit_application(
    job_id: str,
    application_id: str,
    fields: Dict[str, Any] = Body(...),
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    """Applicant edits their resume or cover letter. Status changes go through /applications."""
    job = jobs.edit_application(job_id, application_id, fields, user)
    return {"success": True, "message": "Application updated successfully", "job": job}


@router.delete("/{job_id}/applications/{application_id}")
async def withdraw_application(
    job_id: str,
    application_id: str,
    user: dict = Depends(get_current_user),
    jobs: JobService = Depends(get_job_service),
):
    job = jobs.withdraw_application(job_id, application_id, user)
    return {"success": True, "message": "Application removed successfully", "job": job}
