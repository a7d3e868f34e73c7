"""
Job Service - postings, the employer query surface, and applying.

Applications live inside their job document; applying, withdrawing and
editing an application are embedded-service operations on kind
"applications" with job-specific access rules in front of them.
"""

from typing import List, Dict, Any

from fastapi import Depends
from loguru import logger
from pymongo import DESCENDING

from jobboard.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from jobboard.schemas.schemas import JobCreate, JobUpdate
from jobboard.services.document_store import (
    DocumentStore, get_job_store, get_user_store, serialize_doc, serialize_docs, to_object_id, utcnow,
)
from jobboard.services.embedded_service import EmbeddedCollectionService, find_item
from jobboard.services.kinds import JOBS, KINDS

APPLICATIONS = KINDS["applications"]

EMPLOYER_SUMMARY = {"name": 1, "email": 1}
EMPLOYER_DETAIL = {"name": 1, "email": 1, "profile": 1}


def is_owner(job: dict, principal: dict) -> bool:
    return str(job.get("employer")) == principal["user_id"]


def visible_to(job: dict, principal: dict) -> dict:
    """Shaped job as a given principal may see it: applicants only see their own application."""
    if is_owner(job, principal) or principal["role"] == "admin":
        return job
    job = dict(job)
    job["applications"] = [
        app for app in job.get("applications") or []
        if app.get("applicant") and app["applicant"].get("_id") == principal["user_id"]
    ]
    return job


def public_job(job: dict) -> dict:
    """Listing form: the application array is replaced by its size."""
    job = dict(job)
    job["application_count"] = len(job.pop("applications", None) or [])
    return job


class JobService:

    def __init__(self, users: DocumentStore, jobs: DocumentStore):
        self.users = users
        self.jobs = jobs
        self.embedded = EmbeddedCollectionService(users, jobs)

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _get_raw(self, job_id) -> dict:
        job = self.jobs.find_by_id(job_id)
        if job is None:
            raise NotFoundError("Job not found")
        return job

    def _get_owned(self, job_id, principal: dict, action: str) -> dict:
        job = self._get_raw(job_id)
        if not is_owner(job, principal):
            raise ForbiddenError(f"Not authorized to {action} this job")
        return job

    def _populate_employers(self, jobs: List[dict], projection: dict) -> List[dict]:
        ids = list({job["employer"] for job in jobs if job.get("employer") is not None})
        employers = {u["_id"]: u for u in self.users.find({"_id": {"$in": ids}}, projection)} if ids else {}
        populated = []
        for job in jobs:
            job = dict(job)
            job["employer"] = employers.get(job.get("employer"))
            populated.append(job)
        return populated

    # --------------------------------------------------------
    # Postings
    # --------------------------------------------------------

    def list_active_jobs(self) -> List[dict]:
        """Active jobs, newest first, employer name/email expanded."""
        jobs = self.jobs.find({"is_active": True}, sort=[("created_at", DESCENDING)])
        return [public_job(job) for job in serialize_docs(self._populate_employers(jobs, EMPLOYER_SUMMARY))]

    def get_job(self, job_id) -> dict:
        job = self._get_raw(job_id)
        return public_job(serialize_doc(self._populate_employers([job], EMPLOYER_DETAIL)[0]))

    def create_job(self, data: JobCreate, principal: dict) -> dict:
        doc = data.model_dump(mode="json")
        doc.update(
            employer=to_object_id(principal["user_id"]),
            company=(principal.get("profile") or {}).get("company") or principal["name"],
            is_active=True,
            applications=[],
        )
        job = self.jobs.insert(doc)
        logger.info(f"Job {job['_id']} '{job['title']}' created by employer {principal['user_id']}")
        return serialize_doc(job)

    def update_job(self, job_id, data: JobUpdate, principal: dict) -> dict:
        self._get_owned(job_id, principal, "update")
        changes = data.model_dump(mode="json", exclude_unset=True)
        if not changes:
            raise InvalidArgumentError("No fields to update")
        job = self.jobs.update_fields(job_id, changes)
        if job is None:
            raise NotFoundError("Job not found")
        logger.info(f"Job {job_id} updated: {sorted(changes)}")
        return self.embedded.shape_parent(JOBS, job)

    def delete_job(self, job_id, principal: dict) -> None:
        """Deleting a job deletes its applications with it."""
        self._get_owned(job_id, principal, "delete")
        self.jobs.delete(job_id)
        logger.info(f"Job {job_id} deleted by employer {principal['user_id']}")

    # --------------------------------------------------------
    # Employer query surface
    # --------------------------------------------------------

    def list_employer_jobs(self, employer_id: str) -> List[dict]:
        """All jobs owned by an employer, each with its applications."""
        jobs = self.jobs.find(
            {"employer": to_object_id(employer_id)}, sort=[("created_at", DESCENDING)]
        )
        return [self.embedded.shape_parent(JOBS, job) for job in jobs]

    def list_employer_applications(self, employer_id: str) -> List[Dict[str, Any]]:
        """Applications across all of an employer's jobs, tagged with job title and id."""
        jobs = self.jobs.find(
            {"employer": to_object_id(employer_id)},
            {"title": 1, "applications": 1, "employer": 1},
        )
        flattened = []
        for job in jobs:
            for app in self.embedded.populate_applicants(job.get("applications") or []):
                app["job_title"] = job.get("title")
                app["job_id"] = job["_id"]
                flattened.append(app)
        return serialize_docs(flattened)

    # --------------------------------------------------------
    # Applications
    # --------------------------------------------------------

    def apply(self, job_id, principal: dict, fields: Dict[str, Any]) -> dict:
        if principal["role"] == "employer":
            raise ForbiddenError("Employers cannot apply for jobs")

        job = self._get_raw(job_id)
        if not job.get("is_active", False):
            raise InvalidArgumentError("Job is not accepting applications")

        applicant = to_object_id(principal["user_id"])
        if any(app.get("applicant") == applicant for app in job.get("applications") or []):
            raise InvalidArgumentError("Already applied to this job")

        job = self.embedded.append(
            job["_id"], APPLICATIONS, fields,
            extra={"applicant": applicant, "status": "pending", "applied_at": utcnow()},
        )
        return visible_to(job, principal)

    def edit_application(self, job_id, application_id, fields: Dict[str, Any], principal: dict) -> dict:
        """Applicants may change their resume or cover letter."""
        job = self._get_raw(job_id)
        application = find_item(job, APPLICATIONS, application_id)
        if application is None:
            raise NotFoundError("Application not found")
        if str(application.get("applicant")) != principal["user_id"]:
            raise ForbiddenError("Not authorized to update this application")
        job = self.embedded.patch(job["_id"], APPLICATIONS, application_id, fields)
        return visible_to(job, principal)

    def withdraw_application(self, job_id, application_id, principal: dict) -> dict:
        """Applicant withdraws, or the owning employer deletes. Absent ids are a no-op."""
        job = self._get_raw(job_id)
        application = find_item(job, APPLICATIONS, application_id)
        if (application is not None and not is_owner(job, principal)
                and str(application.get("applicant")) != principal["user_id"]):
            raise ForbiddenError("Not authorized to remove this application")
        job = self.embedded.remove(job["_id"], APPLICATIONS, application_id)
        return visible_to(job, principal)


def get_job_service(
    users: DocumentStore = Depends(get_user_store),
    jobs: DocumentStore = Depends(get_job_store),
) -> JobService:
    """FastAPI dependency."""
    return JobService(users, jobs)
