"""
Embedded Collection Service - id-addressed edits of subdocument arrays.

Every profile section (employments, educations, skills, projects,
accomplishments, certifications) and every job application is an item in
an array inside its parent document. The same four operations cover all
of them:

    append   - validate, load parent, assign _id, push, save
    patch    - validate partial fields, load parent, locate item,
               check the merged item, merge, save
    remove   - load parent, drop item if present, save
    transition_application_status
             - locate the job by application id, check the employer,
               check the status, set it, save

Rules:
- Validation runs before anything is loaded or written.
- Patch of a missing item is NotFound; remove of a missing item is a no-op.
- Each operation is one load-modify-save of a single parent document.
  Whether a concurrent save is detected depends on the store's
  optimistic flag (see document_store).
"""

from typing import Any, Dict, Optional, Union

from bson import ObjectId
from fastapi import Depends
from loguru import logger

from jobboard.core.errors import ForbiddenError, InvalidArgumentError, NotFoundError
from jobboard.schemas.schemas import ApplicationStatus
from jobboard.services.document_store import (
    DocumentStore, get_job_store, get_user_store, serialize_doc, to_object_id,
)
from jobboard.services.kinds import JOBS, KINDS, USERS, KindDescriptor, get_kind

APPLICATION_STATUSES = {status.value for status in ApplicationStatus}

# Fields of a user exposed when populating an applicant
APPLICANT_FIELDS = {"name": 1, "email": 1, "profile": 1}


def find_item(parent: dict, descriptor: KindDescriptor, item_id: Any) -> Optional[dict]:
    """Locate an item by _id in the descriptor's array, or None."""
    oid = to_object_id(item_id)
    if oid is None:
        return None
    for item in parent.get(descriptor.field) or []:
        if item.get("_id") == oid:
            return item
    return None


def strip_private(user: dict) -> dict:
    user = dict(user)
    user.pop("password", None)
    return user


class EmbeddedCollectionService:
    """
    Generic mutator for embedded arrays, parameterized by kind.

    Usage:
        service = EmbeddedCollectionService(users_store, jobs_store)
        user = service.append(user_id, "employments", {"job_title": "Engineer", "company": "Acme"})
    """

    def __init__(self, users: DocumentStore, jobs: DocumentStore):
        self.users = users
        self.jobs = jobs
        self._stores = {USERS: users, JOBS: jobs}

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _resolve(self, kind: Union[str, KindDescriptor]) -> KindDescriptor:
        return kind if isinstance(kind, KindDescriptor) else get_kind(kind)

    def _load_parent(self, store: DocumentStore, parent_id: Any) -> dict:
        parent = store.find_by_id(parent_id)
        if parent is None:
            raise NotFoundError(f"{store.label} not found")
        return parent

    def populate_applicants(self, applications: list) -> list:
        """Expand each application's applicant id into {_id, name, email, profile}."""
        ids = {app.get("applicant") for app in applications if app.get("applicant") is not None}
        if not ids:
            return [dict(app) for app in applications]
        found = self.users.find({"_id": {"$in": list(ids)}}, APPLICANT_FIELDS)
        by_id = {user["_id"]: user for user in found}
        populated = []
        for app in applications:
            app = dict(app)
            app["applicant"] = by_id.get(app.get("applicant"))
            populated.append(app)
        return populated

    def shape_parent(self, parent_type: str, parent: dict) -> dict:
        """Response form of a parent: no password on users, applicants expanded on jobs."""
        if parent_type == USERS:
            return serialize_doc(strip_private(parent))
        job = dict(parent)
        job["applications"] = self.populate_applicants(job.get("applications") or [])
        return serialize_doc(job)

    def refresh(self, parent_type: str, parent_id: Any) -> dict:
        store = self._stores[parent_type]
        return self.shape_parent(parent_type, self._load_parent(store, parent_id))

    # --------------------------------------------------------
    # Operations
    # --------------------------------------------------------

    def append(
        self,
        parent_id: Any,
        kind: Union[str, KindDescriptor],
        fields: Dict[str, Any],
        extra: Dict[str, Any] = None,
    ) -> dict:
        """
        Add a new item to the parent's array.

        Args:
            parent_id: Parent document id
            kind: Kind name or descriptor
            fields: Client-supplied item fields (validated against the kind)
            extra: Server-assigned fields merged after validation

        Returns:
            The refreshed parent, shaped for the response
        """
        descriptor = self._resolve(kind)
        item = descriptor.validate_new(fields)
        store = self._stores[descriptor.parent]
        parent = self._load_parent(store, parent_id)

        item = {"_id": ObjectId(), **item, **(extra or {})}
        parent.setdefault(descriptor.field, []).append(item)
        store.save(parent)

        logger.info(f"Added {descriptor.kind} item {item['_id']} to {store.label.lower()} {parent['_id']}")
        return self.refresh(descriptor.parent, parent["_id"])

    def patch(
        self,
        parent_id: Any,
        kind: Union[str, KindDescriptor],
        item_id: Any,
        fields: Dict[str, Any],
    ) -> dict:
        """Merge the given fields into one item; untouched fields stay as they are."""
        descriptor = self._resolve(kind)
        changes = descriptor.validate_patch(fields)
        store = self._stores[descriptor.parent]
        parent = self._load_parent(store, parent_id)

        item = find_item(parent, descriptor, item_id)
        if item is None:
            raise NotFoundError(f"{descriptor.label} not found")
        descriptor.validate_merged(item, changes)

        item.update(changes)
        store.save(parent)

        logger.info(
            f"Updated {descriptor.kind} item {item['_id']} on {store.label.lower()} {parent['_id']}: "
            f"{sorted(changes)}"
        )
        return self.refresh(descriptor.parent, parent["_id"])

    def remove(self, parent_id: Any, kind: Union[str, KindDescriptor], item_id: Any) -> dict:
        """Drop an item from the array. Removing an absent item changes nothing."""
        descriptor = self._resolve(kind)
        store = self._stores[descriptor.parent]
        parent = self._load_parent(store, parent_id)

        oid = to_object_id(item_id)
        items = parent.get(descriptor.field) or []
        remaining = [item for item in items if item.get("_id") != oid]

        if len(remaining) != len(items):
            parent[descriptor.field] = remaining
            store.save(parent)
            logger.info(f"Removed {descriptor.kind} item {oid} from {store.label.lower()} {parent['_id']}")
        else:
            logger.debug(f"No {descriptor.kind} item {item_id} on {store.label.lower()} {parent['_id']}")

        return self.refresh(descriptor.parent, parent["_id"])

    def transition_application_status(self, application_id: Any, new_status: Any, principal: dict) -> dict:
        """
        Set the status of an application, addressed by application id alone.

        Order of checks: the application must exist (NotFound), the principal
        must be the employer who owns the job (Forbidden, whatever the
        requested status), then the status must be one of pending, accepted,
        rejected (InvalidArgument; exact match).

        Returns:
            The updated application with its applicant expanded
        """
        descriptor = KINDS["applications"]
        oid = to_object_id(application_id)
        job = self.jobs.find_one({"applications._id": oid}) if oid is not None else None
        if job is None:
            raise NotFoundError("Application not found")

        if str(job.get("employer")) != str(principal["user_id"]):
            logger.warning(
                f"User {principal['user_id']} tried to update application {oid} on job {job['_id']}"
            )
            raise ForbiddenError("Not authorized to update this application")

        if not isinstance(new_status, str) or new_status not in APPLICATION_STATUSES:
            raise InvalidArgumentError("Invalid status. Must be: pending, accepted, or rejected")

        application = find_item(job, descriptor, oid)
        application["status"] = new_status
        self.jobs.save(job)

        logger.info(f"Application {oid} on job {job['_id']} set to {new_status}")
        return serialize_doc(self.populate_applicants([application])[0])


def get_embedded_service(
    users: DocumentStore = Depends(get_user_store),
    jobs: DocumentStore = Depends(get_job_store),
) -> EmbeddedCollectionService:
    """FastAPI dependency."""
    return EmbeddedCollectionService(users, jobs)
