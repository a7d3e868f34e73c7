"""
User Service - accounts and top-level profile fields.

Embedded profile sections go through the embedded service; this module
owns registration, login, password changes and the scalar profile fields
(including the resume and profile picture references).
"""

from typing import Optional, Dict, Any

from fastapi import Depends
from loguru import logger

from jobboard.core.auth import hash_password, verify_password
from jobboard.core.errors import ConflictError, InvalidArgumentError, NotFoundError, UnauthenticatedError
from jobboard.services.document_store import DocumentStore, get_user_store, serialize_doc, utcnow
from jobboard.services.embedded_service import strip_private
from jobboard.services.kinds import USER_SECTION_FIELDS

DASHBOARDS = {
    "jobseeker": "/jobseeker/dashboard",
    "employer": "/employer/dashboard",
    "admin": "/admin/dashboard",
}

EMPTY_PROFILE = {
    "phone": "",
    "address": "",
    "experience": "",
    "education": "",
    "skills": "",
    "company": "",
    "company_description": "",
}


def public_user(user: dict) -> dict:
    """Short form returned by register/login."""
    return serialize_doc({
        "_id": user["_id"],
        "name": user["name"],
        "email": user["email"],
        "role": user["role"],
        "profile": user.get("profile", {}),
    })


class UserService:

    def __init__(self, users: DocumentStore):
        self.users = users

    def _get_raw(self, user_id) -> dict:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def register(self, name: str, email: str, password: str, role: str = "jobseeker",
                 profile: Optional[dict] = None) -> dict:
        email = email.lower()
        if self.users.find_one({"email": email}, {"_id": 1}):
            raise InvalidArgumentError("User already exists")

        doc = {
            "name": name,
            "email": email,
            "password": hash_password(password),
            "role": role,
            "profile": {**EMPTY_PROFILE, **(profile or {})},
            "resume": None,
            "profile_pic": None,
        }
        for field in USER_SECTION_FIELDS:
            doc[field] = []

        try:
            user = self.users.insert(doc)
        except ConflictError:
            raise InvalidArgumentError("User already exists")

        logger.info(f"Registered {role} {user['_id']} <{email}>")
        return user

    def authenticate(self, email: str, password: str) -> dict:
        user = self.users.find_one({"email": email.lower()})
        if not user or not verify_password(password, user["password"]):
            logger.warning(f"Failed login for <{email}>")
            raise UnauthenticatedError("Invalid email or password")
        return user

    def get_user(self, user_id) -> dict:
        return serialize_doc(strip_private(self._get_raw(user_id)))

    def update_profile(self, user_id, fields: Dict[str, Any]) -> dict:
        """
        Set top-level profile fields.

        Falsy values (empty strings, empty lists, None) are ignored rather
        than clearing the stored value. Profile sub-fields are set one by
        one, so a partial profile leaves the other sub-fields in place.
        """
        profile = fields.get("profile") or {}
        changes = {key: value for key, value in fields.items() if value and key != "profile"}
        changes.update({f"profile.{key}": value for key, value in profile.items() if value})
        if not changes:
            raise InvalidArgumentError("No fields to update")

        if "email" in changes:
            changes["email"] = changes["email"].lower()
            other = self.users.find_one({"email": changes["email"]}, {"_id": 1})
            if other and str(other["_id"]) != str(user_id):
                raise InvalidArgumentError("Email already in use")

        user = self.users.update_fields(user_id, changes)
        if user is None:
            raise NotFoundError("User not found")

        logger.info(f"Updated profile of user {user_id}: {sorted(changes)}")
        return serialize_doc(strip_private(user))

    def change_password(self, user_id, current_password: str, new_password: str) -> None:
        user = self._get_raw(user_id)
        if not verify_password(current_password, user["password"]):
            raise InvalidArgumentError("Current password is incorrect")
        self.users.update_fields(user_id, {"password": hash_password(new_password)})
        logger.info(f"Password changed for user {user_id}")

    def set_resume(self, user_id, filename: str, url: str) -> dict:
        resume = {"filename": filename, "url": url, "uploaded_at": utcnow()}
        user = self.users.update_fields(user_id, {"resume": resume})
        if user is None:
            raise NotFoundError("User not found")
        return serialize_doc(strip_private(user))

    def clear_resume(self, user_id) -> dict:
        user = self.users.update_fields(user_id, {"resume": None})
        if user is None:
            raise NotFoundError("User not found")
        return serialize_doc(strip_private(user))

    def set_profile_pic(self, user_id, url: str) -> dict:
        user = self.users.update_fields(user_id, {"profile_pic": url})
        if user is None:
            raise NotFoundError("User not found")
        return serialize_doc(strip_private(user))


def get_user_service(users: DocumentStore = Depends(get_user_store)) -> UserService:
    """FastAPI dependency."""
    return UserService(users)
