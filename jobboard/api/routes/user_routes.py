"""
User Routes

GET /users/{user_id} - Get profile (with all sections)
PUT /users/{user_id} - Update top-level profile fields
POST /users/{user_id}/upload-pic - Upload profile picture
POST /users/{user_id}/upload-resume - Upload resume (PDF/DOC/DOCX/RTF/TXT)
DELETE /users/{user_id}/resume - Remove resume reference
POST /users/{user_id}/{kind} - Add a section item
PUT /users/{user_id}/{kind}/{item_id} - Update a section item
DELETE /users/{user_id}/{kind}/{item_id} - Remove a section item

kind: employments | educations | skills | projects | accomplishments | certifications

Every route requires a bearer token for the same user (or an admin).
"""

from typing import Dict, Any

from fastapi import APIRouter, Body, Depends, File, UploadFile

from jobboard.core.auth import authorize_user
from jobboard.services.embedded_service import EmbeddedCollectionService, get_embedded_service
from jobboard.services.kinds import USERS, get_kind
from jobboard.services.user_service import UserService, get_user_service
from jobboard.schemas.schemas import UserUpdate
from jobboard.utils.file_upload import save_upload

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    principal: dict = Depends(authorize_user),
    users: UserService = Depends(get_user_service),
):
    """Get a user's profile, all embedded sections included."""
    return {"success": True, "user": users.get_user(user_id)}


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    principal: dict = Depends(authorize_user),
    users: UserService = Depends(get_user_service),
):
    """Update top-level profile fields. Empty values are ignored."""
    user = users.update_profile(user_id, data.model_dump(mode="json", exclude_unset=True))
    return {"success": True, "message": "Profile updated successfully", "user": user}


@router.post("/{user_id}/upload-pic")
async def upload_profile_pic(
    user_id: str,
    profile_pic: UploadFile = File(...),
    principal: dict = Depends(authorize_user),
    users: UserService = Depends(get_user_service),
):
    url, _ = await save_upload(profile_pic, "profile")
    user = users.set_profile_pic(user_id, url)
    return {
        "success": True,
        "message": "Profile picture uploaded successfully",
        "profile_pic": url,
        "user": user,
    }


@router.post("/{user_id}/upload-resume")
async def upload_resume(
    user_id: str,
    resume: UploadFile = File(...),
    principal: dict = Depends(authorize_user),
    users: UserService = Depends(get_user_service),
):
    url, filename = await save_upload(resume, "resume")
    user = users.set_resume(user_id, filename, url)
    return {
        "success": True,
        "message": "Resume uploaded successfully",
        "resume": user["resume"],
        "user": user,
    }


@router.delete("/{user_id}/resume")
async def delete_resume(
    user_id: str,
    principal: dict = Depends(authorize_user),
    users: UserService = Depends(get_user_service),
):
    user = users.clear_resume(user_id)
    return {"success": True, "message": "Resume deleted successfully", "user": user}


# ============================================================
# EMBEDDED SECTIONS
# ============================================================

@router.post("/{user_id}/{kind}", status_code=201)
async def add_section_item(
    user_id: str,
    kind: str,
    fields: Dict[str, Any] = Body(...),
    principal: dict = Depends(authorize_user),
    service: EmbeddedCollectionService = Depends(get_embedded_service),
):
    """Append an item to a profile section; the server assigns its _id."""
    descriptor = get_kind(kind, USERS)
    user = service.append(user_id, descriptor, fields)
    return {"success": True, "message": f"{descriptor.label} added successfully", "user": user}


@router.put("/{user_id}/{kind}/{item_id}")
async def update_section_item(
    user_id: str,
    kind: str,
    item_id: str,
    fields: Dict[str, Any] = Body(...),
    principal: dict = Depends(authorize_user),
    service: EmbeddedCollectionService = Depends(get_embedded_service),
):
    """Merge fields into one item. 404 if the user or the item is missing."""
    descriptor = get_kind(kind, USERS)
    user = service.patch(user_id, descriptor, item_id, fields)
    return {"success": True, "message": f"{descriptor.label} updated successfully", "user": user}


@router.delete("/{user_id}/{kind}/{item_id}")
async def delete_section_item(
    user_id: str,
    kind: str,
    item_id: str,
    principal: dict = Depends(authorize_user),
    service: EmbeddedCollectionService = Depends(get_embedded_service),
):
    """Remove one item. Removing an item that is already gone still succeeds."""
    descriptor = get_kind(kind, USERS)
    user = service.remove(user_id, descriptor, item_id)
    return {"success": True, "message": f"{descriptor.label} deleted successfully", "user": user}
