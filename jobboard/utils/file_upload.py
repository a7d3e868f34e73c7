"""
File Upload Utility - Store profile pictures and resumes on disk.

Supported uploads:
- Profile pictures: any image/* content type
- Resumes: PDF, DOC, DOCX, RTF, TXT

Files land under settings.upload_dir and are served from /uploads.
Max file size: settings.max_upload_mb
"""

import secrets
import time
from pathlib import Path
from typing import Tuple
from fastapi import UploadFile, HTTPException
from loguru import logger

from jobboard.core.config import get_settings

settings = get_settings()

RESUME_CONTENT_TYPES = {
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/rtf',
    'text/plain',
}
RESUME_EXTENSIONS = {'.pdf', '.doc', '.docx', '.rtf', '.txt'}

UPLOAD_URL_PREFIX = "/uploads"


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def unique_filename(prefix: str, original: str) -> str:
    """e.g. resume-1718000000000-3f9a1c2b.pdf"""
    stamp = int(time.time() * 1000)
    return f"{prefix}-{stamp}-{secrets.token_hex(4)}{get_file_extension(original)}"


def validate_profile_pic(file: UploadFile) -> None:
    if not (file.content_type or '').startswith('image/'):
        raise HTTPException(status_code=400, detail="Only image files are allowed for profile pictures")


def validate_resume(file: UploadFile) -> None:
    ext = get_file_extension(file.filename)
    if file.content_type not in RESUME_CONTENT_TYPES or ext not in RESUME_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Only PDF, DOC, DOCX, RTF, and TXT files are allowed for resumes"
        )


async def save_upload(file: UploadFile, category: str) -> Tuple[str, str]:
    """
    Validate and store an uploaded file.

    Args:
        file: FastAPI UploadFile
        category: "profile" or "resume"

    Returns:
        Tuple of (public_url, original_filename)

    Raises:
        HTTPException on validation errors
    """
    if not file or not file.filename:
        raise HTTPException(status_code=400, detail="Please upload a file")

    if category == "resume":
        validate_resume(file)
        subdir, prefix = "resumes", "resume"
    else:
        validate_profile_pic(file)
        subdir, prefix = "", "profile"

    content = await file.read()

    # Check size
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {settings.max_upload_mb}MB."
        )

    target_dir = Path(settings.upload_dir) / subdir
    target_dir.mkdir(parents=True, exist_ok=True)
    name = unique_filename(prefix, file.filename)
    (target_dir / name).write_bytes(content)

    url = "/".join(part for part in (UPLOAD_URL_PREFIX, subdir, name) if part)
    logger.info(f"Stored {category} upload '{file.filename}' as {url} ({len(content)} bytes)")
    return url, file.filename
