import os
import shutil
import time
from typing import Iterable, Optional

from fastapi import HTTPException, Request, UploadFile, status

from eteeap.config import settings

UPLOAD_URL_PREFIX = "uploads"
PROFILE_SUBDIR = "profile"
APPLICATION_SUBDIR = "applications"
DEFAULT_PROFILE_PICTURE = f"{UPLOAD_URL_PREFIX}/{PROFILE_SUBDIR}/default.png"
IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png"]


def _file_size(file: UploadFile) -> int:
    file.file.seek(0, os.SEEK_END)
    size = file.file.tell()
    file.file.seek(0)
    return size


def save_upload(file: UploadFile, subfolder: str, allowed_types: Optional[Iterable[str]] = None) -> str:
    """
    Write an upload under UPLOAD_DIR/<subfolder> and return its path below the
    /uploads mount, e.g. `uploads/profile/<file>`, whatever UPLOAD_DIR is.
    """
    if allowed_types is not None and file.content_type not in allowed_types:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only JPEG, JPG, PNG allowed"
        )

    if _file_size(file) > settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit"
        )

    folder_path = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder_path, exist_ok=True)

    original = os.path.basename(file.filename or "upload")
    filename = f"{int(time.time() * 1000)}-{original}"
    file_path = os.path.join(folder_path, filename)

    with open(file_path, "wb") as buffer:
        shutil.copyfileobj(file.file, buffer)

    return f"{UPLOAD_URL_PREFIX}/{subfolder}/{filename}"


def public_url(request: Request, path: Optional[str], default: Optional[str] = None) -> Optional[str]:
    """HTTP-rooted URL built from the request's own host."""
    path = path or default
    if not path:
        return None
    return f"{str(request.base_url).rstrip('/')}/{path.lstrip('/')}"
