# eteeap/routes/profile.py
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, Response, UploadFile, status
from sqlalchemy.orm import Session
from typing import Optional

from eteeap.auth.dependencies import SESSION_COOKIE, get_current_user
from eteeap.database import get_db
from eteeap.models.user import User
from eteeap.services import application_service, profile_service
from eteeap.utils.upload import DEFAULT_PROFILE_PICTURE, IMAGE_TYPES, PROFILE_SUBDIR, public_url, save_upload

router = APIRouter(
    prefix="/profile",
    tags=["Profile"]
)


def _profile(request: Request, user: User) -> dict:
    return {
        "id": user.id,
        "fullname": user.fullname,
        "email": user.email,
        "role": user.role,
        "profile_picture": public_url(request, user.profile_picture, DEFAULT_PROFILE_PICTURE),
    }


@router.get("")
def get_profile(request: Request, current_user: User = Depends(get_current_user)):
    return _profile(request, current_user)


@router.put("/update")
def update_profile(
    request: Request,
    fullname: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    profile_picture: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    picture_path = None
    if profile_picture is not None and profile_picture.filename:
        picture_path = save_upload(profile_picture, PROFILE_SUBDIR, IMAGE_TYPES)

    user = profile_service.update_profile(db, current_user, fullname, email, password, picture_path)
    return {"message": "Profile updated", "user": _profile(request, user)}


@router.put("/picture")
def update_picture(
    request: Request,
    profile_picture: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not profile_picture.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    path = save_upload(profile_picture, PROFILE_SUBDIR, IMAGE_TYPES)
    user = profile_service.update_picture(db, current_user, path)
    return {"message": "Profile picture updated", "profile_picture": public_url(request, user.profile_picture)}


@router.delete("/delete")
def delete_account(
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    profile_service.delete_account(db, current_user)
    response.delete_cookie(SESSION_COOKIE)
    return {"message": "Account deleted"}


# ------------------ Own applications ------------------

@router.get("/applications")
def my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return application_service.list_own_applications(db, current_user.id)


@router.get("/applications/{application_id}")
def my_application_detail(
    application_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return application_service.application_detail(db, current_user.id, application_id)
