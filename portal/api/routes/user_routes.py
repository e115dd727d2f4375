"""
User Routes

POST /user/register - Register new user (multipart, optional profile photo)
POST /user/login - Login with email, password and role; sets session cookie
POST /user/google - Login with a Google ID token; sets session cookie
GET /user/logout - Clear session cookie
POST /user/profile/update - Update own profile (multipart, optional resume and photo)
"""

from typing import Optional
from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from portal.core.auth import clear_session_cookie, get_current_user_id, set_session_cookie
from portal.services.profile_service import ProfileService, get_profile_service
from portal.utils.file_upload import is_present, read_upload
from portal.schemas.schemas import (
    AuthResponse, GoogleLoginRequest, LoginRequest, MessageResponse, UploadKind, UserOut,
)

router = APIRouter(prefix="/user", tags=["User"])


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    password: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None, description="Profile photo"),
    service: ProfileService = Depends(get_profile_service),
):
    """
    Register a new account.

    Registration does not log the user in; call /user/login afterwards.
    """
    photo = await read_upload(file, UploadKind.profile_photo) if is_present(file) else None
    await service.register(full_name, email, phone_number, password, role, photo)
    return MessageResponse(message="User registered successfully")


@router.get("/register")
async def register_help():
    return {"message": "Use POST method to register", "method": "POST", "endpoint": "/api/v1/user/register"}


@router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
async def login(
    request: LoginRequest,
    response: Response,
    service: ProfileService = Depends(get_profile_service),
):
    """
    Login and receive the session cookie.

    The token travels only in the HttpOnly "token" cookie.
    """
    user, token = await service.login(request.email, request.password, request.role)
    set_session_cookie(response, token)
    return AuthResponse(message=f"Login successful {user.full_name}", user=UserOut.from_record(user))


@router.get("/login")
async def login_help():
    return {
        "message": "Use POST method to login",
        "method": "POST",
        "endpoint": "/api/v1/user/login",
        "requiredFields": ["email", "password", "role"],
    }


@router.post("/google", response_model=AuthResponse, response_model_exclude_none=True)
async def google_login(
    request: GoogleLoginRequest,
    response: Response,
    service: ProfileService = Depends(get_profile_service),
):
    """Login with a Google ID token; first login creates the account."""
    user, token = await service.federated_login(request.id_token, request.role)
    set_session_cookie(response, token)
    return AuthResponse(message=f"Welcome {user.full_name}", user=UserOut.from_record(user))


@router.get("/logout", response_model=MessageResponse)
async def logout(response: Response):
    """Tell the client to drop the session cookie. No server-side revocation."""
    clear_session_cookie(response)
    return MessageResponse(message="Logout successful")


@router.post("/profile/update", response_model=AuthResponse, response_model_exclude_none=True)
async def update_profile(
    full_name: Optional[str] = Form(None, alias="fullName"),
    email: Optional[str] = Form(None),
    phone_number: Optional[str] = Form(None, alias="phoneNumber"),
    bio: Optional[str] = Form(None),
    skills: Optional[str] = Form(None, description="Comma-separated"),
    file: Optional[UploadFile] = File(None, description="Resume"),
    profile_photo: Optional[UploadFile] = File(None, alias="profilePhoto"),
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Update own profile. Only provided fields are updated."""
    resume = await read_upload(file, UploadKind.resume) if is_present(file) else None
    photo = await read_upload(profile_photo, UploadKind.profile_photo) if is_present(profile_photo) else None

    user = await service.update_profile(
        user_id,
        full_name=full_name,
        email=email,
        phone_number=phone_number,
        bio=bio,
        skills=skills,
        resume=resume,
        photo=photo,
    )
    return AuthResponse(message="Profile updated successfully", user=UserOut.from_record(user))
