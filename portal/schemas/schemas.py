"""
Pydantic Schemas - Stored records and Request/Response validation

All schemas in one file for simplicity. Python attributes are snake_case;
the wire format uses the camelCase aliases the frontend expects.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    candidate = "candidate"
    recruiter = "recruiter"


class UploadKind(str, Enum):
    resume = "resume"
    profile_photo = "profile_photo"


# ============================================================
# STORED RECORDS
# ============================================================

class Profile(BaseModel):
    """Nested profile, present on every user from creation on."""
    model_config = ConfigDict(populate_by_name=True)

    bio: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    resume_url: Optional[str] = Field(None, alias="resumeUrl")
    resume_original_name: Optional[str] = Field(None, alias="resumeOriginalName")
    profile_picture_url: str = Field("", alias="profilePictureUrl")
    company_id: Optional[str] = Field(None, alias="companyRef")


class UserRecord(BaseModel):
    """One identity record as kept in the users collection."""
    model_config = ConfigDict(use_enum_values=True)

    id: Optional[str] = None
    full_name: str
    email: str
    phone_number: Optional[str] = None
    password_hash: Optional[str] = None
    role: UserRole
    profile: Profile = Field(default_factory=Profile)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FederatedClaims(BaseModel):
    email: str
    name: str
    picture: str = ""


class UploadResult(BaseModel):
    url: str
    public_id: str


# ============================================================
# AUTH SCHEMAS
# ============================================================

class LoginRequest(BaseModel):
    # Presence is checked by the workflow so the error uses our envelope
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class GoogleLoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id_token: Optional[str] = Field(None, alias="idToken")
    role: Optional[UserRole] = None


class UserOut(BaseModel):
    """Sanitized user: the password hash never leaves the service."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    full_name: str = Field(alias="fullName")
    email: str
    phone_number: Optional[str] = Field(None, alias="phoneNumber")
    role: UserRole
    profile: Profile

    @classmethod
    def from_record(cls, record: UserRecord) -> "UserOut":
        return cls(
            id=record.id,
            full_name=record.full_name,
            email=record.email,
            phone_number=record.phone_number,
            role=record.role,
            profile=record.profile,
        )


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class AuthResponse(BaseModel):
    message: str
    success: bool = True
    user: Optional[UserOut] = None


class MessageResponse(BaseModel):
    message: str
    success: bool = True
