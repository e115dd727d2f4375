"""
Schemas module - Stored records and Request/Response schemas.
"""

from portal.schemas.schemas import (
    UserRole, UploadKind, Profile, UserRecord, FederatedClaims, UploadResult,
    LoginRequest, GoogleLoginRequest, UserOut, AuthResponse, MessageResponse,
)

__all__ = [
    "UserRole", "UploadKind", "Profile", "UserRecord", "FederatedClaims", "UploadResult",
    "LoginRequest", "GoogleLoginRequest", "UserOut", "AuthResponse", "MessageResponse",
]
