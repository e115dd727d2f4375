"""
Profile Service - registration, login, Google login and profile update.

Each operation is a linear sequence of steps: validate input, consult the
user store, verify the password or Google token, upload attached files,
write the record, and (for logins) mint a session token. Any step can
fail with a PortalError; nothing is written after a failed step.

Blocking work (pymongo, bcrypt, Cloudinary, Google certificate fetch)
runs in worker threads so one slow request does not stall the others.
"""

import asyncio
import logging
from typing import List, Optional, Tuple
from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from portal.core.auth import create_access_token, hash_password, verify_password
from portal.core.errors import (
    DuplicateIdentity, InvalidCredentials, NotFound, RoleMismatch, ValidationError,
)
from portal.services.federated import GoogleIdentityVerifier, get_identity_verifier
from portal.services.media import MediaUploadGateway, get_media_gateway
from portal.services.user_store import UserStore, normalize_email
from portal.schemas.schemas import Profile, UploadKind, UserRecord, UserRole

logger = logging.getLogger(__name__)

# (content, original filename) as returned by utils.file_upload.read_upload
FilePayload = Tuple[bytes, str]

_email_adapter = TypeAdapter(EmailStr)


def check_email(email: str) -> str:
    """Validate email format and return it normalized."""
    try:
        _email_adapter.validate_python(email.strip())
    except PydanticValidationError as exc:
        raise ValidationError("Invalid email address") from exc
    return normalize_email(email)


def parse_skills(skills: Optional[str]) -> List[str]:
    """'a, b, , c' -> ['a', 'b', 'c'] (order kept, blanks dropped)."""
    if not skills:
        return []
    return [s.strip() for s in skills.split(',') if s.strip()]


def parse_role(role: Optional[str]) -> UserRole:
    try:
        return UserRole(role)
    except ValueError as exc:
        allowed = ', '.join(r.value for r in UserRole)
        raise ValidationError(f"Role must be one of: {allowed}") from exc


class ProfileService:
    """
    Orchestrates the user store, password hashing, Google verification,
    media uploads and token issuing.
    """

    def __init__(
        self,
        store: UserStore = None,
        media: MediaUploadGateway = None,
        verifier: GoogleIdentityVerifier = None,
    ):
        self.store = store or UserStore()
        self.media = media or get_media_gateway()
        self.verifier = verifier or get_identity_verifier()

    # ------------------------------------------------------------
    # Register
    # ------------------------------------------------------------

    async def register(
        self,
        full_name: Optional[str],
        email: Optional[str],
        phone_number: Optional[str],
        password: Optional[str],
        role: Optional[str],
        photo: Optional[FilePayload] = None,
    ) -> UserRecord:
        """
        Create a local account. Does not log the user in.

        The duplicate check runs before the photo upload: the photo key is
        derived from the email, so uploading first would overwrite the
        existing account's photo.
        """
        full_name = (full_name or "").strip()
        phone_number = (phone_number or "").strip()
        if not all([full_name, (email or "").strip(), phone_number, password, role]):
            raise ValidationError("All fields are required")
        user_role = parse_role(role)
        email = check_email(email)

        existing = await asyncio.to_thread(self.store.find_by_email, email)
        if existing:
            raise DuplicateIdentity()

        profile = Profile()
        if photo:
            content, _ = photo
            uploaded = await asyncio.to_thread(self.media.upload, content, UploadKind.profile_photo, email)
            profile.profile_picture_url = uploaded.url

        password_hash = await asyncio.to_thread(hash_password, password)
        record = UserRecord(
            full_name=full_name,
            email=email,
            phone_number=phone_number,
            password_hash=password_hash,
            role=user_role,
            profile=profile,
        )
        created = await asyncio.to_thread(self.store.create, record)
        logger.info("Registered %s user %s", created.role, created.id)
        return created

    # ------------------------------------------------------------
    # Login
    # ------------------------------------------------------------

    async def login(
        self,
        email: Optional[str],
        password: Optional[str],
        role: Optional[str],
    ) -> Tuple[UserRecord, str]:
        """
        Password login. Unknown email and wrong password fail the same way;
        only a role mismatch gets its own error.

        Returns:
            (user, session token)
        """
        if not email or not password or not role:
            raise ValidationError("Email, password and role are required")

        user = await asyncio.to_thread(self.store.find_by_email, email)
        if not user:
            raise InvalidCredentials()

        # Google-only accounts have no hash and never match
        password_ok = await asyncio.to_thread(verify_password, password, user.password_hash)
        if not password_ok:
            raise InvalidCredentials()

        if user.role != role:
            raise RoleMismatch()

        token = create_access_token(user.id)
        logger.info("User %s logged in", user.id)
        return user, token

    # ------------------------------------------------------------
    # Google login
    # ------------------------------------------------------------

    async def federated_login(
        self,
        id_token: Optional[str],
        role: Optional[UserRole] = None,
    ) -> Tuple[UserRecord, str]:
        """
        Verify a Google ID token, then find or create the user.

        A new user gets the requested role (candidate by default) and the
        Google picture. An existing user is returned as stored; the Google
        picture never replaces a stored one.
        """
        claims = await asyncio.to_thread(self.verifier.verify, id_token)

        user = await asyncio.to_thread(self.store.find_by_email, claims.email)
        if not user:
            record = UserRecord(
                full_name=claims.name,
                email=claims.email,
                role=role or UserRole.candidate,
                profile=Profile(profile_picture_url=claims.picture),
            )
            try:
                user = await asyncio.to_thread(self.store.create, record)
                logger.info("Provisioned Google user %s", user.id)
            except DuplicateIdentity:
                # Concurrent first login for the same email won the insert
                user = await asyncio.to_thread(self.store.find_by_email, claims.email)
                if not user:
                    raise

        token = create_access_token(user.id)
        return user, token

    # ------------------------------------------------------------
    # Profile update
    # ------------------------------------------------------------

    async def update_profile(
        self,
        user_id: str,
        full_name: Optional[str],
        email: Optional[str],
        phone_number: Optional[str] = None,
        bio: Optional[str] = None,
        skills: Optional[str] = None,
        resume: Optional[FilePayload] = None,
        photo: Optional[FilePayload] = None,
    ) -> UserRecord:
        """
        Partial update of the authenticated user's record.

        Only non-empty fields are applied; skills replace the stored list
        only when at least one skill survives parsing. Uploads finish
        before the write. The photo key uses the email stored before this
        update, even when the same request changes the email.
        """
        full_name = (full_name or "").strip()
        phone_number = (phone_number or "").strip()
        if not full_name or not (email or "").strip():
            raise ValidationError("Fullname and email are required")
        new_email = check_email(email)

        user = await asyncio.to_thread(self.store.find_by_id, user_id)
        if not user:
            raise NotFound()

        # Checked before uploading: a rejected request must not replace the live photo
        if new_email != user.email:
            owner = await asyncio.to_thread(self.store.find_by_email, new_email)
            if owner and owner.id != user.id:
                raise DuplicateIdentity("Email already in use")

        resume_uploaded = None
        if resume:
            content, _ = resume
            resume_uploaded = await asyncio.to_thread(self.media.upload, content, UploadKind.resume, user.email)

        photo_uploaded = None
        if photo:
            content, _ = photo
            photo_uploaded = await asyncio.to_thread(self.media.upload, content, UploadKind.profile_photo, user.email)

        profile = user.profile.model_copy()
        skill_list = parse_skills(skills)
        if bio:
            profile.bio = bio
        if skill_list:
            profile.skills = skill_list
        if resume_uploaded:
            profile.resume_url = resume_uploaded.url
            profile.resume_original_name = resume[1]
        if photo_uploaded:
            profile.profile_picture_url = photo_uploaded.url

        changes = {
            "full_name": full_name,
            "email": new_email,
            "profile": profile,
        }
        if phone_number:
            changes["phone_number"] = phone_number

        updated = await asyncio.to_thread(self.store.save, user.model_copy(update=changes))
        logger.info("Updated profile of user %s", updated.id)
        return updated


def get_profile_service() -> ProfileService:
    """Get profile service instance."""
    return ProfileService()
