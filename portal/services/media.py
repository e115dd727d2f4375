"""
Media Upload Gateway - stores resumes and profile photos on Cloudinary.

Profile photos:
- Stable public id derived from the owner's email, so a new photo
  overwrites the old object instead of piling up copies
- Resized to fit 500x500 and compressed with quality "auto"

Resumes:
- Uploaded as raw files, no transformation

Any SDK or network failure surfaces as UploadFailed. Callers upload
before writing to the store, so a failed upload never leaves a user
pointing at a missing object.
"""

import hashlib
import io
import logging
import re

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from portal.core.config import get_settings
from portal.core.errors import UploadFailed
from portal.schemas.schemas import UploadKind, UploadResult

settings = get_settings()
logger = logging.getLogger(__name__)

PROFILE_PHOTO_FOLDER = "profile-photos"
RESUME_FOLDER = "resumes"
PROFILE_PHOTO_MAX_SIDE = 500


def profile_photo_public_id(email: str) -> str:
    """
    Object key for a user's profile photo.

    profile_<local part, non-alphanumerics as "_">_<sha1(email)[:10]>
    The hash suffix keeps a@x.com and a@y.com apart.
    """
    normalized = email.strip().lower()
    local_part = normalized.split("@")[0]
    prefix = re.sub(r"[^a-z0-9]", "_", local_part)
    suffix = hashlib.sha1(normalized.encode("utf-8")).hexdigest()[:10]
    return f"profile_{prefix}_{suffix}"


class MediaUploadGateway:

    def __init__(self, timeout: float = None):
        self.timeout = timeout if timeout is not None else settings.upload_timeout_seconds
        cloudinary.config(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            secure=True,
        )

    def upload_options(self, kind: UploadKind, email: str) -> dict:
        if kind == UploadKind.profile_photo:
            return {
                "resource_type": "image",
                "folder": PROFILE_PHOTO_FOLDER,
                "public_id": profile_photo_public_id(email),
                "overwrite": True,
                "invalidate": True,
                "transformation": [
                    {"width": PROFILE_PHOTO_MAX_SIDE, "height": PROFILE_PHOTO_MAX_SIDE, "crop": "limit"},
                    {"quality": "auto"},
                ],
                "timeout": self.timeout,
            }
        return {
            "resource_type": "raw",
            "folder": RESUME_FOLDER,
            "timeout": self.timeout,
        }

    def upload(self, file_bytes: bytes, kind: UploadKind, email: str) -> UploadResult:
        """
        Upload a file and return its public URL.

        Args:
            file_bytes: File content
            kind: resume or profile_photo
            email: Owner's email (drives the profile photo key)

        Raises:
            UploadFailed: network, quota or content error from Cloudinary
        """
        options = self.upload_options(kind, email)
        try:
            response = cloudinary.uploader.upload(io.BytesIO(file_bytes), **options)
        except (CloudinaryError, OSError) as exc:
            logger.error("Cloudinary %s upload failed: %s", kind.value, exc)
            raise UploadFailed() from exc

        url = response.get("secure_url")
        if not url:
            logger.error("Cloudinary %s upload returned no URL", kind.value)
            raise UploadFailed()

        logger.info("Uploaded %s as %s", kind.value, response.get("public_id"))
        return UploadResult(url=url, public_id=response.get("public_id", ""))


def get_media_gateway() -> MediaUploadGateway:
    """Get media upload gateway instance."""
    return MediaUploadGateway()
