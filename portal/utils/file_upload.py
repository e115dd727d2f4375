"""
File Upload Utility - Read and validate multipart file uploads.

Supported formats:
- Resume: PDF (.pdf), Word (.doc, .docx)
- Profile photo: .jpg, .jpeg, .png, .gif, .webp

Max file size: 5MB
"""

from typing import Optional, Tuple
from fastapi import UploadFile

from portal.core.errors import ValidationError
from portal.schemas.schemas import UploadKind


MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {
    UploadKind.resume: {'.pdf', '.doc', '.docx'},
    UploadKind.profile_photo: {'.jpg', '.jpeg', '.png', '.gif', '.webp'},
}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def is_present(file: Optional[UploadFile]) -> bool:
    """Browsers send an empty part with no filename when no file was picked."""
    return file is not None and bool(file.filename)


async def read_upload(file: UploadFile, kind: UploadKind) -> Tuple[bytes, str]:
    """
    Read an uploaded file after validating name, type and size.

    Args:
        file: FastAPI UploadFile
        kind: resume or profile_photo

    Returns:
        Tuple of (content, filename)

    Raises:
        ValidationError on validation errors
    """
    # Validate filename
    if not file.filename:
        raise ValidationError("No filename provided")

    ext = get_file_extension(file.filename)
    allowed = ALLOWED_EXTENSIONS[kind]
    if ext not in allowed:
        raise ValidationError(
            f"Unsupported file type '{ext}'. Allowed: {', '.join(sorted(allowed))}"
        )

    # Read content
    content = await file.read()

    # Check size
    if len(content) > MAX_FILE_SIZE_BYTES:
        raise ValidationError(f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB")

    if not content:
        raise ValidationError("Uploaded file is empty")

    return content, file.filename
