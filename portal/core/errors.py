"""
Error taxonomy for the identity and profile workflow.

Every error carries the HTTP status and the stable message that ends up
in the response envelope: {"success": false, "message": ...}.
"""


class PortalError(Exception):
    """Base class for errors that map to a client-facing response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortalError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateIdentity(PortalError):
    status_code = 409
    default_message = "User already exists"


class InvalidCredentials(PortalError):
    # Same message for unknown email and wrong password
    status_code = 401
    default_message = "Invalid credentials"


class RoleMismatch(PortalError):
    status_code = 403
    default_message = "Access denied for this role"


class FederatedAuthFailed(PortalError):
    status_code = 401
    default_message = "Google authentication failed"


class Unauthenticated(PortalError):
    status_code = 401
    default_message = "User not authenticated"


class InvalidToken(Unauthenticated):
    """Token signature, expiry or subject check failed."""


class NotFound(PortalError):
    status_code = 404
    default_message = "User not found"


class UploadFailed(PortalError):
    status_code = 502
    default_message = "File upload failed"
