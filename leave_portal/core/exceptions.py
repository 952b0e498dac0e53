from typing import Any, Dict, Optional


class AppException(Exception):
    def __init__(
        self,
        message: str,
        status_code: int = 400,
        error_code: str = "BUSINESS_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(self.message)


class FormValidationError(AppException):
    """Raised before any network call when a form fails client-side checks."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=422,
            error_code="VALIDATION_ERROR",
            details={"field": field} if field else None
        )


class UpstreamError(AppException):
    """
    The leave-management API answered with an error.

    `upstream_status` keeps the original status; 4xx is mirrored to the
    caller, anything else becomes a 502.
    """
    def __init__(self, message: str, upstream_status: int, details: Optional[Dict[str, Any]] = None):
        self.upstream_status = upstream_status
        super().__init__(
            message=message,
            status_code=upstream_status if 400 <= upstream_status < 500 else 502,
            error_code="UPSTREAM_ERROR",
            details=details
        )


class UpstreamUnavailableError(AppException):
    def __init__(self, message: str = "Leave service is unreachable. Please try again."):
        super().__init__(
            message=message,
            status_code=503,
            error_code="UPSTREAM_UNAVAILABLE"
        )


class AuthenticationError(AppException):
    def __init__(self, message: str = "Please log in to continue"):
        super().__init__(
            message=message,
            status_code=401,
            error_code="AUTH_FAILED"
        )


class AccessDeniedError(AppException):
    """Named AccessDeniedError to avoid shadowing Python's built-in PermissionError."""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(
            message=message,
            status_code=403,
            error_code="PERMISSION_DENIED"
        )
