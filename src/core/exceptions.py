"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Not found errors (404)
    HANDLE_NOT_FOUND = "HANDLE_NOT_FOUND"
    UNSUPPORTED_PLATFORM = "UNSUPPORTED_PLATFORM"

    # Validation errors (400 / 422)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    MALFORMED_PROFILE = "MALFORMED_PROFILE"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Upstream errors (502)
    UPSTREAM_ERROR = "UPSTREAM_ERROR"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    RENDER_ERROR = "RENDER_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class UpstreamDataError(AppException):
    """The data provider could not produce a profile."""

    def __init__(
        self,
        message: str,
        platform: str | None = None,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(
            error_code=ErrorCode.UPSTREAM_ERROR,
            message=message,
            status_code=502,
            details={"platform": platform, "upstream_status": upstream_status},
        )


class HandleNotFoundError(UpstreamDataError):
    """Upstream rejected the handle (4xx): not found or invalid."""

    def __init__(self, handle: str, platform: str, comment: str | None = None) -> None:
        super().__init__(
            message=comment or f"User not found: {handle}",
            platform=platform,
        )
        self.error_code = ErrorCode.HANDLE_NOT_FOUND
        self.status_code = 404
        self.details = {"platform": platform, "handle": handle}


class MalformedInputError(AppException):
    """A normalized profile violates a required invariant."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.MALFORMED_PROFILE,
            message=message,
            status_code=422,
            details={"field": field} if field else None,
        )


class RenderInternalError(AppException):
    """Unexpected failure while laying out a card."""

    def __init__(self, message: str = "Unable to render card") -> None:
        super().__init__(
            error_code=ErrorCode.RENDER_ERROR,
            message=message,
            status_code=500,
        )


class UnsupportedPlatformError(AppException):
    """Platform slug is not one of the known providers."""

    def __init__(self, platform: str) -> None:
        super().__init__(
            error_code=ErrorCode.UNSUPPORTED_PLATFORM,
            message=f"Unsupported platform: {platform}",
            status_code=404,
            details={"platform": platform},
        )
