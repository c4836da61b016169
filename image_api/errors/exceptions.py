"""
Typed failures raised by the request pipeline.

Each failure carries an explicit `ErrorKind`. HTTP status codes and response
codes are only decided by the error normalizer in `errors.handlers`.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    CORS_REJECTION = "cors_rejection"
    UPLOAD_SIZE_EXCEEDED = "upload_size_exceeded"
    UPLOAD_COUNT_EXCEEDED = "upload_count_exceeded"
    UPLOAD_FIELD_UNEXPECTED = "upload_field_unexpected"
    INVALID_FILE_TYPE = "invalid_file_type"
    MISSING_INPUT = "missing_input"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


class ApiError(Exception):
    """
    Base class for failures raised on purpose by the pipeline.

    Args:
        message (str, optional): Human readable message. Falls back to the class default.
        status (int, optional): HTTP status for errors without a fixed mapping.
        code (str, optional): Machine readable code for errors without a fixed mapping.
    """

    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        self.status = status
        self.code = code
        super().__init__(self.message)


class CorsRejection(ApiError):
    kind = ErrorKind.CORS_REJECTION
    default_message = "Origin not allowed"


class UploadSizeExceeded(ApiError):
    kind = ErrorKind.UPLOAD_SIZE_EXCEEDED
    default_message = "File size exceeds 30MB limit"


class UploadCountExceeded(ApiError):
    kind = ErrorKind.UPLOAD_COUNT_EXCEEDED
    default_message = "Too many files uploaded"


class UploadFieldUnexpected(ApiError):
    kind = ErrorKind.UPLOAD_FIELD_UNEXPECTED
    default_message = "Unexpected file field"


class InvalidFileType(ApiError):
    kind = ErrorKind.INVALID_FILE_TYPE
    default_message = "Only image files (JPEG, PNG, GIF, WebP) are allowed"


class MissingInput(ApiError):
    kind = ErrorKind.MISSING_INPUT
    default_message = "An image file is required in the 'image' field"


class ExternalApiError(ApiError):
    """Reserved for failures of the image generation provider."""

    kind = ErrorKind.EXTERNAL_API
    default_message = "Image generation service failed"

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message, status=status or 502, code=code or "EXTERNAL_API_ERROR")


class InternalError(ApiError):
    kind = ErrorKind.INTERNAL
