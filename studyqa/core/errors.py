"""Typed failures raised by the pipeline, storage and auth layers.

Every error carries the HTTP status the API boundary answers with, so the
routes never need to map exceptions one by one.
"""
from typing import Any, Optional


class StudyQAError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(StudyQAError):
    """Malformed, oversized or wrong-type input."""

    status_code = 400

    def __init__(self, message: str, errors: Optional[list[Any]] = None):
        super().__init__(message)
        self.errors = errors


class UnsupportedMediaType(ValidationFailed):
    """Declared media type is not one of the accepted upload types."""

    def __init__(self, media_type: str):
        super().__init__(
            f"Invalid file type: {media_type}. Only PDF, PNG, and JPG files are allowed."
        )
        self.media_type = media_type


class NotFound(StudyQAError):
    status_code = 404


class DuplicateKey(StudyQAError):
    """A unique field (username or email) is already taken."""

    status_code = 400

    def __init__(self, field: str):
        super().__init__(f"{field.capitalize()} already exists")
        self.field = field


class ExtractionFailed(StudyQAError):
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class GenerationFailed(StudyQAError):
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class Unauthorized(StudyQAError):
    status_code = 401
