"""
Input-shape checks for post requests.

The functions here are pure: no I/O, no mutation of the request.  They
report every problem they find so the caller can surface one aggregated
message.
"""
import uuid
from dataclasses import dataclass, field

from socialmedia.config import settings
from socialmedia.schemas import CreatePostRequest, UpdatePostRequest


@dataclass
class ValidationResult:
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_message(self) -> str:
        return " ".join(self.errors)


def is_valid_identifier(value: str | None) -> bool:
    """Return True when *value* is a UUID-shaped token."""
    if not value:
        return False
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def _check_text_lengths(
    errors: list[str], caption: str | None, description: str | None
) -> None:
    if caption is not None and len(caption) > settings.CAPTION_MAX_LENGTH:
        errors.append(
            f"Caption must be at most {settings.CAPTION_MAX_LENGTH} characters."
        )
    if description is not None and len(description) > settings.DESCRIPTION_MAX_LENGTH:
        errors.append(
            f"Description must be at most {settings.DESCRIPTION_MAX_LENGTH} characters."
        )


def validate_create_post(request: CreatePostRequest) -> ValidationResult:
    errors: list[str] = []
    payload = request.file

    if payload is None or not payload.data:
        errors.append("File is required.")
    else:
        if len(payload.data) > settings.MAX_UPLOAD_SIZE:
            errors.append(
                f"File must be at most {settings.MAX_UPLOAD_SIZE} bytes."
            )
        if payload.content_type not in settings.ALLOWED_CONTENT_TYPES:
            errors.append(f"File type '{payload.content_type}' is not supported.")

    _check_text_lengths(errors, request.caption, request.description)
    return ValidationResult(errors)


def validate_update_post(request: UpdatePostRequest) -> ValidationResult:
    errors: list[str] = []

    if not request.id or not request.id.strip():
        errors.append("Id is required.")

    _check_text_lengths(errors, request.caption, request.description)
    return ValidationResult(errors)
