"""Errors raised while receiving and applying provider events."""

from collections.abc import Sequence
from typing import Optional


class WebhookError(Exception):
    """Base for failures that map onto a specific HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(WebhookError):
    status_code = 500
    default_message = "Server configuration error"


class UnauthenticatedError(WebhookError):
    status_code = 401
    default_message = "No signature found"


class MalformedPayloadError(WebhookError):
    status_code = 400
    default_message = "Invalid JSON payload"


class MissingFieldError(MalformedPayloadError):
    """A required field or correlation key is absent from the event data."""

    def __init__(self, fields: Sequence[str]) -> None:
        self.fields = tuple(fields)
        super().__init__(f"Missing required field(s): {', '.join(self.fields)}")


class InvalidSignatureError(WebhookError):
    status_code = 401
    default_message = "Invalid signature"


class NotFoundError(WebhookError):
    status_code = 404
    default_message = "Video not found"


class UnexpectedError(WebhookError):
    status_code = 500


class UpstreamError(WebhookError):
    status_code = 502
    default_message = "Video provider request failed"


class MirrorFailure(Exception):
    """Copying a derived asset into owned storage did not succeed."""
