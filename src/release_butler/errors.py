"""Errors that abort a webhook request with a specific HTTP status."""

from fastapi import HTTPException


class WebhookError(HTTPException):
    """Base class for webhook failures answered with a non-200 status."""

    status_code = 500
    default_message = "Webhook processing failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(
            status_code=self.status_code,
            detail={"error": type(self).__name__, "message": self.message},
        )


class RequiredHeadersNotAvailable(WebhookError):
    status_code = 406
    default_message = (
        "Both `X-Hub-Signature-256` and `X-GitHub-Event` headers are required"
    )


class LargeBodySize(WebhookError):
    status_code = 413
    default_message = "Webhook body exceeds the size limit"


class MalformedBody(WebhookError):
    status_code = 400
    default_message = "Webhook body is malformed"


class InvalidSignature(WebhookError):
    status_code = 401
    default_message = "Invalid signature"


class SerializationFailed(WebhookError):
    status_code = 500
    default_message = "Failed to deserialize the webhook body"


class UnsupportedEvent(WebhookError):
    status_code = 501
    default_message = "Unsupported event"
