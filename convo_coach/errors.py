"""Errors raised while evaluating a practice turn.

Each error carries the HTTP status and the message the service reports in its
``{"error": ...}`` payload.
"""


class PracticeError(Exception):
    """Base class for turn failures that map onto an error payload."""

    status_code = 500
    message = "Unknown error occurred"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self):
        return {"error": self.message}


class ConfigurationError(PracticeError):
    """A required credential or setting is missing."""


class TranscriptionError(PracticeError):
    message = "Failed to transcribe audio"


class GatewayError(PracticeError):
    """The language-model gateway returned a non-success response."""

    message = "AI gateway error"

    def __init__(self, message: str = None, upstream_status: int = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class RateLimitError(GatewayError):
    status_code = 429
    message = "Rate limit exceeded. Please try again in a moment."


class PaymentRequiredError(GatewayError):
    status_code = 402
    message = "Payment required. Please add credits to your workspace."


class MicrophoneError(Exception):
    """The microphone could not be opened (missing device or permission)."""

    def __init__(self, message: str = "Could not access microphone. Please check permissions."):
        super().__init__(message)
        self.message = message


def raise_for_gateway_status(status: int, body: str = "") -> None:
    """Translate a gateway HTTP status into the matching error."""
    if status == 429:
        raise RateLimitError(upstream_status=status)
    if status == 402:
        raise PaymentRequiredError(upstream_status=status)
    if status >= 400:
        print(f"[GATEWAY] error {status}: {body[:200]}")
        raise GatewayError(upstream_status=status)
