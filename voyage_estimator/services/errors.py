"""
RELAY ERRORS
============

Every way a relay call can fail, as one exception per kind. Each carries the
HTTP status the API returns and a message safe to show the user; main.py
turns any RelayError into {"error": message} with that status.
"""


class RelayError(Exception):
    """Base class: a failed relay call with a user-facing message and HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(RelayError):
    """API key missing or still the placeholder. Raised before any network call."""
    default_message = "OpenAI API key not configured. Please add your API key to .env"


class AuthenticationError(RelayError):
    """Completion API answered 401."""
    status_code = 401
    default_message = "Invalid OpenAI API key. Please check your API key."


class RateLimitError(RelayError):
    """Completion API answered 429."""
    status_code = 429
    default_message = "Rate limit exceeded. Please try again in a moment."


class BadRequestError(RelayError):
    """Completion API answered 400."""
    status_code = 400
    default_message = "Invalid request to OpenAI API."


class UpstreamError(RelayError):
    """Any other failure status from the completion API."""
    default_message = "Failed to get response from OpenAI"

    @classmethod
    def with_detail(cls, detail: str) -> "UpstreamError":
        return cls(f"OpenAI API error: {detail}")


class NoResponseError(RelayError):
    """Success status, but the first choice carries no message."""
    default_message = "No response from OpenAI"


class InternalRelayError(RelayError):
    """Network failure, timeout, or a body that is not JSON. No detail leaked."""
