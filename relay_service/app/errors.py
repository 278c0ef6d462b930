"""Error taxonomy for the chat relay.

Every error is terminal for the request that raised it. The HTTP layer maps
each one to its status code and an ``{"error": ..., "details": ...}`` body.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base relay exception."""

    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(RelayError):
    """Raised when the client sent an unusable request."""

    status_code = 400
    default_message = "Message is required"


class ConfigurationError(RelayError):
    """Raised when the upstream credential is not configured."""

    status_code = 500
    default_message = "GITHUB_TOKEN not set. Cannot call AI API."


class AuthError(RelayError):
    """Raised when the upstream API rejected the credential (HTTP 401)."""

    status_code = 401
    default_message = "Invalid GitHub token."


class RateLimitError(RelayError):
    """Raised when the upstream API throttled the request (HTTP 429)."""

    status_code = 429
    default_message = "Rate limit exceeded."


class UpstreamError(RelayError):
    """Raised on any other upstream failure: timeout, network, 5xx, bad body."""

    status_code = 500
    default_message = "Failed to get response from AI"


class NotFoundError(RelayError):
    status_code = 404
    default_message = "Conversation not found"
