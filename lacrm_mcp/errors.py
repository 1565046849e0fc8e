"""
Error taxonomy for the LACRM MCP server.

Core code raises these; the tool layer turns them into LLM-readable messages
via format_error_for_llm().
"""
from __future__ import annotations

from typing import Any, Optional


DEFAULT_AUTH_MESSAGE = "Invalid or missing API key. Set LACRM_API_KEY environment variable."


class LacrmError(Exception):
    """Base exception for all LACRM server errors."""
    pass


class AuthenticationError(LacrmError):
    """Credential missing or rejected by the remote API."""

    def __init__(self, message: str = DEFAULT_AUTH_MESSAGE):
        super().__init__(message)


class ValidationError(LacrmError):
    """Local pre-flight check failed before any remote call was made."""
    pass


class RemoteError(LacrmError):
    """Logical failure reported by the remote API (ErrorCode/ErrorDescription)."""

    def __init__(self, code: str, description: str, details: Optional[Any] = None):
        self.code = code
        self.description = description
        self.details = details
        super().__init__(description)

    def __repr__(self) -> str:
        return f"RemoteError(code={self.code!r}, description={self.description!r})"


def format_error_for_llm(error: BaseException) -> str:
    if isinstance(error, AuthenticationError):
        return "Authentication failed. Ensure LACRM_API_KEY is set correctly in your environment."
    if isinstance(error, ValidationError):
        return f"Validation error: {error}"
    if isinstance(error, RemoteError):
        return f"API error ({error.code}): {error.description}"
    if isinstance(error, Exception):
        return f"Error: {error}"
    return "An unexpected error occurred."
