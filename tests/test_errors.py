from __future__ import annotations

from lacrm_mcp.errors import (
    AuthenticationError,
    RemoteError,
    ValidationError,
    format_error_for_llm,
)


def test_authentication_message() -> None:
    assert format_error_for_llm(AuthenticationError()) == (
        "Authentication failed. Ensure LACRM_API_KEY is set correctly in your environment."
    )


def test_remote_error_message() -> None:
    error = RemoteError("InvalidPipelineId", "Pipeline does not exist")
    assert format_error_for_llm(error) == "API error (InvalidPipelineId): Pipeline does not exist"


def test_validation_message() -> None:
    assert format_error_for_llm(ValidationError("pipeline_id is required")) == (
        "Validation error: pipeline_id is required"
    )


def test_generic_error_message() -> None:
    assert format_error_for_llm(RuntimeError("boom")) == "Error: boom"
