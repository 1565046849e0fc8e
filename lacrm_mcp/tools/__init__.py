"""
LACRM tool modules.

Each module exposes ``register_*_tools(mcp, invoke_tool)`` and only maps
snake_case tool arguments onto LACRM wire parameters; HTTP, rate limiting,
error shaping and metrics live behind ``invoke_tool``.
"""
from typing import Any, Dict, Optional

from mcp.server.fastmcp.exceptions import ToolError

from ..errors import ValidationError, format_error_for_llm


def compact(params: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Drop unset (None) parameters and merge ``extra`` (custom fields) on top."""
    data = {key: value for key, value in params.items() if value is not None}
    if extra:
        data.update(extra)
    return data


def created_message(kind: str, result: Any, id_key: str) -> str:
    record_id = result.get(id_key) if isinstance(result, dict) else None
    if record_id is None:
        return f"{kind} created successfully."
    return f"{kind} created successfully. {id_key}: {record_id}"


def register_all_tools(mcp, invoke_tool) -> None:
    from .activities import register_activity_tools
    from .contacts import register_contact_tools
    from .discovery import register_discovery_tools
    from .pipeline_items import register_pipeline_item_tools
    from .records import register_record_tools
    from .settings import register_settings_tools

    register_discovery_tools(mcp, invoke_tool)
    register_contact_tools(mcp, invoke_tool)
    register_activity_tools(mcp, invoke_tool)
    register_pipeline_item_tools(mcp, invoke_tool)
    register_record_tools(mcp, invoke_tool)
    register_settings_tools(mcp, invoke_tool)


def invalid(message: str) -> ToolError:
    """ToolError for a tool argument check that fails before any remote call."""
    return ToolError(format_error_for_llm(ValidationError(message)))
