from typing import Any, Dict

from ..schema import compose_schema, summarize_schema


def register_discovery_tools(mcp, invoke_tool) -> None:
    @mcp.tool(
        name="get_custom_fields",
        description=(
            "Retrieve all custom field definitions for this LACRM account (contacts, companies "
            "and pipelines). Returns field IDs, names, types and options. Prefer the schema "
            "tools before create/edit calls."
        ),
    )
    async def get_custom_fields() -> Dict[str, Any]:
        return await invoke_tool.records("get_custom_fields", "GetCustomFields", key="CustomFields")

    @mcp.tool(
        name="get_pipelines",
        description=(
            "List all pipelines with their IDs and statuses. Call this before creating pipeline "
            "items to get valid pipeline_id and status_id values."
        ),
    )
    async def get_pipelines() -> Dict[str, Any]:
        return await invoke_tool.records("get_pipelines", "GetPipelines", key="Pipelines")

    @mcp.tool(name="get_groups", description="List all contact groups with their IDs and names.")
    async def get_groups() -> Dict[str, Any]:
        return await invoke_tool.records("get_groups", "GetGroups", key="Groups")

    @mcp.tool(
        name="get_users",
        description="List all users in the account. Use the UserId values for assigned_to and user filters.",
    )
    async def get_users() -> Dict[str, Any]:
        return await invoke_tool.records("get_users", "GetUsers", key="Users")

    @mcp.tool(name="get_calendars", description="List all calendars. Use the CalendarId values when creating events or tasks.")
    async def get_calendars() -> Dict[str, Any]:
        return await invoke_tool.records("get_calendars", "GetCalendars", key="Calendars")

    async def _schema(tool_name: str, record_kind: str, pipeline_id: Any = None) -> Dict[str, Any]:
        async def operation(client) -> Dict[str, Any]:
            fields = await compose_schema(client, record_kind, pipeline_id)
            return summarize_schema(record_kind, fields, pipeline_id)

        return await invoke_tool.run(tool_name, operation)

    @mcp.tool(
        name="get_contact_schema",
        description=(
            "Get every field available on a contact: fixed fields plus this account's custom "
            "fields, with required status, type, input format and valid options. Call before "
            "create_contact or edit_contact."
        ),
    )
    async def get_contact_schema() -> Dict[str, Any]:
        return await _schema("get_contact_schema", "Contact")

    @mcp.tool(
        name="get_company_schema",
        description=(
            "Get every field available on a company: fixed fields plus custom fields, with "
            "required status, type, input format and valid options. Call before creating or "
            "editing a company."
        ),
    )
    async def get_company_schema() -> Dict[str, Any]:
        return await _schema("get_company_schema", "Company")

    @mcp.tool(
        name="get_pipeline_item_schema",
        description=(
            "Get every field for items in one pipeline, including required custom fields and "
            "valid dropdown options. Call before create_pipeline_item or edit_pipeline_item. "
            "Get pipeline_id from get_pipelines."
        ),
    )
    async def get_pipeline_item_schema(pipeline_id: str) -> Dict[str, Any]:
        return await _schema("get_pipeline_item_schema", "PipelineItem", pipeline_id)
