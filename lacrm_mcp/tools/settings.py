"""Account settings: custom fields, groups, pipelines, statuses, teams and webhooks."""
from typing import Any, Dict, List, Literal, Optional

from . import compact, created_message, invalid


FieldType = Literal[
    "Currency", "Date", "Dropdown", "RadioList", "Checkbox",
    "Number", "Text", "TextArea", "ContactLink", "FileLink",
    "Signature", "Section", "SectionHeader", "TextBlock",
]
RecordType = Literal["Contact", "Company", "Pipeline", "PublicForm"]
GroupColor = Literal[
    "Blue", "LightBlue", "Cyan", "Teal", "Green", "LimeGreen", "Yellow",
    "Orange", "Red", "Pink", "Magenta", "Purple", "Indigo", "Gray",
]
Sharing = Literal["Public", "Private", "Teams"]
PipelinePermissions = Literal["Public", "TeamSharing"]


def register_settings_tools(mcp, invoke_tool) -> None:
    # Custom fields

    @mcp.tool(
        name="create_custom_field",
        description=(
            "Create a custom field on contacts, companies, a pipeline (pipeline_id required) or "
            "public forms. options apply to Dropdown, RadioList and Checkbox fields. Returns the "
            "new CustomFieldId."
        ),
    )
    async def create_custom_field(
        name: str,
        type: FieldType,
        record_type: Optional[RecordType] = None,
        pipeline_id: Optional[str] = None,
        is_required: Optional[bool] = None,
        options: Optional[List[str]] = None,
        show_on_active_badge: Optional[bool] = None,
        show_on_closed_badge: Optional[bool] = None,
        show_on_report: Optional[bool] = None,
    ) -> str:
        if record_type == "Pipeline" and not pipeline_id:
            raise invalid("pipeline_id is required for pipeline custom fields")
        params = compact({
            "Name": name,
            "Type": type,
            "RecordType": record_type,
            "PipelineId": pipeline_id,
            "IsRequired": is_required,
            "Options": options,
            "ShowOnActiveBadge": show_on_active_badge,
            "ShowOnClosedBadge": show_on_closed_badge,
            "ShowOnReport": show_on_report,
        })
        result = await invoke_tool("create_custom_field", "CreateCustomField", params)
        return created_message("Custom field", result, "CustomFieldId")

    @mcp.tool(name="edit_custom_field", description="Update a custom field. The field type cannot be changed.")
    async def edit_custom_field(
        custom_field_id: str,
        name: Optional[str] = None,
        is_required: Optional[bool] = None,
        options: Optional[List[str]] = None,
        show_on_active_badge: Optional[bool] = None,
        show_on_closed_badge: Optional[bool] = None,
        show_on_report: Optional[bool] = None,
    ) -> str:
        params = compact({
            "CustomFieldId": custom_field_id,
            "Name": name,
            "IsRequired": is_required,
            "Options": options,
            "ShowOnActiveBadge": show_on_active_badge,
            "ShowOnClosedBadge": show_on_closed_badge,
            "ShowOnReport": show_on_report,
        })
        await invoke_tool("edit_custom_field", "EditCustomField", params)
        return f"Custom field {custom_field_id} updated successfully."

    @mcp.tool(
        name="delete_custom_field",
        description="Delete a custom field and its stored values. For sections, section_deletes_fields also deletes the fields inside.",
    )
    async def delete_custom_field(custom_field_id: str, section_deletes_fields: Optional[bool] = None) -> str:
        params = compact({"CustomFieldId": custom_field_id, "SectionDeletesFields": section_deletes_fields})
        await invoke_tool("delete_custom_field", "DeleteCustomField", params)
        return f"Custom field {custom_field_id} deleted successfully."

    @mcp.tool(name="get_custom_field", description="Retrieve one custom field definition by ID.")
    async def get_custom_field(custom_field_id: str) -> Any:
        return await invoke_tool("get_custom_field", "GetCustomField", {"CustomFieldId": custom_field_id})

    # Groups

    @mcp.tool(name="create_group", description="Create a contact group. Returns the new GroupId.")
    async def create_group(
        name: str,
        sharing: Optional[Sharing] = None,
        team_ids: Optional[List[str]] = None,
        color: Optional[GroupColor] = None,
    ) -> str:
        params = compact({"Name": name, "Sharing": sharing, "TeamIds": team_ids, "Color": color})
        result = await invoke_tool("create_group", "CreateGroup", params)
        return created_message("Group", result, "GroupId")

    @mcp.tool(name="edit_group", description="Rename a group or change its sharing or color.")
    async def edit_group(
        group_id: str,
        name: Optional[str] = None,
        sharing: Optional[Sharing] = None,
        team_ids: Optional[List[str]] = None,
        color: Optional[GroupColor] = None,
    ) -> str:
        params = compact({"GroupId": group_id, "Name": name, "Sharing": sharing, "TeamIds": team_ids, "Color": color})
        await invoke_tool("edit_group", "EditGroup", params)
        return f"Group {group_id} updated successfully."

    @mcp.tool(name="delete_group", description="Delete a group. Contacts in it are kept.")
    async def delete_group(group_id: str) -> str:
        await invoke_tool("delete_group", "DeleteGroup", {"GroupId": group_id})
        return f"Group {group_id} deleted successfully."

    @mcp.tool(name="get_group", description="Retrieve one group by ID.")
    async def get_group(group_id: str) -> Any:
        return await invoke_tool("get_group", "GetGroup", {"GroupId": group_id})

    # Pipelines

    @mcp.tool(name="create_pipeline", description="Create a pipeline. Returns the new PipelineId.")
    async def create_pipeline(
        name: str,
        icon: Optional[str] = None,
        permissions: Optional[PipelinePermissions] = None,
        team_ids: Optional[List[str]] = None,
    ) -> str:
        params = compact({"Name": name, "Icon": icon, "Permissions": permissions, "TeamIds": team_ids})
        result = await invoke_tool("create_pipeline", "CreatePipeline", params)
        return created_message("Pipeline", result, "PipelineId")

    @mcp.tool(name="edit_pipeline", description="Rename a pipeline or change its icon or permissions.")
    async def edit_pipeline(
        pipeline_id: str,
        name: Optional[str] = None,
        icon: Optional[str] = None,
        permissions: Optional[PipelinePermissions] = None,
        team_ids: Optional[List[str]] = None,
    ) -> str:
        params = compact({
            "PipelineId": pipeline_id,
            "Name": name,
            "Icon": icon,
            "Permissions": permissions,
            "TeamIds": team_ids,
        })
        await invoke_tool("edit_pipeline", "EditPipeline", params)
        return f"Pipeline {pipeline_id} updated successfully."

    @mcp.tool(name="delete_pipeline", description="Delete a pipeline and all of its items. Cannot be undone.")
    async def delete_pipeline(pipeline_id: str) -> str:
        await invoke_tool("delete_pipeline", "DeletePipeline", {"PipelineId": pipeline_id})
        return f"Pipeline {pipeline_id} deleted successfully."

    @mcp.tool(name="get_pipeline", description="Retrieve one pipeline by ID.")
    async def get_pipeline(pipeline_id: str) -> Any:
        return await invoke_tool("get_pipeline", "GetPipeline", {"PipelineId": pipeline_id})

    # Pipeline statuses

    @mcp.tool(
        name="create_pipeline_status",
        description=(
            "Add a status to a pipeline. is_active true marks an in-progress stage, false a "
            "closed stage. color is a named color or a hex code like #486581."
        ),
    )
    async def create_pipeline_status(
        pipeline_id: str,
        name: str,
        is_active: Optional[bool] = None,
        color: Optional[str] = None,
    ) -> str:
        params = compact({"PipelineId": pipeline_id, "Name": name, "IsActive": is_active, "Color": color})
        result = await invoke_tool("create_pipeline_status", "CreatePipelineStatus", params)
        return created_message("Pipeline status", result, "StatusId")

    @mcp.tool(name="edit_pipeline_status", description="Rename a pipeline status or change its active flag or color.")
    async def edit_pipeline_status(
        status_id: str,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
        color: Optional[str] = None,
    ) -> str:
        params = compact({"StatusId": status_id, "Name": name, "IsActive": is_active, "Color": color})
        await invoke_tool("edit_pipeline_status", "EditPipelineStatus", params)
        return f"Pipeline status {status_id} updated successfully."

    @mcp.tool(name="delete_pipeline_status", description="Delete a pipeline status.")
    async def delete_pipeline_status(status_id: str) -> str:
        await invoke_tool("delete_pipeline_status", "DeletePipelineStatus", {"StatusId": status_id})
        return f"Pipeline status {status_id} deleted successfully."

    @mcp.tool(name="get_pipeline_statuses", description="List pipeline statuses, optionally for one pipeline.")
    async def get_pipeline_statuses(pipeline_id: Optional[str] = None) -> Dict[str, Any]:
        return await invoke_tool.records(
            "get_pipeline_statuses",
            "GetPipelineStatuses",
            compact({"PipelineId": pipeline_id}),
        )

    # Teams

    @mcp.tool(name="create_team", description="Create a team of users. Returns the new TeamId.")
    async def create_team(name: str, user_ids: Optional[List[str]] = None) -> str:
        result = await invoke_tool("create_team", "CreateTeam", compact({"Name": name, "UserIdList": user_ids}))
        return created_message("Team", result, "TeamId")

    @mcp.tool(name="edit_team", description="Rename a team or replace its member list.")
    async def edit_team(team_id: str, name: Optional[str] = None, user_ids: Optional[List[str]] = None) -> str:
        params = compact({"TeamId": team_id, "Name": name, "UserIdList": user_ids})
        await invoke_tool("edit_team", "EditTeam", params)
        return f"Team {team_id} updated successfully."

    @mcp.tool(name="delete_team", description="Delete a team.")
    async def delete_team(team_id: str) -> str:
        await invoke_tool("delete_team", "DeleteTeam", {"TeamId": team_id})
        return f"Team {team_id} deleted successfully."

    @mcp.tool(name="get_team", description="Retrieve one team by ID.")
    async def get_team(team_id: str) -> Any:
        return await invoke_tool("get_team", "GetTeam", {"TeamId": team_id})

    @mcp.tool(name="get_teams", description="List all teams.")
    async def get_teams() -> Dict[str, Any]:
        return await invoke_tool.records("get_teams", "GetTeams", key="Teams")

    # Webhooks

    @mcp.tool(
        name="create_webhook",
        description=(
            "Subscribe an HTTPS endpoint to CRM events such as Contact.Create, Contact.Edit, "
            "Contact.Delete, PipelineItemStatus.Create. webhook_scope User covers the "
            "authenticated user's actions, Account covers every user."
        ),
    )
    async def create_webhook(
        endpoint_url: str,
        events: List[str],
        webhook_scope: Literal["User", "Account"],
    ) -> str:
        if not endpoint_url.lower().startswith("https://"):
            raise invalid("webhook endpoint URL must use HTTPS")
        params = {"EndpointUrl": endpoint_url, "Events": events, "WebhookScope": webhook_scope}
        result = await invoke_tool("create_webhook", "CreateWebhook", params)
        return created_message("Webhook", result, "WebhookId")

    @mcp.tool(name="get_webhook", description="Retrieve one webhook by ID.")
    async def get_webhook(webhook_id: str) -> Any:
        return await invoke_tool("get_webhook", "GetWebhook", {"WebhookId": webhook_id})

    @mcp.tool(name="get_webhooks", description="List webhooks, optionally including archived ones.")
    async def get_webhooks(include_archived: Optional[bool] = None) -> Dict[str, Any]:
        return await invoke_tool.records(
            "get_webhooks",
            "GetWebhooks",
            compact({"IncludeArchived": include_archived}),
            key="Webhooks",
        )

    @mcp.tool(name="delete_webhook", description="Delete a webhook subscription.")
    async def delete_webhook(webhook_id: str) -> str:
        await invoke_tool("delete_webhook", "DeleteWebhook", {"WebhookId": webhook_id})
        return f"Webhook {webhook_id} deleted successfully."
