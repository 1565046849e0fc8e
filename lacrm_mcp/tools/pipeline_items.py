from typing import Any, Dict, List, Literal, Optional

from . import compact, created_message, invalid


MAX_BULK_DELETE = 5000


def register_pipeline_item_tools(mcp, invoke_tool) -> None:
    @mcp.tool(
        name="create_pipeline_item",
        description=(
            "Attach a new pipeline item (deal, opportunity) to a contact. Call get_pipelines for "
            "pipeline_id/status_id and get_pipeline_item_schema(pipeline_id) for required custom "
            "fields first. custom_fields maps field names to values; dropdown values must match "
            "a valid option exactly. Returns the new PipelineItemId."
        ),
    )
    async def create_pipeline_item(
        contact_id: str,
        pipeline_id: str,
        status_id: str,
        note: Optional[str] = None,
        run_automation: Optional[bool] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
    ) -> str:
        params = compact(
            {
                "ContactId": contact_id,
                "PipelineId": pipeline_id,
                "StatusId": status_id,
                "Note": note,
                "RunStatusAutomation": run_automation,
            },
            custom_fields,
        )
        result = await invoke_tool("create_pipeline_item", "CreatePipelineItem", params)
        return created_message("Pipeline item", result, "PipelineItemId")

    @mcp.tool(
        name="edit_pipeline_item",
        description="Update a pipeline item: move it to another status, add a note or change custom fields.",
    )
    async def edit_pipeline_item(
        pipeline_item_id: str,
        status_id: Optional[str] = None,
        note: Optional[str] = None,
        run_automation: Optional[bool] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
    ) -> str:
        params = compact(
            {
                "PipelineItemId": pipeline_item_id,
                "StatusId": status_id,
                "Note": note,
                "RunStatusAutomation": run_automation,
            },
            custom_fields,
        )
        await invoke_tool("edit_pipeline_item", "EditPipelineItem", params)
        return f"Pipeline item {pipeline_item_id} updated successfully."

    @mcp.tool(name="delete_pipeline_item", description="Permanently delete one pipeline item.")
    async def delete_pipeline_item(pipeline_item_id: str) -> str:
        await invoke_tool("delete_pipeline_item", "DeletePipelineItem", {"PipelineItemId": pipeline_item_id})
        return f"Pipeline item {pipeline_item_id} deleted successfully."

    @mcp.tool(
        name="delete_pipeline_items_bulk",
        description="Delete up to 5000 pipeline items that all belong to one pipeline. Returns processed and skipped counts.",
    )
    async def delete_pipeline_items_bulk(pipeline_item_ids: List[str], pipeline_id: str) -> str:
        if not pipeline_item_ids:
            raise invalid("pipeline_item_ids must not be empty")
        if len(pipeline_item_ids) > MAX_BULK_DELETE:
            raise invalid(f"at most {MAX_BULK_DELETE} pipeline items can be deleted per call")
        result = await invoke_tool(
            "delete_pipeline_items_bulk",
            "DeletePipelineItems",
            {"PipelineItemIds": pipeline_item_ids, "PipelineId": pipeline_id},
        )
        result = result if isinstance(result, dict) else {}
        return (
            f"Bulk delete complete. Processed: {result.get('NumberProcessed', 0)}, "
            f"Skipped: {result.get('NumberSkipped', 0)}"
        )

    @mcp.tool(name="get_pipeline_item", description="Retrieve one pipeline item by ID, including custom fields.")
    async def get_pipeline_item(pipeline_item_id: str) -> Any:
        return await invoke_tool("get_pipeline_item", "GetPipelineItem", {"PipelineItemId": pipeline_item_id})

    @mcp.tool(
        name="search_pipeline_items",
        description=(
            "List items in a pipeline, filtered by users or status IDs, with sorting and advanced "
            'filters (array of {"Name", "Operation", "Value"}; field names from '
            "get_pipeline_item_schema)."
        ),
    )
    async def search_pipeline_items(
        pipeline_id: str,
        user_filter: Optional[List[str]] = None,
        status_filter: Optional[List[str]] = None,
        sort_by: Optional[Literal["Status", "DateCreated", "LastUpdate"]] = None,
        sort_direction: Optional[Literal["Ascending", "Descending"]] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
        advanced_filters: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        params = compact({
            "PipelineId": pipeline_id,
            "UserFilter": user_filter,
            "StatusFilter": status_filter,
            "SortBy": sort_by,
            "SortDirection": sort_direction,
            "MaxNumberOfResults": max_results,
            "Page": page,
            "AdvancedFilters": advanced_filters,
        })
        return await invoke_tool.records("search_pipeline_items", "GetPipelineItems", params)

    @mcp.tool(name="get_pipeline_items_attached_to_contact", description="List pipeline items attached to a contact.")
    async def get_pipeline_items_attached_to_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({"ContactId": contact_id, "MaxNumberOfResults": max_results, "Page": page})
        return await invoke_tool.records(
            "get_pipeline_items_attached_to_contact",
            "GetPipelineItemsAttachedToContact",
            params,
        )
