"""Events, tasks and notes."""
from typing import Any, Dict, List, Literal, Optional

from . import compact, created_message


SortDirection = Literal["Ascending", "Descending"]


def _attached(contact_id: str, max_results: Optional[int], page: Optional[int]) -> Dict[str, Any]:
    return compact({"ContactId": contact_id, "MaxNumberOfResults": max_results, "Page": page})


def register_activity_tools(mcp, invoke_tool) -> None:
    # Events

    @mcp.tool(
        name="create_event",
        description=(
            "Create a calendar event. Dates are ISO 8601 (YYYY-MM-DD for all-day events). "
            'attendees is an array of {"IsUser": bool, "AttendeeId": str, "AttendanceStatus": '
            '"IsAttending"|"Maybe"|"NotAttending"}. Get calendar IDs from get_calendars.'
        ),
    )
    async def create_event(
        name: str,
        start_date: str,
        end_date: str,
        is_all_day: Optional[bool] = None,
        location: Optional[str] = None,
        description: Optional[str] = None,
        calendar_id: Optional[str] = None,
        attendees: Optional[List[Dict[str, Any]]] = None,
        is_recurring: Optional[bool] = None,
        recurrence_rule: Optional[str] = None,
        end_recurrence_date: Optional[str] = None,
    ) -> str:
        params = compact({
            "Name": name,
            "StartDate": start_date,
            "EndDate": end_date,
            "IsAllDay": is_all_day,
            "Location": location,
            "Description": description,
            "CalendarId": calendar_id,
            "Attendees": attendees,
            "IsRecurring": is_recurring,
            "RecurrenceRule": recurrence_rule,
            "EndRecurrenceRule": end_recurrence_date,
        })
        result = await invoke_tool("create_event", "CreateEvent", params)
        return created_message("Event", result, "EventId")

    @mcp.tool(name="edit_event", description="Update an event. Only include fields to change.")
    async def edit_event(
        event_id: str,
        name: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        is_all_day: Optional[bool] = None,
        location: Optional[str] = None,
        description: Optional[str] = None,
        calendar_id: Optional[str] = None,
        attendees: Optional[List[Dict[str, Any]]] = None,
        is_recurring: Optional[bool] = None,
        recurrence_rule: Optional[str] = None,
        end_recurrence_date: Optional[str] = None,
    ) -> str:
        params = compact({
            "EventId": event_id,
            "Name": name,
            "StartDate": start_date,
            "EndDate": end_date,
            "IsAllDay": is_all_day,
            "Location": location,
            "Description": description,
            "CalendarId": calendar_id,
            "Attendees": attendees,
            "IsRecurring": is_recurring,
            "RecurrenceRule": recurrence_rule,
            "EndRecurrenceRule": end_recurrence_date,
        })
        await invoke_tool("edit_event", "EditEvent", params)
        return f"Event {event_id} updated successfully."

    @mcp.tool(name="delete_event", description="Permanently delete an event.")
    async def delete_event(event_id: str) -> str:
        await invoke_tool("delete_event", "DeleteEvent", {"EventId": event_id})
        return f"Event {event_id} deleted successfully."

    @mcp.tool(name="get_event", description="Retrieve one event by ID.")
    async def get_event(event_id: str) -> Any:
        return await invoke_tool("get_event", "GetEvent", {"EventId": event_id})

    @mcp.tool(
        name="search_events",
        description="Search events in a date range, optionally filtered by users, calendars or contact.",
    )
    async def search_events(
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        user_filter: Optional[List[str]] = None,
        calendar_filter: Optional[List[str]] = None,
        contact_id: Optional[str] = None,
        sort_direction: Optional[SortDirection] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({
            "StartDate": start_date,
            "EndDate": end_date,
            "UserFilter": user_filter,
            "CalendarFilter": calendar_filter,
            "ContactId": contact_id,
            "SortDirection": sort_direction,
            "MaxNumberOfResults": max_results,
            "Page": page,
        })
        return await invoke_tool.records("search_events", "GetEvents", params)

    @mcp.tool(name="get_events_attached_to_contact", description="List events attached to a contact.")
    async def get_events_attached_to_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        return await invoke_tool.records(
            "get_events_attached_to_contact",
            "GetEventsAttachedToContact",
            _attached(contact_id, max_results, page),
        )

    # Tasks

    @mcp.tool(
        name="create_task",
        description="Create a task, optionally due on a date (YYYY-MM-DD), assigned to a user and attached to a contact.",
    )
    async def create_task(
        name: str,
        due_date: Optional[str] = None,
        assigned_to: Optional[str] = None,
        calendar_id: Optional[str] = None,
        description: Optional[str] = None,
        contact_id: Optional[str] = None,
    ) -> str:
        params = compact({
            "Name": name,
            "DueDate": due_date,
            "AssignedTo": assigned_to,
            "CalendarId": calendar_id,
            "Description": description,
            "ContactId": contact_id,
        })
        result = await invoke_tool("create_task", "CreateTask", params)
        return created_message("Task", result, "TaskId")

    @mcp.tool(
        name="edit_task",
        description=(
            "Update a task or mark it complete. Only include fields to change. Set "
            "detach_contact to true to remove the attached contact."
        ),
    )
    async def edit_task(
        task_id: str,
        name: Optional[str] = None,
        due_date: Optional[str] = None,
        assigned_to: Optional[str] = None,
        calendar_id: Optional[str] = None,
        description: Optional[str] = None,
        contact_id: Optional[str] = None,
        detach_contact: bool = False,
        is_complete: Optional[bool] = None,
    ) -> str:
        params = compact({
            "TaskId": task_id,
            "Name": name,
            "DueDate": due_date,
            "AssignedTo": assigned_to,
            "CalendarId": calendar_id,
            "Description": description,
            "ContactId": contact_id,
            "IsComplete": is_complete,
        })
        if detach_contact:
            params["ContactId"] = None
        await invoke_tool("edit_task", "EditTask", params)
        return f"Task {task_id} updated successfully."

    @mcp.tool(name="delete_task", description="Permanently delete a task.")
    async def delete_task(task_id: str) -> str:
        await invoke_tool("delete_task", "DeleteTask", {"TaskId": task_id})
        return f"Task {task_id} deleted successfully."

    @mcp.tool(name="get_task", description="Retrieve one task by ID.")
    async def get_task(task_id: str) -> Any:
        return await invoke_tool("get_task", "GetTask", {"TaskId": task_id})

    @mcp.tool(
        name="search_tasks",
        description="Search tasks due between start_date and end_date (YYYY-MM-DD), filtered by user, contact or completion.",
    )
    async def search_tasks(
        start_date: str,
        end_date: str,
        user_filter: Optional[List[str]] = None,
        contact_id: Optional[str] = None,
        completion_status: Optional[Literal["Both", "Incomplete", "Complete"]] = None,
        sort_direction: Optional[SortDirection] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({
            "StartDate": start_date,
            "EndDate": end_date,
            "UserFilter": user_filter,
            "ContactId": contact_id,
            "CompletionStatus": completion_status,
            "SortDirection": sort_direction,
            "MaxNumberOfResults": max_results,
            "Page": page,
        })
        return await invoke_tool.records("search_tasks", "GetTasks", params)

    @mcp.tool(name="get_tasks_attached_to_contact", description="List tasks attached to a contact.")
    async def get_tasks_attached_to_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        return await invoke_tool.records(
            "get_tasks_attached_to_contact",
            "GetTasksAttachedToContact",
            _attached(contact_id, max_results, page),
        )

    # Notes

    @mcp.tool(name="create_note", description="Add a note to a contact's history.")
    async def create_note(contact_id: str, note: str, date_displayed: Optional[str] = None) -> str:
        params = compact({"ContactId": contact_id, "Note": note, "DateDisplayedInHistory": date_displayed})
        result = await invoke_tool("create_note", "CreateNote", params)
        return created_message("Note", result, "NoteId")

    @mcp.tool(name="edit_note", description="Update the text or displayed date of a note.")
    async def edit_note(note_id: str, note: Optional[str] = None, date_displayed: Optional[str] = None) -> str:
        params = compact({"NoteId": note_id, "Note": note, "DateDisplayedInHistory": date_displayed})
        await invoke_tool("edit_note", "EditNote", params)
        return f"Note {note_id} updated successfully."

    @mcp.tool(name="delete_note", description="Permanently delete a note.")
    async def delete_note(note_id: str) -> str:
        await invoke_tool("delete_note", "DeleteNote", {"NoteId": note_id})
        return f"Note {note_id} deleted successfully."

    @mcp.tool(name="get_note", description="Retrieve one note by ID.")
    async def get_note(note_id: str) -> Any:
        return await invoke_tool("get_note", "GetNote", {"NoteId": note_id})

    @mcp.tool(name="search_notes", description="Search notes by date range, user or contact.")
    async def search_notes(
        date_start: Optional[str] = None,
        date_end: Optional[str] = None,
        user_filter: Optional[List[str]] = None,
        contact_id: Optional[str] = None,
        sort_direction: Optional[SortDirection] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({
            "DateFilterStart": date_start,
            "DateFilterEnd": date_end,
            "UserFilter": user_filter,
            "ContactId": contact_id,
            "SortDirection": sort_direction,
            "MaxNumberOfResults": max_results,
            "Page": page,
        })
        return await invoke_tool.records("search_notes", "GetNotes", params)

    @mcp.tool(name="get_notes_attached_to_contact", description="List notes attached to a contact.")
    async def get_notes_attached_to_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        return await invoke_tool.records(
            "get_notes_attached_to_contact",
            "GetNotesAttachedToContact",
            _attached(contact_id, max_results, page),
        )
