"""Emails, files, relationships and group memberships attached to contacts."""
import base64
import binascii
import logging
from pathlib import Path, PurePath
from typing import Any, Dict, List, Literal, Optional

from ..client import DEFAULT_MIME_TYPE, UploadFile
from ..errors import ValidationError
from . import compact, created_message, invalid


logger = logging.getLogger("lacrm_mcp.tools.records")

MAX_FILE_BYTES = 50 * 1024 * 1024

FORBIDDEN_PATH_SEGMENTS = frozenset({
    ".git", ".env", ".ssh", ".aws", ".config",
    "node_modules", "__pycache__", ".venv",
    "credentials", "secrets", ".npmrc", ".pypirc",
})


def validate_file_path(file_path: str) -> Path:
    """Reject traversal and paths touching sensitive directories or files."""
    segments = [s.lower() for s in PurePath(file_path.replace("\\", "/")).parts]
    if ".." in segments or ".." in file_path:
        raise ValidationError('file_path cannot contain ".." (path traversal not allowed)')
    for segment in segments:
        if segment in FORBIDDEN_PATH_SEGMENTS:
            raise ValidationError(f'access to sensitive path "{segment}" is not allowed')
    return Path(file_path)


def load_upload(
    file_base64: Optional[str],
    file_path: Optional[str],
    file_name: Optional[str],
    mime_type: Optional[str],
) -> UploadFile:
    if file_base64:
        if not file_name:
            raise ValidationError("file_name is required when using file_base64")
        try:
            content = base64.b64decode(file_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError(f"file_base64 is not valid base64: {exc}") from exc
        name = file_name
    elif file_path:
        path = validate_file_path(file_path)
        if not path.is_file():
            raise ValidationError(f"file not found: {file_path}")
        if path.stat().st_size > MAX_FILE_BYTES:
            raise ValidationError("file exceeds the 50MB upload limit")
        content = path.read_bytes()
        name = file_name or path.name
    else:
        raise ValidationError("either file_base64 or file_path is required")

    if len(content) > MAX_FILE_BYTES:
        raise ValidationError("file exceeds the 50MB upload limit")
    return UploadFile(name=name, content=content, mime_type=mime_type or DEFAULT_MIME_TYPE)


def _group_target(group_id: Optional[str], group_name: Optional[str]) -> Dict[str, Any]:
    if not group_id and not group_name:
        raise invalid("either group_id or group_name is required")
    if group_id and group_name:
        raise invalid("use either group_id or group_name, not both")
    return compact({"GroupId": group_id or None, "GroupName": group_name or None})


def register_record_tools(mcp, invoke_tool) -> None:
    # Emails

    @mcp.tool(
        name="create_email",
        description=(
            "Log an email in the history of one or more contacts. from_address and each "
            'recipient are {"Address": str, "Name": str}; date is ISO 8601.'
        ),
    )
    async def create_email(
        contact_ids: List[str],
        from_address: Dict[str, Any],
        to: List[Dict[str, Any]],
        body: str,
        date: str,
        user_is_sender: Optional[bool] = None,
        cc: Optional[List[Dict[str, Any]]] = None,
        subject: Optional[str] = None,
    ) -> str:
        params = compact({
            "ContactIds": contact_ids,
            "From": from_address,
            "To": to,
            "Body": body,
            "Date": date,
            "UserIsSender": user_is_sender,
            "Cc": cc,
            "Subject": subject,
        })
        result = await invoke_tool("create_email", "CreateEmail", params)
        return created_message("Email", result, "EmailId")

    @mcp.tool(name="get_email", description="Retrieve one logged email by ID.")
    async def get_email(email_id: str) -> Any:
        return await invoke_tool("get_email", "GetEmail", {"EmailId": email_id})

    @mcp.tool(name="delete_email", description="Permanently delete a logged email.")
    async def delete_email(email_id: str) -> str:
        await invoke_tool("delete_email", "DeleteEmail", {"EmailId": email_id})
        return f"Email {email_id} deleted successfully."

    @mcp.tool(
        name="search_emails",
        description="Search logged emails by date range, user or contact. Set include_company_contacts to add emails of contacts at a company.",
    )
    async def search_emails(
        date_start: Optional[str] = None,
        date_end: Optional[str] = None,
        user_filter: Optional[List[str]] = None,
        contact_id: Optional[str] = None,
        include_company_contacts: Optional[bool] = None,
        sort_direction: Optional[Literal["Ascending", "Descending"]] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({
            "DateFilterStart": date_start,
            "DateFilterEnd": date_end,
            "UserFilter": user_filter,
            "ContactId": contact_id,
            "GetContactsAtCompanyEmails": include_company_contacts,
            "SortDirection": sort_direction,
            "MaxNumberOfResults": max_results,
            "Page": page,
        })
        return await invoke_tool.records("search_emails", "GetEmails", params)

    @mcp.tool(name="get_emails_attached_to_contact", description="List emails logged for a contact.")
    async def get_emails_attached_to_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({"ContactId": contact_id, "MaxNumberOfResults": max_results, "Page": page})
        return await invoke_tool.records("get_emails_attached_to_contact", "GetEmailsAttachedToContact", params)

    # Files

    @mcp.tool(
        name="create_file",
        description=(
            "Upload a file and attach it to a contact, either as file_base64 (file_name required) "
            "or from a local file_path. Maximum 50MB. Returns the new FileId."
        ),
    )
    async def create_file(
        contact_id: str,
        file_base64: Optional[str] = None,
        file_path: Optional[str] = None,
        file_name: Optional[str] = None,
        mime_type: Optional[str] = None,
    ) -> str:
        async def operation(client) -> Any:
            upload = load_upload(file_base64, file_path, file_name, mime_type)
            logger.info("Uploading %s (%d bytes) to contact %s", upload.name, len(upload.content), contact_id)
            return await client.call_with_file("CreateFile", {"ContactId": contact_id}, upload)

        result = await invoke_tool.run("create_file", operation)
        return created_message("File", result, "FileId")

    @mcp.tool(
        name="get_file",
        description="Retrieve file metadata and a temporary download URL (expires after 5 minutes).",
    )
    async def get_file(file_id: str) -> Any:
        return await invoke_tool("get_file", "GetFile", {"FileId": file_id})

    @mcp.tool(
        name="get_files_attached_to_contact",
        description="List files attached to a contact, optionally with previous versions.",
    )
    async def get_files_attached_to_contact(contact_id: str, include_versions: Optional[bool] = None) -> Dict[str, Any]:
        params = compact({"ContactId": contact_id, "ReturnPreviousVersions": include_versions})
        return await invoke_tool.records("get_files_attached_to_contact", "GetFilesAttachedToContact", params)

    # Relationships

    @mcp.tool(name="create_relationship", description="Link two contacts or companies with a note describing the relationship.")
    async def create_relationship(contact_id_1: str, contact_id_2: str, note: str) -> str:
        result = await invoke_tool(
            "create_relationship",
            "CreateRelationship",
            {"ContactId1": contact_id_1, "ContactId2": contact_id_2, "Note": note},
        )
        return created_message("Relationship", result, "RelationshipId")

    @mcp.tool(name="edit_relationship", description="Change the note on a relationship.")
    async def edit_relationship(relationship_id: str, note: str) -> str:
        await invoke_tool("edit_relationship", "EditRelationship", {"RelationshipId": relationship_id, "Note": note})
        return f"Relationship {relationship_id} updated successfully."

    @mcp.tool(name="delete_relationship", description="Remove a relationship between two contacts.")
    async def delete_relationship(relationship_id: str) -> str:
        await invoke_tool("delete_relationship", "DeleteRelationship", {"RelationshipId": relationship_id})
        return f"Relationship {relationship_id} deleted successfully."

    @mcp.tool(name="get_relationship", description="Retrieve one relationship by ID.")
    async def get_relationship(relationship_id: str) -> Any:
        return await invoke_tool("get_relationship", "GetRelationship", {"RelationshipId": relationship_id})

    @mcp.tool(name="get_relationships_attached_to_contact", description="List relationships of a contact.")
    async def get_relationships_attached_to_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({"ContactId": contact_id, "MaxNumberOfResults": max_results, "Page": page})
        return await invoke_tool.records(
            "get_relationships_attached_to_contact",
            "GetRelationshipsAttachedToContact",
            params,
        )

    # Group membership

    @mcp.tool(
        name="add_contact_to_group",
        description="Add a contact to a group given either group_id or group_name (not both). Get groups from get_groups.",
    )
    async def add_contact_to_group(
        contact_id: str,
        group_id: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> str:
        params = {"ContactId": contact_id, **_group_target(group_id, group_name)}
        await invoke_tool("add_contact_to_group", "CreateGroupMembership", params)
        return f"Contact {contact_id} added to group {group_id or group_name}."

    @mcp.tool(
        name="remove_contact_from_group",
        description="Remove a contact from a group given either group_id or group_name (not both).",
    )
    async def remove_contact_from_group(
        contact_id: str,
        group_id: Optional[str] = None,
        group_name: Optional[str] = None,
    ) -> str:
        params = {"ContactId": contact_id, **_group_target(group_id, group_name)}
        await invoke_tool("remove_contact_from_group", "DeleteGroupMembership", params)
        return f"Contact {contact_id} removed from group {group_id or group_name}."

    @mcp.tool(name="get_groups_for_contact", description="List the groups a contact belongs to.")
    async def get_groups_for_contact(
        contact_id: str,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({"ContactId": contact_id, "MaxNumberOfResults": max_results, "Page": page})
        return await invoke_tool.records("get_groups_for_contact", "GetGroupsAttachedToContact", params)

    @mcp.tool(
        name="get_contacts_in_group",
        description="List the contacts in a group given either group_id or group_name (not both).",
    )
    async def get_contacts_in_group(
        group_id: Optional[str] = None,
        group_name: Optional[str] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact(
            {"MaxNumberOfResults": max_results, "Page": page},
            _group_target(group_id, group_name),
        )
        return await invoke_tool.records("get_contacts_in_group", "GetContactsInGroup", params)
