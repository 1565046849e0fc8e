"""Workflow guides exposed as MCP resources."""
from __future__ import annotations

OVERVIEW = """# LACRM MCP Workflow Guide

## Before any create or edit

Call the matching schema tool first. It lists every field (fixed and custom),
whether it is required and the exact input format.

| Operation | Call first | Returns |
|-----------|------------|---------|
| Create/edit contact | get_contact_schema | Fixed + custom fields, required status, formats |
| Create/edit company | get_company_schema | Fixed + custom fields, required status, formats |
| Create/edit pipeline item | get_pipeline_item_schema(pipeline_id) | Required custom fields, valid dropdown options |
| Assign to a user | get_users | Valid user IDs |
| Add to a group | get_groups | Valid group IDs |
| Create an event | get_calendars | Valid calendar IDs |

## Schema fields

- **name**: parameter name to use in create/edit calls
- **required**: must be provided when true
- **type**: field type (Text, Dropdown, Date, ...)
- **input_format**: exact expected format, e.g. "YYYY-MM-DD" for dates
- **valid_options**: allowed values for Dropdown, RadioList and Checkbox fields
- **is_custom_field**: true for account-specific fields

## Minimum required fields

- Contact: name, assigned_to
- Company: name (unique), assigned_to, is_company = true
- Pipeline item: contact_id, pipeline_id, status_id, plus any required custom fields

## Error recovery

An error like "'Hunter' field is required for CreatePipelineItem" means a
required custom field is missing. Call get_pipeline_item_schema(pipeline_id)
to see the field and its valid options, then retry.
"""

CONTACTS = """# Contact & Company Workflow

## Creating a contact

1. `get_contact_schema`: all fields, fixed and custom.
2. `get_users`: pick a user ID for the required assigned_to.
3. `create_contact`:

```
{
  "name": "John Smith",
  "assigned_to": "<user_id>",
  "email": [{"Text": "john@example.com", "Type": "Work"}],
  "phone": [{"Text": "555-123-4567", "Type": "Mobile"}],
  "company_name": "Acme Corp"
}
```

## Creating a company

Same steps with `get_company_schema` and `"is_company": true`. Company names
must be unique in the account.

## Editing a contact

1. `search_contacts` (or `get_contact` when the ID is known).
2. `get_contact_schema` to check available fields.
3. `edit_contact` with only the fields to change. List fields such as email
   replace all existing values.

## Field formats

| Field | Format |
|-------|--------|
| email | array of {Text, Type: Work/Personal/Other} |
| phone | array of {Text, Type: Work/Mobile/Home/Fax/Other} |
| address | array of {Street, City, State, Zip, Country, Type} |
| website | array of {Text, Type} |
| birthday | "YYYY-MM-DD", or "0000-MM-DD" for annual dates |
"""

PIPELINE_ITEMS = """# Pipeline Item Workflow

Pipeline items are deals, opportunities or other tracked items attached to a contact.

## Creating a pipeline item

1. `get_pipelines`: pipeline IDs and their statuses (StatusId, Name).
2. `get_pipeline_item_schema` with the pipeline_id. Each pipeline has its own
   custom fields and some may be required. Dropdown fields list valid_options.
3. `search_contacts`: find the contact to attach the item to.
4. `create_pipeline_item`:

```
{
  "contact_id": "<contact_id>",
  "pipeline_id": "<pipeline_id>",
  "status_id": "<status_id>",
  "custom_fields": {"Deal Value": 50000, "Hunter": "Matt"}
}
```

Dropdown values must match a valid option exactly (case-sensitive).

## Moving an item to another status

Call `edit_pipeline_item` with the pipeline_item_id and the new status_id.
Valid status IDs come from `get_pipelines` or `get_pipeline_statuses`.
"""

WORKFLOWS = {
    "lacrm://workflows/overview": (
        "workflow_overview",
        "START HERE: which tools to call before any LACRM operation",
        OVERVIEW,
    ),
    "lacrm://workflows/contacts": (
        "workflow_contacts",
        "Workflow for creating and editing contacts and companies",
        CONTACTS,
    ),
    "lacrm://workflows/pipeline-items": (
        "workflow_pipeline_items",
        "Workflow for creating and editing pipeline items (deals/opportunities)",
        PIPELINE_ITEMS,
    ),
}


def _reader(text: str):
    def read() -> str:
        return text

    return read


def register_resources(mcp) -> None:
    for uri, (name, description, text) in WORKFLOWS.items():
        mcp.resource(uri, name=name, description=description, mime_type="text/markdown")(_reader(text))
