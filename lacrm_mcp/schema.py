"""
Schema composition for LACRM records.

Field schemas are built fresh on every call: the fixed fields of a record
kind, followed by the account's custom fields as returned by GetCustomFields.
Nothing is cached.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .errors import ValidationError
from .responses import decode_records


logger = logging.getLogger("lacrm_mcp.schema")

RECORD_KINDS = ("Contact", "Company", "PipelineItem")

CHOICE_TYPES = ("Dropdown", "RadioList", "Checkbox")

INPUT_FORMATS: Dict[str, str] = {
    "Text": "string",
    "TextArea": "string (multi-line allowed)",
    "Number": "number",
    "Currency": "number (no currency symbol)",
    "Date": "YYYY-MM-DD",
    "Dropdown": "exactly one of the valid options, case-sensitive",
    "RadioList": "exactly one of the valid options, case-sensitive",
    "Checkbox": "array of selected options",
    "ContactLink": "ContactId string",
    "FileLink": "FileId string",
    "Signature": "string",
    "Boolean": "true or false",
    "User": "UserId string from get_users",
    "Id": "ID string",
    "EmailList": 'array of {"Text": "...", "Type": "Work|Personal|Other"}',
    "PhoneList": 'array of {"Text": "...", "Type": "Work|Mobile|Home|Fax|Other"}',
    "AddressList": 'array of {"Street", "City", "State", "Zip", "Country", "Type"}',
    "WebsiteList": 'array of {"Text": "...", "Type": "..."}',
}

# (name, type, required)
_FixedField = Tuple[str, str, bool]

FIXED_FIELDS: Dict[str, List[_FixedField]] = {
    "Contact": [
        ("name", "Text", True),
        ("assigned_to", "User", True),
        ("email", "EmailList", False),
        ("phone", "PhoneList", False),
        ("company_name", "Text", False),
        ("job_title", "Text", False),
        ("address", "AddressList", False),
        ("website", "WebsiteList", False),
        ("background_info", "TextArea", False),
        ("birthday", "Date", False),
    ],
    "Company": [
        ("name", "Text", True),
        ("assigned_to", "User", True),
        ("is_company", "Boolean", True),
        ("email", "EmailList", False),
        ("phone", "PhoneList", False),
        ("address", "AddressList", False),
        ("website", "WebsiteList", False),
        ("background_info", "TextArea", False),
    ],
    "PipelineItem": [
        ("contact_id", "Id", True),
        ("pipeline_id", "Id", True),
        ("status_id", "Id", True),
        ("note", "TextArea", False),
        ("run_status_automation", "Boolean", False),
    ],
}

# Record kind -> RecordType as understood by GetCustomFields
_REMOTE_RECORD_TYPES = {
    "Contact": "Contact",
    "Company": "Company",
    "PipelineItem": "Pipeline",
}


@dataclass
class FieldDescriptor:
    name: str
    required: bool
    type: str
    input_format: str
    valid_options: Optional[List[str]] = None
    is_custom_field: bool = False
    field_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "required": self.required,
            "type": self.type,
            "input_format": self.input_format,
            "is_custom_field": self.is_custom_field,
        }
        if self.valid_options is not None:
            data["valid_options"] = self.valid_options
        if self.field_id is not None:
            data["field_id"] = self.field_id
        return data


def input_format_for(field_type: str) -> str:
    return INPUT_FORMATS.get(field_type, "string")


def _flatten_options(options: Any) -> List[str]:
    flat: List[str] = []
    if isinstance(options, dict):
        options = list(options.values())
    for option in options or []:
        if isinstance(option, str):
            flat.append(option)
        elif isinstance(option, dict):
            value = option.get("Value", option.get("Name"))
            if value is not None:
                flat.append(str(value))
        elif option is not None:
            flat.append(str(option))
    return flat


def _fixed_descriptors(record_kind: str) -> List[FieldDescriptor]:
    return [
        FieldDescriptor(
            name=name,
            required=required,
            type=field_type,
            input_format=input_format_for(field_type),
        )
        for name, field_type, required in FIXED_FIELDS[record_kind]
    ]


def _matches(definition: Dict[str, Any], record_kind: str, pipeline_id: Optional[str]) -> bool:
    record_type = definition.get("RecordType")
    if record_type and record_type != _REMOTE_RECORD_TYPES[record_kind]:
        return False
    if record_kind == "PipelineItem":
        def_pipeline = definition.get("PipelineId")
        if def_pipeline and str(def_pipeline) != str(pipeline_id):
            return False
    return True


def custom_field_descriptor(definition: Dict[str, Any]) -> FieldDescriptor:
    field_type = str(definition.get("Type") or "Text")
    valid_options = None
    if field_type in CHOICE_TYPES:
        valid_options = _flatten_options(definition.get("Options"))
    field_id = definition.get("FieldId", definition.get("CustomFieldId"))
    return FieldDescriptor(
        name=str(definition.get("Name", "")),
        required=bool(definition.get("IsRequired", False)),
        type=field_type,
        input_format=input_format_for(field_type),
        valid_options=valid_options,
        is_custom_field=True,
        field_id=str(field_id) if field_id is not None else None,
    )


async def compose_schema(client, record_kind: str, pipeline_id: Optional[str] = None) -> List[FieldDescriptor]:
    """
    Build the field schema for a record kind.

    PipelineItem requires ``pipeline_id``; the check happens before any remote
    call. Fixed and custom fields are concatenated without deduplication.
    """
    if record_kind not in FIXED_FIELDS:
        raise ValidationError(
            f"Unknown record kind {record_kind!r}. Expected one of: {', '.join(RECORD_KINDS)}"
        )
    if record_kind == "PipelineItem" and not pipeline_id:
        raise ValidationError("pipeline_id is required for pipeline item schemas. Use get_pipelines to find it.")

    fields = _fixed_descriptors(record_kind)

    params: Dict[str, Any] = {"RecordType": _REMOTE_RECORD_TYPES[record_kind]}
    if record_kind == "PipelineItem":
        params["PipelineId"] = pipeline_id
    payload = await client.call("GetCustomFields", params)
    page = decode_records(payload, key="CustomFields")

    custom = [
        custom_field_descriptor(definition)
        for definition in page.results
        if isinstance(definition, dict) and _matches(definition, record_kind, pipeline_id)
    ]
    logger.debug(
        "Composed %s schema: %d fixed, %d custom fields",
        record_kind,
        len(fields),
        len(custom),
    )
    return fields + custom


def summarize_schema(
    record_kind: str,
    fields: List[FieldDescriptor],
    pipeline_id: Optional[str] = None,
) -> Dict[str, Any]:
    summary: Dict[str, Any] = {"record_type": record_kind}
    if pipeline_id is not None:
        summary["pipeline_id"] = pipeline_id
    summary["required_fields"] = [f.to_dict() for f in fields if f.required]
    summary["optional_fields"] = [f.to_dict() for f in fields if not f.required]
    summary["custom_field_count"] = sum(1 for f in fields if f.is_custom_field)
    return summary
