from __future__ import annotations

import pytest

from lacrm_mcp.errors import ValidationError
from lacrm_mcp.schema import FIXED_FIELDS, compose_schema, summarize_schema


CUSTOM_FIELDS = {
    "CustomFields": [
        {"FieldId": "f1", "Name": "Industry", "Type": "Dropdown", "RecordType": "Contact",
         "Options": ["Retail", {"Value": "Finance"}, {"Name": "Health"}]},
        {"FieldId": "f2", "Name": "Renewal", "Type": "Date", "RecordType": "Contact", "IsRequired": True},
        {"FieldId": "f3", "Name": "Hunter", "Type": "RadioList", "RecordType": "Pipeline",
         "PipelineId": "p1", "IsRequired": True, "Options": ["Matt", "Sue"]},
        {"FieldId": "f4", "Name": "Other pipeline", "Type": "Text", "RecordType": "Pipeline", "PipelineId": "p2"},
        {"FieldId": "f5", "Name": "Interests", "Type": "Checkbox", "RecordType": "Contact", "Options": ["A", "B"]},
    ]
}


@pytest.mark.asyncio
async def test_contact_schema_merges_fixed_and_custom(client, backend) -> None:
    backend.reply("GetCustomFields", CUSTOM_FIELDS)
    fields = await compose_schema(client, "Contact")

    names = [f.name for f in fields]
    assert names[: len(FIXED_FIELDS["Contact"])] == [name for name, _, _ in FIXED_FIELDS["Contact"]]
    assert names[len(FIXED_FIELDS["Contact"]):] == ["Industry", "Renewal", "Interests"]
    assert backend.last_call() == {"Function": "GetCustomFields", "Parameters": {"RecordType": "Contact"}}

    industry = fields[-3]
    assert industry.is_custom_field is True
    assert industry.valid_options == ["Retail", "Finance", "Health"]
    assert industry.input_format == "exactly one of the valid options, case-sensitive"
    renewal = fields[-2]
    assert renewal.required is True
    assert renewal.input_format == "YYYY-MM-DD"
    assert renewal.valid_options is None
    assert fields[-1].input_format == "array of selected options"


@pytest.mark.asyncio
async def test_pipeline_item_schema_filters_by_pipeline(client, backend) -> None:
    backend.reply("GetCustomFields", CUSTOM_FIELDS)
    fields = await compose_schema(client, "PipelineItem", "p1")

    custom = [f for f in fields if f.is_custom_field]
    assert [f.name for f in custom] == ["Hunter"]
    assert custom[0].valid_options == ["Matt", "Sue"]
    assert backend.last_call()["Parameters"] == {"RecordType": "Pipeline", "PipelineId": "p1"}


@pytest.mark.asyncio
async def test_pipeline_item_without_pipeline_fails_before_any_call(client, backend) -> None:
    with pytest.raises(ValidationError):
        await compose_schema(client, "PipelineItem")
    assert backend.requests == []


@pytest.mark.asyncio
async def test_unknown_record_kind(client) -> None:
    with pytest.raises(ValidationError):
        await compose_schema(client, "Invoice")


@pytest.mark.asyncio
async def test_custom_fields_not_deduplicated(client, backend) -> None:
    backend.reply("GetCustomFields", [{"Name": "name", "Type": "Text"}])
    fields = await compose_schema(client, "Company")
    assert [f.name for f in fields].count("name") == 2


@pytest.mark.asyncio
async def test_summary_partitions_required_fields(client, backend) -> None:
    backend.reply("GetCustomFields", CUSTOM_FIELDS)
    fields = await compose_schema(client, "Company")
    summary = summarize_schema("Company", fields)
    assert [f["name"] for f in summary["required_fields"]] == ["name", "assigned_to", "is_company"]
    assert all(f["required"] is False for f in summary["optional_fields"])
    assert summary["custom_field_count"] == 0
