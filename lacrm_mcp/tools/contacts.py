from typing import Any, Dict, List, Literal, Optional

from . import compact, created_message


def _contact_fields(
    email: Optional[List[Dict[str, Any]]],
    phone: Optional[List[Dict[str, Any]]],
    job_title: Optional[str],
    address: Optional[List[Dict[str, Any]]],
    website: Optional[List[Dict[str, Any]]],
    background_info: Optional[str],
    birthday: Optional[str],
) -> Dict[str, Any]:
    return {
        "Email": email,
        "Phone": phone,
        "Job Title": job_title,
        "Address": address,
        "Website": website,
        "Background Info": background_info,
        "Birthday": birthday,
    }


def register_contact_tools(mcp, invoke_tool) -> None:
    @mcp.tool(
        name="create_contact",
        description=(
            "Create a contact or company. Call get_contact_schema (or get_company_schema) and "
            "get_users first. Set is_company to true for a company. email/phone/website are "
            'arrays of {"Text", "Type"}; address is an array of {"Street", "City", "State", '
            '"Zip", "Country", "Type"}; birthday is YYYY-MM-DD. custom_fields maps field names '
            "to values. Returns the new ContactId."
        ),
    )
    async def create_contact(
        name: str,
        assigned_to: str,
        is_company: bool = False,
        email: Optional[List[Dict[str, Any]]] = None,
        phone: Optional[List[Dict[str, Any]]] = None,
        company_name: Optional[str] = None,
        job_title: Optional[str] = None,
        address: Optional[List[Dict[str, Any]]] = None,
        website: Optional[List[Dict[str, Any]]] = None,
        background_info: Optional[str] = None,
        birthday: Optional[str] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
    ) -> str:
        params: Dict[str, Any] = {"AssignedTo": assigned_to, "IsCompany": is_company}
        if is_company:
            params["Company Name"] = name
        else:
            params["Name"] = name
            params["Company Name"] = company_name
        params.update(_contact_fields(email, phone, job_title, address, website, background_info, birthday))
        result = await invoke_tool("create_contact", "CreateContact", compact(params, custom_fields))
        return created_message("Contact", result, "ContactId")

    @mcp.tool(
        name="edit_contact",
        description=(
            "Update a contact or company. Only include fields to change; list fields (email, "
            "phone, address, website) replace all existing values. Call get_contact_schema first."
        ),
    )
    async def edit_contact(
        contact_id: str,
        name: Optional[str] = None,
        assigned_to: Optional[str] = None,
        is_company: Optional[bool] = None,
        email: Optional[List[Dict[str, Any]]] = None,
        phone: Optional[List[Dict[str, Any]]] = None,
        company_name: Optional[str] = None,
        job_title: Optional[str] = None,
        address: Optional[List[Dict[str, Any]]] = None,
        website: Optional[List[Dict[str, Any]]] = None,
        background_info: Optional[str] = None,
        birthday: Optional[str] = None,
        custom_fields: Optional[Dict[str, Any]] = None,
    ) -> str:
        params: Dict[str, Any] = {
            "ContactId": contact_id,
            "Name": name,
            "AssignedTo": assigned_to,
            "IsCompany": is_company,
            "Company Name": company_name,
        }
        params.update(_contact_fields(email, phone, job_title, address, website, background_info, birthday))
        await invoke_tool("edit_contact", "EditContact", compact(params, custom_fields))
        return f"Contact {contact_id} updated successfully."

    @mcp.tool(
        name="delete_contact",
        description="Permanently delete a contact or company and its attached data. Cannot be undone.",
    )
    async def delete_contact(contact_id: str) -> str:
        await invoke_tool("delete_contact", "DeleteContact", {"ContactId": contact_id})
        return f"Contact {contact_id} deleted successfully."

    @mcp.tool(name="get_contact", description="Retrieve one contact or company by ID, including custom fields.")
    async def get_contact(contact_id: str) -> Any:
        return await invoke_tool("get_contact", "GetContact", {"ContactId": contact_id})

    @mcp.tool(
        name="get_contacts_by_ids",
        description="Retrieve several contacts or companies by ID in one call (max 10000 per page).",
    )
    async def get_contacts_by_ids(
        contact_ids: List[str],
        max_results: Optional[int] = None,
        page: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = compact({"ContactIds": contact_ids, "MaxNumberOfResults": max_results, "Page": page})
        return await invoke_tool.records("get_contacts_by_ids", "GetContactsById", params)

    @mcp.tool(
        name="search_contacts",
        description=(
            "Search contacts and companies by free text, record type, owner, with sorting and "
            'advanced filters (array of {"Name", "Operation", "Value"}).'
        ),
    )
    async def search_contacts(
        search_terms: Optional[str] = None,
        record_type: Optional[Literal["Contacts", "Companies"]] = None,
        owner_filter: Optional[List[str]] = None,
        sort_by: Optional[
            Literal["Relevance", "FirstName", "LastName", "CompanyName", "DateCreated", "LastUpdate"]
        ] = None,
        sort_direction: Optional[Literal["Ascending", "Descending"]] = None,
        max_results: Optional[int] = None,
        page: Optional[int] = None,
        advanced_filters: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        params = compact({
            "SearchTerms": search_terms,
            "RecordTypeFilter": record_type,
            "OwnerFilter": owner_filter,
            "SortBy": sort_by,
            "SortDirection": sort_direction,
            "MaxNumberOfResults": max_results,
            "Page": page,
            "AdvancedFilters": advanced_filters,
        })
        return await invoke_tool.records("search_contacts", "GetContacts", params)
