from __future__ import annotations

import json

import pytest

from lacrm_mcp.errors import AuthenticationError, RemoteError
from lacrm_mcp.responses import classify, decode_records


class TestClassify:
    def test_success_payload_returned_unchanged(self) -> None:
        body = json.dumps({"ContactId": "123", "Results": [1, 2]})
        assert classify(body, 200) == {"ContactId": "123", "Results": [1, 2]}

    def test_success_array_returned_unchanged(self) -> None:
        assert classify("[1, 2, 3]", 200) == [1, 2, 3]

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses_do_not_parse_body(self, status: int) -> None:
        with pytest.raises(AuthenticationError):
            classify("<html>not json</html>", status)

    def test_error_code_in_success_body(self) -> None:
        body = json.dumps({"ErrorCode": "InvalidContactId", "ErrorDescription": "No such contact"})
        with pytest.raises(RemoteError) as exc_info:
            classify(body, 200)
        assert exc_info.value.code == "InvalidContactId"
        assert exc_info.value.description == "No such contact"

    def test_error_code_in_failure_body(self) -> None:
        body = json.dumps({"ErrorCode": "MissingField", "ErrorDescription": "'Hunter' field is required"})
        with pytest.raises(RemoteError) as exc_info:
            classify(body, 400, "Bad Request")
        assert exc_info.value.code == "MissingField"

    def test_non_json_failure_body(self) -> None:
        with pytest.raises(RemoteError) as exc_info:
            classify("Internal error", 500, "Internal Server Error")
        assert exc_info.value.code == "HTTP_500"
        assert exc_info.value.description == "HTTP error: 500 Internal Server Error"

    def test_json_failure_body_without_error_code(self) -> None:
        with pytest.raises(RemoteError) as exc_info:
            classify(json.dumps({"message": "nope"}), 502, "Bad Gateway")
        assert exc_info.value.code == "HTTP_502"

    def test_invalid_json_on_success_is_unclassified(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            classify("not json", 200)
        assert not isinstance(exc_info.value, RemoteError)

    def test_empty_success_body_is_none(self) -> None:
        assert classify(b"", 200) is None


class TestDecodeRecords:
    def test_array(self) -> None:
        page = decode_records([{"UserId": "1"}])
        assert page.shape == "array"
        assert page.results == [{"UserId": "1"}]
        assert page.has_more is False

    def test_paginated(self) -> None:
        page = decode_records({"HasMoreResults": True, "Results": [{"ContactId": "1"}]})
        assert page.shape == "paginated"
        assert page.has_more is True
        assert page.to_dict() == {
            "results": [{"ContactId": "1"}],
            "count": 1,
            "has_more_results": True,
        }

    def test_records_under_key(self) -> None:
        page = decode_records({"CustomFields": [{"Name": "Hunter"}]}, key="CustomFields")
        assert page.results == [{"Name": "Hunter"}]

    def test_keyed_id_map(self) -> None:
        page = decode_records({"1": {"Name": "A"}, "2": {"Name": "B"}})
        assert page.shape == "keyed"
        assert page.results == [{"Name": "A"}, {"Name": "B"}]

    def test_single_list_envelope(self) -> None:
        page = decode_records({"Teams": [{"TeamId": "t1"}]})
        assert page.results == [{"TeamId": "t1"}]

    def test_page_count_pagination(self) -> None:
        page = decode_records({
            "Results": [{"ContactId": "1"}],
            "CurrentPage": 1,
            "TotalPages": 3,
            "TotalResults": 250,
        })
        assert page.has_more is True
        assert page.total == 250

    def test_last_page_has_no_more(self) -> None:
        page = decode_records({"Results": [], "CurrentPage": 3, "TotalPages": 3, "TotalResults": 250})
        assert page.has_more is False

    def test_single_list_with_metadata(self) -> None:
        page = decode_records({"Tasks": [{"TaskId": "1"}], "HasMoreResults": True})
        assert page.shape == "paginated"
        assert page.results == [{"TaskId": "1"}]
        assert page.has_more is True

    def test_unrecognized_shape_passes_through(self) -> None:
        payload = {"a": 1, "b": "x"}
        assert decode_records(payload).to_dict() == payload
        assert decode_records("text").to_dict() == "text"
