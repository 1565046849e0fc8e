"""
Response normalization for the LACRM v2 API.

classify() turns a raw HTTP response into either the parsed JSON payload or a
typed error. decode_records() reduces the several list shapes the API returns
to a single RecordPage so list tools do not branch on shape themselves.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import AuthenticationError, RemoteError


def _error_from_payload(payload: Dict[str, Any]) -> RemoteError:
    return RemoteError(
        str(payload["ErrorCode"]),
        str(payload.get("ErrorDescription") or "Unknown error"),
        payload.get("ErrorDetails"),
    )


def classify(raw_body: Union[str, bytes], http_status: int, reason: str = "") -> Any:
    if http_status in (401, 403):
        raise AuthenticationError()

    if not 200 <= http_status < 300:
        try:
            payload = json.loads(raw_body)
        except ValueError:
            payload = None
        if isinstance(payload, dict) and "ErrorCode" in payload:
            raise _error_from_payload(payload)
        raise RemoteError(
            f"HTTP_{http_status}",
            f"HTTP error: {http_status} {reason}".rstrip(),
        )

    if not raw_body or not raw_body.strip():
        return None
    payload = json.loads(raw_body)
    if isinstance(payload, dict) and "ErrorCode" in payload:
        raise _error_from_payload(payload)
    return payload


@dataclass
class RecordPage:
    shape: str
    results: List[Any] = field(default_factory=list)
    has_more: bool = False
    total: Optional[int] = None
    raw: Any = None

    def to_dict(self) -> Any:
        if self.shape == "raw":
            return self.raw
        data: Dict[str, Any] = {
            "results": self.results,
            "count": len(self.results),
            "has_more_results": self.has_more,
        }
        if self.total is not None:
            data["total_results"] = self.total
        return data


def _pagination(payload: Dict[str, Any]) -> Tuple[bool, Optional[int]]:
    """Read HasMoreResults, or CurrentPage/TotalPages, and the result total."""
    if "HasMoreResults" in payload:
        has_more = bool(payload["HasMoreResults"])
    else:
        current = payload.get("CurrentPage")
        pages = payload.get("TotalPages")
        has_more = current is not None and pages is not None and int(current) < int(pages)
    total = payload.get("TotalResults", payload.get("Count"))
    return has_more, int(total) if total is not None else None


def decode_records(payload: Any, key: Optional[str] = None) -> RecordPage:
    """
    Decode a list-shaped success payload.

    Shapes:
      array      a bare JSON array of records
      paginated  one record list next to pagination metadata, under
                 "Results", ``key`` or any single list-valued entry
      keyed      an id -> record mapping, or records mapped under ``key``
      raw        anything else, passed through unchanged
    """
    if payload is None:
        return RecordPage(shape="array")

    if isinstance(payload, list):
        return RecordPage(shape="array", results=list(payload))

    if not isinstance(payload, dict):
        return RecordPage(shape="raw", raw=payload)

    if not payload:
        return RecordPage(shape="keyed")

    if isinstance(payload.get("Results"), list):
        records = payload["Results"]
    elif key is not None and isinstance(payload.get(key), list):
        records = payload[key]
    elif key is not None and isinstance(payload.get(key), dict):
        return RecordPage(shape="keyed", results=list(payload[key].values()))
    else:
        list_values = [v for v in payload.values() if isinstance(v, list)]
        if len(list_values) == 1:
            records = list_values[0]
        elif all(isinstance(v, dict) for v in payload.values()):
            return RecordPage(shape="keyed", results=list(payload.values()))
        else:
            return RecordPage(shape="raw", raw=payload)

    has_more, total = _pagination(payload)
    return RecordPage(shape="paginated", results=list(records), has_more=has_more, total=total)
