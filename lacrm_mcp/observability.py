import logging
import sys
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


LOGGER_NAME = "lacrm_mcp"

_STRUCTURED_FIELDS = ("tool", "function", "correlation_id", "duration_ms")


class StructuredFormatter(logging.Formatter):
    """Formatter that fills structured fields missing from a record."""

    def format(self, record: logging.LogRecord) -> str:
        for name in _STRUCTURED_FIELDS:
            if not hasattr(record, name):
                setattr(record, name, "")
        return super().format(record)


def setup_logger(level_name: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logger.setLevel(level)
    if logger.handlers:
        return logger
    # stdout carries the stdio MCP stream
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","tool":"%(tool)s",'
        '"function":"%(function)s","correlation_id":"%(correlation_id)s",'
        '"duration_ms":"%(duration_ms)s","msg":"%(message)s"}'
    ))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


@dataclass
class ToolMetrics:
    """Per-tool counters, with remote failures broken down by LACRM ErrorCode."""

    calls: int = 0
    failures: int = 0
    latency_ms_sum: float = 0.0
    remote_error_codes: Dict[str, int] = field(default_factory=dict)

    def observe(self, duration_ms: float, error: bool, error_code: Optional[str] = None) -> None:
        self.calls += 1
        self.latency_ms_sum += float(duration_ms)
        if not error:
            return
        self.failures += 1
        if error_code:
            self.remote_error_codes[error_code] = self.remote_error_codes.get(error_code, 0) + 1


class InMemoryMetrics:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tools: Dict[str, ToolMetrics] = {}

    def record(self, tool: str, duration_ms: float, error: bool, error_code: Optional[str] = None) -> None:
        with self._lock:
            self._tools.setdefault(tool, ToolMetrics()).observe(duration_ms, error, error_code)

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            return {
                name: {
                    "calls": float(m.calls),
                    "errors": float(m.failures),
                    "avg_latency_ms": m.latency_ms_sum / m.calls if m.calls else 0.0,
                    "error_codes": dict(m.remote_error_codes),
                }
                for name, m in self._tools.items()
            }


def _label(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def render_prometheus(snapshot: Dict[str, Dict[str, Any]], rate_window_calls: int = 0) -> str:
    lines: List[str] = [
        "# HELP lacrm_mcp_healthy LACRM MCP server health status",
        "# TYPE lacrm_mcp_healthy gauge",
        "lacrm_mcp_healthy 1",
        "# HELP lacrm_api_calls_in_window Remote calls admitted in the current rate-limit window",
        "# TYPE lacrm_api_calls_in_window gauge",
        f"lacrm_api_calls_in_window {rate_window_calls}",
    ]
    if not snapshot:
        return "\n".join(lines) + "\n"
    tools = sorted(snapshot.items())
    lines.append("# HELP lacrm_mcp_tool_calls_total Total number of tool calls")
    lines.append("# TYPE lacrm_mcp_tool_calls_total counter")
    lines.extend(f'lacrm_mcp_tool_calls_total{{tool="{tool}"}} {int(m["calls"])}' for tool, m in tools)
    lines.append("# HELP lacrm_mcp_tool_errors_total Total number of failed tool calls")
    lines.append("# TYPE lacrm_mcp_tool_errors_total counter")
    lines.extend(f'lacrm_mcp_tool_errors_total{{tool="{tool}"}} {int(m["errors"])}' for tool, m in tools)
    lines.append("# HELP lacrm_mcp_remote_errors_total LACRM API errors by ErrorCode")
    lines.append("# TYPE lacrm_mcp_remote_errors_total counter")
    for tool, m in tools:
        for code, count in sorted(m.get("error_codes", {}).items()):
            lines.append(f'lacrm_mcp_remote_errors_total{{tool="{tool}",code="{_label(code)}"}} {count}')
    lines.append("# HELP lacrm_mcp_tool_avg_latency_ms Average tool latency in milliseconds")
    lines.append("# TYPE lacrm_mcp_tool_avg_latency_ms gauge")
    lines.extend(f'lacrm_mcp_tool_avg_latency_ms{{tool="{tool}"}} {m["avg_latency_ms"]:.3f}' for tool, m in tools)
    return "\n".join(lines) + "\n"
