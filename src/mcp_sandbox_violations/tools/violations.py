"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, Field

from mcp_sandbox_violations.core.collector import ViolationCollector
from mcp_sandbox_violations.core.errors import CollectorError
from mcp_sandbox_violations.core.models import Violation
from mcp_sandbox_violations.core.time_window import parse_duration

LOGGER = logging.getLogger(__name__)

DEFAULT_LIMIT = 500
HARD_LIMIT = 5000
COLUMNS = (
    "timestamp",
    "process_name",
    "process_id",
    "operation",
    "target_path",
    "deny_code",
    "raw_line",
)


class ViolationRow(BaseModel):
    """One sandbox_violations row; every column is text."""

    timestamp: str = Field(description="RFC3339 time the denial was logged.")
    process_name: str = Field(description="Process that attempted the operation.")
    process_id: str = Field(description="PID as printed by the log source.")
    operation: str = Field(description="Denied operation (e.g. file-read-data, Permission denied).")
    target_path: str = Field(description="Resource the operation targeted; may be empty.")
    deny_code: str = Field(description="Backend deny code (numeric on macOS, EPERM on Linux).")
    raw_line: str = Field(description="Original log line.")

    @classmethod
    def from_violation(cls, v: Violation) -> ViolationRow:
        return cls(
            timestamp=v.timestamp.isoformat(timespec="seconds"),
            process_name=v.process_name,
            process_id=v.process_id,
            operation=v.operation,
            target_path=v.target_path,
            deny_code=v.deny_code,
            raw_line=v.raw_line,
        )


async def sandbox_violations_impl(
    *,
    collector: ViolationCollector | None = None,
    since: str | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Implementation for the `sandbox_violations` MCP tool.

    Notes
    -----
    - `since` is a duration such as 30m or 2h; the collector config default
      applies when omitted.
    - Without `collector`, one is built for this host from the environment.
    - Collection errors never fail the query: they are logged and an empty
      row set is returned.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    if limit > HARD_LIMIT:
        limit = HARD_LIMIT

    if collector is None:
        try:
            collector = ViolationCollector()
        except CollectorError as exc:
            LOGGER.warning("Error collecting violations: %s", exc)
            return {"count": 0, "rows": []}
    lookback = parse_duration(since) if since else collector.config.since

    LOGGER.debug("Table query called for sandbox_violations (since=%s)", lookback)
    try:
        result = await collector.collect_violations(lookback)
    except CollectorError as exc:
        LOGGER.warning("Error collecting violations: %s", exc)
        return {"count": 0, "rows": []}

    if result.error is not None:
        LOGGER.warning("Error collecting violations: %s", result.error)
        return {"count": 0, "rows": []}

    LOGGER.debug("Found %d violations", len(result.violations))
    rows = [ViolationRow.from_violation(v).model_dump() for v in result.violations[:limit]]
    return {"count": len(rows), "rows": rows}
