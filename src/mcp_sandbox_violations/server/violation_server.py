"""MCP server entrypoint (stdio transport).

This module wires together:
- Tools: the sandbox_violations table query
- Resources: column reference, row schema and sample log lines
- Prompts: a review workflow over recent violations

Run locally (stdio):
    python -m mcp_sandbox_violations.server.violation_server
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_sandbox_violations.core.collector import ViolationCollector
from mcp_sandbox_violations.core.config import LOG_LEVEL_ENV
from mcp_sandbox_violations.prompts.registry import register_prompts
from mcp_sandbox_violations.resources.registry import register_resources
from mcp_sandbox_violations.tools.violations import sandbox_violations_impl

LOGGER = logging.getLogger(__name__)

_collector: ViolationCollector | None = None


def _configure_logging() -> None:
    """Configure a reasonable default logging setup.

    The MCP client typically captures stderr; keeping logs concise makes them easier to consume.
    """
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_collector() -> ViolationCollector:
    """Return the process-wide collector, selecting the platform on first use."""
    global _collector
    if _collector is None:
        _collector = ViolationCollector()
    return _collector


mcp = FastMCP("sandbox-violations", json_response=True)

register_resources(mcp)
register_prompts(mcp)


@mcp.tool()
async def sandbox_violations(
    since: str | None = None,
    limit: int | None = None,
) -> dict[str, Any]:
    """Return recent sandbox denial events as table rows.

    Parameters
    ----------
    since:
        Lookback duration (e.g. 30m, 1h, 1h30m, 2d). Defaults to
        SANDBOX_VIOLATIONS_SINCE or one hour.
    limit:
        Maximum number of rows returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"count": int, "rows": list[dict]} with text columns timestamp,
        process_name, process_id, operation, target_path, deny_code, raw_line.
        Collection failures return no rows rather than an error.
    """
    return await sandbox_violations_impl(collector=get_collector(), since=since, limit=limit)


def main(argv: Sequence[str] | None = None) -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    _ = argv or sys.argv[1:]
    collector = get_collector()
    LOGGER.info(
        "Starting sandbox-violations MCP server (transport=stdio, lookback=%s)",
        collector.config.since,
    )
    mcp.run(transport="stdio")
    LOGGER.info("Server stopped")


if __name__ == "__main__":
    main()
