"""MCP resource registry.

Resources are addressable by URI and can be fetched by the MCP client on demand.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from mcp_sandbox_violations.core.collector import COLLECTORS
from mcp_sandbox_violations.core.config import (
    PLATFORM_ENV,
    SINCE_ENV,
    TIMEOUT_ENV,
    YEAR_POLICY_ENV,
)
from mcp_sandbox_violations.tools.violations import COLUMNS, ViolationRow

SAMPLE_MACOS_LOG = (
    "2025-11-03 16:25:43.448666+0900  localhost kernel[0]: (Sandbox) Sandbox: "
    "cat(13276) deny(1) file-read-data /Users/x/.ssh/config\n"
    "2025-11-03 16:25:44.001200+0900  localhost kernel[0]: (Sandbox) Sandbox: "
    "curl(13280) deny(1) network-outbound /private/var/run/mDNSResponder\n"
)

SAMPLE_LINUX_LOG = (
    "Nov 03 16:25:43 host bwrap[12345]: Permission denied: /path/to/file\n"
    "Nov 03 16:25:44 host bwrap[12346]: Can't mount proc on /newroot/proc: Operation not permitted\n"
)


def register_resources(mcp: FastMCP) -> None:
    """Register resource handlers on the MCP server."""

    @mcp.resource("app://sandbox-violations/help")
    def help_resource() -> str:
        """Return a short list of available resource URIs."""
        platforms = ", ".join(sorted(COLLECTORS))
        return (
            "Resources:\n"
            "- app://sandbox-violations/help\n"
            "- app://sandbox-violations/columns\n"
            "- app://sandbox-violations/schemas/row\n"
            "- app://sandbox-violations/examples/macos\n"
            "- app://sandbox-violations/examples/linux\n"
            f"\nSupported platforms: {platforms}\n"
            f"Environment: {SINCE_ENV}, {TIMEOUT_ENV}, {YEAR_POLICY_ENV}, {PLATFORM_ENV}\n"
        )

    @mcp.resource("app://sandbox-violations/columns")
    def columns() -> list[str]:
        """Return the sandbox_violations column names, in order."""
        return list(COLUMNS)

    @mcp.resource("app://sandbox-violations/schemas/row")
    def row_schema() -> dict[str, Any]:
        """Return the JSON schema for a sandbox_violations row."""
        return ViolationRow.model_json_schema()

    @mcp.resource("app://sandbox-violations/examples/macos")
    def sample_macos() -> str:
        """Return sample `log show --style syslog` output."""
        return SAMPLE_MACOS_LOG

    @mcp.resource("app://sandbox-violations/examples/linux")
    def sample_linux() -> str:
        """Return sample `journalctl -o short` output."""
        return SAMPLE_LINUX_LOG
