"""MCP prompt registry.

Prompts are predefined conversation/workflow templates that the client can invoke explicitly.
"""

from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP


def build_review_prompt(since: str = "1h", focus: str | None = None) -> list[dict[str, Any]]:
    """Build the message list for reviewing recent sandbox denials."""
    focus_line = f"- Focus on: {focus}\n" if focus else ""
    return [
        {
            "role": "system",
            "content": (
                "You are a security reviewer for sandboxed developer tooling. "
                "Summarize sandbox denials from evidence only. "
                "Do not invent details; if the evidence is insufficient, say so."
            ),
        },
        {
            "role": "user",
            "content": (
                "Review recent sandbox violations. Follow this workflow:\n"
                f"- Call sandbox_violations with since=\"{since}\".\n"
                f"{focus_line}"
                "- Group rows by process_name and operation.\n"
                "- Flag targets under credential or configuration paths "
                "(e.g. ~/.ssh, ~/.aws, ~/.config).\n"
                "- If no rows are returned, say so and suggest widening the window; "
                "an empty result can also mean the log backend was unavailable.\n\n"
                "Return this structure:\n"
                "1) Summary (1-3 bullets)\n"
                "2) Evidence (quote raw_line for 2-5 rows)\n"
                "3) Likely cause (expected policy vs suspicious access)\n"
                "4) Next actions (2-4 bullets)\n"
            ),
        },
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "Column reference:"},
                {"type": "resource", "uri": "app://sandbox-violations/columns"},
            ],
        },
    ]


def register_prompts(mcp: FastMCP) -> None:
    """Register prompt templates on the MCP server."""

    @mcp.prompt()
    def review_sandbox_violations(since: str = "1h", focus: str | None = None) -> list[dict[str, Any]]:
        """Build a prompt that reviews recent sandbox denials."""
        return build_review_prompt(since=since, focus=focus)
