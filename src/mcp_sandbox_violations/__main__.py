"""Module entrypoint.

Allows:
    python -m mcp_sandbox_violations
"""

from __future__ import annotations

from mcp_sandbox_violations.server.violation_server import main

if __name__ == "__main__":
    main()
