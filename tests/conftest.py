from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta

import pytest

from mcp_sandbox_violations.core.errors import SourceUnavailableError

MACOS_LINE = (
    "2025-11-03 16:25:43.448666+0900 localhost kernel[0]: (Sandbox) Sandbox: "
    "cat(13276) deny(1) file-read-data /Users/x/.ssh/config"
)
LINUX_LINE = "Nov 03 16:25:43 host bwrap[12345]: Permission denied: /path/to/file"


@dataclass
class FakeReader:
    """In-memory SourceReader that records the windows it was asked for."""

    name: str
    text: str = ""
    error: SourceUnavailableError | None = None
    windowed: bool = True
    calls: list[timedelta] = field(default_factory=list)

    async def read(self, since: timedelta) -> str:
        self.calls.append(since)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def macos_log() -> str:
    return (
        "\n".join(
            [
                "Timestamp                       (process)[PID]",
                MACOS_LINE,
                "2025-11-03 16:25:44.000001+0900 localhost kernel[0]: unrelated message",
                "2025-11-03 16:25:45.120000+0900 localhost kernel[0]: (Sandbox) Sandbox: "
                "curl(13280) deny(1) network-outbound /private/var/run/mDNSResponder",
            ]
        )
        + "\n"
    )


@pytest.fixture
def linux_log() -> str:
    return (
        "\n".join(
            [
                "Nov 03 16:25:40 host systemd[1]: Started session.",
                LINUX_LINE,
                "Nov 03 16:25:44 host sshd[222]: Permission denied (publickey).",
                "Nov 03 16:25:45 host bwrap[12346]: Can't mount proc on /newroot/proc: Operation not permitted",
            ]
        )
        + "\n"
    )


@pytest.fixture
def make_reader() -> Callable[..., FakeReader]:
    def _make(name: str = "fake", **kwargs) -> FakeReader:
        return FakeReader(name=name, **kwargs)

    return _make


@pytest.fixture
def macos_line() -> str:
    return MACOS_LINE


@pytest.fixture
def linux_line() -> str:
    return LINUX_LINE
