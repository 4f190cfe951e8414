from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime

from mcp_sandbox_violations.core.errors import ScanFaultError
from mcp_sandbox_violations.core.formats import (
    LinuxSandboxParser,
    MacOSSandboxParser,
    linux_default_filter,
    macos_default_filter,
)
from mcp_sandbox_violations.core.scanning import iter_lines, scan_violations

NOW = datetime(2025, 11, 10, 12, 0, 0, tzinfo=UTC)


def test_iter_lines_strips_terminators_only() -> None:
    text = "first  \r\nsecond\n\nthird\rstill third\n"
    assert list(iter_lines(text)) == ["first  ", "second", "", "third\rstill third"]


def test_scan_keeps_carriage_return_inside_line() -> None:
    line = (
        "2025-11-03 16:25:43.448666+0900 localhost kernel[0]: (Sandbox) Sandbox: "
        "cat(13276) deny(1) file-read-data /Users/x/odd\rname"
    )
    result = scan_violations(
        iter_lines(line + "\r\n"), parser=MacOSSandboxParser(), line_filter=macos_default_filter(), now=NOW
    )

    assert len(result.violations) == 1
    assert result.violations[0].raw_line == line
    assert result.violations[0].target_path == "/Users/x/odd\rname"


def test_scan_empty_input() -> None:
    result = scan_violations(
        iter_lines(""), parser=MacOSSandboxParser(), line_filter=macos_default_filter(), now=NOW
    )
    assert result.violations == []
    assert result.error is None
    assert result.ok


def test_scan_macos_preserves_source_order(macos_log: str) -> None:
    result = scan_violations(
        iter_lines(macos_log),
        parser=MacOSSandboxParser(),
        line_filter=macos_default_filter(),
        now=NOW,
        source="log show",
    )
    assert [v.process_name for v in result.violations] == ["cat", "curl"]
    assert result.source == "log show"
    assert all(v.raw_line in macos_log.splitlines() for v in result.violations)


def test_scan_linux_filters_and_parses(linux_log: str) -> None:
    result = scan_violations(
        iter_lines(linux_log),
        parser=LinuxSandboxParser(),
        line_filter=linux_default_filter(),
        now=NOW,
    )
    assert [v.process_id for v in result.violations] == ["12345", "12346"]
    assert [v.operation for v in result.violations] == ["Permission denied", "unknown"]


def test_scan_lines_without_marker_yield_nothing() -> None:
    lines = [
        "2025-11-03 16:25:43.448666+0900 localhost kernel[0]: cat(13276) deny(1) file-read-data /x",
        "Nov 03 16:25:43 host runner[1]: operation failed: /path/to/file",
    ]
    mac = scan_violations(lines, parser=MacOSSandboxParser(), line_filter=macos_default_filter(), now=NOW)
    lin = scan_violations(lines, parser=LinuxSandboxParser(), line_filter=linux_default_filter(), now=NOW)
    assert mac.violations == []
    assert lin.violations == []


def test_scan_is_idempotent(macos_log: str, linux_log: str) -> None:
    def run_mac():
        return scan_violations(
            iter_lines(macos_log), parser=MacOSSandboxParser(), line_filter=macos_default_filter(), now=NOW
        )

    def run_linux():
        return scan_violations(
            iter_lines(linux_log), parser=LinuxSandboxParser(), line_filter=linux_default_filter(), now=NOW
        )

    assert run_mac() == run_mac()
    assert run_linux() == run_linux()


def test_scan_fault_keeps_partial_results(macos_line: str) -> None:
    def broken_stream() -> Iterator[str]:
        yield macos_line + "\n"
        yield "noise\n"
        raise OSError("stream closed")

    result = scan_violations(
        broken_stream(),
        parser=MacOSSandboxParser(),
        line_filter=macos_default_filter(),
        now=NOW,
        source="stdin",
    )

    assert len(result.violations) == 1
    assert result.violations[0].raw_line == macos_line
    assert isinstance(result.error, ScanFaultError)
    assert "stream closed" in str(result.error)
    assert not result.ok
