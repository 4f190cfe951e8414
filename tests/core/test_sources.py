from __future__ import annotations

import asyncio
import gzip
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import pytest

from mcp_sandbox_violations.core.errors import SourceUnavailableError
from mcp_sandbox_violations.core.scanning import iter_lines
from mcp_sandbox_violations.core.sources import (
    CommandSourceReader,
    DmesgReader,
    FileSourceReader,
    JournalctlReader,
    LogShowReader,
)
from mcp_sandbox_violations.core.time_window import format_minutes


class FakeProcess:
    def __init__(self, returncode: int, stdout: bytes = b"", stderr: bytes = b"", hang: bool = False) -> None:
        self.returncode: int | None = None
        self._rc = returncode
        self._stdout = stdout
        self._stderr = stderr
        self._hang = hang
        self.killed = False

    async def communicate(self) -> tuple[bytes, bytes]:
        if self._hang:
            await asyncio.sleep(60)
        self.returncode = self._rc
        return self._stdout, self._stderr

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    async def wait(self) -> int:
        return self.returncode


@pytest.fixture
def fake_exec(monkeypatch: pytest.MonkeyPatch):
    calls: list[tuple[str, ...]] = []
    state: dict[str, object] = {}

    async def _exec(*argv, **kwargs):
        calls.append(argv)
        exc = state.get("raise")
        if exc is not None:
            raise exc
        return state["process"]

    monkeypatch.setattr(asyncio, "create_subprocess_exec", _exec)

    def _configure(process: FakeProcess | None = None, raise_: Exception | None = None):
        state["process"] = process
        state["raise"] = raise_
        return calls

    return _configure


def test_log_show_args() -> None:
    args = LogShowReader().args(timedelta(hours=1))
    assert args == [
        "log",
        "show",
        "--predicate",
        'eventMessage CONTAINS "Sandbox:" AND eventMessage CONTAINS "deny"',
        "--style",
        "syslog",
        "--last",
        "60m",
    ]


def test_journalctl_args() -> None:
    assert JournalctlReader().args(timedelta(hours=2)) == [
        "journalctl",
        "--since",
        "2 hours ago",
        "--no-pager",
        "-o",
        "short",
    ]
    assert JournalctlReader().args(timedelta(minutes=30))[2] == "30 minutes ago"


def test_dmesg_args_and_window_flag() -> None:
    reader = DmesgReader()
    assert reader.args(timedelta(hours=1)) == ["dmesg", "-T"]
    assert reader.windowed is False
    assert JournalctlReader().windowed is True


@pytest.mark.asyncio
async def test_command_reader_returns_stdout(fake_exec) -> None:
    calls = fake_exec(FakeProcess(0, stdout=b"line one\nline two\n"))
    text = await JournalctlReader().read(timedelta(hours=1))
    assert text == "line one\nline two\n"
    assert calls[0][0] == "journalctl"


@pytest.mark.asyncio
async def test_command_reader_decodes_invalid_utf8(fake_exec) -> None:
    fake_exec(FakeProcess(0, stdout=b"bwrap \xff\n"))
    text = await DmesgReader().read(timedelta(hours=1))
    assert text == "bwrap \ufffd\n"


@pytest.mark.asyncio
async def test_command_reader_nonzero_exit(fake_exec) -> None:
    fake_exec(FakeProcess(1, stderr=b"No journal files were found.\n"))
    with pytest.raises(SourceUnavailableError) as info:
        await JournalctlReader().read(timedelta(hours=1))
    err = info.value
    assert err.source == "journalctl"
    assert err.returncode == 1
    assert "No journal files were found." in str(err)


@pytest.mark.asyncio
async def test_command_reader_missing_tool(fake_exec) -> None:
    fake_exec(raise_=FileNotFoundError(2, "No such file or directory", "log"))
    with pytest.raises(SourceUnavailableError, match="failed to execute log"):
        await LogShowReader().read(timedelta(minutes=5))


@pytest.mark.asyncio
async def test_command_reader_timeout_kills_child(fake_exec) -> None:
    proc = FakeProcess(0, hang=True)
    fake_exec(proc)
    with pytest.raises(SourceUnavailableError, match="did not finish"):
        await DmesgReader(timeout=0.01).read(timedelta(hours=1))
    assert proc.killed


@pytest.mark.asyncio
async def test_file_reader_plain_and_gzip(tmp_path: Path) -> None:
    content = "Nov 03 16:25:43 host bwrap[1]: Permission denied: /a\n"
    plain = tmp_path / "journal.log"
    plain.write_text(content, encoding="utf-8")
    packed = tmp_path / "journal.log.gz"
    with gzip.open(packed, "wt", encoding="utf-8") as f:
        f.write(content)

    assert await FileSourceReader(path=plain).read(timedelta(hours=1)) == content
    assert await FileSourceReader(path=packed).read(timedelta(hours=1)) == content


@pytest.mark.asyncio
async def test_file_reader_missing_file(tmp_path: Path) -> None:
    reader = FileSourceReader(path=tmp_path / "missing.log")
    with pytest.raises(SourceUnavailableError, match="not found"):
        await reader.read(timedelta(hours=1))
    assert reader.name.startswith("file:")
    assert reader.windowed is False


def test_command_reader_base_needs_argument_template() -> None:
    with pytest.raises(TypeError):
        CommandSourceReader(name="custom")

    @dataclass(frozen=True, slots=True)
    class EchoReader(CommandSourceReader):
        name: str = "echo"

        def args(self, since: timedelta) -> list[str]:
            return ["echo", format_minutes(since)]

    assert EchoReader().args(timedelta(minutes=5)) == ["echo", "5m"]
    assert EchoReader().windowed is True


@pytest.mark.asyncio
async def test_file_reader_keeps_line_endings_untranslated(tmp_path: Path) -> None:
    export = tmp_path / "journal.log"
    export.write_bytes(b"Nov 03 16:25:43 host bwrap[1]: Permission denied: /odd\rname\r\nnext\n")

    text = await FileSourceReader(path=export).read(timedelta(hours=1))

    assert text == "Nov 03 16:25:43 host bwrap[1]: Permission denied: /odd\rname\r\nnext\n"
    assert list(iter_lines(text)) == ["Nov 03 16:25:43 host bwrap[1]: Permission denied: /odd\rname", "next"]
