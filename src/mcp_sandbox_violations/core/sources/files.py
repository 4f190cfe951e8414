"""Reader for saved log exports (offline replay)."""

from __future__ import annotations

import gzip
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from ..errors import SourceUnavailableError
from .base import TEXT_ENCODING, TEXT_ERRORS


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str) -> AsyncIterator:
    """Open a log export for async text reading (plain or gzip), line endings untranslated."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors, newline="")
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors, newline="") as f:
            yield f


@dataclass(frozen=True, slots=True)
class FileSourceReader:
    """Read text previously captured from `log show`, `journalctl` or `dmesg`.

    The export is returned whole; the collector applies the lookback window
    to what it parses.
    """

    path: Path
    encoding: str = TEXT_ENCODING
    decode_errors: str = TEXT_ERRORS
    windowed: bool = False

    @property
    def name(self) -> str:
        return f"file:{self.path}"

    async def read(self, since: timedelta) -> str:
        if not self.path.is_file():
            raise SourceUnavailableError(self.name, "log export not found")
        try:
            async with _open_text(
                self.path, encoding=self.encoding, decode_errors=self.decode_errors
            ) as f:
                return await f.read()
        except OSError as exc:
            raise SourceUnavailableError(self.name, f"failed to read log export: {exc}") from exc
