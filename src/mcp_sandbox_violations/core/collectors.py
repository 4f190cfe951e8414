"""Platform collectors: a fallback chain of readers plus one line parser."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Protocol

from .config import CollectorConfig
from .errors import SourceUnavailableError
from .formats import (
    LineFilter,
    LinuxSandboxParser,
    MacOSSandboxParser,
    ViolationParser,
    linux_default_filter,
    local_now,
    macos_default_filter,
)
from .models import CollectionResult
from .scanning import iter_lines, scan_violations
from .sources import DmesgReader, JournalctlReader, LogShowReader, SourceReader
from .time_window import window_start

LOGGER = logging.getLogger(__name__)


class Collector(Protocol):
    """Anything that can collect sandbox violations for a lookback window."""

    async def collect_violations(self, since: timedelta) -> CollectionResult:
        ...


@dataclass(frozen=True, slots=True)
class FallbackCollector:
    """Try readers in order; scan the first text retrieved.

    Raises the last reader's SourceUnavailableError when every reader fails.
    Output from whole-buffer readers (`windowed=False`) is trimmed to the
    lookback unless `trim_unwindowed` is off, as for replaying old exports.
    """

    readers: Sequence[SourceReader]
    parser: ViolationParser
    line_filter: LineFilter
    clock: Callable[[], datetime] = local_now
    trim_unwindowed: bool = True

    def __post_init__(self) -> None:
        if not self.readers:
            raise ValueError("at least one source reader is required")

    async def _read_first_available(self, since: timedelta) -> tuple[str, SourceReader]:
        errors: list[SourceUnavailableError] = []
        for i, reader in enumerate(self.readers):
            try:
                return await reader.read(since), reader
            except SourceUnavailableError as exc:
                errors.append(exc)
                if i + 1 < len(self.readers):
                    LOGGER.warning(
                        "%s unavailable, falling back to %s: %s",
                        reader.name,
                        self.readers[i + 1].name,
                        exc,
                    )

        if len(errors) > 1:
            raise errors[-1] from errors[-2]
        raise errors[-1]

    async def collect_violations(self, since: timedelta) -> CollectionResult:
        """Collect violations from the first available source."""
        if since <= timedelta(0):
            LOGGER.debug("Non-positive lookback %s; nothing to collect", since)
            return CollectionResult()

        text, reader = await self._read_first_available(since)
        now = self.clock()
        result = scan_violations(
            iter_lines(text),
            parser=self.parser,
            line_filter=self.line_filter,
            now=now,
            source=reader.name,
        )

        if not reader.windowed and self.trim_unwindowed:
            start = window_start(since, now)
            kept = [v for v in result.violations if v.timestamp >= start]
            dropped = len(result.violations) - len(kept)
            if dropped:
                LOGGER.info(
                    "Dropped %d violations from %s older than %s",
                    dropped,
                    reader.name,
                    start.isoformat(timespec="seconds"),
                )
            result = replace(result, violations=kept)

        LOGGER.debug("Collected %d violations from %s", len(result.violations), reader.name)
        return result


def new_macos_collector(cfg: CollectorConfig) -> FallbackCollector:
    """Unified logging only; there is no fallback source on macOS."""
    return FallbackCollector(
        readers=(LogShowReader(timeout=cfg.command_timeout),),
        parser=MacOSSandboxParser(),
        line_filter=macos_default_filter(),
    )


def new_linux_collector(cfg: CollectorConfig) -> FallbackCollector:
    """Journal first, kernel ring buffer when the journal is unavailable."""
    return FallbackCollector(
        readers=(
            JournalctlReader(timeout=cfg.command_timeout),
            DmesgReader(timeout=cfg.command_timeout),
        ),
        parser=LinuxSandboxParser(year_policy=cfg.year_policy),
        line_filter=linux_default_filter(),
    )
