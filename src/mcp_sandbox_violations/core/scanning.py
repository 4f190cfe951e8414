"""Sequential line scanning: prefilter, parse, accumulate."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime

from .errors import ScanFaultError
from .formats import LineFilter, ViolationParser, local_now
from .models import CollectionResult, Violation

LOGGER = logging.getLogger(__name__)


def _strip_terminator(line: str) -> str:
    return line.removesuffix("\n").removesuffix("\r")


def iter_lines(text: str) -> Iterator[str]:
    """Lazily yield lines of captured output without their terminators.

    Only a newline ends a line; a bare carriage return stays part of it.
    """
    for line in io.StringIO(text, newline="\n"):
        yield _strip_terminator(line)


def scan_violations(
    lines: Iterable[str],
    *,
    parser: ViolationParser,
    line_filter: LineFilter,
    now: datetime | None = None,
    source: str = "",
) -> CollectionResult:
    """Scan lines in order and collect the recognized violations.

    An I/O or decode error raised by `lines` stops the scan; the violations
    gathered so far are returned together with a ScanFaultError.
    """
    now = now or local_now()
    violations: list[Violation] = []
    it = iter(lines)
    while True:
        try:
            line = next(it)
        except StopIteration:
            break
        except (OSError, UnicodeError) as exc:
            err = ScanFaultError(f"error scanning {source or 'log'} output: {exc}")
            err.__cause__ = exc
            LOGGER.warning("%s (kept %d violations)", err, len(violations))
            return CollectionResult(violations=violations, error=err, source=source)

        line = _strip_terminator(line)
        if not line or not line_filter.matches(line):
            continue
        violation = parser.parse(line, now=now)
        if violation is not None:
            violations.append(violation)

    return CollectionResult(violations=violations, source=source)
