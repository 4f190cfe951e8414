"""Source reader interface and the external-command runner."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol

from ..errors import SourceUnavailableError

LOGGER = logging.getLogger(__name__)

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


class SourceReader(Protocol):
    """Retrieve raw log text for a lookback window, or raise SourceUnavailableError."""

    name: str
    # False when the backend returns its whole buffer regardless of `since`
    windowed: bool

    async def read(self, since: timedelta) -> str:
        """Return the raw multi-line text for the window."""
        ...


@dataclass(frozen=True, slots=True)
class CommandSourceReader(ABC):
    """Base for readers that run a log query executable and return its stdout.

    Subclasses set `name` and provide the argument template via `args()`.
    `timeout` bounds the child process; the child is killed when it expires
    or when the awaiting task is cancelled.
    """

    name: str
    windowed: bool = True
    timeout: float | None = None

    @abstractmethod
    def args(self, since: timedelta) -> list[str]:
        """Return the argv for the lookback window."""

    async def read(self, since: timedelta) -> str:
        argv = self.args(since)
        LOGGER.debug("Running %s", " ".join(argv))
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SourceUnavailableError(self.name, f"failed to execute {argv[0]}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except TimeoutError:
            raise SourceUnavailableError(
                self.name, f"{argv[0]} did not finish within {self.timeout}s"
            ) from None
        finally:
            if proc.returncode is None:
                proc.kill()
                await proc.wait()

        if proc.returncode != 0:
            raise SourceUnavailableError(
                self.name,
                f"{argv[0]} exited with status {proc.returncode}",
                returncode=proc.returncode,
                stderr=stderr.decode(TEXT_ENCODING, errors=TEXT_ERRORS),
            )
        return stdout.decode(TEXT_ENCODING, errors=TEXT_ERRORS)
