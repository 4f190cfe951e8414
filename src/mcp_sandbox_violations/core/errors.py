"""Error types raised by the collection engine."""

from __future__ import annotations


class CollectorError(Exception):
    """Base class for collection failures."""


class SourceUnavailableError(CollectorError):
    """A log source could not be queried (missing tool, no access, non-zero exit)."""

    def __init__(
        self,
        source: str,
        message: str,
        *,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.source = source
        self.returncode = returncode
        self.stderr = stderr
        detail = f"{source}: {message}"
        if stderr.strip():
            detail = f"{detail}: {stderr.strip()}"
        super().__init__(detail)


class ScanFaultError(CollectorError):
    """Reading already-retrieved log text failed part way through."""


class UnsupportedPlatformError(CollectorError):
    """No collector is registered for the host platform."""

    def __init__(self, platform: str, supported: list[str]) -> None:
        self.platform = platform
        self.supported = supported
        allowed = ", ".join(sorted(supported))
        super().__init__(f"No sandbox violation collector for platform '{platform}'. Supported: {allowed}")
