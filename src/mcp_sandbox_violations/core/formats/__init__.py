"""Line parsers and prefilters for sandbox denial logs.

Contains parsers for macOS unified logging and Linux journal/kernel output.
"""

from __future__ import annotations

from .base import (
    LineFilter,
    ViolationParser,
    YearPolicy,
    linux_default_filter,
    local_now,
    macos_default_filter,
)
from .linux import DENY_CODE, UNKNOWN_OPERATION, LinuxSandboxParser
from .macos import MacOSSandboxParser

__all__ = [
    "DENY_CODE",
    "LineFilter",
    "LinuxSandboxParser",
    "MacOSSandboxParser",
    "UNKNOWN_OPERATION",
    "ViolationParser",
    "YearPolicy",
    "linux_default_filter",
    "local_now",
    "macos_default_filter",
]
