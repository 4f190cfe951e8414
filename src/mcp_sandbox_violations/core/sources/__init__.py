"""Source readers for OS log backends."""

from __future__ import annotations

from .base import CommandSourceReader, SourceReader
from .commands import DmesgReader, JournalctlReader, LogShowReader
from .files import FileSourceReader

__all__ = [
    "CommandSourceReader",
    "DmesgReader",
    "FileSourceReader",
    "JournalctlReader",
    "LogShowReader",
    "SourceReader",
]
