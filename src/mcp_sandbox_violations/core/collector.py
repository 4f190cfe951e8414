"""Collector facade.

Picks the platform collector once and exposes `collect_violations` to the
query-facing layer. Adding a platform means registering a factory in
`COLLECTORS`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from datetime import timedelta

from .collectors import Collector, new_linux_collector, new_macos_collector
from .config import CollectorConfig, resolve_collector_config
from .errors import UnsupportedPlatformError
from .models import CollectionResult

LOGGER = logging.getLogger(__name__)

COLLECTORS: dict[str, Callable[[CollectorConfig], Collector]] = {
    "darwin": new_macos_collector,
    "linux": new_linux_collector,
}


def platform_key(platform: str) -> str:
    """Normalize a sys.platform value (e.g. linux2 -> linux)."""
    p = platform.strip().lower()
    if p.startswith("linux"):
        return "linux"
    return p


def build_collector(platform: str | None = None, *, config: CollectorConfig | None = None) -> Collector:
    """Build the collector registered for a platform (default: this host)."""
    cfg = config or CollectorConfig()
    key = platform_key(platform or cfg.platform or sys.platform)
    factory = COLLECTORS.get(key)
    if factory is None:
        raise UnsupportedPlatformError(key, list(COLLECTORS))
    LOGGER.debug("Using %s sandbox violation collector", key)
    return factory(cfg)


class ViolationCollector:
    """Facade over the platform collector selected at construction."""

    def __init__(
        self,
        config: CollectorConfig | None = None,
        *,
        collector: Collector | None = None,
    ) -> None:
        self.config = config or resolve_collector_config()
        self._delegate = collector or build_collector(config=self.config)

    async def collect_violations(self, since: timedelta) -> CollectionResult:
        """Collect violations for the lookback window; errors propagate unchanged."""
        return await self._delegate.collect_violations(since)
