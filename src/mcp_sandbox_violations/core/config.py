"""Collector configuration and environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import timedelta

from .formats import YearPolicy
from .time_window import parse_duration

SINCE_ENV = "SANDBOX_VIOLATIONS_SINCE"
TIMEOUT_ENV = "SANDBOX_VIOLATIONS_COMMAND_TIMEOUT"
YEAR_POLICY_ENV = "SANDBOX_VIOLATIONS_YEAR_POLICY"
PLATFORM_ENV = "SANDBOX_VIOLATIONS_PLATFORM"
LOG_LEVEL_ENV = "SANDBOX_VIOLATIONS_LOG_LEVEL"


@dataclass(frozen=True, slots=True)
class CollectorConfig:
    since: timedelta = timedelta(hours=1)

    # Process-level bound for each log query command; None waits indefinitely.
    command_timeout: float | None = None

    year_policy: YearPolicy = YearPolicy.CURRENT

    # None selects sys.platform
    platform: str | None = None


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def resolve_collector_config(cfg: CollectorConfig | None = None) -> CollectorConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = CollectorConfig()

    changes: dict[str, object] = {}

    since = _env(SINCE_ENV)
    if since is not None:
        try:
            changes["since"] = parse_duration(since)
        except ValueError as exc:
            raise ValueError(f"{SINCE_ENV} must be a duration such as 30m or 1h") from exc

    timeout = _env(TIMEOUT_ENV)
    if timeout is not None:
        try:
            value = float(timeout)
        except ValueError as exc:
            raise ValueError(f"{TIMEOUT_ENV} must be a number of seconds") from exc
        if value <= 0:
            raise ValueError(f"{TIMEOUT_ENV} must be > 0")
        changes["command_timeout"] = value

    policy = _env(YEAR_POLICY_ENV)
    if policy is not None:
        try:
            changes["year_policy"] = YearPolicy(policy.lower())
        except ValueError as exc:
            allowed = ", ".join(p.value for p in YearPolicy)
            raise ValueError(f"{YEAR_POLICY_ENV} must be one of: {allowed}") from exc

    platform = _env(PLATFORM_ENV)
    if platform is not None:
        changes["platform"] = platform.lower()

    if not changes:
        return cfg
    return replace(cfg, **changes)
