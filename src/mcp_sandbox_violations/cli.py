from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from datetime import timedelta
from pathlib import Path

from mcp_sandbox_violations.core.collector import ViolationCollector, build_collector
from mcp_sandbox_violations.core.collectors import FallbackCollector
from mcp_sandbox_violations.core.config import resolve_collector_config
from mcp_sandbox_violations.core.errors import CollectorError
from mcp_sandbox_violations.core.models import CollectionResult
from mcp_sandbox_violations.core.sources import FileSourceReader
from mcp_sandbox_violations.core.time_window import parse_duration

RAW_PREVIEW_CHARS = 100


def _parse_since(s: str) -> timedelta:
    try:
        return parse_duration(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _build(args: argparse.Namespace) -> ViolationCollector:
    cfg = resolve_collector_config()
    if args.platform:
        cfg = dataclasses.replace(cfg, platform=args.platform)

    collector = build_collector(config=cfg)
    if args.input is not None:
        # Replay a saved export through the platform's parser; the whole export unless --since is given.
        if not isinstance(collector, FallbackCollector):
            raise ValueError("--input is not supported for this collector")
        collector = dataclasses.replace(
            collector,
            readers=(FileSourceReader(path=args.input),),
            trim_unwindowed=args.since is not None,
        )
    return ViolationCollector(cfg, collector=collector)


def _print_result(result: CollectionResult, limit: int) -> None:
    violations = result.violations
    print(f"\nFound {len(violations)} violations:\n")
    for i, v in enumerate(violations):
        if i >= limit:
            print(f"... and {len(violations) - limit} more")
            break
        print(f"=== Violation #{i + 1} ===")
        print(f"Timestamp:    {v.timestamp.isoformat(timespec='seconds')}")
        print(f"Process:      {v.process_name} (PID: {v.process_id})")
        print(f"Operation:    {v.operation}")
        print(f"Target Path:  {v.target_path}")
        print(f"Deny Code:    {v.deny_code}")
        print(f"Raw Line:     {v.raw_line[:RAW_PREVIEW_CHARS]}\n")


def main() -> None:
    """CLI entrypoint for collecting violations once and printing them."""
    p = argparse.ArgumentParser(description="Collect sandbox violations from the OS logs.")
    p.add_argument("--since", type=_parse_since, default=None, help="Lookback, e.g. 30m, 1h, 2d (default: 1h)")
    p.add_argument("--platform", default=None, help="Collector to use: darwin or linux (default: this host)")
    p.add_argument(
        "--input",
        type=Path,
        default=None,
        help="Parse a saved log export instead of querying the OS (all of it unless --since is given)",
    )
    p.add_argument("--limit", type=int, default=5, help="Max violations to print")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        collector = _build(args)
        since = args.since or collector.config.since
        if args.input is not None and args.since is None:
            print(f"Replaying sandbox violations from {args.input}...")
        else:
            print(f"Collecting sandbox violations from the last {since}...")
        result = asyncio.run(collector.collect_violations(since))
    except (CollectorError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    _print_result(result, args.limit)

    if result.error is not None:
        print(f"Warning: {result.error}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
