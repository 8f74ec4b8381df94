#!/usr/bin/env python3
"""Bucketize a local dataset file and print what each bucket holds.

Runs the same parse + bucketize path as a live load, against an
:class:`InMemorySurface`, so bucket boundaries can be checked without a map.

Usage
-----
    python scripts/bucket_summary.py fire.geojson
    python scripts/bucket_summary.py --kind actor plans.json --step 15
    python scripts/bucket_summary.py fire.geojson --ignition 0800 --seek 50
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from phoenixplay import (  # noqa: E402
    DatasetDescriptor,
    DatasetKind,
    InMemorySurface,
    PhoenixClient,
    PhoenixConfig,
    PhoenixError,
)


class _FileTransport:
    """Serves the one local file regardless of the requested URL."""

    def __init__(self, path: Path) -> None:
        self._path = path

    async def get_json(self, url: str) -> Any:
        return json.loads(self._path.read_text(encoding="utf-8"))


async def main() -> int:
    parser = argparse.ArgumentParser(description="Summarize the time buckets of a dataset file")
    parser.add_argument("path", type=Path, help="GeoJSON fire file or JSON plan array")
    parser.add_argument("--kind", choices=[k.value for k in DatasetKind], default=DatasetKind.BURN.value)
    parser.add_argument("--step", type=int, default=None, help="Bucket width in minutes")
    parser.add_argument("--ignition", default=None, help="Fire ignition time as HHMM")
    parser.add_argument("--seek", type=int, default=None, help="Apply a seek and list visible layers")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.step is not None:
        overrides["step_minutes"] = args.step
    config = PhoenixConfig.from_env(**overrides)

    descriptor = DatasetDescriptor(
        id=args.path.stem,
        kind=DatasetKind(args.kind),
        url=args.path.resolve().as_uri(),
        ignition_hhmm=args.ignition,
    )
    surface = InMemorySurface()

    async with PhoenixClient(config, surface, transport=_FileTransport(args.path)) as client:
        try:
            buckets = await client.select(descriptor)
        except PhoenixError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1

        timeline = client.burn if descriptor.kind == DatasetKind.BURN else client.actor
        print(f"{descriptor.id}: {len(buckets or ())} buckets of {config.step_minutes} min")
        for bucket in buckets or ():
            print(f"  #{bucket.index:>4}  < {bucket.lower_bound_minutes:>8.1f} min  {bucket.feature_count:>6} features")

        if args.seek is not None:
            timeline.seek(args.seek)
        print(f"visible: {', '.join(surface.visible_layers()) or '-'}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
