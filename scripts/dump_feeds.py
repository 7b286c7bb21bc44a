#!/usr/bin/env python3
"""Fetch both feeds once and dump what pycarburanti makes of them.

Useful to check a new feed export against the parsers without starting
the exporter. Each stage is reported separately, so a malformed station
registry still shows the parsed prices.

Usage
-----
::

    python scripts/dump_feeds.py
    python scripts/dump_feeds.py --prices-file prezzo_alle_8.csv --stations-file anagrafica.csv
    python scripts/dump_feeds.py --json --output dump.json

Options::

    --prices-file FILE     Read the price feed from FILE instead of the network
    --stations-file FILE   Read the station feed from FILE instead of the network
    --limit N              Number of joined records to print (default 20)
    --json                 Output as machine-readable JSON
    --output FILE          Write output to FILE instead of stdout
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiohttp

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pycarburanti import ExporterConfig, RecordCache, join_stations, parse_prices, parse_stations  # noqa: E402
from pycarburanti._transport import HttpFeedTransport  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


async def _load(transport: HttpFeedTransport, url: str, path: str | None, encoding: str) -> str:
    if path:
        return Path(path).read_text(encoding=encoding, errors="replace")
    return await transport.fetch_text(url)


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump parsed fuel price and station feeds.")
    parser.add_argument("--prices-file", help="Read the price feed from FILE")
    parser.add_argument("--stations-file", help="Read the station feed from FILE")
    parser.add_argument("--limit", type=int, default=20, help="Joined records to print")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    config = ExporterConfig.from_env()
    cache = RecordCache(config.cache_ttl)
    result: dict[str, Any] = {"timestamp": datetime.now(UTC).isoformat()}
    out: list[str] = [_section("pycarburanti dump_feeds"), f"  time      : {result['timestamp']}"]

    async with aiohttp.ClientSession() as session:
        transport = HttpFeedTransport(session, encoding=config.feed_encoding)

        # ── Prices ──
        out.append(_section("PRICES"))
        try:
            body = await _load(transport, config.prices_url, args.prices_file, config.feed_encoding)
            records = parse_prices(body, cache=cache, tz=config.source_timezone)
        except Exception as exc:
            out.append(f"  !! prices failed: {exc}")
            result["prices"] = {"error": str(exc), "traceback": traceback.format_exc()}
            records = []
        else:
            out.append(f"  records   : {len(records)}")
            out.append(f"  cache keys: {len(cache)}")
            result["prices"] = {"records": len(records), "cache_keys": len(cache)}

        # ── Stations ──
        out.append(_section("STATIONS"))
        try:
            body = await _load(transport, config.stations_url, args.stations_file, config.feed_encoding)
            stations = parse_stations(body)
        except Exception as exc:
            out.append(f"  !! stations failed: {exc}")
            result["stations"] = {"error": str(exc), "traceback": traceback.format_exc()}
            stations = {}
        else:
            out.append(f"  stations  : {len(stations)}")
            result["stations"] = {"stations": len(stations)}

    # ── Join ──
    joined = join_stations(records, stations)
    unmatched = sum(1 for item in joined if not item.matched)
    out.append(_section("JOINED"))
    out.append(f"  joined    : {len(joined)} ({unmatched} without station data)")
    sample = [{"labels": item.labels(), "price": item.price} for item in joined[: args.limit]]
    for item in sample:
        out.append(f"  {item['price']:>7.3f}  {json.dumps(item['labels'], ensure_ascii=False)}")
    result["joined"] = {"count": len(joined), "unmatched": unmatched, "sample": sample}

    # ── Output ──
    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
    else:
        payload = "\n".join(out)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Output written to {args.output}", file=sys.stderr)
    else:
        print(payload)


if __name__ == "__main__":
    asyncio.run(main())
