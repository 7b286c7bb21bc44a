"""Price feed parser.

The price feed is a ``;``-separated CSV preceded by a two-line header that
is not CSV at all. Every data row must carry exactly five well-formed
fields; any bad row fails the whole feed.
"""

from __future__ import annotations

import csv
import logging
import re
from collections.abc import Iterable
from datetime import datetime, tzinfo
from zoneinfo import ZoneInfo

from pycarburanti._cache import RecordCache, cache_key
from pycarburanti._constants import (
    CSV_DELIMITER,
    FALSE_LITERALS,
    PRICE_TIMESTAMP_FORMAT,
    PRICES_FIELD_COUNT,
    PRICES_HEADER_LINES,
    TRUE_LITERALS,
)
from pycarburanti.exceptions import MalformedDataError, MalformedField, MalformedRow
from pycarburanti.ingestion._lines import iter_lines, parse_int, skip_header
from pycarburanti.models.price import PriceRecord

_logger = logging.getLogger(__name__)

# Decimal or exponent form, or the inf/nan literals; no underscores or padding.
_FLOAT_RE = re.compile(r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)", re.ASCII | re.IGNORECASE)
_TIMESTAMP_RE = re.compile(r"\d{1,2}/\d{1,2}/\d{4} \d{1,2}:\d{2}:\d{2}", re.ASCII)


def parse_bool(value: str, *, field: str = "self_service", line: int | None = None) -> bool:
    if value in TRUE_LITERALS:
        return True
    if value in FALSE_LITERALS:
        return False
    raise MalformedField(f"{field} is not a bool string: {value!r}", field=field, value=value, line=line)


def parse_price(value: str, *, field: str = "price", line: int | None = None) -> float:
    if not _FLOAT_RE.fullmatch(value):
        raise MalformedField(f"{field} is not a float string: {value!r}", field=field, value=value, line=line)
    return float(value)


def parse_timestamp(value: str, tz: tzinfo, *, field: str = "observed_at", line: int | None = None) -> datetime:
    """Parse ``D/M/YYYY H:MM:SS`` in the feed's time zone."""
    if not _TIMESTAMP_RE.fullmatch(value):
        raise MalformedField(f"{field} is not a time string: {value!r}", field=field, value=value, line=line)
    try:
        naive = datetime.strptime(value, PRICE_TIMESTAMP_FORMAT)
    except ValueError:
        raise MalformedField(f"{field} is not a time string: {value!r}", field=field, value=value, line=line) from None
    return naive.replace(tzinfo=tz)


def parse_price_row(items: list[str], tz: tzinfo, *, line: int | None = None) -> PriceRecord:
    """Convert one CSV row into a :class:`PriceRecord`."""
    if len(items) != PRICES_FIELD_COUNT:
        raise MalformedRow(
            f"expected {PRICES_FIELD_COUNT} fields, got {len(items)}",
            expected=(PRICES_FIELD_COUNT,),
            got=len(items),
            line=line,
        )
    return PriceRecord(
        station_id=parse_int(items[0], field="station_id", line=line),
        fuel_type=items[1],
        price=parse_price(items[2], line=line),
        self_service=parse_bool(items[3], line=line),
        observed_at=parse_timestamp(items[4], tz, line=line),
    )


def parse_prices(
    source: str | Iterable[str],
    *,
    cache: RecordCache | None = None,
    tz: tzinfo | str = "UTC",
) -> list[PriceRecord]:
    """Parse the price feed.

    Each record is put into *cache* as soon as it is parsed, so records
    preceding a bad row stay cached even though the whole call fails.

    Raises
    ------
    MalformedDataError
        The header is truncated, or a row has the wrong field count or an
        unparseable value.
    FetchError
        Reading *source* failed.
    """
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    lines = iter_lines(source, keepends=True)
    skip_header(lines, PRICES_HEADER_LINES)

    reader = csv.reader(lines, delimiter=CSV_DELIMITER)
    records: list[PriceRecord] = []
    while True:
        try:
            items = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            raise MalformedDataError(
                f"failed to read CSV record: {exc}",
                line=PRICES_HEADER_LINES + reader.line_num,
            ) from exc
        if not items:
            continue
        line = PRICES_HEADER_LINES + reader.line_num
        record = parse_price_row(items, zone, line=line)
        records.append(record)
        if cache is not None:
            cache.put(cache_key(record), record)

    _logger.debug("Parsed %d price records", len(records))
    return records
