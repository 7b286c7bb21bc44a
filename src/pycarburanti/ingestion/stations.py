"""Station registry feed parser.

The registry is a ``;``-separated CSV with a single header line. It is
not safe to read with a quote-aware CSV reader: some station names carry
an unterminated ``"`` that swallows the rest of the file. Rows are
therefore split on the delimiter only.

Known defects handled here:

* rows with 11 fields instead of 10, where the address is repeated;
  the first address is kept and the duplicate dropped
* blank rows, skipped with a warning
* duplicate station identifiers, resolved in favour of the later row
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pycarburanti._constants import CSV_DELIMITER, STATIONS_FIELD_COUNTS, STATIONS_HEADER_LINES
from pycarburanti.exceptions import DuplicateKey, MalformedRow
from pycarburanti.ingestion._lines import iter_lines, parse_int, skip_header
from pycarburanti.models.station import Station

_logger = logging.getLogger(__name__)

# Index of the address field. 11-field rows repeat it at the next index.
_ADDRESS_INDEX = 5


def _split_address(items: list[str]) -> tuple[str, list[str]]:
    """Return the address and the fields that follow it."""
    if len(items) == 10:
        return items[_ADDRESS_INDEX], items[_ADDRESS_INDEX + 1 :]
    # Only the first of the two address fields is used; see
    # test_eleven_field_row_keeps_first_address.
    address = "".join(items[_ADDRESS_INDEX : _ADDRESS_INDEX + 1])
    return address, items[_ADDRESS_INDEX + 2 :]


def parse_station_row(items: list[str], *, line: int | None = None) -> Station:
    """Convert one split row into a :class:`Station`."""
    if len(items) not in STATIONS_FIELD_COUNTS:
        raise MalformedRow(
            f"expected {' or '.join(map(str, sorted(STATIONS_FIELD_COUNTS)))} fields, got {len(items)}",
            expected=tuple(sorted(STATIONS_FIELD_COUNTS)),
            got=len(items),
            line=line,
        )
    station_id = parse_int(items[0], field="station_id", line=line)
    address, rest = _split_address(items)
    municipality, province, latitude, longitude = rest
    return Station(
        station_id=station_id,
        operator=items[1],
        brand=items[2],
        station_type=items[3],
        name=items[4],
        address=address,
        municipality=municipality,
        province=province,
        latitude=latitude,
        longitude=longitude,
    )


def _warn_duplicate(duplicate: DuplicateKey) -> None:
    _logger.warning("%s", duplicate)


def parse_stations(
    source: str | Iterable[str],
    *,
    on_duplicate: Callable[[DuplicateKey], None] | None = None,
) -> dict[int, Station]:
    """Parse the station registry into a map keyed by station identifier.

    Parameters
    ----------
    source
        Whole feed body, or an iterable of lines.
    on_duplicate
        Called for every station identifier seen more than once. Defaults
        to logging a warning. The later row always wins.

    Raises
    ------
    MalformedField
        A row has a field count other than 10 or 11 (:class:`MalformedRow`),
        or a non-numeric station identifier.
    FetchError
        Reading *source* failed.
    """
    report = on_duplicate or _warn_duplicate
    lines = iter_lines(source)
    skip_header(lines, STATIONS_HEADER_LINES)

    stations: dict[int, Station] = {}
    skipped = 0
    for line_no, raw in enumerate(lines, start=STATIONS_HEADER_LINES + 1):
        if not raw.strip():
            _logger.warning("Skipping empty station record at line %d", line_no)
            skipped += 1
            continue
        station = parse_station_row(raw.split(CSV_DELIMITER), line=line_no)
        previous = stations.get(station.station_id)
        if previous is not None:
            report(
                DuplicateKey(
                    f"Found duplicate station ID {station.station_id} at line {line_no} "
                    f"(type {previous.station_type!s} replaced by {station.station_type!s})",
                    station_id=station.station_id,
                    line=line_no,
                )
            )
        stations[station.station_id] = station

    _logger.debug("Parsed %d stations (%d rows skipped)", len(stations), skipped)
    return stations
