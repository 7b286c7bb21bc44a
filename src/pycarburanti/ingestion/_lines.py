"""Line iteration shared by the feed parsers."""

from __future__ import annotations

import io
import re
from collections.abc import Iterable, Iterator

from pycarburanti.exceptions import FetchError, MalformedDataError, MalformedField

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)


def iter_lines(source: str | Iterable[str], *, keepends: bool = False) -> Iterator[str]:
    """Yield lines from a text body or an iterable of lines.

    Line endings are stripped unless *keepends* is set, which a quote-aware
    reader needs to keep newlines inside quoted fields.

    I/O failures while reading *source* surface as :class:`FetchError`.
    """
    lines: Iterable[str] = io.StringIO(source) if isinstance(source, str) else source
    try:
        for line in lines:
            yield line if keepends else line.rstrip("\r\n")
    except OSError as exc:
        raise FetchError(f"failed to read feed: {exc}") from exc


def skip_header(lines: Iterator[str], count: int) -> None:
    """Discard *count* header lines without inspecting them."""
    for index in range(count):
        try:
            next(lines)
        except StopIteration:
            raise MalformedDataError(
                f"expected {count} header lines, feed ended after {index}",
                line=index + 1,
            ) from None


def parse_int(value: str, *, field: str, line: int | None = None) -> int:
    """Parse a strict base-10 integer."""
    if not _INT_RE.fullmatch(value):
        raise MalformedField(f"{field} is not a numeric string: {value!r}", field=field, value=value, line=line)
    return int(value)
