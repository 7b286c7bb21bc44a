"""Custom exception hierarchy for pycarburanti."""

from __future__ import annotations


class CarburantiError(Exception):
    """Base exception for all pycarburanti errors."""


class CarburantiConfigError(CarburantiError):
    """Invalid or missing configuration."""


class FetchError(CarburantiError):
    """Transport failure reaching a feed (network, non-200, unreadable body)."""

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class MalformedDataError(CarburantiError):
    """Feed content could not be parsed."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)


class MalformedField(MalformedDataError):
    """A value in a row failed type conversion."""

    def __init__(
        self,
        message: str,
        *,
        field: str = "",
        value: str = "",
        line: int | None = None,
    ) -> None:
        self.field = field
        self.value = value
        super().__init__(message, line=line)


class MalformedRow(MalformedField):
    """A row carries an unexpected number of fields.

    Subclasses :class:`MalformedField` so that callers handling field
    errors for a feed also see field-count failures.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: tuple[int, ...] = (),
        got: int | None = None,
        line: int | None = None,
    ) -> None:
        self.expected = expected
        self.got = got
        super().__init__(message, line=line)


class DuplicateKey(CarburantiError):
    """Duplicate station identifier in the registry feed.

    Never raised by the parser: the later row replaces the earlier one and
    this error is reported as a warning.
    """

    def __init__(self, message: str, *, station_id: int, line: int | None = None) -> None:
        self.station_id = station_id
        self.line = line
        super().__init__(message)
