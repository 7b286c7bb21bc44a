"""Exposition sink for joined price records."""

from __future__ import annotations

from typing import Protocol

from prometheus_client import CollectorRegistry, Gauge

from pycarburanti._constants import METRIC_HELP, METRIC_LABELS, METRIC_NAME
from pycarburanti.models.joined import JoinedPrice


class PriceSink(Protocol):
    """Receives joined records. The last value per label set wins."""

    def emit(self, joined: JoinedPrice) -> None:
        ...


class PrometheusPriceSink:
    """Expose joined prices as a labelled Prometheus gauge.

    Registration happens in the constructor; a clash with an existing
    collector raises and is fatal at startup.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self._gauge = Gauge(
            METRIC_NAME,
            METRIC_HELP,
            labelnames=METRIC_LABELS,
            registry=self.registry,
        )

    def emit(self, joined: JoinedPrice) -> None:
        self._gauge.labels(**joined.labels()).set(joined.price)
