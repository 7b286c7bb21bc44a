"""Base model for feed records.

Every feed model inherits from :class:`CarburantiBaseModel`, which makes
instances immutable and ignores unknown keys so callers can pass loose
dicts straight from the parsers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CarburantiBaseModel(BaseModel):
    """Frozen base for all pycarburanti models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
