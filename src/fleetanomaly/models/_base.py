"""Base model for stored fleet records.

Every stored record inherits from :class:`FleetRecord` which provides:

* ``frozen=True`` so a record read from a store is never mutated in
  place; changes go through ``model_copy``.
* ``extra="allow"`` so attributes written by other subsystems (the
  ingestion pipeline, vehicle registration) survive a read/write cycle
  without this library knowing their shape.
* :meth:`FleetRecord.to_item` to turn a record back into a plain item.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


def require_key(value: str, name: str) -> str:
    """Reject blank key attributes."""
    if not value or not value.strip():
        raise ValueError(f"{name} must be non-empty")
    return value


class FleetRecord(BaseModel):
    """Base for records held in the ownership and anomaly tables."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
    )

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Attributes outside the declared core fields."""
        return dict(self.model_extra or {})

    def to_item(self) -> dict[str, Any]:
        """Full record, core fields and extras, as a plain dict."""
        return self.model_dump()
