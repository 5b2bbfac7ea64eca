"""Anomaly record model."""

from __future__ import annotations

from pydantic import Field, ValidationInfo, field_validator

from fleetanomaly.models._base import FleetRecord, require_key


class AnomalyRecord(FleetRecord):
    """A diagnostic event flagged as abnormal for one vehicle.

    Only the key attributes and the ``acknowledged`` flag are declared.
    Everything else the ingestion pipeline wrote (fault codes, sensor
    readings, timestamps) is kept as an extra and written back verbatim.
    """

    vin: str = Field(..., description="Vehicle VIN (partition key)")
    anomaly_id: str = Field(..., description="Anomaly id, unique within the vehicle")
    acknowledged: bool = False
    """Whether the owner has reviewed the anomaly."""

    @field_validator("vin", "anomaly_id")
    @classmethod
    def _non_empty_key(cls, value: str, info: ValidationInfo) -> str:
        return require_key(value, info.field_name or "key")

    def acknowledge(self) -> AnomalyRecord:
        """Return a copy with ``acknowledged`` set."""
        return self.model_copy(update={"acknowledged": True})
