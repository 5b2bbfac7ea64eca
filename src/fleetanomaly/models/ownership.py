"""Ownership record model."""

from __future__ import annotations

from pydantic import Field, ValidationInfo, field_validator

from fleetanomaly.models._base import FleetRecord, require_key


class OwnershipRecord(FleetRecord):
    """Registration of a vehicle under a user.

    Written by the vehicle-registration subsystem; only read here.
    Its existence is what grants access to the vehicle's anomalies.
    """

    owner_id: str = Field(..., description="Username of the registered owner")
    vin: str = Field(..., description="Vehicle VIN")

    @field_validator("owner_id", "vin")
    @classmethod
    def _non_empty_key(cls, value: str, info: ValidationInfo) -> str:
        return require_key(value, info.field_name or "key")
