"""Data models for fleet records and callers."""

from fleetanomaly.models._base import FleetRecord
from fleetanomaly.models.anomaly import AnomalyRecord
from fleetanomaly.models.identity import CallerIdentity
from fleetanomaly.models.ownership import OwnershipRecord

__all__ = [
    "AnomalyRecord",
    "CallerIdentity",
    "FleetRecord",
    "OwnershipRecord",
]
