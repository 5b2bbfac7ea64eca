"""Structural store interfaces consumed by the anomaly service.

Having protocols here makes it easy to pass test doubles while keeping
the production implementations (the DynamoDB stores) concrete.
"""

from __future__ import annotations

from typing import Any, Protocol

from fleetanomaly.models.anomaly import AnomalyRecord
from fleetanomaly.models.ownership import OwnershipRecord


class OwnershipStore(Protocol):
    """Lookup of vehicle registrations keyed by ``(owner_id, vin)``."""

    async def __aenter__(self) -> Any: ...

    async def __aexit__(self, *exc: Any) -> None: ...

    async def get_ownership(self, owner_id: str, vin: str) -> OwnershipRecord | None: ...


class AnomalyStore(Protocol):
    """Anomaly records keyed by ``(vin, anomaly_id)``."""

    async def __aenter__(self) -> Any: ...

    async def __aexit__(self, *exc: Any) -> None: ...

    async def query_by_vehicle(self, vin: str) -> list[AnomalyRecord]: ...

    async def get_anomaly(self, vin: str, anomaly_id: str) -> AnomalyRecord | None: ...

    async def put_anomaly(
        self,
        record: AnomalyRecord,
        *,
        expected_acknowledged: bool | None = None,
    ) -> None:
        """Upsert *record*, overwriting any stored item with the same key.

        When *expected_acknowledged* is not ``None`` the write only
        succeeds if the stored item still exists and its ``acknowledged``
        value equals it; otherwise ``FleetConflictError`` is raised.
        """
        ...
