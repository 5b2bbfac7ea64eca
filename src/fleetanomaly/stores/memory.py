"""In-memory stores.

Used by the test-suite and for local runs without a database.  Records
are copied on the way in and out so callers never share state with the
store.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from fleetanomaly.exceptions import FleetConflictError
from fleetanomaly.models.anomaly import AnomalyRecord
from fleetanomaly.models.ownership import OwnershipRecord


class InMemoryOwnershipStore:
    """Ownership records held in a dict keyed by ``(owner_id, vin)``."""

    def __init__(self, records: Iterable[OwnershipRecord] = ()) -> None:
        self._records: dict[tuple[str, str], OwnershipRecord] = {}
        for record in records:
            self.register(record)

    async def __aenter__(self) -> InMemoryOwnershipStore:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    def register(self, record: OwnershipRecord) -> None:
        self._records[(record.owner_id, record.vin)] = record.model_copy(deep=True)

    def unregister(self, owner_id: str, vin: str) -> None:
        self._records.pop((owner_id, vin), None)

    async def get_ownership(self, owner_id: str, vin: str) -> OwnershipRecord | None:
        record = self._records.get((owner_id, vin))
        if record is None:
            return None
        return record.model_copy(deep=True)


class InMemoryAnomalyStore:
    """Anomaly records grouped per VIN, in insertion order."""

    def __init__(self, records: Iterable[AnomalyRecord] = ()) -> None:
        self._vehicles: dict[str, dict[str, AnomalyRecord]] = {}
        for record in records:
            self._store(record)

    async def __aenter__(self) -> InMemoryAnomalyStore:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    def _store(self, record: AnomalyRecord) -> None:
        self._vehicles.setdefault(record.vin, {})[record.anomaly_id] = record.model_copy(deep=True)

    async def query_by_vehicle(self, vin: str) -> list[AnomalyRecord]:
        anomalies = self._vehicles.get(vin, {})
        return [record.model_copy(deep=True) for record in anomalies.values()]

    async def get_anomaly(self, vin: str, anomaly_id: str) -> AnomalyRecord | None:
        record = self._vehicles.get(vin, {}).get(anomaly_id)
        if record is None:
            return None
        return record.model_copy(deep=True)

    async def put_anomaly(
        self,
        record: AnomalyRecord,
        *,
        expected_acknowledged: bool | None = None,
    ) -> None:
        if expected_acknowledged is not None:
            current = self._vehicles.get(record.vin, {}).get(record.anomaly_id)
            if current is None or current.acknowledged != expected_acknowledged:
                raise FleetConflictError(
                    f"Anomaly {record.anomaly_id} for VIN {record.vin} changed since it was read",
                    operation="put_anomaly",
                    table="memory",
                )
        self._store(record)
