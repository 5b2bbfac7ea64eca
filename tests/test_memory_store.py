from __future__ import annotations

import pytest

from fleetanomaly.exceptions import FleetConflictError
from fleetanomaly.models import AnomalyRecord, OwnershipRecord
from fleetanomaly.stores.memory import InMemoryAnomalyStore, InMemoryOwnershipStore


@pytest.mark.asyncio
async def test_ownership_register_and_unregister() -> None:
    store = InMemoryOwnershipStore([OwnershipRecord(owner_id="alice", vin="VIN123")])
    assert await store.get_ownership("alice", "VIN123") is not None
    assert await store.get_ownership("alice", "VIN999") is None

    store.unregister("alice", "VIN123")
    assert await store.get_ownership("alice", "VIN123") is None


@pytest.mark.asyncio
async def test_query_keeps_insertion_order_per_vehicle() -> None:
    store = InMemoryAnomalyStore(
        [
            AnomalyRecord(vin="VIN123", anomaly_id="A2"),
            AnomalyRecord(vin="VIN999", anomaly_id="B1"),
            AnomalyRecord(vin="VIN123", anomaly_id="A1"),
        ]
    )
    records = await store.query_by_vehicle("VIN123")
    assert [r.anomaly_id for r in records] == ["A2", "A1"]
    assert await store.query_by_vehicle("VIN000") == []


@pytest.mark.asyncio
async def test_put_overwrites_same_key() -> None:
    store = InMemoryAnomalyStore([AnomalyRecord(vin="VIN123", anomaly_id="A1", code="P0171")])
    await store.put_anomaly(AnomalyRecord(vin="VIN123", anomaly_id="A1", acknowledged=True))

    stored = await store.get_anomaly("VIN123", "A1")
    assert stored is not None
    assert stored.acknowledged is True
    assert stored.extra_fields == {}
    assert len(await store.query_by_vehicle("VIN123")) == 1


@pytest.mark.asyncio
async def test_conditional_put_checks_stored_flag() -> None:
    store = InMemoryAnomalyStore([AnomalyRecord(vin="VIN123", anomaly_id="A1", acknowledged=True)])
    update = AnomalyRecord(vin="VIN123", anomaly_id="A1", acknowledged=True)

    with pytest.raises(FleetConflictError):
        await store.put_anomaly(update, expected_acknowledged=False)
    await store.put_anomaly(update, expected_acknowledged=True)


@pytest.mark.asyncio
async def test_conditional_put_requires_existing_record() -> None:
    store = InMemoryAnomalyStore()
    with pytest.raises(FleetConflictError):
        await store.put_anomaly(AnomalyRecord(vin="VIN123", anomaly_id="A1"), expected_acknowledged=False)
