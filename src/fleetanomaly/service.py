"""Ownership-gated access to vehicle anomaly records."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Awaitable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from fleetanomaly._redact import redact_for_log
from fleetanomaly.config import DEFAULT_IDENTITY_CLAIM, FleetConfig
from fleetanomaly.exceptions import (
    FleetAuthorizationError,
    FleetError,
    FleetNotFoundError,
    FleetStoreError,
)
from fleetanomaly.models.anomaly import AnomalyRecord
from fleetanomaly.models.identity import CallerIdentity
from fleetanomaly.stores._base import AnomalyStore, OwnershipStore
from fleetanomaly.stores.dynamodb import DynamoAnomalyStore, DynamoOwnershipStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_REGISTERED_MESSAGE = "The vehicle requested is not registered under the user."
NOT_FOUND_MESSAGE = "The anomaly record requested does not exist."

Identity = CallerIdentity | Mapping[str, Any]


def _ticket_for_log(identity: Identity) -> Any:
    ticket = identity.raw if isinstance(identity, CallerIdentity) else identity
    return redact_for_log(ticket)


def _require_arg(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")
    return value


class AnomalyService:
    """List, fetch and acknowledge the anomalies of a user's vehicles.

    Every operation first checks that the caller owns the vehicle and
    stops at the first error.  The service keeps no state of its own.

    Usage::

        async with AnomalyService.from_config(FleetConfig.from_env()) as service:
            anomalies = await service.list_anomalies_by_vehicle(ticket, vin)
    """

    def __init__(
        self,
        ownership_store: OwnershipStore,
        anomaly_store: AnomalyStore,
        *,
        conditional_acknowledge: bool = False,
        identity_claim: str = DEFAULT_IDENTITY_CLAIM,
    ) -> None:
        self._ownership_store = ownership_store
        self._anomaly_store = anomaly_store
        self._conditional_acknowledge = conditional_acknowledge
        self._identity_claim = identity_claim
        self._exit_stack: contextlib.AsyncExitStack | None = None

    @classmethod
    def from_config(cls, config: FleetConfig) -> AnomalyService:
        """Build a service backed by the DynamoDB tables in *config*."""
        return cls(
            DynamoOwnershipStore(config),
            DynamoAnomalyStore(config),
            conditional_acknowledge=config.conditional_acknowledge,
            identity_claim=config.identity_claim,
        )

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> AnomalyService:
        async with contextlib.AsyncExitStack() as stack:
            await stack.enter_async_context(self._ownership_store)
            await stack.enter_async_context(self._anomaly_store)
            self._exit_stack = stack.pop_all()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        stack, self._exit_stack = self._exit_stack, None
        if stack is not None:
            await stack.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _resolve_identity(self, identity: Identity) -> CallerIdentity:
        if isinstance(identity, CallerIdentity):
            return identity
        if not isinstance(identity, Mapping):
            _logger.warning("Rejected caller ticket of type %s", type(identity).__name__)
            raise FleetAuthorizationError("Caller ticket must be a mapping of claims")
        try:
            return CallerIdentity.from_ticket(identity, claim=self._identity_claim)
        except ValidationError as exc:
            _logger.warning("Rejected ticket without a usable %s claim", self._identity_claim)
            raise FleetAuthorizationError(
                f"Caller ticket carries no {self._identity_claim} claim"
            ) from exc

    async def _store_call(self, operation: str, call: Awaitable[T]) -> T:
        """Await a store call, wrapping foreign exceptions as store errors."""
        try:
            return await call
        except FleetError:
            raise
        except Exception as exc:
            _logger.warning("Store call %s failed: %r", operation, exc)
            raise FleetStoreError(f"{operation} failed: {exc!r}", operation=operation) from exc

    async def _authorize(self, identity: Identity, vin: str) -> CallerIdentity:
        """Raise unless the caller has registered *vin*."""
        caller = self._resolve_identity(identity)
        ownership = await self._store_call(
            "get_ownership",
            self._ownership_store.get_ownership(caller.username, vin),
        )
        if ownership is None:
            _logger.warning("VIN %s is not registered under user %s", vin, caller.username)
            raise FleetAuthorizationError(NOT_REGISTERED_MESSAGE, vin=vin)
        return caller

    async def _require_anomaly(self, vin: str, anomaly_id: str) -> AnomalyRecord:
        record = await self._store_call(
            "get_anomaly",
            self._anomaly_store.get_anomaly(vin, anomaly_id),
        )
        if record is None:
            raise FleetNotFoundError(NOT_FOUND_MESSAGE, vin=vin, anomaly_id=anomaly_id)
        return record

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def list_anomalies_by_vehicle(self, identity: Identity, vin: str) -> list[AnomalyRecord]:
        """Return all anomaly records of *vin*, in store order."""
        _require_arg(vin, "vin")
        _logger.debug("list_anomalies_by_vehicle vin=%s ticket=%s", vin, _ticket_for_log(identity))
        await self._authorize(identity, vin)
        return await self._store_call("query_by_vehicle", self._anomaly_store.query_by_vehicle(vin))

    async def get_vehicle_anomaly(self, identity: Identity, vin: str, anomaly_id: str) -> AnomalyRecord:
        """Return one anomaly record of *vin*."""
        _require_arg(vin, "vin")
        _require_arg(anomaly_id, "anomaly_id")
        _logger.debug(
            "get_vehicle_anomaly vin=%s anomaly_id=%s ticket=%s",
            vin,
            anomaly_id,
            _ticket_for_log(identity),
        )
        await self._authorize(identity, vin)
        return await self._require_anomaly(vin, anomaly_id)

    async def acknowledge_vehicle_anomaly(self, identity: Identity, vin: str, anomaly_id: str) -> AnomalyRecord:
        """Mark one anomaly record as reviewed and return the updated record.

        The record is read and then written back in full.  Without
        ``conditional_acknowledge`` nothing guards the gap between the two
        calls, so a concurrent overwrite of the same record can be lost.
        With it, the write fails with ``FleetConflictError`` if the stored
        ``acknowledged`` flag changed in between.
        """
        _require_arg(vin, "vin")
        _require_arg(anomaly_id, "anomaly_id")
        _logger.debug(
            "acknowledge_vehicle_anomaly vin=%s anomaly_id=%s ticket=%s",
            vin,
            anomaly_id,
            _ticket_for_log(identity),
        )
        caller = await self._authorize(identity, vin)
        current = await self._require_anomaly(vin, anomaly_id)
        updated = current.acknowledge()
        expected = current.acknowledged if self._conditional_acknowledge else None
        await self._store_call(
            "put_anomaly",
            self._anomaly_store.put_anomaly(updated, expected_acknowledged=expected),
        )
        _logger.info("User %s acknowledged anomaly %s for VIN %s", caller.username, anomaly_id, vin)
        return updated
