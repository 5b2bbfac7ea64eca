"""DynamoDB-backed ownership and anomaly stores.

Table layout:

* ownership table, key ``{owner_id, vin}``
* anomaly table, hash key ``vin`` and range key ``anomaly_id``

boto3 is blocking, so every call runs in a worker thread.  Each store
owns its boto3 resource for the lifetime of an ``async with`` block
unless one is passed in.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import boto3
from boto3.dynamodb.conditions import Attr, ConditionBase, Key
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from fleetanomaly.config import FleetConfig
from fleetanomaly.exceptions import FleetConflictError, FleetStoreError
from fleetanomaly.models.anomaly import AnomalyRecord
from fleetanomaly.models.ownership import OwnershipRecord

_logger = logging.getLogger(__name__)

_CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


class _DynamoTable:
    """Lifecycle and error translation shared by both stores."""

    def __init__(self, config: FleetConfig, table_name: str, *, resource: Any | None = None) -> None:
        self._config = config
        self._table_name = table_name
        self._external_resource = resource is not None
        self._resource = resource
        self._table: Any | None = None

    def _create_resource(self) -> Any:
        # Loads service models from disk.
        session = boto3.Session()
        return session.resource(
            "dynamodb",
            region_name=self._config.region,
            endpoint_url=self._config.endpoint_url,
        )

    async def __aenter__(self) -> Any:
        if self._resource is None:
            try:
                self._resource = await asyncio.to_thread(self._create_resource)
            except BotoCoreError as exc:
                raise FleetStoreError(
                    f"Could not create DynamoDB resource for {self._table_name}: {exc}",
                    operation="connect",
                    table=self._table_name,
                ) from exc
        self._table = self._resource.Table(self._table_name)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_resource and self._resource is not None:
            self._resource.meta.client.close()
            self._resource = None
        self._table = None

    def _require_table(self, operation: str) -> Any:
        if self._table is None:
            raise FleetStoreError(
                f"Store for {self._table_name} not initialized. Use 'async with store:'",
                operation=operation,
                table=self._table_name,
            )
        return self._table

    async def _call(self, operation: str, **params: Any) -> dict[str, Any]:
        table = self._require_table(operation)
        _logger.debug("%s %s", operation, self._table_name)
        try:
            response: dict[str, Any] = await asyncio.to_thread(getattr(table, operation), **params)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            code = str(error.get("Code", ""))
            message = str(error.get("Message", exc))
            if code == _CONDITIONAL_CHECK_FAILED:
                raise FleetConflictError(
                    f"{operation} on {self._table_name} rejected: {message}",
                    operation=operation,
                    table=self._table_name,
                ) from exc
            _logger.warning("%s on %s failed: code=%s message=%s", operation, self._table_name, code, message)
            raise FleetStoreError(
                f"{operation} on {self._table_name} failed: code={code} message={message}",
                operation=operation,
                table=self._table_name,
            ) from exc
        except BotoCoreError as exc:
            _logger.warning("%s on %s failed: %s", operation, self._table_name, exc)
            raise FleetStoreError(
                f"{operation} on {self._table_name} failed: {exc}",
                operation=operation,
                table=self._table_name,
            ) from exc
        return response

    def _malformed(self, operation: str, exc: ValidationError) -> FleetStoreError:
        _logger.warning("Malformed item from %s: %s", self._table_name, exc)
        return FleetStoreError(
            f"Malformed item from {self._table_name}: {exc.error_count()} validation error(s)",
            operation=operation,
            table=self._table_name,
        )


class DynamoOwnershipStore(_DynamoTable):
    """Ownership records in the table named by ``config.owner_table``."""

    def __init__(self, config: FleetConfig, *, resource: Any | None = None) -> None:
        super().__init__(config, config.owner_table, resource=resource)

    async def __aenter__(self) -> DynamoOwnershipStore:
        await super().__aenter__()
        return self

    async def get_ownership(self, owner_id: str, vin: str) -> OwnershipRecord | None:
        response = await self._call("get_item", Key={"owner_id": owner_id, "vin": vin})
        item = response.get("Item")
        if not item:
            return None
        try:
            return OwnershipRecord.model_validate(item)
        except ValidationError as exc:
            raise self._malformed("get_item", exc) from exc


class DynamoAnomalyStore(_DynamoTable):
    """Anomaly records in the table named by ``config.anomaly_table``."""

    def __init__(self, config: FleetConfig, *, resource: Any | None = None) -> None:
        super().__init__(config, config.anomaly_table, resource=resource)

    async def __aenter__(self) -> DynamoAnomalyStore:
        await super().__aenter__()
        return self

    def _parse(self, operation: str, item: dict[str, Any]) -> AnomalyRecord:
        try:
            return AnomalyRecord.model_validate(item)
        except ValidationError as exc:
            raise self._malformed(operation, exc) from exc

    async def query_by_vehicle(self, vin: str) -> list[AnomalyRecord]:
        """Return every anomaly of *vin*, following result pages."""
        params: dict[str, Any] = {"KeyConditionExpression": Key("vin").eq(vin)}
        records: list[AnomalyRecord] = []
        while True:
            page = await self._call("query", **params)
            records.extend(self._parse("query", item) for item in page.get("Items", []))
            last_key = page.get("LastEvaluatedKey")
            if not last_key:
                return records
            params["ExclusiveStartKey"] = last_key

    async def get_anomaly(self, vin: str, anomaly_id: str) -> AnomalyRecord | None:
        response = await self._call("get_item", Key={"vin": vin, "anomaly_id": anomaly_id})
        item = response.get("Item")
        if not item:
            return None
        return self._parse("get_item", item)

    async def put_anomaly(
        self,
        record: AnomalyRecord,
        *,
        expected_acknowledged: bool | None = None,
    ) -> None:
        params: dict[str, Any] = {"Item": record.to_item()}
        if expected_acknowledged is not None:
            params["ConditionExpression"] = _acknowledged_condition(expected_acknowledged)
        await self._call("put_item", **params)


def _acknowledged_condition(expected: bool) -> ConditionBase:
    """Item still exists and its flag is unchanged (absent counts as false)."""
    condition = Attr("anomaly_id").exists()
    if expected:
        return condition & Attr("acknowledged").eq(True)
    return condition & (Attr("acknowledged").eq(False) | Attr("acknowledged").not_exists())
