"""Custom exception hierarchy for fleetanomaly."""

from __future__ import annotations

from typing import Any


class FleetError(Exception):
    """Base exception for all fleetanomaly errors."""

    def to_payload(self) -> dict[str, Any]:
        """Error body in the shape returned to API callers."""
        return {"error": {"message": str(self)}}


class FleetConfigError(FleetError):
    """Invalid or missing configuration."""


class FleetStoreError(FleetError):
    """Store-level failure (network, throttling, malformed item)."""

    def __init__(
        self,
        message: str,
        *,
        operation: str = "",
        table: str = "",
    ) -> None:
        self.operation = operation
        self.table = table
        super().__init__(message)


class FleetConflictError(FleetStoreError):
    """Conditional write rejected because the stored record changed.

    Only raised when the service runs with ``conditional_acknowledge``
    enabled.  The write is not retried.
    """


class FleetAuthorizationError(FleetError):
    """The vehicle is not registered under the calling user."""

    def __init__(self, message: str, *, vin: str = "") -> None:
        self.vin = vin
        super().__init__(message)


class FleetNotFoundError(FleetError):
    """The requested anomaly does not exist under an authorized vehicle."""

    def __init__(self, message: str, *, vin: str = "", anomaly_id: str = "") -> None:
        self.vin = vin
        self.anomaly_id = anomaly_id
        super().__init__(message)


ConfigError = FleetConfigError
StoreError = FleetStoreError
ConflictError = FleetConflictError
AuthorizationError = FleetAuthorizationError
NotFoundError = FleetNotFoundError
