"""fleetanomaly - Ownership-gated access to vehicle anomaly records."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fleetanomaly")
except PackageNotFoundError:
    __version__ = "0+local"
from fleetanomaly.config import FleetConfig
from fleetanomaly.exceptions import (
    AuthorizationError,
    ConfigError,
    ConflictError,
    FleetAuthorizationError,
    FleetConfigError,
    FleetConflictError,
    FleetError,
    FleetNotFoundError,
    FleetStoreError,
    NotFoundError,
    StoreError,
)
from fleetanomaly.models import AnomalyRecord, CallerIdentity, OwnershipRecord
from fleetanomaly.service import AnomalyService
from fleetanomaly.stores import (
    AnomalyStore,
    DynamoAnomalyStore,
    DynamoOwnershipStore,
    InMemoryAnomalyStore,
    InMemoryOwnershipStore,
    OwnershipStore,
)

__all__ = [
    "__version__",
    "AnomalyRecord",
    "AnomalyService",
    "AnomalyStore",
    "AuthorizationError",
    "CallerIdentity",
    "ConfigError",
    "ConflictError",
    "DynamoAnomalyStore",
    "DynamoOwnershipStore",
    "FleetAuthorizationError",
    "FleetConfig",
    "FleetConfigError",
    "FleetConflictError",
    "FleetError",
    "FleetNotFoundError",
    "FleetStoreError",
    "InMemoryAnomalyStore",
    "InMemoryOwnershipStore",
    "NotFoundError",
    "OwnershipRecord",
    "OwnershipStore",
    "StoreError",
]
