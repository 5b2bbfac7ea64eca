"""Store layer.

The service only depends on the :class:`OwnershipStore` and
:class:`AnomalyStore` protocols.  Two implementations ship with the
package: in-memory stores and DynamoDB tables.
"""

from fleetanomaly.stores._base import AnomalyStore, OwnershipStore
from fleetanomaly.stores.dynamodb import DynamoAnomalyStore, DynamoOwnershipStore
from fleetanomaly.stores.memory import InMemoryAnomalyStore, InMemoryOwnershipStore

__all__ = [
    "AnomalyStore",
    "DynamoAnomalyStore",
    "DynamoOwnershipStore",
    "InMemoryAnomalyStore",
    "InMemoryOwnershipStore",
    "OwnershipStore",
]
