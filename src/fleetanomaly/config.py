"""Service configuration for fleetanomaly."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from fleetanomaly.exceptions import FleetConfigError

#: Ticket claim holding the caller's username.
DEFAULT_IDENTITY_CLAIM = "cognito:username"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class FleetConfig:
    """Service configuration.

    Parameters
    ----------
    anomaly_table : str
        Name of the table holding anomaly records, keyed by
        ``vin`` and ``anomaly_id``.
    owner_table : str
        Name of the table holding ownership records, keyed by
        ``owner_id`` and ``vin``.
    region : str or None
        Store region.  ``None`` defers to the boto3 default chain.
    endpoint_url : str or None
        Override for the store endpoint (e.g. a local DynamoDB).
    identity_claim : str
        Ticket claim that carries the caller's username.
    conditional_acknowledge : bool
        Make the acknowledge write conditional on the ``acknowledged``
        value read just before it.  Off by default.
    """

    anomaly_table: str
    owner_table: str
    region: str | None = None
    endpoint_url: str | None = None
    identity_claim: str = DEFAULT_IDENTITY_CLAIM
    conditional_acknowledge: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> FleetConfig:
        """Create configuration from environment variables.

        Reads ``VEHICLE_ANOMALY_TBL``, ``VEHICLE_OWNER_TBL`` and
        ``AWS_REGION``, plus the optional ``FLEET_*`` variables.
        Explicit keyword arguments override environment values.

        Raises
        ------
        FleetConfigError
            If either table name is missing.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "VEHICLE_ANOMALY_TBL": "anomaly_table",
            "VEHICLE_OWNER_TBL": "owner_table",
            "AWS_REGION": "region",
            "FLEET_DYNAMODB_ENDPOINT": "endpoint_url",
            "FLEET_IDENTITY_CLAIM": "identity_claim",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val

        if "conditional_acknowledge" not in overrides:
            config_kwargs["conditional_acknowledge"] = _env_bool(
                env.get("FLEET_CONDITIONAL_ACKNOWLEDGE"),
                False,
            )

        config_kwargs.update(overrides)

        missing = [name for name in ("anomaly_table", "owner_table") if not config_kwargs.get(name)]
        if missing:
            raise FleetConfigError(f"Missing table configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
