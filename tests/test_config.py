from __future__ import annotations

import pytest

from fleetanomaly.config import DEFAULT_IDENTITY_CLAIM, FleetConfig
from fleetanomaly.exceptions import FleetConfigError

_ENV_KEYS = (
    "VEHICLE_ANOMALY_TBL",
    "VEHICLE_OWNER_TBL",
    "AWS_REGION",
    "FLEET_DYNAMODB_ENDPOINT",
    "FLEET_IDENTITY_CLAIM",
    "FLEET_CONDITIONAL_ACKNOWLEDGE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_from_env_reads_tables_and_region(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLE_ANOMALY_TBL", "vehicle-anomaly")
    monkeypatch.setenv("VEHICLE_OWNER_TBL", "vehicle-owner")
    monkeypatch.setenv("AWS_REGION", "us-east-1")

    config = FleetConfig.from_env()

    assert config.anomaly_table == "vehicle-anomaly"
    assert config.owner_table == "vehicle-owner"
    assert config.region == "us-east-1"
    assert config.endpoint_url is None
    assert config.identity_claim == DEFAULT_IDENTITY_CLAIM
    assert config.conditional_acknowledge is False


def test_from_env_optional_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLE_ANOMALY_TBL", "vehicle-anomaly")
    monkeypatch.setenv("VEHICLE_OWNER_TBL", "vehicle-owner")
    monkeypatch.setenv("FLEET_DYNAMODB_ENDPOINT", "http://localhost:8000")
    monkeypatch.setenv("FLEET_IDENTITY_CLAIM", "preferred_username")
    monkeypatch.setenv("FLEET_CONDITIONAL_ACKNOWLEDGE", "yes")

    config = FleetConfig.from_env()

    assert config.endpoint_url == "http://localhost:8000"
    assert config.identity_claim == "preferred_username"
    assert config.conditional_acknowledge is True


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLE_ANOMALY_TBL", "vehicle-anomaly")
    monkeypatch.setenv("VEHICLE_OWNER_TBL", "vehicle-owner")
    monkeypatch.setenv("FLEET_CONDITIONAL_ACKNOWLEDGE", "on")

    config = FleetConfig.from_env(owner_table="owners-test", conditional_acknowledge=False)

    assert config.owner_table == "owners-test"
    assert config.conditional_acknowledge is False


def test_unrecognised_bool_uses_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FLEET_CONDITIONAL_ACKNOWLEDGE", "maybe")
    config = FleetConfig.from_env(anomaly_table="a", owner_table="o")
    assert config.conditional_acknowledge is False


def test_missing_tables_raise_config_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VEHICLE_OWNER_TBL", "vehicle-owner")
    with pytest.raises(FleetConfigError, match="anomaly_table"):
        FleetConfig.from_env()
