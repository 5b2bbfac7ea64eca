"""Tests for record and identity models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from fleetanomaly.models import AnomalyRecord, CallerIdentity, OwnershipRecord


class TestAnomalyRecord:
    def test_acknowledged_defaults_to_false(self) -> None:
        record = AnomalyRecord.model_validate({"vin": "VIN123", "anomaly_id": "A1"})
        assert record.acknowledged is False

    def test_extra_fields_pass_through(self) -> None:
        item = {
            "vin": "VIN123",
            "anomaly_id": "A1",
            "acknowledged": False,
            "code": "P0171",
            "value": Decimal("14.7"),
            "telemetry": {"rpm": Decimal("812"), "tags": ["fuel", "lean"]},
        }
        record = AnomalyRecord.model_validate(item)

        assert record.extra_fields == {
            "code": "P0171",
            "value": Decimal("14.7"),
            "telemetry": {"rpm": Decimal("812"), "tags": ["fuel", "lean"]},
        }
        assert record.to_item() == item

    def test_acknowledge_returns_copy(self) -> None:
        record = AnomalyRecord(vin="VIN123", anomaly_id="A1", code="P0171")
        acknowledged = record.acknowledge()

        assert record.acknowledged is False
        assert acknowledged.acknowledged is True
        assert acknowledged.extra_fields == {"code": "P0171"}

    def test_records_are_frozen(self) -> None:
        record = AnomalyRecord(vin="VIN123", anomaly_id="A1")
        with pytest.raises(ValidationError):
            record.acknowledged = True  # type: ignore[misc]

    @pytest.mark.parametrize("missing", ["vin", "anomaly_id"])
    def test_key_fields_required(self, missing: str) -> None:
        item = {"vin": "VIN123", "anomaly_id": "A1"}
        item.pop(missing)
        with pytest.raises(ValidationError):
            AnomalyRecord.model_validate(item)

    def test_fields_are_matched_by_attribute_name_only(self) -> None:
        assert all(field.alias is None for field in AnomalyRecord.model_fields.values())
        assert "populate_by_name" not in AnomalyRecord.model_config

    def test_blank_key_rejected(self) -> None:
        with pytest.raises(ValidationError, match="anomaly_id must be non-empty"):
            AnomalyRecord(vin="VIN123", anomaly_id="  ")


class TestOwnershipRecord:
    def test_extra_attributes_kept(self) -> None:
        record = OwnershipRecord.model_validate({"owner_id": "alice", "vin": "VIN123", "nickname": "van"})
        assert record.extra_fields == {"nickname": "van"}

    def test_blank_owner_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OwnershipRecord(owner_id="", vin="VIN123")


class TestCallerIdentity:
    def test_from_cognito_ticket(self) -> None:
        ticket = {"cognito:username": "alice", "email": "alice@example.com", "token_use": "id"}
        identity = CallerIdentity.from_ticket(ticket)
        assert identity.username == "alice"
        assert identity.raw == ticket

    def test_falls_back_to_username_claim(self) -> None:
        assert CallerIdentity.from_ticket({"username": "bob"}).username == "bob"

    def test_custom_claim(self) -> None:
        identity = CallerIdentity.from_ticket({"preferred_username": "carol"}, claim="preferred_username")
        assert identity.username == "carol"

    def test_username_is_kept_as_given(self) -> None:
        assert CallerIdentity.from_ticket({"cognito:username": " alice "}).username == " alice "

    @pytest.mark.parametrize(
        "ticket",
        [{}, {"cognito:username": ""}, {"cognito:username": "   "}, {"cognito:username": None}, {"sub": "x"}],
    )
    def test_missing_username_rejected(self, ticket: dict[str, object]) -> None:
        with pytest.raises(ValidationError):
            CallerIdentity.from_ticket(ticket)
