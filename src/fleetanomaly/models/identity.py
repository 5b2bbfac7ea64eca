"""Caller identity model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fleetanomaly.config import DEFAULT_IDENTITY_CLAIM


class CallerIdentity(BaseModel):
    """The authenticated caller, as described by its ticket.

    The ticket is produced by the authentication layer and is not
    verified here; only the username claim is used, exactly as given.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    username: str
    raw: dict[str, Any] = Field(default_factory=dict)
    """Original ticket claims."""

    @field_validator("username")
    @classmethod
    def _non_empty_username(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("username must be non-empty")
        return value

    @classmethod
    def from_ticket(cls, ticket: Mapping[str, Any], *, claim: str = DEFAULT_IDENTITY_CLAIM) -> CallerIdentity:
        """Build an identity from a ticket's claims.

        Looks up *claim* first and falls back to a plain ``username``
        claim.  Raises :class:`pydantic.ValidationError` when neither
        holds a non-empty string.
        """
        username = ticket.get(claim)
        if username is None:
            username = ticket.get("username")
        return cls.model_validate({"username": username, "raw": dict(ticket)})
