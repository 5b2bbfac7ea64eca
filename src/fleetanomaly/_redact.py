"""Redaction of caller tickets for DEBUG logs.

Tickets from the authentication layer mix the username claim with
bearer tokens and personal claims.  Only the former belongs in a log
line.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

_SENSITIVE_CLAIMS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "access_token",
        "id_token",
        "refresh_token",
        "authorization",
        "cookie",
        "email",
        "phone_number",
        "address",
        "birthdate",
    }
)

_REDACTED = "<redacted>"

# header.payload.signature, header always starts with '{"' base64-encoded
_JWT_RE = re.compile(r"^eyJ[\w-]*\.[\w-]+\.[\w-]*$")


def _is_sensitive(claim: str) -> bool:
    # Namespaced claims such as "custom:email" match on the last segment.
    return claim.lower().rsplit(":", 1)[-1] in _SENSITIVE_CLAIMS


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a copy of *value* with secrets and personal claims masked."""
    return _redact(value, max_string, 0)


def _redact(value: Any, max_string: int, depth: int) -> Any:
    if depth > 8:
        return "<max-depth>"
    if isinstance(value, Mapping):
        return {
            str(claim): _REDACTED if _is_sensitive(str(claim)) else _redact(item, max_string, depth + 1)
            for claim, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        # e.g. "cognito:groups"
        return [_redact(item, max_string, depth + 1) for item in value]
    if isinstance(value, str):
        if _JWT_RE.match(value):
            return _REDACTED
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value
    if value is None or isinstance(value, (bool, int, float, Decimal)):
        return value
    return repr(value)
