"""Input validation for client ids, priorities and lanes.

Validators return the parsed value or raise a ``ClientApiError`` subclass
carrying the short ``message`` and longer ``long_message`` shown to callers.
Only ``validate_identifier`` touches the store.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.engine import Connection

from app.config.error_mapping import (
    CLIENT_ERROR_MAP,
    INVALID_BODY,
    INVALID_ENUM,
    NOT_A_NUMBER,
    NOT_FOUND,
    STORE_REJECTED,
    STORE_UNAVAILABLE,
)
from app.logic import repository_clients
from app.models.lane import Lane

_INT_RE = re.compile(r"^[+-]?\d+$")
# Signed 64-bit range of the store's INTEGER columns
STORE_INT_MIN = -(2**63)
STORE_INT_MAX = 2**63 - 1


class ClientApiError(ValueError):
    kind: str = NOT_A_NUMBER

    def __init__(self, message: str, long_message: str) -> None:
        super().__init__(f"{message} {long_message}")
        self.message = message
        self.long_message = long_message

    @property
    def status_code(self) -> int:
        return int(CLIENT_ERROR_MAP[self.kind]["status"])

    @property
    def code(self) -> str:
        return str(CLIENT_ERROR_MAP[self.kind]["code"])

    def to_body(self) -> Dict[str, Any]:
        return {"message": self.message, "long_message": self.long_message, "code": self.code}


class NotANumber(ClientApiError):
    kind = NOT_A_NUMBER


class NotFound(ClientApiError):
    kind = NOT_FOUND


class InvalidEnum(ClientApiError):
    kind = INVALID_ENUM


class InvalidBody(ClientApiError):
    kind = INVALID_BODY


class StoreRejected(ClientApiError):
    kind = STORE_REJECTED

    def to_body(self) -> Dict[str, Any]:
        # Create path contract: {error}
        return {"error": self.long_message, "code": self.code}


class StoreUnavailable(ClientApiError):
    kind = STORE_UNAVAILABLE


def parse_int(raw: Any) -> Optional[int]:
    """Parse a JSON number or base-10 string into an int; None if not integral."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    if isinstance(raw, str) and _INT_RE.match(raw.strip()):
        return int(raw.strip())
    return None


def fits_store_integer(value: int) -> bool:
    return STORE_INT_MIN <= value <= STORE_INT_MAX


def validate_identifier(raw_id: Any, conn: Connection | None = None) -> int:
    client_id = parse_int(raw_id)
    if client_id is None:
        raise NotANumber("Invalid id provided.", "Id can only be integer.")
    # No stored id can lie outside the column range
    if not fits_store_integer(client_id) or not repository_clients.client_exists(client_id, conn=conn):
        raise NotFound("Invalid id provided.", "Cannot find client with that id.")
    return client_id


def validate_rank(raw_rank: Any) -> int:
    """Parse a priority; the upper bound is clamped later by the reorder engine."""
    rank = parse_int(raw_rank)
    if rank is None:
        raise NotANumber("Invalid priority provided.", "Priority can only be positive integer.")
    return rank


def validate_lane(raw_lane: Any) -> str:
    if not Lane.is_valid(raw_lane):
        raise InvalidEnum(
            "Invalid status provided.",
            "Status can only be one of the following: [{}].".format(" | ".join(Lane.ALL)),
        )
    return str(raw_lane)


def validate_update_body(raw_body: Any) -> Tuple[Any, Any]:
    """Return raw ``(status, priority)`` from a PUT body; a missing body means neither."""
    if raw_body is None:
        return None, None
    if not isinstance(raw_body, dict):
        raise InvalidBody(
            "Invalid body provided.",
            "Body must be a JSON object with optional status and priority.",
        )
    return raw_body.get("status"), raw_body.get("priority")


__all__ = [
    "ClientApiError",
    "NotANumber",
    "NotFound",
    "InvalidEnum",
    "InvalidBody",
    "StoreRejected",
    "StoreUnavailable",
    "parse_int",
    "fits_store_integer",
    "validate_update_body",
    "validate_identifier",
    "validate_rank",
    "validate_lane",
]
