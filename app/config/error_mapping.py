"""Central error mapping for client API failures.

Single source of truth for mapping error kinds to response codes and HTTP
statuses. Validators and handlers must import from here instead of
hardcoding strings or numbers.
"""

from __future__ import annotations

NOT_A_NUMBER = "not_a_number"
NOT_FOUND = "not_found"
INVALID_ENUM = "invalid_enum"
INVALID_BODY = "invalid_body"
STORE_REJECTED = "store_rejected"
STORE_UNAVAILABLE = "store_unavailable"

# All caller input errors stay 400 for compatibility with existing clients;
# infrastructure faults are the only 5xx.
CLIENT_ERROR_MAP = {
    NOT_A_NUMBER: {"code": "NOT_A_NUMBER", "status": 400},
    NOT_FOUND: {"code": "NOT_FOUND", "status": 400},
    INVALID_ENUM: {"code": "INVALID_ENUM", "status": 400},
    INVALID_BODY: {"code": "INVALID_BODY", "status": 400},
    STORE_REJECTED: {"code": "STORE_REJECTED", "status": 400},
    STORE_UNAVAILABLE: {"code": "STORE_UNAVAILABLE", "status": 503},
}

__all__ = [
    "CLIENT_ERROR_MAP",
    "NOT_A_NUMBER",
    "NOT_FOUND",
    "INVALID_ENUM",
    "INVALID_BODY",
    "STORE_REJECTED",
    "STORE_UNAVAILABLE",
]
