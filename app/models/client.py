"""Client record shapes shared by the repository, reorder engine and routes."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel


@dataclass
class ClientRow:
    """One row of the lane snapshot.

    Mutable on purpose: the reorder engine works on copies and shifts
    ``priority`` and ``status`` in place.
    """

    id: int
    name: Optional[str]
    description: Optional[str]
    status: str
    priority: int

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "ClientRow":
        return cls(
            id=int(row["id"]),
            name=row.get("name"),
            description=row.get("description"),
            status=str(row["status"]),
            priority=int(row["priority"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ClientOut(BaseModel):
    """Serialized client as returned by the HTTP API."""

    id: int
    name: Optional[str] = None
    description: Optional[str] = None
    status: str
    priority: int


__all__ = ["ClientRow", "ClientOut"]
