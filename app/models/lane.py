"""Lane enumeration for the three workflow stages a client occupies.

Provides a simple constants container instead of an Enum so values compare
and serialize as the plain strings stored in the `status` column.
"""

from __future__ import annotations


class Lane:
    BACKLOG = "backlog"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"

    ALL: tuple[str, ...] = (BACKLOG, IN_PROGRESS, COMPLETE)

    @classmethod
    def is_valid(cls, value: object) -> bool:
        return isinstance(value, str) and value in cls.ALL


__all__ = ["Lane"]
