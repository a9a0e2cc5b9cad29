"""Lane reordering for client priorities.

Backend-authoritative, contiguous 1-based ranks per lane. Given the full
snapshot ordered by (status, priority), a target client and an optional new
lane and/or rank, compute the new (status, priority) of every client. The
functions here are pure: no store access, and the input snapshot is never
mutated.

Moves are single-pass interval shifts rather than full re-sorts, so clients
outside the shifted interval keep their exact rank and relative order.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from app.models.client import ClientRow


class TargetNotInSnapshot(LookupError):
    """Raised when the target id is absent from the snapshot."""


def _lane_members(rows: Iterable[ClientRow], lane: str) -> List[ClientRow]:
    return [r for r in rows if r.status == lane]


def clamp_rank(requested: int, lane_size: int) -> int:
    """Clamp a requested rank into [1, lane_size]."""
    return min(max(1, int(requested)), max(1, lane_size))


def _move_to_lane(rows: List[ClientRow], target: ClientRow, new_lane: str) -> None:
    source_lane = target.status
    vacated = target.priority
    # Close the hole left in the source lane
    for r in rows:
        if r is not target and r.status == source_lane and r.priority > vacated:
            r.priority -= 1
    tail = max((r.priority for r in _lane_members(rows, new_lane)), default=0)
    target.status = new_lane
    target.priority = tail + 1


def _shift_within_lane(rows: List[ClientRow], target: ClientRow, requested: int) -> None:
    members = _lane_members(rows, target.status)
    old = target.priority
    new = clamp_rank(requested, len(members))
    if old == new:
        return
    if old < new:
        # Lower priority: members in (old, new] move up one
        for r in members:
            if r is not target and old < r.priority <= new:
                r.priority -= 1
    else:
        # Higher priority: members in [new, old) move down one
        for r in members:
            if r is not target and new <= r.priority < old:
                r.priority += 1
    target.priority = new


def reorder(
    snapshot: Sequence[ClientRow],
    target_id: int,
    new_lane: Optional[str] = None,
    new_rank: Optional[int] = None,
) -> List[ClientRow]:
    """Return the snapshot with the target moved to ``new_lane``/``new_rank``.

    - A lane change appends the target to the end of the destination lane
      (``max rank + 1``) and renumbers the source lane so it stays contiguous.
    - A rank change is evaluated in the target's lane after any lane change;
      the rank is clamped into [1, lane size] and the ranks between the old and
      new position shift by one.
    - With neither given the snapshot is returned unchanged (as copies).

    Output order matches input order; callers re-read for canonical order.
    """
    rows = [replace(r) for r in snapshot]
    target = next((r for r in rows if r.id == target_id), None)
    if target is None:
        raise TargetNotInSnapshot(target_id)

    if new_lane is not None and new_lane != target.status:
        _move_to_lane(rows, target, new_lane)

    if new_rank is not None:
        _shift_within_lane(rows, target, new_rank)

    return rows


def changed_rows(before: Sequence[ClientRow], after: Sequence[ClientRow]) -> List[ClientRow]:
    """Rows of ``after`` whose (status, priority) differ from ``before``."""
    prior: Dict[int, tuple] = {r.id: (r.status, r.priority) for r in before}
    return [r for r in after if prior.get(r.id) != (r.status, r.priority)]


def lanes_with_gaps(rows: Iterable[ClientRow]) -> List[str]:
    """Lanes whose ranks are not exactly 1..N (sorted by lane name)."""
    by_lane: Dict[str, List[int]] = {}
    for r in rows:
        by_lane.setdefault(r.status, []).append(r.priority)
    return sorted(
        lane for lane, ranks in by_lane.items() if sorted(ranks) != list(range(1, len(ranks) + 1))
    )


__all__ = [
    "TargetNotInSnapshot",
    "clamp_rank",
    "reorder",
    "changed_rows",
    "lanes_with_gaps",
]
