"""
JobLedger Structural Diff: Frame-Condition Building Blocks
============================================================
Engine: Core Primitives

Generic comparison helpers over frozen dataclass snapshots.

Every "nothing else changed" rule in the validators is expressed
through these functions instead of per-field comparisons, so a
field added to an entity is covered by the frame condition
without touching any rule.

All functions are pure.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from typing import Any, Sequence, Tuple


def changed_fields(before: Any, after: Any) -> Tuple[str, ...]:
    """
    Names of dataclass fields whose values differ, in declaration order.

    Both snapshots must be instances of the same dataclass.
    """
    if not is_dataclass(before) or isinstance(before, type):
        raise TypeError(
            f"Expected dataclass instance, got {type(before).__name__}."
        )
    if type(before) is not type(after):
        raise TypeError(
            f"Cannot diff {type(before).__name__} "
            f"against {type(after).__name__}."
        )

    return tuple(
        f.name
        for f in fields(before)
        if getattr(before, f.name) != getattr(after, f.name)
    )


def unchanged_except(before: Any, after: Any, *ignored: str) -> bool:
    """True if `before` and `after` differ at most in the `ignored` fields."""
    return all(name in ignored for name in changed_fields(before, after))


def changed_positions(
    before: Sequence[Any],
    after: Sequence[Any],
    addressed: int,
) -> Tuple[int, ...]:
    """
    Positions other than `addressed` whose elements differ.

    Elements are compared with their own type's equality, position
    by position. Positions present in only one sequence count as
    changed, so an added or dropped element is always reported.
    """
    width = max(len(before), len(after))
    changed = []
    for position in range(width):
        if position == addressed:
            continue
        if position >= len(before) or position >= len(after):
            changed.append(position)
        elif before[position] != after[position]:
            changed.append(position)
    return tuple(changed)
