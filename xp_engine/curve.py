"""
XP Engine — Level Curve
=========================

The single level curve shared by per-community and global leveling.

    Levels 2–20     level × 50              (fast linear start)
    Levels 21–100   50 × level^1.5
    Levels 101–500  50 × level^1.8
    Levels 501+     50 × level^2.0          (prestige grind)

Cumulative totals are precomputed once into a lookup table; level
lookups are a binary search over it.
"""

from __future__ import annotations

from bisect import bisect_right

MIN_LEVEL = 1
MAX_LEVEL = 1000
BASE_XP = 50


def xp_required(level: int) -> int:
    """XP needed to go from ``level - 1`` to ``level``."""
    if level <= MIN_LEVEL:
        return 0
    if level <= 20:
        return level * BASE_XP
    if level <= 100:
        return int(BASE_XP * level ** 1.5)
    if level <= 500:
        return int(BASE_XP * level ** 1.8)
    return int(BASE_XP * level ** 2.0)


def _build_table() -> list[int]:
    # index = level; index 0 is padding so that table[1] == 0
    table = [0, 0]
    for level in range(MIN_LEVEL + 1, MAX_LEVEL + 1):
        table.append(table[-1] + xp_required(level))
    return table


XP_TABLE: list[int] = _build_table()


def total_xp_for_level(level: int) -> int:
    """Cumulative XP needed to reach ``level``."""
    if level <= MIN_LEVEL:
        return 0
    if level <= MAX_LEVEL:
        return XP_TABLE[level]
    return XP_TABLE[MAX_LEVEL] + sum(xp_required(l) for l in range(MAX_LEVEL + 1, level + 1))


def level_from_xp(xp: int) -> int:
    """Highest level whose cumulative XP is <= ``xp`` (1..MAX_LEVEL)."""
    if xp <= 0:
        return MIN_LEVEL
    return min(MAX_LEVEL, bisect_right(XP_TABLE, xp, lo=MIN_LEVEL) - 1)


def progress_to_next_level(xp: int) -> float:
    """Fraction of the way from the current level to the next (0.0–1.0)."""
    level = level_from_xp(xp)
    if level >= MAX_LEVEL:
        return 1.0

    current = XP_TABLE[level]
    span = XP_TABLE[level + 1] - current
    if span <= 0:
        return 0.0
    return min(1.0, max(0.0, (xp - current) / span))


def xp_to_next_level(xp: int) -> int:
    level = level_from_xp(xp)
    if level >= MAX_LEVEL:
        return 0
    return max(0, XP_TABLE[level + 1] - max(xp, 0))
