"""
XP Engine — Daily Bonus Tap Tracker
=====================================

Tracks bonus tap usage per community per day, in memory only.
The allowance comes from the global tap multiplier; usage for every
community resets as soon as the calendar day changes.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from xp_engine.models import TapUsage

logger = logging.getLogger("xp_engine.tap_usage")

NORMAL_TAP = 1
BOOSTED_TAP = 2


class TapUsageTracker:
    """Per-community daily bonus taps for a single user session."""

    def __init__(self, tap_multiplier: int = 0, today: Callable[[], date] = date.today) -> None:
        self.tap_multiplier = max(tap_multiplier, 0)
        self._today = today
        self._usage: dict[str, TapUsage] = {}

    def _today_str(self) -> str:
        return self._today().isoformat()

    def _reset_if_new_day(self) -> None:
        today = self._today_str()
        if any(u.date != today for u in self._usage.values()):
            logger.debug("New day %s — clearing tap usage for %d communities", today, len(self._usage))
            self._usage.clear()

    def remaining_bonus_taps(self, community_id: str) -> int:
        self._reset_if_new_day()
        usage = self._usage.get(community_id)
        if usage is None:
            return self.tap_multiplier
        return usage.remaining_bonus_taps

    def use_bonus_tap(self, community_id: str) -> int:
        """Consume a bonus tap if one is left; return the tap multiplier applied."""
        self._reset_if_new_day()
        if self.tap_multiplier <= 0:
            return NORMAL_TAP

        usage = self._usage.get(community_id)
        if usage is None:
            usage = TapUsage(
                community_id=community_id,
                date=self._today_str(),
                bonus_taps_allowed=self.tap_multiplier,
            )
            self._usage[community_id] = usage

        if not usage.has_remaining_bonus_taps:
            return NORMAL_TAP

        usage.bonus_taps_used += 1
        return BOOSTED_TAP

    def has_any_bonus_taps(self) -> bool:
        # Communities not touched today still have their full allowance
        return self.tap_multiplier > 0

    def snapshot(self) -> list[TapUsage]:
        """Today's usage records, for syncing at session end."""
        self._reset_if_new_day()
        return [u.model_copy() for u in self._usage.values()]

    def clear(self) -> None:
        """Forget all recorded usage, e.g. when the user signs out."""
        self._usage.clear()
