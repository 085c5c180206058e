"""
XP Engine — Global XP Aggregation & Milestone Bonuses
=======================================================

Computes a creator's cross-community progression from per-community
XP totals.

Capabilities:
    • Aggregate community XP at a fixed contribution rate
    • Global level from the shared level curve
    • Tap multiplier from the global level
    • Cumulative clout bonus, recomputed from scratch every call
    • Newly crossed milestones, excluding those already in the ledger
    • Community badge and feature-gate checks on the same curve
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from xp_engine import curve
from xp_engine.models import (
    BadgeCheckResult,
    BadgeDefinition,
    GlobalXPState,
    GlobalXPSummary,
    MilestoneAward,
    RecalculationResult,
    TapUpgrade,
)
from xp_engine.rules import (
    BADGE_TABLE,
    CLOUT_MILESTONES,
    MILESTONE_LEVELS,
    TAP_MULTIPLIER_THRESHOLDS,
    FeatureGate,
    cumulative_clout_bonus,
    global_contribution,
    milestones_reached,
    tap_multiplier_for_level,
)

logger = logging.getLogger("xp_engine")

ALL_BADGES: tuple[BadgeDefinition, ...] = tuple(
    BadgeDefinition(
        id=badge_id,
        level=level,
        name=name,
        description=description,
        reward_description=reward,
    )
    for badge_id, level, name, description, reward in BADGE_TABLE
)


class GlobalXPAggregator:
    """Derives global progression from per-community XP. Holds no state."""

    def recalculate(
        self,
        per_community_xp: Mapping[str, int],
        previous_clout_bonus: int = 0,
        awarded_milestones: Iterable[int] = (),
        creator_id: str = "",
        calculated_at: Optional[datetime] = None,
    ) -> RecalculationResult:
        """Recompute the global state and report milestones not yet credited.

        Parameters
        ----------
        per_community_xp : Mapping[str, int]
            Community ID → that community's XP total for the creator.
        previous_clout_bonus : int
            ``permanent_clout_bonus`` from the last stored state.
        awarded_milestones : Iterable[int]
            Milestone levels already credited (the ledger).
        calculated_at : datetime, optional
            Stamped onto the state as-is; the aggregator never reads the clock.
        """
        # ── Aggregate ────────────────────────────────────────────────
        total_global_xp = 0
        active = 0
        for xp in per_community_xp.values():
            total_global_xp += global_contribution(xp)
            if xp > 0:
                active += 1

        # ── Level + rewards ──────────────────────────────────────────
        level = curve.level_from_xp(total_global_xp)
        tap_bonus = tap_multiplier_for_level(level)

        previous = max(previous_clout_bonus, 0)
        cumulative = cumulative_clout_bonus(level)
        clout_delta = max(0, cumulative - previous)

        # ── Ledger diff ──────────────────────────────────────────────
        already = set(awarded_milestones)
        newly_awarded = [m for m in milestones_reached(level) if m not in already]

        state = GlobalXPState(
            creator_id=creator_id,
            total_global_xp=total_global_xp,
            global_level=level,
            tap_multiplier_bonus=tap_bonus,
            permanent_clout_bonus=max(cumulative, previous),
            communities_active=active,
            last_calculated_at=calculated_at,
        )

        logger.info(
            "Global XP for %s: %d XP — Lv %d — %d communities — +%d taps — %d clout (new milestones: %s)",
            creator_id or "<anonymous>",
            total_global_xp,
            level,
            active,
            tap_bonus,
            state.permanent_clout_bonus,
            newly_awarded or "none",
        )

        return RecalculationResult(
            state=state,
            newly_awarded=newly_awarded,
            clout_delta=clout_delta,
        )

    def summarize(self, state: GlobalXPState) -> GlobalXPSummary:
        """Progress toward the next level, milestone and tap upgrade."""
        return GlobalXPSummary(
            total_xp=state.total_global_xp,
            level=state.global_level,
            clout_bonus=state.permanent_clout_bonus,
            tap_multiplier=state.tap_multiplier_bonus,
            communities_active=state.communities_active,
            progress=curve.progress_to_next_level(state.total_global_xp),
            xp_to_next=curve.xp_to_next_level(state.total_global_xp),
            next_clout_milestone=next_clout_milestone(state.global_level),
            next_tap_upgrade=next_tap_upgrade(state.global_level),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Next rewards
# ─────────────────────────────────────────────────────────────────────────────
def next_clout_milestone(level: int) -> Optional[MilestoneAward]:
    for milestone in MILESTONE_LEVELS:
        if milestone > level:
            return MilestoneAward(level=milestone, clout=CLOUT_MILESTONES[milestone])
    return None


def next_tap_upgrade(level: int) -> Optional[TapUpgrade]:
    for threshold, taps in TAP_MULTIPLIER_THRESHOLDS:
        if threshold > level:
            return TapUpgrade(level=threshold, new_multiplier=taps)
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Community badges & feature gates
# ─────────────────────────────────────────────────────────────────────────────
def badges_earned(level: int) -> list[BadgeDefinition]:
    return [b for b in ALL_BADGES if b.level <= level]


def next_badge(level: int) -> Optional[BadgeDefinition]:
    return next((b for b in ALL_BADGES if b.level > level), None)


def check_badge_eligibility(level: int, earned_badge_ids: Iterable[str] = ()) -> BadgeCheckResult:
    """Badges unlocked at ``level`` that the member does not hold yet."""
    earned = set(earned_badge_ids)
    eligible = badges_earned(level)
    upcoming = next_badge(level)

    return BadgeCheckResult(
        total_earned=len(eligible),
        total_available=len(ALL_BADGES),
        newly_eligible=[b for b in eligible if b.id not in earned],
        next_badge=upcoming,
        levels_to_next_badge=upcoming.level - level if upcoming else 0,
    )


def can_access_feature(feature: FeatureGate, level: int) -> bool:
    return level >= feature.required_level


def unlocked_features(level: int) -> list[FeatureGate]:
    return [f for f in FeatureGate if f.required_level <= level]


def next_feature_unlock(level: int) -> Optional[FeatureGate]:
    for feature in sorted(FeatureGate, key=lambda f: f.required_level):
        if feature.required_level > level:
            return feature
    return None
