"""
XP Engine — Data Models
=========================

Pydantic models for global XP state, milestone awards, summaries,
badge checks and daily tap usage.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# Global XP
# ─────────────────────────────────────────────────────────────────────────────
class GlobalXPState(BaseModel):
    """Cross-community aggregate for one creator. Always recomputed, never patched."""
    creator_id: str = ""
    total_global_xp: int = Field(ge=0, default=0)
    global_level: int = Field(ge=1, default=1)
    tap_multiplier_bonus: int = Field(ge=0, default=0)
    permanent_clout_bonus: int = Field(ge=0, default=0)
    communities_active: int = Field(ge=0, default=0)
    last_calculated_at: Optional[datetime] = None


class RecalculationResult(BaseModel):
    """Output of a global XP recalculation."""
    state: GlobalXPState
    newly_awarded: list[int] = []
    clout_delta: int = Field(ge=0, default=0)


class MilestoneAward(BaseModel):
    level: int
    clout: int


class TapUpgrade(BaseModel):
    level: int
    new_multiplier: int


class GlobalXPSummary(BaseModel):
    """Progress view of a GlobalXPState."""
    total_xp: int
    level: int
    clout_bonus: int
    tap_multiplier: int
    communities_active: int
    progress: float = Field(ge=0.0, le=1.0)
    xp_to_next: int
    next_clout_milestone: Optional[MilestoneAward] = None
    next_tap_upgrade: Optional[TapUpgrade] = None


# ─────────────────────────────────────────────────────────────────────────────
# Community Progression
# ─────────────────────────────────────────────────────────────────────────────
class BadgeDefinition(BaseModel):
    id: str
    level: int
    name: str
    description: str
    reward_description: str


class BadgeCheckResult(BaseModel):
    total_earned: int
    total_available: int
    newly_eligible: list[BadgeDefinition] = []
    next_badge: Optional[BadgeDefinition] = None
    levels_to_next_badge: int = 0


# ─────────────────────────────────────────────────────────────────────────────
# Daily Tap Usage
# ─────────────────────────────────────────────────────────────────────────────
class TapUsage(BaseModel):
    """Bonus taps used in one community on one day."""
    community_id: str
    date: str                       # yyyy-mm-dd
    bonus_taps_used: int = 0
    bonus_taps_allowed: int = 0

    @property
    def has_remaining_bonus_taps(self) -> bool:
        return self.bonus_taps_used < self.bonus_taps_allowed

    @property
    def remaining_bonus_taps(self) -> int:
        return max(0, self.bonus_taps_allowed - self.bonus_taps_used)
