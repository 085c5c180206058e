"""
Backend Router — Community Progression
=========================================

GET /progression/level/{xp} — Level and progress for an XP total
GET /progression/badges     — Badge eligibility at a level
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Query
from pydantic import BaseModel

from xp_engine import curve
from xp_engine.engine import check_badge_eligibility, next_feature_unlock, unlocked_features
from xp_engine.models import BadgeCheckResult

logger = logging.getLogger("backend.progression")
router = APIRouter(prefix="/progression", tags=["Progression"])


class LevelResponse(BaseModel):
    xp: int
    level: int
    progress: float
    xp_to_next: int
    unlocked_features: list[str] = []
    next_feature: str | None = None


@router.get("/level/{xp}", response_model=LevelResponse)
async def get_level(xp: int):
    """Level on the shared curve for an XP total."""
    level = curve.level_from_xp(xp)
    logger.debug("Level lookup: %d XP → Lv %d", xp, level)
    upcoming = next_feature_unlock(level)
    return LevelResponse(
        xp=xp,
        level=level,
        progress=round(curve.progress_to_next_level(xp), 4),
        xp_to_next=curve.xp_to_next_level(xp),
        unlocked_features=[f.display_name for f in unlocked_features(level)],
        next_feature=upcoming.display_name if upcoming else None,
    )


@router.get("/badges", response_model=BadgeCheckResult)
async def get_badges(
    level: int = Query(..., ge=1),
    earned: list[str] = Query(default=[]),
):
    """Badges unlocked at ``level`` minus the ones already earned."""
    return check_badge_eligibility(level, earned)
