"""
Backend Router — Global XP
=============================

POST /global-xp/{creator_id}/recalculate — Recompute state, credit new milestones
GET  /global-xp/{creator_id}             — Last stored state
GET  /global-xp/{creator_id}/summary     — Progress toward next rewards
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from backend.config import get_ledger, xp_aggregator
from backend.database import MilestoneLedger
from xp_engine.models import GlobalXPState, GlobalXPSummary
from xp_engine.rules import clout_bonus_for_level

logger = logging.getLogger("backend.global_xp")
router = APIRouter(prefix="/global-xp", tags=["Global XP"])


class RecalculateRequest(BaseModel):
    community_xp: dict[str, int] = Field(
        default_factory=dict,
        description="Community ID → the creator's XP total in that community",
    )


class RecalculateResponse(BaseModel):
    state: GlobalXPState
    newly_awarded: list[int] = []
    clout_awarded: int = 0
    awarded_milestones: list[int] = []


@router.post("/{creator_id}/recalculate", response_model=RecalculateResponse)
async def recalculate(
    creator_id: str,
    req: RecalculateRequest,
    ledger: MilestoneLedger = Depends(get_ledger),
):
    """Recompute global XP and credit milestones crossed for the first time."""
    try:
        previous = ledger.load_state(creator_id)
        awarded = ledger.awarded_milestones(creator_id)

        result = xp_aggregator.recalculate(
            req.community_xp,
            previous_clout_bonus=previous.permanent_clout_bonus if previous else 0,
            awarded_milestones=awarded,
            creator_id=creator_id,
            calculated_at=datetime.now(timezone.utc),
        )

        # The ledger decides what was actually new; a concurrent writer may have won
        credited = ledger.record_awards(
            creator_id, result.newly_awarded, result.state.global_level
        )
        stored = ledger.save_state(result.state)

        return RecalculateResponse(
            state=stored,
            newly_awarded=credited,
            clout_awarded=sum(clout_bonus_for_level(level) for level in credited),
            awarded_milestones=sorted(awarded | set(credited)),
        )
    except SQLAlchemyError as exc:
        logger.error("Recalculation failed for %s: %s", creator_id, exc, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Ledger unavailable: {exc}")


@router.get("/{creator_id}", response_model=GlobalXPState)
async def get_global_xp(
    creator_id: str,
    ledger: MilestoneLedger = Depends(get_ledger),
):
    """Return the last stored state, or a fresh level-1 state."""
    try:
        return ledger.load_state(creator_id) or GlobalXPState(creator_id=creator_id)
    except SQLAlchemyError as exc:
        logger.error("Load failed for %s: %s", creator_id, exc, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Ledger unavailable: {exc}")


@router.get("/{creator_id}/summary", response_model=GlobalXPSummary)
async def get_summary(
    creator_id: str,
    ledger: MilestoneLedger = Depends(get_ledger),
):
    """Progress toward the next level, clout milestone and tap upgrade."""
    try:
        state = ledger.load_state(creator_id) or GlobalXPState(creator_id=creator_id)
    except SQLAlchemyError as exc:
        logger.error("Summary failed for %s: %s", creator_id, exc, exc_info=True)
        raise HTTPException(status_code=502, detail=f"Ledger unavailable: {exc}")
    return xp_aggregator.summarize(state)
