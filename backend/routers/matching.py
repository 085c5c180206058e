"""
Backend Router — Opportunity Matching
=======================================

POST /match/score — Score one campaign for a creator
POST /match/rank  — Rank a batch of campaigns for a creator
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ad_matching.engine import DEFAULT_RANK_LIMIT
from ad_matching.models import (
    CampaignListing,
    CampaignRequirements,
    CreatorMetrics,
    MatchResult,
    RankedOpportunity,
)
from ad_matching.rules import can_access_ads
from backend.config import matching_engine

logger = logging.getLogger("backend.matching")
router = APIRouter(prefix="/match", tags=["Matching"])


# ─────────────────────────────────────────────────────────────────────────────
# Request / Response Models
# ─────────────────────────────────────────────────────────────────────────────
class ScoreRequest(BaseModel):
    requirements: CampaignRequirements
    metrics: CreatorMetrics


class RankRequest(BaseModel):
    metrics: CreatorMetrics
    campaigns: list[CampaignListing] = []
    min_score: int = Field(default=1, ge=0, le=100)
    limit: int = Field(default=DEFAULT_RANK_LIMIT, ge=1, le=200)


class RankResponse(BaseModel):
    tier: str
    opportunity_count: int
    opportunities: list[RankedOpportunity]


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────
@router.post("/score", response_model=MatchResult)
async def score_match(req: ScoreRequest):
    """Score a creator against one campaign's requirements."""
    return matching_engine.evaluate(req.requirements, req.metrics)


@router.post("/rank", response_model=RankResponse)
async def rank_opportunities(req: RankRequest):
    """Rank campaigns for a creator, best matches first."""
    if not can_access_ads(req.metrics.tier):
        logger.warning("Ad access denied for %s tier", req.metrics.tier.value)
        raise HTTPException(
            status_code=403,
            detail="Influencer tier or higher is required to access ad opportunities",
        )

    ranked = matching_engine.rank(
        req.metrics,
        req.campaigns,
        min_score=req.min_score,
        limit=req.limit,
    )
    return RankResponse(
        tier=req.metrics.tier.value,
        opportunity_count=len(ranked),
        opportunities=ranked,
    )
