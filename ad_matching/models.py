"""
Ad Matching — Data Models
==========================

Shared Pydantic models for sponsor campaigns, creator metrics and
match results. These models are the contract between the matching
engine, the HTTP routers and the CLI.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────
class UserTier(str, Enum):
    ROOKIE = "rookie"
    RISING = "rising"
    VETERAN = "veteran"
    INFLUENCER = "influencer"
    AMBASSADOR = "ambassador"
    ELITE = "elite"
    PARTNER = "partner"
    LEGENDARY = "legendary"
    TOP_CREATOR = "top_creator"
    FOUNDER = "founder"
    CO_FOUNDER = "co_founder"


class AdCategory(str, Enum):
    FITNESS = "fitness"
    GAMING = "gaming"
    LIFESTYLE = "lifestyle"
    FASHION = "fashion"
    TECH = "tech"
    FOOD = "food"
    TRAVEL = "travel"
    BEAUTY = "beauty"
    EDUCATION = "education"
    ENTERTAINMENT = "entertainment"
    SPORTS = "sports"
    MUSIC = "music"
    OTHER = "other"


class CriterionOutcome(str, Enum):
    MET = "met"
    UNMET = "unmet"
    UNSPECIFIED = "unspecified"


class MatchLevel(str, Enum):
    STRONG = "strong"          # 80–100
    MODERATE = "moderate"      # 50–79
    WEAK = "weak"              # 0–49, tier gate passed
    INELIGIBLE = "ineligible"  # tier gate failed


# ─────────────────────────────────────────────────────────────────────────────
# Inputs
# ─────────────────────────────────────────────────────────────────────────────
class CampaignRequirements(BaseModel):
    """Sponsor-defined eligibility and preference criteria.

    Unset thresholds are soft preferences: they earn a fixed neutral
    credit instead of being skipped.
    """
    minimum_tier: UserTier = UserTier.INFLUENCER
    minimum_follower_count: Optional[int] = None
    minimum_engagement_score: Optional[float] = None
    minimum_engagement_rate: Optional[float] = None
    minimum_view_count: Optional[int] = None
    preferred_categories: Optional[list[AdCategory]] = None
    required_hashtags: Optional[list[str]] = None


class CreatorMetrics(BaseModel):
    """Snapshot of a creator's measured performance."""
    tier: UserTier
    follower_count: int = 0
    engagement_score: float = 0.0
    engagement_rate: float = 0.0
    view_count: int = 0
    primary_category: Optional[AdCategory] = None
    hashtags: list[str] = Field(default_factory=list)


class CampaignListing(BaseModel):
    """A sponsor campaign offered to creators."""
    campaign_id: str
    brand_name: str
    title: str
    category: AdCategory = AdCategory.OTHER
    requirements: CampaignRequirements = Field(default_factory=CampaignRequirements)


# ─────────────────────────────────────────────────────────────────────────────
# Outputs
# ─────────────────────────────────────────────────────────────────────────────
class MatchBreakdown(BaseModel):
    """Contribution of a single criterion to the match score."""
    criterion: str
    outcome: CriterionOutcome
    points: int
    detail: str


class MatchResult(BaseModel):
    """Output of the matching engine."""
    match_score: int = Field(ge=0, le=100)
    eligible: bool
    match_level: MatchLevel
    breakdown: list[MatchBreakdown] = []
    explanation: str = ""


class RankedOpportunity(BaseModel):
    """A campaign scored for one creator."""
    campaign_id: str
    brand_name: str
    title: str
    category: AdCategory
    match_score: int = Field(ge=0, le=100)
    match_level: MatchLevel
    revenue_share_creator: float = Field(ge=0.0, le=1.0)
    revenue_share_platform: float = Field(ge=0.0, le=1.0)
