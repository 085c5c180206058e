"""
Ad Matching — Scoring Rules & Tier Tables
===========================================

Weights, tier ordering and revenue-share tables used by the matching
engine. All match points are defined here.
No magic numbers elsewhere.
"""

from __future__ import annotations

from ad_matching.models import MatchLevel, UserTier

# ─────────────────────────────────────────────────────────────────────────────
# Tier Ordering — lower bound of each tier's clout range
# ─────────────────────────────────────────────────────────────────────────────
TIER_CLOUT_FLOOR: dict[UserTier, int] = {
    UserTier.ROOKIE: 0,
    UserTier.RISING: 1_000,
    UserTier.VETERAN: 5_000,
    UserTier.INFLUENCER: 10_000,
    UserTier.AMBASSADOR: 15_000,
    UserTier.ELITE: 20_000,
    UserTier.PARTNER: 50_000,
    UserTier.LEGENDARY: 100_000,
    UserTier.TOP_CREATOR: 500_000,
    # Founder tiers span the whole clout range
    UserTier.FOUNDER: 0,
    UserTier.CO_FOUNDER: 0,
}


def tier_rank(tier: UserTier) -> int:
    """Rank used by the tier gate (clout-range lower bound)."""
    return TIER_CLOUT_FLOOR[tier]


# ─────────────────────────────────────────────────────────────────────────────
# Match Weights
# ─────────────────────────────────────────────────────────────────────────────
class MatchWeights:
    """Points awarded per criterion: met / unmet / unspecified."""

    TIER_PASS = 20

    FOLLOWERS_MET = 15
    FOLLOWERS_UNMET = -10
    FOLLOWERS_UNSPECIFIED = 10

    ENGAGEMENT_SCORE_MET = 15
    ENGAGEMENT_SCORE_UNMET = -10
    ENGAGEMENT_SCORE_UNSPECIFIED = 10

    ENGAGEMENT_RATE_MET = 15
    ENGAGEMENT_RATE_UNMET = -10
    ENGAGEMENT_RATE_UNSPECIFIED = 10

    VIEWS_MET = 10
    VIEWS_UNMET = -5
    VIEWS_UNSPECIFIED = 5

    CATEGORY_MET = 20
    CATEGORY_UNSPECIFIED = 10

    HASHTAG_PER_MATCH = 5
    HASHTAG_CAP = 15
    HASHTAG_UNSPECIFIED = 5

    SCORE_MIN = 0
    SCORE_MAX = 100


# ─────────────────────────────────────────────────────────────────────────────
# Ad Access & Revenue Share
# ─────────────────────────────────────────────────────────────────────────────
CREATOR_REVENUE_SHARE: dict[UserTier, float] = {
    UserTier.INFLUENCER: 0.25,
    UserTier.AMBASSADOR: 0.28,
    UserTier.ELITE: 0.32,
    UserTier.PARTNER: 0.35,
    UserTier.LEGENDARY: 0.38,
    UserTier.TOP_CREATOR: 0.40,
    UserTier.FOUNDER: 0.50,
    UserTier.CO_FOUNDER: 0.50,
}


def creator_share(tier: UserTier) -> float:
    """Creator's cut of ad revenue. Tiers below influencer get nothing."""
    return CREATOR_REVENUE_SHARE.get(tier, 0.0)


def platform_share(tier: UserTier) -> float:
    return round(1.0 - creator_share(tier), 4)


def can_access_ads(tier: UserTier) -> bool:
    return tier in CREATOR_REVENUE_SHARE


# ─────────────────────────────────────────────────────────────────────────────
# Match Level Thresholds
# ─────────────────────────────────────────────────────────────────────────────
STRONG_MATCH_THRESHOLD = 80
MODERATE_MATCH_THRESHOLD = 50


def match_level(score: int, eligible: bool = True) -> MatchLevel:
    if not eligible:
        return MatchLevel.INELIGIBLE
    if score >= STRONG_MATCH_THRESHOLD:
        return MatchLevel.STRONG
    if score >= MODERATE_MATCH_THRESHOLD:
        return MatchLevel.MODERATE
    return MatchLevel.WEAK


def match_label(score: int, eligible: bool = True) -> str:
    """Return human-readable match label."""
    return match_level(score, eligible).value.title()
