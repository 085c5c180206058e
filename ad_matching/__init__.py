"""Ad Matching Engine — Package."""

from ad_matching.engine import MatchingEngine, compute_match_score
from ad_matching.models import (
    AdCategory,
    CampaignListing,
    CampaignRequirements,
    CreatorMetrics,
    MatchResult,
    RankedOpportunity,
    UserTier,
)

__all__ = [
    "MatchingEngine",
    "compute_match_score",
    "AdCategory",
    "CampaignListing",
    "CampaignRequirements",
    "CreatorMetrics",
    "MatchResult",
    "RankedOpportunity",
    "UserTier",
]
