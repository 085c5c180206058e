"""
Ad Matching — Matching Engine
===============================

Scores sponsor campaigns against a creator's profile and metrics.

Design:
    • Hard tier gate, then additive scoring over five criteria
    • Unset requirements earn a fixed neutral credit
    • Produces a breakdown and explanation for every score
    • Pure: no I/O, safe to call concurrently
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ad_matching.models import (
    CampaignListing,
    CampaignRequirements,
    CreatorMetrics,
    CriterionOutcome,
    MatchBreakdown,
    MatchResult,
    RankedOpportunity,
)
from ad_matching.rules import (
    MatchWeights,
    creator_share,
    match_label,
    match_level,
    platform_share,
    tier_rank,
)

logger = logging.getLogger("ad_matching.engine")

DEFAULT_RANK_LIMIT = 20


class MatchingEngine:
    """Computes creator / campaign match scores.

    Usage:
        engine = MatchingEngine()
        result = engine.evaluate(requirements, metrics)
        print(result.match_score, result.explanation)
    """

    def __init__(self) -> None:
        self.weights = MatchWeights()

    def evaluate(
        self,
        requirements: CampaignRequirements,
        metrics: CreatorMetrics,
    ) -> MatchResult:
        """Score a creator against one campaign's requirements."""
        w = self.weights

        # ── Tier gate (only early exit) ──────────────────────────────
        if tier_rank(metrics.tier) < tier_rank(requirements.minimum_tier):
            return MatchResult(
                match_score=0,
                eligible=False,
                match_level=match_level(0, eligible=False),
                breakdown=[MatchBreakdown(
                    criterion="tier",
                    outcome=CriterionOutcome.UNMET,
                    points=0,
                    detail=f"{metrics.tier.value} is below required {requirements.minimum_tier.value}",
                )],
                explanation=(
                    f"Not eligible: campaign requires {requirements.minimum_tier.value} tier or higher."
                ),
            )

        breakdown: list[MatchBreakdown] = [MatchBreakdown(
            criterion="tier",
            outcome=CriterionOutcome.MET,
            points=w.TIER_PASS,
            detail=f"{metrics.tier.value} meets {requirements.minimum_tier.value}",
        )]

        # ── Threshold criteria ───────────────────────────────────────
        breakdown.append(self._threshold(
            "followers",
            metrics.follower_count,
            requirements.minimum_follower_count,
            (w.FOLLOWERS_MET, w.FOLLOWERS_UNMET, w.FOLLOWERS_UNSPECIFIED),
        ))
        breakdown.append(self._threshold(
            "engagement_score",
            metrics.engagement_score,
            requirements.minimum_engagement_score,
            (w.ENGAGEMENT_SCORE_MET, w.ENGAGEMENT_SCORE_UNMET, w.ENGAGEMENT_SCORE_UNSPECIFIED),
        ))
        breakdown.append(self._threshold(
            "engagement_rate",
            metrics.engagement_rate,
            requirements.minimum_engagement_rate,
            (w.ENGAGEMENT_RATE_MET, w.ENGAGEMENT_RATE_UNMET, w.ENGAGEMENT_RATE_UNSPECIFIED),
        ))
        breakdown.append(self._threshold(
            "views",
            metrics.view_count,
            requirements.minimum_view_count,
            (w.VIEWS_MET, w.VIEWS_UNMET, w.VIEWS_UNSPECIFIED),
        ))

        breakdown.append(self._category(requirements, metrics))
        breakdown.append(self._hashtags(requirements, metrics))

        raw = sum(b.points for b in breakdown)
        score = max(w.SCORE_MIN, min(w.SCORE_MAX, raw))

        result = MatchResult(
            match_score=score,
            eligible=True,
            match_level=match_level(score),
            breakdown=breakdown,
            explanation=self._build_explanation(score, breakdown),
        )

        logger.debug(
            "Match %d/100 (%s) for %s creator",
            score, result.match_level.value, metrics.tier.value,
        )
        return result

    def rank(
        self,
        metrics: CreatorMetrics,
        campaigns: Iterable[CampaignListing],
        min_score: int = 1,
        limit: int = DEFAULT_RANK_LIMIT,
    ) -> list[RankedOpportunity]:
        """Score every campaign for one creator, best matches first."""
        ranked: list[RankedOpportunity] = []
        share = creator_share(metrics.tier)

        for campaign in campaigns:
            result = self.evaluate(campaign.requirements, metrics)
            if not result.eligible or result.match_score < min_score:
                continue
            ranked.append(RankedOpportunity(
                campaign_id=campaign.campaign_id,
                brand_name=campaign.brand_name,
                title=campaign.title,
                category=campaign.category,
                match_score=result.match_score,
                match_level=result.match_level,
                revenue_share_creator=share,
                revenue_share_platform=platform_share(metrics.tier),
            ))

        # Stable sort keeps input order among equal scores
        ranked.sort(key=lambda r: r.match_score, reverse=True)

        logger.info(
            "Ranked %d opportunities for %s creator (min score %d)",
            len(ranked), metrics.tier.value, min_score,
        )
        return ranked[: max(limit, 0)]

    # ─────────────────────────────────────────────────────────────────────
    # Criteria
    # ─────────────────────────────────────────────────────────────────────
    @staticmethod
    def _threshold(
        name: str,
        value: float,
        minimum: Optional[float],
        points: tuple[int, int, int],
    ) -> MatchBreakdown:
        met, unmet, unspecified = points
        if minimum is None:
            return MatchBreakdown(
                criterion=name,
                outcome=CriterionOutcome.UNSPECIFIED,
                points=unspecified,
                detail="no minimum set",
            )
        if value >= minimum:
            return MatchBreakdown(
                criterion=name,
                outcome=CriterionOutcome.MET,
                points=met,
                detail=f"{value:g} >= {minimum:g}",
            )
        return MatchBreakdown(
            criterion=name,
            outcome=CriterionOutcome.UNMET,
            points=unmet,
            detail=f"{value:g} < {minimum:g}",
        )

    def _category(
        self,
        requirements: CampaignRequirements,
        metrics: CreatorMetrics,
    ) -> MatchBreakdown:
        preferred = requirements.preferred_categories
        category = metrics.primary_category

        if preferred is not None and category is not None and category in preferred:
            return MatchBreakdown(
                criterion="category",
                outcome=CriterionOutcome.MET,
                points=self.weights.CATEGORY_MET,
                detail=f"{category.value} is a preferred category",
            )

        # A mismatch is not penalized; it earns the neutral credit.
        return MatchBreakdown(
            criterion="category",
            outcome=CriterionOutcome.UNSPECIFIED,
            points=self.weights.CATEGORY_UNSPECIFIED,
            detail="no preferred category match",
        )

    def _hashtags(
        self,
        requirements: CampaignRequirements,
        metrics: CreatorMetrics,
    ) -> MatchBreakdown:
        w = self.weights
        required = requirements.required_hashtags

        if not required:
            return MatchBreakdown(
                criterion="hashtags",
                outcome=CriterionOutcome.UNSPECIFIED,
                points=w.HASHTAG_UNSPECIFIED,
                detail="no required hashtags",
            )

        overlap = set(metrics.hashtags) & set(required)
        points = min(len(overlap) * w.HASHTAG_PER_MATCH, w.HASHTAG_CAP)
        return MatchBreakdown(
            criterion="hashtags",
            outcome=CriterionOutcome.MET if overlap else CriterionOutcome.UNMET,
            points=points,
            detail=f"{len(overlap)} of {len(set(required))} required hashtags used",
        )

    @staticmethod
    def _build_explanation(score: int, breakdown: list[MatchBreakdown]) -> str:
        """Build a human-readable explanation of the score."""
        parts = [f"Match: {match_label(score)} ({score}/100)."]

        met = [b.criterion.replace("_", " ") for b in breakdown if b.outcome == CriterionOutcome.MET]
        if met:
            parts.append("Meets: " + ", ".join(met) + ".")

        unmet = [b.criterion.replace("_", " ") for b in breakdown if b.outcome == CriterionOutcome.UNMET]
        if unmet:
            parts.append("Falls short on: " + ", ".join(unmet) + ".")

        return " ".join(parts)


_default_engine = MatchingEngine()


def compute_match_score(
    requirements: CampaignRequirements,
    metrics: CreatorMetrics,
) -> int:
    """Match score in [0, 100]; 0 when the creator's tier is too low."""
    return _default_engine.evaluate(requirements, metrics).match_score
