"""
Opportunity matcher tests: tier gate, criterion points, clamping,
hashtag cap, ranking and ad access rules.
"""

import pytest

from ad_matching.engine import compute_match_score
from ad_matching.models import (
    AdCategory,
    CampaignListing,
    CampaignRequirements,
    CreatorMetrics,
    CriterionOutcome,
    MatchLevel,
    UserTier,
)
from ad_matching.rules import can_access_ads, creator_share, platform_share, tier_rank

# tier 20 + four neutral thresholds (10+10+10+5) + category neutral 10
NEUTRAL_WITHOUT_HASHTAGS = 65


def _points(result, criterion):
    return next(b.points for b in result.breakdown if b.criterion == criterion)


class TestTierGate:

    def test_lower_tier_scores_zero(self, open_campaign):
        metrics = CreatorMetrics(tier=UserTier.RISING, follower_count=10_000_000)
        assert compute_match_score(open_campaign, metrics) == 0

    @pytest.mark.parametrize("tier", [UserTier.ROOKIE, UserTier.RISING, UserTier.VETERAN])
    def test_every_tier_below_minimum_is_ineligible(self, engine, open_campaign, tier):
        result = engine.evaluate(open_campaign, CreatorMetrics(tier=tier))
        assert result.match_score == 0
        assert result.eligible is False
        assert result.match_level == MatchLevel.INELIGIBLE

    def test_founder_ranks_at_clout_floor_zero(self, open_campaign):
        assert tier_rank(UserTier.FOUNDER) == 0
        assert compute_match_score(open_campaign, CreatorMetrics(tier=UserTier.FOUNDER)) == 0

    def test_higher_tier_passes(self, open_campaign):
        metrics = CreatorMetrics(tier=UserTier.LEGENDARY)
        assert compute_match_score(open_campaign, metrics) > 0


class TestCriteria:

    def test_all_unspecified_baseline(self, engine, open_campaign, influencer):
        result = engine.evaluate(open_campaign, influencer)
        # 65 plus the +5 hashtag credit for "no required hashtags"
        assert result.match_score == NEUTRAL_WITHOUT_HASHTAGS + 5
        assert _points(result, "hashtags") == 5
        assert result.eligible is True

    def test_all_met_clamps_to_100(self, engine):
        requirements = CampaignRequirements(
            minimum_tier=UserTier.INFLUENCER,
            minimum_follower_count=1000,
            minimum_engagement_score=50.0,
            minimum_engagement_rate=0.05,
            minimum_view_count=10_000,
            preferred_categories=[AdCategory.GAMING],
            required_hashtags=["speedrun", "retro", "indie"],
        )
        metrics = CreatorMetrics(
            tier=UserTier.ELITE,
            follower_count=5000,
            engagement_score=75.0,
            engagement_rate=0.08,
            view_count=250_000,
            primary_category=AdCategory.GAMING,
            hashtags=["speedrun", "retro", "indie", "pixelart"],
        )
        result = engine.evaluate(requirements, metrics)
        assert sum(b.points for b in result.breakdown) == 110
        assert result.match_score == 100
        assert result.match_level == MatchLevel.STRONG

    def test_all_unmet_clamps_to_zero(self, engine, influencer):
        requirements = CampaignRequirements(
            minimum_follower_count=1000,
            minimum_engagement_score=50.0,
            minimum_engagement_rate=0.05,
            minimum_view_count=10_000,
            required_hashtags=["fitness"],
        )
        result = engine.evaluate(requirements, influencer)
        # 20 - 10 - 10 - 10 - 5 + 10 + 0
        assert sum(b.points for b in result.breakdown) == -5
        assert result.match_score == 0
        assert result.eligible is True

    def test_threshold_met_exactly_counts(self, engine, influencer):
        requirements = CampaignRequirements(minimum_follower_count=0, minimum_view_count=0)
        result = engine.evaluate(requirements, influencer)
        assert _points(result, "followers") == 15
        assert _points(result, "views") == 10

    def test_single_unmet_threshold(self, engine):
        requirements = CampaignRequirements(minimum_engagement_rate=0.10)
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, engagement_rate=0.02)
        result = engine.evaluate(requirements, metrics)
        assert _points(result, "engagement_rate") == -10
        assert result.match_score == 70 - 10 - 10


class TestCategory:

    def test_preferred_category_match(self, engine):
        requirements = CampaignRequirements(preferred_categories=[AdCategory.TECH, AdCategory.GAMING])
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, primary_category=AdCategory.TECH)
        result = engine.evaluate(requirements, metrics)
        assert _points(result, "category") == 20
        assert result.match_score == 80

    def test_category_mismatch_gets_neutral_credit(self, engine):
        requirements = CampaignRequirements(preferred_categories=[AdCategory.BEAUTY])
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, primary_category=AdCategory.GAMING)
        result = engine.evaluate(requirements, metrics)
        assert _points(result, "category") == 10

    def test_unknown_creator_category_gets_neutral_credit(self, engine, influencer):
        requirements = CampaignRequirements(preferred_categories=[AdCategory.BEAUTY])
        assert _points(engine.evaluate(requirements, influencer), "category") == 10


class TestHashtags:

    @pytest.mark.parametrize("tags, expected", [
        ([], 0),
        (["a"], 5),
        (["a", "b"], 10),
        (["a", "b", "c"], 15),
        (["a", "b", "c", "d", "e"], 15),
    ])
    def test_overlap_scaled_and_capped(self, engine, tags, expected):
        requirements = CampaignRequirements(required_hashtags=["a", "b", "c", "d", "e"])
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, hashtags=tags + ["unrelated"])
        result = engine.evaluate(requirements, metrics)
        assert _points(result, "hashtags") == expected
        assert result.match_score == NEUTRAL_WITHOUT_HASHTAGS + expected

    def test_duplicate_creator_hashtags_count_once(self, engine):
        requirements = CampaignRequirements(required_hashtags=["a", "b"])
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, hashtags=["a", "a", "a"])
        assert _points(engine.evaluate(requirements, metrics), "hashtags") == 5

    def test_empty_required_list_is_unspecified(self, engine, influencer):
        result = engine.evaluate(CampaignRequirements(required_hashtags=[]), influencer)
        hashtags = next(b for b in result.breakdown if b.criterion == "hashtags")
        assert hashtags.outcome == CriterionOutcome.UNSPECIFIED
        assert hashtags.points == 5


class TestRanking:

    def _campaigns(self):
        return [
            CampaignListing(
                campaign_id="c-low",
                brand_name="Acme",
                title="Generic",
                requirements=CampaignRequirements(minimum_view_count=1_000_000),
            ),
            CampaignListing(
                campaign_id="c-gated",
                brand_name="Luxe",
                title="Elite only",
                requirements=CampaignRequirements(minimum_tier=UserTier.PARTNER),
            ),
            CampaignListing(
                campaign_id="c-high",
                brand_name="PlayCo",
                title="Gaming launch",
                category=AdCategory.GAMING,
                requirements=CampaignRequirements(preferred_categories=[AdCategory.GAMING]),
            ),
        ]

    def test_rank_orders_and_drops_ineligible(self, engine):
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, primary_category=AdCategory.GAMING)
        ranked = engine.rank(metrics, self._campaigns())
        assert [r.campaign_id for r in ranked] == ["c-high", "c-low"]
        assert ranked[0].match_score == 80
        assert ranked[0].revenue_share_creator == 0.25
        assert ranked[0].revenue_share_platform == 0.75

    def test_rank_min_score_and_limit(self, engine):
        metrics = CreatorMetrics(tier=UserTier.INFLUENCER, primary_category=AdCategory.GAMING)
        assert [r.campaign_id for r in engine.rank(metrics, self._campaigns(), min_score=75)] == ["c-high"]
        assert len(engine.rank(metrics, self._campaigns(), limit=1)) == 1


class TestAdAccess:

    def test_access_starts_at_influencer(self):
        assert not can_access_ads(UserTier.VETERAN)
        assert can_access_ads(UserTier.INFLUENCER)
        assert can_access_ads(UserTier.CO_FOUNDER)

    def test_revenue_split(self):
        assert creator_share(UserTier.ROOKIE) == 0.0
        assert creator_share(UserTier.TOP_CREATOR) == 0.40
        assert platform_share(UserTier.FOUNDER) == 0.5
