"""
Global XP aggregator tests: aggregation, milestone ledger semantics,
reward tables, summaries and community badge checks.
"""

from datetime import datetime, timezone

import pytest

from xp_engine.engine import (
    can_access_feature,
    check_badge_eligibility,
    next_clout_milestone,
    next_feature_unlock,
    next_tap_upgrade,
    unlocked_features,
)
from xp_engine.rules import (
    FeatureGate,
    cumulative_clout_bonus,
    global_contribution,
    tap_multiplier_for_level,
)


class TestAggregation:

    def test_contributions_floored_per_community(self, aggregator):
        result = aggregator.recalculate({"a": 40, "b": 200, "c": 7, "d": 3})
        # 10 + 50 + 1 + 0
        assert result.state.total_global_xp == 61
        assert result.state.communities_active == 4

    def test_worked_example(self, aggregator):
        result = aggregator.recalculate({"A": 40, "B": 200})
        assert result.state.total_global_xp == 60
        assert result.state.global_level == 1
        assert result.newly_awarded == []

    def test_empty_input_is_level_one(self, aggregator):
        result = aggregator.recalculate({})
        assert result.state.total_global_xp == 0
        assert result.state.global_level == 1
        assert result.state.tap_multiplier_bonus == 0
        assert result.state.permanent_clout_bonus == 0
        assert result.newly_awarded == []

    def test_negative_and_zero_xp_ignored(self, aggregator):
        result = aggregator.recalculate({"a": -400, "b": 0, "c": 8})
        assert result.state.total_global_xp == 2
        assert result.state.communities_active == 1

    def test_identical_inputs_give_identical_state(self, aggregator):
        a = aggregator.recalculate({"x": 400_000}, 0, set())
        b = aggregator.recalculate({"x": 400_000}, 0, set())
        assert a.state == b.state
        assert a.state.last_calculated_at is None

    def test_timestamp_comes_from_caller(self, aggregator):
        stamp = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        result = aggregator.recalculate({"x": 400}, calculated_at=stamp)
        assert result.state.last_calculated_at == stamp

    def test_global_contribution_rate(self):
        assert global_contribution(3) == 0
        assert global_contribution(4) == 1
        assert global_contribution(-10) == 0


class TestMilestones:

    def test_first_milestone_awarded(self, aggregator, xp_for_level):
        result = aggregator.recalculate({"gaming": xp_for_level(12)})
        assert result.state.global_level == 12
        assert result.newly_awarded == [10]
        assert result.state.permanent_clout_bonus == 50
        assert result.clout_delta == 50
        assert result.state.tap_multiplier_bonus == 1

    def test_recalculate_is_idempotent_with_ledger(self, aggregator, xp_for_level):
        community_xp = {"gaming": xp_for_level(30)}
        first = aggregator.recalculate(community_xp)
        ledger = set(first.newly_awarded)

        second = aggregator.recalculate(
            community_xp,
            previous_clout_bonus=first.state.permanent_clout_bonus,
            awarded_milestones=ledger,
        )
        assert first.newly_awarded == [10, 25]
        assert second.newly_awarded == []
        assert second.clout_delta == 0
        assert second.state == first.state

    def test_each_milestone_reported_exactly_once(self, aggregator, xp_for_level):
        ledger: set[int] = set()
        clout = 0
        reported: list[int] = []

        for level in (5, 12, 12, 30, 60, 60, 120, 250, 250):
            result = aggregator.recalculate(
                {"main": xp_for_level(level)},
                previous_clout_bonus=clout,
                awarded_milestones=ledger,
            )
            reported.extend(result.newly_awarded)
            ledger |= set(result.newly_awarded)
            assert result.state.permanent_clout_bonus >= clout
            clout = result.state.permanent_clout_bonus

        assert reported == [10, 25, 50, 75, 100, 150, 200]
        assert clout == cumulative_clout_bonus(250) == 12_200

    def test_clout_never_decreases_when_level_drops(self, aggregator, xp_for_level):
        high = aggregator.recalculate({"a": xp_for_level(60)})
        low = aggregator.recalculate(
            {"a": xp_for_level(12)},
            previous_clout_bonus=high.state.permanent_clout_bonus,
            awarded_milestones=high.newly_awarded,
        )
        assert low.state.global_level == 12
        assert low.state.permanent_clout_bonus == high.state.permanent_clout_bonus
        assert low.clout_delta == 0
        assert low.newly_awarded == []

    def test_ledger_gap_reported_again(self, aggregator, xp_for_level):
        # 25 missing from the ledger: it is still owed
        result = aggregator.recalculate(
            {"a": xp_for_level(55)},
            previous_clout_bonus=50,
            awarded_milestones={10, 50},
        )
        assert result.newly_awarded == [25]


class TestRewardTables:

    @pytest.mark.parametrize("level, taps", [
        (1, 0), (9, 0), (10, 1), (24, 1), (25, 2), (49, 2), (50, 3), (75, 4), (100, 5), (999, 5),
    ])
    def test_tap_multiplier_steps(self, level, taps):
        assert tap_multiplier_for_level(level) == taps

    def test_cumulative_clout(self):
        assert cumulative_clout_bonus(9) == 0
        assert cumulative_clout_bonus(10) == 50
        assert cumulative_clout_bonus(74) == 700

    def test_next_rewards(self):
        assert next_clout_milestone(12).model_dump() == {"level": 25, "clout": 150}
        assert next_clout_milestone(200) is None
        assert next_tap_upgrade(12).model_dump() == {"level": 25, "new_multiplier": 2}
        assert next_tap_upgrade(100) is None


class TestSummary:

    def test_summary_fields(self, aggregator, xp_for_level):
        state = aggregator.recalculate({"a": xp_for_level(12)}, creator_id="u1").state
        summary = aggregator.summarize(state)
        assert summary.level == 12
        assert summary.clout_bonus == 50
        assert summary.progress == 0.0
        assert summary.xp_to_next > 0
        assert summary.next_clout_milestone.level == 25
        assert summary.next_tap_upgrade.new_multiplier == 2


class TestCommunityProgression:

    def test_badge_check(self):
        result = check_badge_eligibility(10, ["badge_01"])
        assert result.total_earned == 5
        assert result.total_available == 25
        assert [b.id for b in result.newly_eligible] == ["badge_02", "badge_03", "badge_04", "badge_05"]
        assert result.next_badge.id == "badge_06"
        assert result.levels_to_next_badge == 3

    def test_badge_check_at_max(self):
        result = check_badge_eligibility(1000)
        assert result.total_earned == 25
        assert result.next_badge is None
        assert result.levels_to_next_badge == 0

    def test_feature_gates(self):
        assert unlocked_features(10) == [
            FeatureGate.PROFILE_BORDER,
            FeatureGate.CUSTOM_FLAIR,
            FeatureGate.REACTION_EMOTES,
        ]
        assert next_feature_unlock(10) == FeatureGate.NAME_HIGHLIGHT
        assert next_feature_unlock(1000) is None
        assert can_access_feature(FeatureGate.DM_CREATOR, 25)
        assert not can_access_feature(FeatureGate.DM_CREATOR, 24)
