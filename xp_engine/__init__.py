"""XP Engine — Package."""

from xp_engine.curve import level_from_xp
from xp_engine.engine import GlobalXPAggregator
from xp_engine.models import (
    GlobalXPState,
    GlobalXPSummary,
    RecalculationResult,
)
from xp_engine.tap_usage import TapUsageTracker

__all__ = [
    "level_from_xp",
    "GlobalXPAggregator",
    "GlobalXPState",
    "GlobalXPSummary",
    "RecalculationResult",
    "TapUsageTracker",
]
