"""Shared fixtures for the progression test suite."""

import pytest
from fastapi.testclient import TestClient

from ad_matching.engine import MatchingEngine
from ad_matching.models import CampaignRequirements, CreatorMetrics, UserTier
from backend.config import get_ledger
from backend.database import create_ledger
from backend.main import app
from xp_engine.curve import total_xp_for_level
from xp_engine.engine import GlobalXPAggregator


@pytest.fixture
def engine():
    return MatchingEngine()


@pytest.fixture
def aggregator():
    return GlobalXPAggregator()


@pytest.fixture
def influencer():
    return CreatorMetrics(tier=UserTier.INFLUENCER)


@pytest.fixture
def open_campaign():
    """Influencer minimum and nothing else specified."""
    return CampaignRequirements(minimum_tier=UserTier.INFLUENCER)


@pytest.fixture
def ledger():
    return create_ledger("sqlite://")


@pytest.fixture
def client(ledger):
    app.dependency_overrides[get_ledger] = lambda: ledger
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def xp_for_level():
    """Community XP whose 25% contribution lands exactly on a global level."""
    def _xp(level: int) -> int:
        return total_xp_for_level(level) * 4
    return _xp
