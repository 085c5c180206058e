"""
Backend — Shared Configuration
================================

Environment settings, shared engines and the milestone ledger client.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from ad_matching.engine import MatchingEngine
from backend.database import MilestoneLedger, create_ledger
from xp_engine.engine import GlobalXPAggregator

logger = logging.getLogger("backend.config")

# ─────────────────────────────────────────────────────────────────────────────
# Load .env
# ─────────────────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(PROJECT_ROOT / ".env")

# ─────────────────────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────────────────────
APP_NAME = "StitchSocial Progression API"
APP_VERSION = "1.0.0"

DATABASE_URL = os.getenv(
    "STITCH_DATABASE_URL",
    f"sqlite:///{(PROJECT_ROOT / 'stitch_progression.db').as_posix()}",
)
LOG_LEVEL = os.getenv("STITCH_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("STITCH_CORS_ORIGINS", "*").split(",") if o.strip()]

# ─────────────────────────────────────────────────────────────────────────────
# Singletons
# ─────────────────────────────────────────────────────────────────────────────
matching_engine = MatchingEngine()
xp_aggregator = GlobalXPAggregator()

_ledger: MilestoneLedger | None = None


def get_ledger() -> MilestoneLedger:
    """Lazy-init the milestone ledger."""
    global _ledger

    if _ledger is None:
        _ledger = create_ledger(DATABASE_URL)
        logger.info("Ledger initialized")

    return _ledger
