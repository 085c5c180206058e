"""
StitchSocial Progression — Command-Line Interface
===================================================

Score campaign matches and recompute global XP without the API.

Usage:
    python xp_cli.py match requirements.json metrics.json
    python xp_cli.py recalc <creator_id> --xp gaming=400 --xp music=1200 --awarded 10
    python xp_cli.py level <xp>

Environment:
    Reads .env for STITCH_LOG_LEVEL.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ad_matching.engine import MatchingEngine
from ad_matching.models import CampaignRequirements, CreatorMetrics
from xp_engine import curve
from xp_engine.engine import GlobalXPAggregator

load_dotenv(Path(__file__).parent / ".env")

# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=os.getenv("STITCH_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s  %(levelname)-8s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("xp_cli")


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _load_json(path: str) -> dict:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def parse_community_xp(pairs: list[str]) -> dict[str, int]:
    """Turn ``["gaming=400", "music=1200"]`` into a mapping."""
    community_xp: dict[str, int] = {}
    for pair in pairs:
        community, sep, value = pair.partition("=")
        if not sep or not community:
            raise ValueError(f"Expected COMMUNITY=XP, got '{pair}'")
        community_xp[community] = community_xp.get(community, 0) + int(value)
    return community_xp


# ─────────────────────────────────────────────────────────────────────────────
# Core actions
# ─────────────────────────────────────────────────────────────────────────────
def run_match(requirements_path: str, metrics_path: str) -> int:
    requirements = CampaignRequirements.model_validate(_load_json(requirements_path))
    metrics = CreatorMetrics.model_validate(_load_json(metrics_path))

    result = MatchingEngine().evaluate(requirements, metrics)

    logger.info("─" * 60)
    logger.info("MATCH SCORE : %d/100 (%s)", result.match_score, result.match_level.value)
    logger.info("─" * 60)
    for item in result.breakdown:
        logger.info("  %-17s %-12s %+4d  %s", item.criterion, item.outcome.value, item.points, item.detail)
    logger.info("─" * 60)
    logger.info("%s", result.explanation)
    return result.match_score


def run_recalc(
    creator_id: str,
    community_xp: dict[str, int],
    awarded: list[int],
    previous_clout: int,
) -> None:
    result = GlobalXPAggregator().recalculate(
        community_xp,
        previous_clout_bonus=previous_clout,
        awarded_milestones=awarded,
        creator_id=creator_id,
    )
    state = result.state

    logger.info("─" * 60)
    logger.info("GLOBAL XP — %s", creator_id)
    logger.info("─" * 60)
    logger.info("  Total global XP    : %d", state.total_global_xp)
    logger.info("  Global level       : %d", state.global_level)
    logger.info("  Tap multiplier     : +%d", state.tap_multiplier_bonus)
    logger.info("  Clout bonus        : %d", state.permanent_clout_bonus)
    logger.info("  Active communities : %d", state.communities_active)
    logger.info("  Newly awarded      : %s", result.newly_awarded or "none")
    logger.info("  Ledger after       : %s", sorted(set(awarded) | set(result.newly_awarded)))
    logger.info("─" * 60)


def run_level(xp: int) -> None:
    logger.info(
        "XP %d → Lv %d (%.1f%% to next, %d XP needed)",
        xp,
        curve.level_from_xp(xp),
        curve.progress_to_next_level(xp) * 100,
        curve.xp_to_next_level(xp),
    )


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────
def main() -> None:
    parser = argparse.ArgumentParser(
        prog="xp_cli",
        description="StitchSocial Progression — matching and global XP CLI",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ── match ────────────────────────────────────────────────────────
    match_parser = subparsers.add_parser("match", help="Score a creator against a campaign")
    match_parser.add_argument("requirements", type=str, help="Path to campaign requirements JSON")
    match_parser.add_argument("metrics", type=str, help="Path to creator metrics JSON")

    # ── recalc ───────────────────────────────────────────────────────
    recalc_parser = subparsers.add_parser("recalc", help="Recompute global XP for a creator")
    recalc_parser.add_argument("creator_id", type=str, help="Creator identifier")
    recalc_parser.add_argument(
        "--xp",
        action="append",
        default=[],
        metavar="COMMUNITY=XP",
        help="Community XP total (repeatable)",
    )
    recalc_parser.add_argument(
        "--awarded",
        action="append",
        type=int,
        default=[],
        help="Milestone level already credited (repeatable)",
    )
    recalc_parser.add_argument(
        "--previous-clout",
        type=int,
        default=0,
        help="Previously stored permanent clout bonus",
    )

    # ── level ────────────────────────────────────────────────────────
    level_parser = subparsers.add_parser("level", help="Show the level for an XP total")
    level_parser.add_argument("xp", type=int, help="XP total")

    args = parser.parse_args()

    try:
        if args.command == "match":
            run_match(args.requirements, args.metrics)

        elif args.command == "recalc":
            run_recalc(
                args.creator_id,
                parse_community_xp(args.xp),
                args.awarded,
                args.previous_clout,
            )

        elif args.command == "level":
            run_level(args.xp)

    except (OSError, ValueError, ValidationError) as exc:
        logger.error("%s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user.")
        sys.exit(130)


if __name__ == "__main__":
    main()
