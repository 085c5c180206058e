"""
XP Engine — Reward Rules & Progression Tables
===============================================

Global XP contribution rate, clout milestones, tap multiplier steps,
community feature gates and badge definitions.
All reward constants are defined here.
"""

from __future__ import annotations

import math
from enum import Enum

# ─────────────────────────────────────────────────────────────────────────────
# Global XP Contribution
# ─────────────────────────────────────────────────────────────────────────────
GLOBAL_CONTRIBUTION_RATE = 0.25


def global_contribution(local_xp: int) -> int:
    """Global XP earned from one community's XP total (negative → 0)."""
    return math.floor(max(local_xp, 0) * GLOBAL_CONTRIBUTION_RATE)


# ─────────────────────────────────────────────────────────────────────────────
# Clout Milestones — global level → one-time clout reward
# ─────────────────────────────────────────────────────────────────────────────
CLOUT_MILESTONES: dict[int, int] = {
    10: 50,
    25: 150,
    50: 500,
    75: 1000,
    100: 2000,
    150: 3500,
    200: 5000,
}

MILESTONE_LEVELS: tuple[int, ...] = tuple(sorted(CLOUT_MILESTONES))

CLOUT_SOURCE = "global_community_xp"


def clout_bonus_for_level(level: int) -> int:
    """Clout paid for reaching exactly this milestone level (0 otherwise)."""
    return CLOUT_MILESTONES.get(level, 0)


def milestones_reached(level: int) -> list[int]:
    return [m for m in MILESTONE_LEVELS if m <= level]


def cumulative_clout_bonus(level: int) -> int:
    """Total clout for every milestone at or below ``level``."""
    return sum(CLOUT_MILESTONES[m] for m in milestones_reached(level))


# ─────────────────────────────────────────────────────────────────────────────
# Tap Multiplier — global level → bonus taps per community per day
# ─────────────────────────────────────────────────────────────────────────────
TAP_MULTIPLIER_THRESHOLDS: tuple[tuple[int, int], ...] = (
    (10, 1),
    (25, 2),
    (50, 3),
    (75, 4),
    (100, 5),
)


def tap_multiplier_for_level(level: int) -> int:
    bonus = 0
    for threshold, taps in TAP_MULTIPLIER_THRESHOLDS:
        if level >= threshold:
            bonus = taps
    return bonus


# ─────────────────────────────────────────────────────────────────────────────
# Community Feature Gates
# ─────────────────────────────────────────────────────────────────────────────
class FeatureGate(int, Enum):
    PROFILE_BORDER = 3
    CUSTOM_FLAIR = 5
    REACTION_EMOTES = 10
    NAME_HIGHLIGHT = 15
    VIDEO_CLIPS = 20
    DM_CREATOR = 25
    EXCLUSIVE_EMOTES = 30
    PRIORITY_QA = 40
    PRIVATE_LIVE = 50
    MAIN_FEED_BADGE = 75
    MOD_ELIGIBLE = 100
    ANIMATED_BORDER = 150
    CUSTOM_TITLE = 200
    EARLY_ACCESS = 300
    MERCH_DISCOUNT = 400
    ANIMATED_BADGE = 500
    ENTRANCE_ANIMATION = 600
    VOICE_CHAT = 750
    CO_HOST_LIVE = 850
    COMMUNITY_WALL = 950
    IMMORTAL_STATUS = 1000

    @property
    def required_level(self) -> int:
        return int(self.value)

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


# ─────────────────────────────────────────────────────────────────────────────
# Community Badges — (id, level, name, description, reward)
# ─────────────────────────────────────────────────────────────────────────────
BADGE_TABLE: tuple[tuple[str, int, str, str, str], ...] = (
    ("badge_01", 1, "Welcome", "Joined the community", "Community profile created"),
    ("badge_02", 3, "New Face", "Getting started", "Profile border in community"),
    ("badge_03", 5, "Colorful", "Finding your style", "Custom flair color picker"),
    ("badge_04", 8, "Chatterbox", "Active in discussions", "Reaction emote pack 1"),
    ("badge_05", 10, "Regular", "Consistent presence", "Name highlighted in posts"),
    ("badge_06", 13, "Expressive", "Engaging communicator", "Animated emote pack"),
    ("badge_07", 15, "Clipper", "Video contributor", "Post video clips"),
    ("badge_08", 18, "Rising", "On the way up", "Glow effect on username"),
    ("badge_09", 20, "Connected", "Building relationships", "DM creator unlocked"),
    ("badge_10", 25, "Dedicated", "Committed member", "Exclusive emote pack 2"),
    ("badge_11", 30, "Sharpshooter", "Precision engagement", "Priority in Q&A queues"),
    ("badge_12", 40, "Guardian", "Community protector", "Report/flag priority"),
    ("badge_13", 50, "Inner Circle", "Trusted member", "Private live access"),
    ("badge_14", 75, "Superfan", "Above and beyond", "Badge visible on main feed"),
    ("badge_15", 100, "Centurion", "Elite status", "Mod nomination eligible"),
    ("badge_16", 150, "Diamond", "Rare dedication", "Animated profile border"),
    ("badge_17", 200, "Pillar", "Community foundation", "Custom community title"),
    ("badge_18", 300, "Eagle", "Soaring above", "Early access to creator content"),
    ("badge_19", 400, "Warlord", "Battle tested", "Exclusive merch discount"),
    ("badge_20", 500, "Mythic", "Legendary status", "Animated badge + sound effect"),
    ("badge_21", 600, "Transcendent", "Beyond mortal", "Custom entrance animation"),
    ("badge_22", 750, "Oracle", "All-seeing", "Direct voice chat with creator"),
    ("badge_23", 850, "Cosmic", "Universe-level", "Co-host live streams"),
    ("badge_24", 950, "Eternal", "Timeless presence", "Name on community wall"),
    ("badge_25", 1000, "Immortal", "Maximum dedication", "Custom badge + creator collab invite"),
)
