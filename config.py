"""Configuration settings for FF Draft Engine"""
import os
from pathlib import Path

# Project paths
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
OUTPUT_DIR = DATA_DIR / "output"

# Ensure directories exist
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# Default league settings
DEFAULT_SETTINGS = {
    "teams": 12,
    "draft_rounds": 16,
    "roster": {
        "QB": 2,
        "RB": 5,
        "WR": 6,
        "TE": 2,
        "K": 1,
        "DST": 1
    }
}

# ADP gap that starts a new tier, per position
TIER_THRESHOLDS = {
    "QB": 8,
    "RB": 12,
    "WR": 15,
    "TE": 10,
    "K": 20,
    "DST": 20
}
DEFAULT_TIER_THRESHOLD = 10

# Auto-draft presets, keyed by strategy
AUTO_DRAFT_PRESETS = {
    "BPA": {
        "strategy": "BPA",
        "position_priority": ["RB", "WR", "QB", "TE", "K", "DST"],
        "risk_tolerance": "MEDIUM",
        "target_roster": {"QB": 2, "RB": 5, "WR": 6, "TE": 2, "K": 1, "DST": 1},
        "avoid_injury_prone": False,
        "prefer_veterans": False,
        "timeout_action": "AUTO_DRAFT"
    },
    "POSITIONAL_NEED": {
        "strategy": "POSITIONAL_NEED",
        "position_priority": ["RB", "WR", "QB", "TE", "K", "DST"],
        "risk_tolerance": "MEDIUM",
        "target_roster": {"QB": 1, "RB": 4, "WR": 5, "TE": 2, "K": 1, "DST": 1},
        "avoid_injury_prone": True,
        "prefer_veterans": False,
        "timeout_action": "AUTO_DRAFT"
    },
    "VALUE_BASED": {
        "strategy": "VALUE_BASED",
        "position_priority": ["RB", "WR", "QB", "TE", "K", "DST"],
        "risk_tolerance": "HIGH",
        "target_roster": {"QB": 2, "RB": 6, "WR": 7, "TE": 2, "K": 1, "DST": 1},
        "avoid_injury_prone": False,
        "prefer_veterans": False,
        "timeout_action": "AUTO_DRAFT"
    },
    "CONSERVATIVE": {
        "strategy": "CONSERVATIVE",
        "position_priority": ["RB", "WR", "QB", "TE", "K", "DST"],
        "risk_tolerance": "LOW",
        "target_roster": {"QB": 2, "RB": 4, "WR": 5, "TE": 2, "K": 1, "DST": 2},
        "avoid_injury_prone": True,
        "prefer_veterans": True,
        "timeout_action": "AUTO_DRAFT"
    },
    "AGGRESSIVE": {
        "strategy": "AGGRESSIVE",
        "position_priority": ["RB", "WR", "QB", "TE", "K", "DST"],
        "risk_tolerance": "HIGH",
        "target_roster": {"QB": 1, "RB": 6, "WR": 7, "TE": 1, "K": 1, "DST": 1},
        "avoid_injury_prone": False,
        "prefer_veterans": False,
        "timeout_action": "AUTO_DRAFT"
    }
}

# Composition a finished roster is graded against
IDEAL_ROSTER_COMPOSITION = {"QB": 2, "RB": 5, "WR": 6, "TE": 2, "K": 1, "DST": 1}

# Share of the salary cap keepers may consume (the rest is kept for the draft)
KEEPER_CAP_RESERVE = 0.7

# Post-draft classification margins (picks relative to ADP)
ANALYTICS_MARGINS = {
    "value": 10,
    "reach": 10,
    "steal": 20
}

# Tie-break advisor settings
ADVISOR_URL = os.getenv('DRAFT_ADVISOR_URL')
ADVISOR_API_KEY = os.getenv('DRAFT_ADVISOR_API_KEY')
ADVISOR_TIMEOUT_SECONDS = float(os.getenv('DRAFT_ADVISOR_TIMEOUT', '5.0'))
ADVISOR_FUZZY_THRESHOLD = 90
