"""
League constants for the Jungle Sportsbook
"""

from datetime import datetime, timezone

# Tracked stats, in display order
STATS = ("pts", "3pm", "ast", "stl", "blk")

STAT_LABELS = {
    "pts": "Points",
    "3pm": "3-Pointers",
    "ast": "Assists",
    "stl": "Steals",
    "blk": "Blocks",
}

# Prop bets set up automatically for every round
PROP_BETS = ("most_missed_ft", "team_mvp")

PROP_BET_LABELS = {
    "most_missed_ft": "Most Missed FTs",
    "team_mvp": "Team MVP",
}

MVP_PROP = "team_mvp"

# Default roster used by `manage.py seed`
DEFAULT_BETTORS = ("andy", "andrew", "josh", "ronit", "aarnav", "pranav", "vishi")
DEFAULT_PLAYERS = DEFAULT_BETTORS + ("tyler",)

# Games tip off at 5pm Central (23:00 UTC); lines and picks lock at tip-off
DEFAULT_SCHEDULE = (
    (1, "Week 1", datetime(2026, 2, 2, 23, 0, tzinfo=timezone.utc)),
    (2, "Week 2", datetime(2026, 2, 9, 23, 0, tzinfo=timezone.utc)),
    (3, "Week 3", datetime(2026, 2, 16, 23, 0, tzinfo=timezone.utc)),
    (4, "Week 4", datetime(2026, 2, 23, 23, 0, tzinfo=timezone.utc)),
    (5, "Playoff 1", datetime(2026, 3, 2, 23, 0, tzinfo=timezone.utc)),
)

ROUND_STATUSES = ("upcoming", "locked", "scored")
