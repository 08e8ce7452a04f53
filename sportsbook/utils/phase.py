"""
Game phase clock

Maps the current time against a round's lock times. Phases are derived on
every call and never stored, so callers ask again on each request.
"""

import enum
from datetime import datetime, timezone


class Phase(str, enum.Enum):
    OPEN = "open"  # lines and picks can be submitted
    PICKS_OPEN = "picks_open"  # lines closed, picks still allowed
    LOCKED = "locked"


def _as_utc(dt):
    """Naive datetimes are stored as UTC"""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def get_phase(now, thresholds, terminal=Phase.LOCKED):
    """
    Return the label of the first threshold that `now` is strictly before.

    Args:
        now: current datetime
        thresholds: ordered (timestamp, label) pairs
        terminal: label once every threshold has passed

    Returns:
        The matching label, else `terminal`
    """
    now = _as_utc(now)
    for timestamp, label in thresholds:
        if now < _as_utc(timestamp):
            return label
    return terminal


def get_game_phase(now, lock_time):
    """OPEN strictly before the lock time, LOCKED from the lock instant on"""
    return get_phase(now, [(lock_time, Phase.OPEN)])


def get_round_phase(now, lines_lock_time, picks_lock_time=None):
    """
    Three-phase variant driven by separate lines and picks lock times.

    With no picks lock time, or one equal to the lines lock, this is the
    same as get_game_phase().
    """
    if picks_lock_time is None:
        picks_lock_time = lines_lock_time

    return get_phase(
        now,
        [(lines_lock_time, Phase.OPEN), (picks_lock_time, Phase.PICKS_OPEN)],
    )


def format_time_remaining(target, now=None):
    """Human readable countdown to a lock time"""
    if now is None:
        now = datetime.now(timezone.utc)

    diff = (_as_utc(target) - _as_utc(now)).total_seconds()
    if diff <= 0:
        return "Locked"

    hours = int(diff // 3600)
    minutes = int((diff % 3600) // 60)

    if hours > 24:
        return f"{hours // 24}d {hours % 24}h"

    return f"{hours}h {minutes}m"
