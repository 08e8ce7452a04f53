"""
League clock helpers

Lock times are stored as naive UTC. Anything a person types (CLI dates,
the seeded schedule) and anything shown back to them is in the league's
TIMEZONE.
"""

from datetime import datetime, timedelta, timezone

import pytz
from flask import current_app


def get_app_timezone():
    try:
        return pytz.timezone(current_app.config.get("TIMEZONE", "UTC"))
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def to_league_time(dt):
    """Aware datetime in the league timezone; naive input is read as UTC"""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(get_app_timezone())


def to_storage(dt):
    """
    Normalize a datetime for the database.

    Naive input is read as league time, since that is how game times are
    entered. Returns a naive UTC datetime.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = get_app_timezone().localize(dt)
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def results_cutoff(game_date, cutoff_hour=None):
    """
    When a round stops being the current one: cutoff_hour (league time) on
    the day after the game. Defaults to RESULTS_CUTOFF_HOUR.
    """
    if cutoff_hour is None:
        cutoff_hour = current_app.config.get("RESULTS_CUTOFF_HOUR", 8)

    next_day = (to_league_time(game_date) + timedelta(days=1)).date()
    return get_app_timezone().localize(
        datetime(next_day.year, next_day.month, next_day.day, cutoff_hour)
    )


def format_game_time(dt, format_str="%a %m/%d at %I:%M %p"):
    """Tip-off as shown to players, e.g. 'Mon 02/02 at 05:00 PM'"""
    if dt is None:
        return "TBD"
    return to_league_time(dt).strftime(format_str)
