"""
Standings cache for the Jungle Sportsbook

The leaderboard and season stats are rebuilt from every stored score and
result, so both are cached under fixed keys until a write touches them.
"""

import functools
import logging

from flask import current_app

from sportsbook import cache

logger = logging.getLogger(__name__)

LEADERBOARD_KEY = "standings:leaderboard"
STATS_KEY = "standings:season_stats"
STANDINGS_KEYS = (LEADERBOARD_KEY, STATS_KEY)


def cached_standings(key, timeout=None):
    """
    Cache a view's payload under a fixed key.

    The wrapped view returns a plain dict, never a Response, so the cached
    value stays picklable for every cache backend.

    Args:
        key: one of STANDINGS_KEYS
        timeout: seconds, defaults to CACHE_DEFAULT_TIMEOUT
    """

    def decorator(f):
        @functools.wraps(f)
        def wrapped(*args, **kwargs):
            payload = cache.get(key)
            if payload is not None:
                logger.debug(f"Standings cache hit: {key}")
                return payload

            payload = f(*args, **kwargs)
            cache.set(key, payload, timeout=timeout)
            return payload

        return wrapped

    return decorator


def invalidate_standings():
    """Drop the cached leaderboard and season stats"""
    try:
        cache.delete_many(*STANDINGS_KEYS)
    except Exception as e:
        logger.error(f"Failed to invalidate standings cache: {e}")


def describe_cache():
    return {
        "type": current_app.config.get("CACHE_TYPE", "Unknown"),
        "timeout": current_app.config.get("CACHE_DEFAULT_TIMEOUT", 300),
    }
