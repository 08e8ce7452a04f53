"""
Scoring Engine for the Jungle Sportsbook

This module turns one round's picks, lines, results, predictions and prop
bets into a per-participant point breakdown. Persisting the breakdown and
summing it across rounds happens in Round.calculate_scores() and
Score.get_leaderboard() in sportsbook/models/.
"""

import logging

logger = logging.getLogger(__name__)

CORRECT_PICK_POINTS = 1.0
MISSED_PICK_PENALTY = 0.5
EXACT_LINE_POINTS = 1.0
PROP_WIN_POINTS = 1.0


class ScoreBreakdown:
    """Point breakdown for one participant in one round"""

    __slots__ = (
        "correct_picks",
        "missed_picks",
        "exact_lines",
        "prop_wins",
        "prop_misses",
    )

    def __init__(
        self,
        correct_picks=0,
        missed_picks=0,
        exact_lines=0,
        prop_wins=0,
        prop_misses=0,
    ):
        self.correct_picks = correct_picks
        self.missed_picks = missed_picks
        self.exact_lines = exact_lines
        self.prop_wins = prop_wins
        self.prop_misses = prop_misses

    @property
    def total_points(self):
        """Total points, always derived from the counters"""
        return (
            self.correct_picks * CORRECT_PICK_POINTS
            - self.missed_picks * MISSED_PICK_PENALTY
            + self.exact_lines * EXACT_LINE_POINTS
            + self.prop_wins * PROP_WIN_POINTS
        )

    def __eq__(self, other):
        if not isinstance(other, ScoreBreakdown):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"<ScoreBreakdown correct={self.correct_picks} "
            f"missed={self.missed_picks} exact={self.exact_lines} "
            f"props={self.prop_wins}/{self.prop_misses} "
            f"total={self.total_points}>"
        )

    def to_dict(self):
        return {
            "correct_picks": self.correct_picks,
            "missed_picks": self.missed_picks,
            "exact_lines": self.exact_lines,
            "prop_wins": self.prop_wins,
            "prop_misses": self.prop_misses,
            "total_points": self.total_points,
        }


def parse_winners(raw):
    """
    Normalize a prop result into a set of winning player ids.

    Args:
        raw: comma-delimited string as stored ("andy, josh"), any iterable
            of ids, or None

    Returns:
        set: winner ids with whitespace and empty entries removed
    """
    if raw is None:
        return set()
    if isinstance(raw, str):
        raw = raw.split(",")
    return {str(winner).strip() for winner in raw if str(winner).strip()}


def _stat_map(rows):
    return {(row.player, row.stat): row.value for row in rows}


def calculate_scores(picks, lines, results, predictions, prop_picks, prop_results):
    """
    Calculate every participant's score for one round.

    Rules:
        - Picked over hits (result >= line): +1.0, miss: -0.5
        - Own prediction exactly equal to the result: +1.0
        - Prop pick among the winners: +1.0, wrong prop pick: no penalty
        - Anything without a line, result or prop result is skipped

    Args:
        picks: rows exposing picker, player, stat, picked
        lines: rows exposing player, stat, value
        results: rows exposing player, stat, value
        predictions: rows exposing submitter, player, stat, value
        prop_picks: rows exposing picker, prop_type, player_picked
        prop_results: mapping of prop_type to winners (string or iterable)

    Returns:
        dict: {participant: ScoreBreakdown} for every participant seen in
        picks, predictions or prop picks
    """
    scores = {}

    def entry(participant):
        if participant not in scores:
            scores[participant] = ScoreBreakdown()
        return scores[participant]

    line_map = _stat_map(lines)
    result_map = _stat_map(results)
    winner_map = {
        prop_type: parse_winners(winners)
        for prop_type, winners in (prop_results or {}).items()
    }

    # Over picks: only rows the participant actually picked are graded
    for pick in picks:
        current = entry(pick.picker)
        if not pick.picked:
            continue

        key = (pick.player, pick.stat)
        if key not in line_map or key not in result_map:
            continue

        # Hitting the line exactly counts as a hit
        if result_map[key] >= line_map[key]:
            current.correct_picks += 1
        else:
            current.missed_picks += 1

    # Exact line bonus against the submitter's own prediction
    for prediction in predictions:
        current = entry(prediction.submitter)

        key = (prediction.player, prediction.stat)
        if key not in result_map:
            continue

        if prediction.value == result_map[key]:
            current.exact_lines += 1

    # Prop bets
    for prop in prop_picks:
        current = entry(prop.picker)

        winners = winner_map.get(prop.prop_type)
        if not winners:
            continue

        if prop.player_picked in winners:
            current.prop_wins += 1
        else:
            current.prop_misses += 1

    logger.debug(f"Calculated scores for {len(scores)} participants")

    return scores
