"""
Line aggregation for the Jungle Sportsbook

Collapses every participant's prediction for one (player, stat) pair into the
single published line. Outliers are dropped with an IQR fence built from
index-truncated quartiles before the remaining values are averaged.
"""

import logging
import math
from collections import defaultdict

logger = logging.getLogger(__name__)

IQR_FENCE = 1.5


def round_line(value):
    """Round to the nearest whole number, halves away from zero"""
    if value < 0:
        return -round_line(-value)
    return int(math.floor(value + 0.5))


def calculate_averaged_line(values):
    """
    Calculate the consensus line for one (player, stat) pair.

    Args:
        values: iterable of numeric predictions, in any order

    Returns:
        int: the rounded line, or 0 when there are no predictions
    """
    values = [float(v) for v in values]

    if not values:
        return 0
    if len(values) == 1:
        return round_line(values[0])
    if len(values) == 2:
        return round_line((values[0] + values[1]) / 2)

    ordered = sorted(values)
    n = len(ordered)

    # Quartiles are picked by truncated index, not interpolated
    q1 = ordered[math.floor(n * 0.25)]
    q3 = ordered[math.floor(n * 0.75)]
    iqr = q3 - q1
    lower_bound = q1 - IQR_FENCE * iqr
    upper_bound = q3 + IQR_FENCE * iqr

    filtered = [v for v in ordered if lower_bound <= v <= upper_bound]

    if not filtered:
        return round_line(ordered[n // 2])

    if len(filtered) < n:
        logger.debug(
            f"Dropped {n - len(filtered)} outlier(s) outside "
            f"[{lower_bound}, {upper_bound}]"
        )

    return round_line(sum(filtered) / len(filtered))


def build_lines(predictions):
    """
    Aggregate a round's predictions into lines.

    Args:
        predictions: rows exposing player, stat and value

    Returns:
        dict: {(player, stat): line value}, only for pairs with predictions
    """
    grouped = defaultdict(list)
    for prediction in predictions:
        grouped[(prediction.player, prediction.stat)].append(prediction.value)

    return {
        key: calculate_averaged_line(values)
        for key, values in sorted(grouped.items())
        if values
    }


def suggest_picks(predictions, lines, picker):
    """
    Suggest which overs a participant would take based on their own lines.

    A suggestion is computed on read and never stored as a pick; the
    participant still has to choose it.

    Args:
        predictions: the round's predictions (any submitter)
        lines: rows exposing player, stat and value
        picker: participant to build suggestions for

    Returns:
        dict: {(player, stat): True/False}, only for lines the picker predicted
    """
    line_map = {(line.player, line.stat): line.value for line in lines}

    suggestions = {}
    for prediction in predictions:
        if prediction.submitter != picker:
            continue
        key = (prediction.player, prediction.stat)
        if key not in line_map:
            continue
        suggestions[key] = prediction.value >= line_map[key]

    return suggestions
