from sportsbook import db  # noqa: F401 - imported for model imports

from .line import Line
from .pick import Pick
from .player import Player
from .prediction import Prediction
from .prop_pick import PropPick
from .prop_result import PropResult
from .result import Result
from .roster_spot import RosterSpot
from .round import Round
from .score import Score

__all__ = [
    "Player",
    "Round",
    "RosterSpot",
    "Prediction",
    "Line",
    "Pick",
    "PropPick",
    "Result",
    "PropResult",
    "Score",
]
