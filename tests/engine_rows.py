"""
Plain stand-ins for the database rows the line and scoring engines read.

The engines only touch attributes, so these frozen records let the engine
tests build inputs without an app or a database.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PredictionRecord:
    submitter: str
    player: str
    stat: str
    value: float


@dataclass(frozen=True)
class LineRecord:
    player: str
    stat: str
    value: float


@dataclass(frozen=True)
class ResultRecord:
    player: str
    stat: str
    value: float


@dataclass(frozen=True)
class PickRecord:
    picker: str
    player: str
    stat: str
    picked: bool = True


@dataclass(frozen=True)
class PropPickRecord:
    picker: str
    prop_type: str
    player_picked: str
