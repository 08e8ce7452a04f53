from wtforms import FloatField, SelectField
from wtforms.validators import InputRequired, NumberRange

from sportsbook.constants import STATS

from .base import EntryForm


class PredictionForm(EntryForm):
    player = SelectField("Player", choices=[])
    stat = SelectField("Stat", choices=[(stat, stat) for stat in STATS])
    value = FloatField("Line", validators=[InputRequired(), NumberRange(min=0)])
