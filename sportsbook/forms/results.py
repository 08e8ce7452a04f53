from wtforms import IntegerField, SelectField, StringField, ValidationError
from wtforms.validators import InputRequired, NumberRange

from sportsbook.constants import PROP_BETS, STATS
from sportsbook.utils.scoring import parse_winners

from .base import EntryForm


class ResultForm(EntryForm):
    player = SelectField("Player", choices=[])
    stat = SelectField("Stat", choices=[(stat, stat) for stat in STATS])
    value = IntegerField("Value", validators=[InputRequired(), NumberRange(min=0)])


class PropResultForm(EntryForm):
    prop_type = SelectField("Prop", choices=[(prop, prop) for prop in PROP_BETS])
    # Comma-delimited; more than one name records a tie
    winners = StringField("Winners")

    def __init__(self, *args, known_players=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.known_players = known_players

    def validate_winners(self, field):
        if self.known_players is None:
            return
        unknown = parse_winners(field.data) - set(self.known_players)
        if unknown:
            raise ValidationError(f"Unknown players: {', '.join(sorted(unknown))}")

    @property
    def winner_set(self):
        return parse_winners(self.winners.data)
