from wtforms import BooleanField, SelectField

from sportsbook.constants import PROP_BETS, STATS

from .base import EntryForm


class PickForm(EntryForm):
    player = SelectField("Player", choices=[])
    stat = SelectField("Stat", choices=[(stat, stat) for stat in STATS])
    picked = BooleanField("Take the over")


class PropPickForm(EntryForm):
    prop_type = SelectField("Prop", choices=[(prop, prop) for prop in PROP_BETS])
    player_picked = SelectField("Player", choices=[])
