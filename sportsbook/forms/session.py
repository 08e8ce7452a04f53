from wtforms import StringField
from wtforms.validators import DataRequired, Length

from .base import EntryForm


class SelectParticipantForm(EntryForm):
    participant = StringField(
        "Participant", validators=[DataRequired(), Length(max=50)]
    )
