from datetime import datetime, timezone

from sportsbook import db


class PropPick(db.Model):
    __tablename__ = "prop_picks"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    picker = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    prop_type = db.Column(db.String(30), nullable=False)
    player_picked = db.Column(
        db.String(50), db.ForeignKey("players.name"), nullable=False
    )

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # One active choice per prop category
    __table_args__ = (
        db.UniqueConstraint(
            "round_id", "picker", "prop_type", name="unique_round_prop_pick"
        ),
    )

    def __repr__(self):
        return f"<PropPick {self.picker}: {self.prop_type}={self.player_picked}>"

    @staticmethod
    def upsert(round_id, picker, prop_type, player_picked):
        prop_pick = PropPick.query.filter_by(
            round_id=round_id, picker=picker, prop_type=prop_type
        ).first()
        if prop_pick is None:
            prop_pick = PropPick(round_id=round_id, picker=picker, prop_type=prop_type)
            db.session.add(prop_pick)
        prop_pick.player_picked = player_picked
        return prop_pick

    def to_dict(self):
        return {
            "picker": self.picker,
            "prop_type": self.prop_type,
            "player_picked": self.player_picked,
        }
