from sportsbook import db


class RosterSpot(db.Model):
    """A player whose stats are tracked in a round"""

    __tablename__ = "roster_spots"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    player = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)

    # Injured players stay in stat tables but are not expected to play
    is_injured = db.Column(db.Boolean, default=False, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("round_id", "player", name="unique_round_roster_player"),
    )

    def __repr__(self):
        return f"<RosterSpot round_id={self.round_id} player={self.player}>"

    def to_dict(self):
        return {"player": self.player, "is_injured": self.is_injured}
