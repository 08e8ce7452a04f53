from datetime import datetime, timezone

from sportsbook import db


class Line(db.Model):
    """Published consensus line, rebuilt from predictions"""

    __tablename__ = "lines"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    player = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    stat = db.Column(db.String(10), nullable=False)
    value = db.Column(db.Float, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("round_id", "player", "stat", name="unique_round_line"),
    )

    def __repr__(self):
        return f"<Line {self.player} {self.stat}={self.value}>"

    def to_dict(self):
        return {"player": self.player, "stat": self.stat, "value": self.value}
