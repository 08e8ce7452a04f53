from datetime import datetime, timezone

from sportsbook import db


class Pick(db.Model):
    __tablename__ = "picks"

    id = db.Column(db.Integer, primary_key=True)

    # Pick identification
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    picker = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    player = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    stat = db.Column(db.String(10), nullable=False)

    # True = betting the player meets or beats the line
    picked = db.Column(db.Boolean, default=False, nullable=False)
    locked = db.Column(db.Boolean, default=False, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Constraints and indexes
    __table_args__ = (
        db.UniqueConstraint(
            "round_id", "picker", "player", "stat", name="unique_round_pick"
        ),
        db.Index("idx_pick_round_picker", "round_id", "picker"),
    )

    def __repr__(self):
        return f"<Pick {self.picker}: {self.player} {self.stat} picked={self.picked}>"

    @staticmethod
    def upsert(round_id, picker, player, stat, picked):
        """Create or update a pick by its natural key"""
        pick = Pick.query.filter_by(
            round_id=round_id, picker=picker, player=player, stat=stat
        ).first()
        if pick is None:
            pick = Pick(round_id=round_id, picker=picker, player=player, stat=stat)
            db.session.add(pick)
        pick.picked = picked
        return pick

    def to_dict(self):
        """Convert pick to dictionary for API responses"""
        return {
            "picker": self.picker,
            "player": self.player,
            "stat": self.stat,
            "picked": self.picked,
            "locked": self.locked,
        }
