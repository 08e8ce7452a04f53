from datetime import datetime, timezone

from sportsbook import db


class Prediction(db.Model):
    """One submitter's guess at one player's stat for a round"""

    __tablename__ = "predictions"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    submitter = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    player = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    stat = db.Column(db.String(10), nullable=False)
    value = db.Column(db.Float, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint(
            "round_id", "submitter", "player", "stat", name="unique_round_prediction"
        ),
        db.Index("idx_prediction_round_submitter", "round_id", "submitter"),
    )

    def __repr__(self):
        return f"<Prediction {self.submitter}: {self.player} {self.stat}={self.value}>"

    @staticmethod
    def replace_for_submitter(round_id, submitter, entries):
        """
        Replace a submitter's predictions for a round.

        Args:
            round_id: round primary key
            submitter: participant name
            entries: iterable of (player, stat, value)

        Returns:
            int: number of predictions stored
        """
        Prediction.query.filter_by(round_id=round_id, submitter=submitter).delete()

        count = 0
        for player, stat, value in entries:
            db.session.add(
                Prediction(
                    round_id=round_id,
                    submitter=submitter,
                    player=player,
                    stat=stat,
                    value=value,
                )
            )
            count += 1

        db.session.flush()
        return count

    def to_dict(self):
        return {
            "submitter": self.submitter,
            "player": self.player,
            "stat": self.stat,
            "value": self.value,
        }
