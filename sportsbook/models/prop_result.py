from datetime import datetime, timezone

from sportsbook import db
from sportsbook.utils.scoring import parse_winners


class PropResult(db.Model):
    """Winner(s) of a prop category; ties are stored comma-delimited"""

    __tablename__ = "prop_results"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    prop_type = db.Column(db.String(30), nullable=False)
    winner = db.Column(db.String(255), nullable=False, default="")

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint("round_id", "prop_type", name="unique_round_prop_result"),
    )

    def __repr__(self):
        return f"<PropResult {self.prop_type}={self.winner}>"

    @property
    def winners(self):
        return parse_winners(self.winner)

    @staticmethod
    def upsert(round_id, prop_type, winners):
        """Create or update a prop result; winners is an iterable of names"""
        prop_result = PropResult.query.filter_by(
            round_id=round_id, prop_type=prop_type
        ).first()
        if prop_result is None:
            prop_result = PropResult(round_id=round_id, prop_type=prop_type)
            db.session.add(prop_result)
        prop_result.winner = ",".join(sorted(parse_winners(winners)))
        return prop_result

    @staticmethod
    def get_weekly_winners(prop_type):
        """Winners of one prop category for every round, in round order"""
        from .round import Round

        by_round = {
            prop_result.round_id: prop_result
            for prop_result in PropResult.query.filter_by(prop_type=prop_type)
        }

        weekly = []
        for game_round in Round.query.order_by(Round.number):
            prop_result = by_round.get(game_round.id)
            weekly.append(
                {
                    "round": game_round.number,
                    "label": game_round.label,
                    "winners": sorted(prop_result.winners) if prop_result else [],
                }
            )
        return weekly

    def to_dict(self):
        return {"prop_type": self.prop_type, "winners": sorted(self.winners)}
