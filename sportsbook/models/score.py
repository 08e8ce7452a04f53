from datetime import datetime, timezone

from sportsbook import db


class Score(db.Model):
    """Stored point breakdown for one participant in one round"""

    __tablename__ = "scores"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    player = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)

    correct_picks = db.Column(db.Integer, default=0, nullable=False)
    missed_picks = db.Column(db.Integer, default=0, nullable=False)
    exact_lines = db.Column(db.Integer, default=0, nullable=False)
    prop_wins = db.Column(db.Integer, default=0, nullable=False)
    prop_misses = db.Column(db.Integer, default=0, nullable=False)
    total_points = db.Column(db.Float, default=0.0, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        db.UniqueConstraint("round_id", "player", name="unique_round_score"),
        db.Index("idx_score_player", "player"),
    )

    def __repr__(self):
        return f"<Score {self.player} round_id={self.round_id} total={self.total_points}>"

    def apply_breakdown(self, breakdown):
        """Overwrite every counter from a ScoreBreakdown"""
        self.correct_picks = breakdown.correct_picks
        self.missed_picks = breakdown.missed_picks
        self.exact_lines = breakdown.exact_lines
        self.prop_wins = breakdown.prop_wins
        self.prop_misses = breakdown.prop_misses
        self.total_points = breakdown.total_points

    @staticmethod
    def get_leaderboard():
        """
        Sum stored scores across rounds.

        Every active bettor appears even without a stored score. Sorted by
        total points (highest first), then name.
        """
        from .player import Player
        from .round import Round

        def empty_entry(name):
            return {
                "player": name,
                "total_points": 0.0,
                "correct_picks": 0,
                "missed_picks": 0,
                "exact_lines": 0,
                "prop_wins": 0,
                "prop_misses": 0,
                "rounds": [],
            }

        board = {player.name: empty_entry(player.name) for player in Player.get_bettors()}

        rows = (
            db.session.query(Score, Round.number)
            .join(Round, Score.round_id == Round.id)
            .order_by(Round.number, Score.player)
            .all()
        )

        for score, round_number in rows:
            entry = board.setdefault(score.player, empty_entry(score.player))
            entry["total_points"] += score.total_points or 0.0
            entry["correct_picks"] += score.correct_picks or 0
            entry["missed_picks"] += score.missed_picks or 0
            entry["exact_lines"] += score.exact_lines or 0
            entry["prop_wins"] += score.prop_wins or 0
            entry["prop_misses"] += score.prop_misses or 0
            entry["rounds"].append(score.to_dict(round_number=round_number))

        return sorted(board.values(), key=lambda e: (-e["total_points"], e["player"]))

    def to_dict(self, round_number=None):
        return {
            "round": round_number if round_number is not None else self.round.number,
            "player": self.player,
            "correct_picks": self.correct_picks,
            "missed_picks": self.missed_picks,
            "exact_lines": self.exact_lines,
            "prop_wins": self.prop_wins,
            "prop_misses": self.prop_misses,
            "total_points": self.total_points,
        }
