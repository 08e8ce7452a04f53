from collections import defaultdict
from datetime import datetime, timezone

from sportsbook import db
from sportsbook.constants import STATS


class Result(db.Model):
    """Recorded stat for one player in one round; no row means not tracked"""

    __tablename__ = "results"

    id = db.Column(db.Integer, primary_key=True)
    round_id = db.Column(db.Integer, db.ForeignKey("rounds.id"), nullable=False)
    player = db.Column(db.String(50), db.ForeignKey("players.name"), nullable=False)
    stat = db.Column(db.String(10), nullable=False)
    value = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("round_id", "player", "stat", name="unique_round_result"),
    )

    def __repr__(self):
        return f"<Result {self.player} {self.stat}={self.value}>"

    @staticmethod
    def replace_for_round(round_id, entries):
        """
        Replace every recorded stat for a round.

        Args:
            round_id: round primary key
            entries: iterable of (player, stat, value); omitted pairs are untracked

        Returns:
            int: number of results stored
        """
        Result.query.filter_by(round_id=round_id).delete()

        count = 0
        for player, stat, value in entries:
            db.session.add(Result(round_id=round_id, player=player, stat=stat, value=value))
            count += 1

        db.session.flush()
        return count

    @staticmethod
    def get_season_stats(players=None):
        """
        Season totals and per-game averages for every player and stat.

        Only rounds where a stat was recorded count as games played for that
        stat; an untracked round is skipped rather than counted as zero.

        Args:
            players: player names to include (defaults to all active players)

        Returns:
            list: [{"player": name, "stats": {stat: {total, games, per_game}}}]
        """
        from .player import Player

        if players is None:
            players = sorted(Player.active_names())

        totals = defaultdict(lambda: {"total": 0, "games": 0})
        for result in Result.query.filter(Result.player.in_(players)).all():
            bucket = totals[(result.player, result.stat)]
            bucket["total"] += result.value
            bucket["games"] += 1

        season_stats = []
        for player in players:
            stats = {}
            for stat in STATS:
                bucket = totals.get((player, stat), {"total": 0, "games": 0})
                games = bucket["games"]
                stats[stat] = {
                    "total": bucket["total"],
                    "games": games,
                    "per_game": round(bucket["total"] / games, 1) if games else 0.0,
                }
            season_stats.append({"player": player, "stats": stats})

        return season_stats

    def to_dict(self):
        return {"player": self.player, "stat": self.stat, "value": self.value}
