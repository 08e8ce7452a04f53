import logging
from datetime import datetime, timezone

from sportsbook import db
from sportsbook.utils import scoring
from sportsbook.utils.lines import build_lines
from sportsbook.utils.phase import Phase, format_time_remaining, get_round_phase

logger = logging.getLogger(__name__)


class Round(db.Model):
    """One scheduled game; predictions, picks, results and scores hang off it"""

    __tablename__ = "rounds"

    id = db.Column(db.Integer, primary_key=True)
    number = db.Column(db.Integer, nullable=False, unique=True, index=True)
    label = db.Column(db.String(50), nullable=False)  # e.g., "Week 1"

    # Game timing, stored as UTC
    game_date = db.Column(db.DateTime, nullable=False)
    lines_lock_time = db.Column(db.DateTime, nullable=False)
    picks_lock_time = db.Column(db.DateTime, nullable=False)

    # Bookkeeping only; the live phase always comes from phase()
    status = db.Column(db.String(20), default="upcoming", nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    roster_spots = db.relationship(
        "RosterSpot", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    predictions = db.relationship(
        "Prediction", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    lines = db.relationship(
        "Line", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    picks = db.relationship(
        "Pick", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    prop_picks = db.relationship(
        "PropPick", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    results = db.relationship(
        "Result", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    prop_results = db.relationship(
        "PropResult", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )
    scores = db.relationship(
        "Score", backref="round", lazy="dynamic", cascade="all, delete-orphan"
    )

    __table_args__ = (
        db.Index("idx_round_status", "status"),
        db.CheckConstraint(
            "lines_lock_time <= picks_lock_time", name="lines_lock_before_picks_lock"
        ),
    )

    def __repr__(self):
        return f"<Round {self.number} {self.label}>"

    @staticmethod
    def create_round(number, game_date, lock_time=None, lines_lock_time=None, label=None):
        """
        Create a round. Lines and picks lock at tip-off unless told otherwise.

        Args:
            number: round number, unique
            game_date: tip-off datetime (naive values are read as app timezone)
            lock_time: when picks lock (defaults to game_date)
            lines_lock_time: when predictions lock (defaults to lock_time)
            label: display label (defaults to "Week <number>")
        """
        from sportsbook.utils.timezone_utils import to_storage

        picks_lock = lock_time or game_date
        lines_lock = lines_lock_time or picks_lock

        new_round = Round(
            number=number,
            label=label or f"Week {number}",
            game_date=to_storage(game_date),
            lines_lock_time=to_storage(lines_lock),
            picks_lock_time=to_storage(picks_lock),
            status="upcoming",
        )
        db.session.add(new_round)
        return new_round

    @staticmethod
    def get_by_number(number):
        return Round.query.filter_by(number=number).first()

    @staticmethod
    def get_current_round(now=None):
        """
        Get the round participants are currently working on.

        A round stays current until the results cutoff hour (app timezone) on
        the morning after the game, which leaves time to enter results.
        """
        from sportsbook.utils.timezone_utils import results_cutoff

        rounds = Round.query.order_by(Round.number).all()
        if not rounds:
            return None

        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        for game_round in rounds:
            if now < results_cutoff(game_round.game_date):
                return game_round

        # All rounds are done, keep showing the last one
        return rounds[-1]

    def phase(self, now=None):
        """Live phase, derived from the lock times on every call"""
        now = now or datetime.now(timezone.utc)
        return get_round_phase(now, self.lines_lock_time, self.picks_lock_time)

    def accepts_predictions(self, now=None):
        return self.phase(now) == Phase.OPEN

    def accepts_picks(self, now=None):
        return self.phase(now) in (Phase.OPEN, Phase.PICKS_OPEN)

    def is_locked(self, now=None):
        return self.phase(now) == Phase.LOCKED

    def roster_players(self):
        """Players whose stats are tracked this round (injured included)"""
        from .player import Player

        spots = self.roster_spots.all()
        if not spots:
            return sorted(Player.active_names())
        return sorted(spot.player for spot in spots)

    def active_players(self):
        """Roster players who are not injured"""
        injured = {spot.player for spot in self.roster_spots.filter_by(is_injured=True)}
        return [name for name in self.roster_players() if name not in injured]

    def regenerate_lines(self):
        """
        Rebuild every line for this round from the current predictions.

        Existing lines are deleted and re-inserted in the same unit of work,
        so the caller's commit publishes the whole set at once.

        Returns:
            int: number of lines published
        """
        from .line import Line
        from .prediction import Prediction

        predictions = Prediction.query.filter_by(round_id=self.id).all()
        built = build_lines(predictions)

        Line.query.filter_by(round_id=self.id).delete()
        for (player, stat), value in built.items():
            db.session.add(Line(round_id=self.id, player=player, stat=stat, value=value))

        db.session.flush()
        logger.info(
            f"Regenerated {len(built)} lines for round {self.number} "
            f"from {len(predictions)} predictions"
        )
        return len(built)

    def calculate_scores(self):
        """
        Score the round and store one Score row per participant.

        Stored rows are overwritten rather than incremented, and rows for
        participants who no longer appear are removed, so re-running is safe.

        Returns:
            dict: {participant: ScoreBreakdown}
        """
        from .score import Score

        self.lock_picks()

        breakdowns = scoring.calculate_scores(
            picks=self.picks.all(),
            lines=self.lines.all(),
            results=self.results.all(),
            predictions=self.predictions.all(),
            prop_picks=self.prop_picks.all(),
            prop_results={pr.prop_type: pr.winner for pr in self.prop_results},
        )

        existing = {score.player: score for score in self.scores}
        for player, breakdown in breakdowns.items():
            score = existing.pop(player, None)
            if score is None:
                score = Score(round_id=self.id, player=player)
                db.session.add(score)
            score.apply_breakdown(breakdown)

        for stale in existing.values():
            db.session.delete(stale)

        self.status = "scored"
        db.session.flush()

        logger.info(f"Calculated scores for {len(breakdowns)} participants in round {self.number}")
        return breakdowns

    def lock_picks(self):
        """Stamp every pick in this round as locked"""
        from .pick import Pick

        updated = (
            Pick.query.filter_by(round_id=self.id, locked=False)
            .update({"locked": True})
        )
        return updated

    def to_dict(self, include_roster=False, now=None):
        """Convert round to dictionary for API responses"""
        data = {
            "number": self.number,
            "label": self.label,
            "game_date": self.game_date.isoformat() if self.game_date else None,
            "lines_lock_time": (
                self.lines_lock_time.isoformat() if self.lines_lock_time else None
            ),
            "picks_lock_time": (
                self.picks_lock_time.isoformat() if self.picks_lock_time else None
            ),
            "status": self.status,
            "phase": self.phase(now).value,
            "time_remaining": format_time_remaining(self.picks_lock_time, now),
        }

        if include_roster:
            data["roster"] = self.roster_players()
            data["active_players"] = self.active_players()

        return data
