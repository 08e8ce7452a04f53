from datetime import datetime, timezone

from sportsbook import db


class Player(db.Model):
    __tablename__ = "players"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False, index=True)
    display_name = db.Column(db.String(100))

    # Bettors set lines and make picks; everyone else only has stats tracked
    is_bettor = db.Column(db.Boolean, default=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = db.Column(
        db.DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (db.Index("idx_player_active_bettor", "is_active", "is_bettor"),)

    def __repr__(self):
        return f"<Player {self.name}>"

    @property
    def full_name(self):
        """Return display name or name"""
        return self.display_name or self.name.capitalize()

    @staticmethod
    def get_active():
        return Player.query.filter_by(is_active=True).order_by(Player.name).all()

    @staticmethod
    def get_bettors():
        return (
            Player.query.filter_by(is_active=True, is_bettor=True)
            .order_by(Player.name)
            .all()
        )

    @staticmethod
    def active_names():
        return {player.name for player in Player.get_active()}

    def to_dict(self):
        return {
            "name": self.name,
            "display_name": self.full_name,
            "is_bettor": self.is_bettor,
            "is_active": self.is_active,
        }
