"""
Shared fixtures: an in-memory app, seeded players and rounds on either side
of their lock time.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from sportsbook import create_app, db  # noqa: E402
from sportsbook.models import Player, Round  # noqa: E402

BETTORS = ("andy", "josh", "ronit")
NON_BETTORS = ("tyler",)


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def players(app):
    for name in BETTORS:
        db.session.add(Player(name=name, is_bettor=True))
    for name in NON_BETTORS:
        db.session.add(Player(name=name, is_bettor=False))
    db.session.commit()
    return BETTORS + NON_BETTORS


@pytest.fixture
def open_round(players):
    """Round 1, tipping off in two days"""
    game_round = Round.create_round(
        1, datetime.now(timezone.utc) + timedelta(days=2), label="Week 1"
    )
    db.session.commit()
    return game_round


@pytest.fixture
def locked_round(players):
    """Round 2, tipped off an hour ago"""
    game_round = Round.create_round(
        2, datetime.now(timezone.utc) - timedelta(hours=1), label="Week 2"
    )
    db.session.commit()
    return game_round


@pytest.fixture
def as_andy(client, players):
    """Test client with andy selected as the participant"""
    response = client.post("/api/session", json={"participant": "andy"})
    assert response.status_code == 200
    return client
