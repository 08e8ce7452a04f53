#!/usr/bin/env python3
"""
Jungle Sportsbook Management CLI

This script provides command-line management functionality for the Jungle Sportsbook.
"""

import logging
import os

import click
from flask import current_app
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sportsbook import create_app, db
from sportsbook.constants import DEFAULT_BETTORS, DEFAULT_PLAYERS, DEFAULT_SCHEDULE
from sportsbook.models import Player, RosterSpot, Round, Score
from sportsbook.utils.cache_utils import describe_cache
from sportsbook.utils.timezone_utils import format_game_time

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%d"]


@click.group()
def cli():
    """Jungle Sportsbook Management CLI"""
    pass


def _get_round(number):
    game_round = Round.get_by_number(number)
    if not game_round:
        click.echo(f"❌ Round {number} not found!")
    return game_round


# Player Management Commands
@cli.group()
def player():
    """Player management commands"""
    pass


@player.command("add")
@click.argument("name")
@click.option("--display-name", help="Name shown in standings")
@click.option("--non-bettor", is_flag=True, help="Track stats only, no predictions or picks")
@with_appcontext
def add_player(name, display_name, non_bettor):
    """Add a player"""
    name = name.strip().lower()
    try:
        if Player.query.filter_by(name=name).first():
            click.echo(f"Player {name} already exists!")
            return

        db.session.add(
            Player(name=name, display_name=display_name, is_bettor=not non_bettor)
        )
        db.session.commit()
        click.echo(f"✅ Added player {name}" + (" (stats only)" if non_bettor else ""))

    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error adding player: {str(e)}")
        logging.error(f"Player creation failed - SQL error: {e}")


@player.command("list")
@with_appcontext
def list_players():
    """List active players"""
    players = Player.get_active()
    if not players:
        click.echo("No players found.")
        return

    click.echo("Players:")
    for p in players:
        role = "bettor" if p.is_bettor else "stats only"
        click.echo(f"  {p.name} ({p.full_name}) - {role}")


# Round Management Commands
@cli.group(name="round")
def round_group():
    """Round management commands"""
    pass


@round_group.command("create")
@click.argument("number", type=int)
@click.option(
    "--date",
    "game_date",
    required=True,
    type=click.DateTime(formats=DATETIME_FORMATS),
    help="Tip-off in the app timezone (YYYY-MM-DDTHH:MM)",
)
@click.option(
    "--lock-time",
    type=click.DateTime(formats=DATETIME_FORMATS),
    help="When picks lock (defaults to tip-off)",
)
@click.option(
    "--lines-lock-time",
    type=click.DateTime(formats=DATETIME_FORMATS),
    help="When predictions lock (defaults to the picks lock)",
)
@click.option("--label", help="Display label (defaults to 'Week <number>')")
@with_appcontext
def create_round(number, game_date, lock_time, lines_lock_time, label):
    """Create a new round"""
    try:
        if Round.get_by_number(number):
            click.echo(f"Round {number} already exists!")
            return

        if lines_lock_time and lines_lock_time > (lock_time or game_date):
            click.echo("❌ Lines must lock no later than picks")
            return

        game_round = Round.create_round(
            number,
            game_date,
            lock_time=lock_time,
            lines_lock_time=lines_lock_time,
            label=label,
        )
        db.session.commit()
        click.echo(
            f"✅ Created round {number} ({game_round.label}) - "
            f"{format_game_time(game_round.game_date)}"
        )

    except IntegrityError as e:
        db.session.rollback()
        click.echo(f"❌ Round {number} already exists!")
        logging.error(f"Round creation failed - integrity error: {e}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error creating round: {str(e)}")
        logging.error(f"Round creation failed - SQL error: {e}")


@round_group.command("list")
@with_appcontext
def list_rounds():
    """List all rounds"""
    rounds = Round.query.order_by(Round.number).all()

    if not rounds:
        click.echo("No rounds found.")
        return

    click.echo("Rounds:")
    for r in rounds:
        click.echo(
            f"  {r.number}: {r.label} - {format_game_time(r.game_date)} "
            f"[{r.phase().value}, {r.status}]"
        )


# Roster Commands
@cli.group()
def roster():
    """Per-round roster commands"""
    pass


@roster.command("set")
@click.argument("number", type=int)
@click.argument("name")
@click.option("--injured", is_flag=True, help="On the roster but injured")
@with_appcontext
def set_roster(number, name, injured):
    """Put a player on a round's roster"""
    game_round = _get_round(number)
    if not game_round:
        return
    name = name.strip().lower()
    if not Player.query.filter_by(name=name).first():
        click.echo(f"❌ Player {name} not found!")
        return

    try:
        spot = RosterSpot.query.filter_by(round_id=game_round.id, player=name).first()
        if spot is None:
            spot = RosterSpot(round_id=game_round.id, player=name)
            db.session.add(spot)
        spot.is_injured = injured
        db.session.commit()
        click.echo(
            f"✅ {name} on round {number} roster" + (" (injured)" if injured else "")
        )
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error updating roster: {str(e)}")
        logging.error(f"Roster update failed - SQL error: {e}")


@roster.command("remove")
@click.argument("number", type=int)
@click.argument("name")
@with_appcontext
def remove_roster(number, name):
    """Take a player off a round's roster"""
    game_round = _get_round(number)
    if not game_round:
        return

    removed = RosterSpot.query.filter_by(
        round_id=game_round.id, player=name.strip().lower()
    ).delete()
    db.session.commit()
    click.echo(f"✅ Removed {removed} roster spot(s)")


@cli.command()
@with_appcontext
def seed():
    """Create the default players and schedule"""
    try:
        players_added = 0
        for name in DEFAULT_PLAYERS:
            if not Player.query.filter_by(name=name).first():
                db.session.add(Player(name=name, is_bettor=name in DEFAULT_BETTORS))
                players_added += 1

        rounds_added = 0
        for number, label, game_date in DEFAULT_SCHEDULE:
            if not Round.get_by_number(number):
                Round.create_round(number, game_date, label=label)
                rounds_added += 1

        db.session.commit()
        click.echo(f"✅ Seeded {players_added} players and {rounds_added} rounds")

    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error seeding: {str(e)}")
        logging.error(f"Seeding failed - SQL error: {e}")


# Lines and Scores
@cli.group()
def lines():
    """Line commands"""
    pass


@lines.command("regenerate")
@click.argument("number", type=int)
@with_appcontext
def regenerate_lines(number):
    """Rebuild a round's lines from its predictions"""
    game_round = _get_round(number)
    if not game_round:
        return

    try:
        published = game_round.regenerate_lines()
        db.session.commit()
        click.echo(f"✅ Published {published} lines for round {number}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error regenerating lines: {str(e)}")
        logging.error(f"Line regeneration failed - SQL error: {e}")


@cli.group()
def scores():
    """Scoring commands"""
    pass


@scores.command("calculate")
@click.argument("number", type=int)
@with_appcontext
def calculate_scores(number):
    """Score a round and overwrite its stored scores"""
    game_round = _get_round(number)
    if not game_round:
        return

    try:
        breakdowns = game_round.calculate_scores()
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error calculating scores: {str(e)}")
        logging.error(f"Score calculation failed - SQL error: {e}")
        return

    click.echo(f"✅ Scored {len(breakdowns)} participants for round {number}")
    for name, breakdown in sorted(
        breakdowns.items(), key=lambda item: -item[1].total_points
    ):
        click.echo(f"  {name}: {breakdown.total_points:+.1f}")


@cli.command()
@with_appcontext
def leaderboard():
    """Show the season leaderboard"""
    board = Score.get_leaderboard()
    if not board:
        click.echo("No bettors found.")
        return

    for position, entry in enumerate(board, start=1):
        click.echo(
            f"{position:>2}. {entry['player']:<10} {entry['total_points']:>6.1f} "
            f"({entry['correct_picks']} hit, {entry['missed_picks']} missed, "
            f"{entry['exact_lines']} exact, {entry['prop_wins']} props)"
        )


@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("🏀 Jungle Sportsbook Status")
    click.echo("=" * 30)

    config_name = os.environ.get("FLASK_CONFIG", "default")
    click.echo(f"Configuration: {config_name}")
    click.echo(f"Timezone: {current_app.config.get('TIMEZONE')}")

    db_url = current_app.config.get("SQLALCHEMY_DATABASE_URI", "")
    click.echo(f"Database: {db_url.split('://')[0] if '://' in db_url else 'Unknown'}")
    click.echo(f"Cache: {describe_cache()['type']}")

    try:
        click.echo(f"Players: {Player.query.filter_by(is_active=True).count()}")
        click.echo(f"Rounds: {Round.query.count()}")

        current = Round.get_current_round()
        if current:
            click.echo(
                f"Current round: {current.number} ({current.label}) - "
                f"{current.phase().value}"
            )
        else:
            click.echo("Current round: none")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database error: {str(e)}")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        cli()
