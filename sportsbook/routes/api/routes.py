import logging
from functools import wraps

from flask import current_app, g, jsonify, request, session
from sqlalchemy.exc import SQLAlchemyError

from sportsbook import SESSION_PARTICIPANT_KEY, db, limiter
from sportsbook.constants import MVP_PROP, PROP_BET_LABELS, STAT_LABELS
from sportsbook.forms.base import load_entries, to_formdata
from sportsbook.forms.picks import PickForm, PropPickForm
from sportsbook.forms.predictions import PredictionForm
from sportsbook.forms.results import PropResultForm, ResultForm
from sportsbook.forms.session import SelectParticipantForm
from sportsbook.models import (
    Line,
    Pick,
    Player,
    Prediction,
    PropPick,
    PropResult,
    Result,
    Round,
    Score,
)
from sportsbook.routes.api import bp
from sportsbook.utils.cache_utils import (
    LEADERBOARD_KEY,
    STATS_KEY,
    cached_standings,
    invalidate_standings,
)
from sportsbook.utils.lines import suggest_picks

logger = logging.getLogger(__name__)


def write_limit():
    return current_app.config.get("RATELIMIT_WRITE", "60 per minute")


def participant_required(f):
    """Reject requests that have not selected a participant"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not g.get("participant"):
            return jsonify({"error": "Select your name first"}), 401
        return f(*args, **kwargs)

    return decorated_function


def _get_round_or_404(number):
    return Round.query.filter_by(number=number).first_or_404()


def _json_body():
    """Decoded JSON object body, or None when missing or not an object"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def _commit(action):
    """Commit the session; returns an error response tuple on failure"""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Database error while {action}: {e}")
        return jsonify({"error": f"Could not save {action}"}), 500
    return None


# Session


@bp.route("/session", methods=["GET"])
def get_session():
    """Get the selected participant"""
    return jsonify({"participant": g.get("participant")})


@bp.route("/session", methods=["POST"])
def select_participant():
    """Select who is making predictions and picks on this device"""
    data = _json_body()
    if data is None:
        return jsonify({"error": "Expected a JSON object"}), 400

    form = SelectParticipantForm(formdata=to_formdata(data))
    if not form.validate():
        return jsonify({"error": "Invalid participant", "details": form.errors}), 400

    name = form.participant.data.strip().lower()
    player = Player.query.filter_by(name=name, is_active=True).first()
    if not player or not player.is_bettor:
        return jsonify({"error": f"{name} is not an active bettor"}), 400

    session[SESSION_PARTICIPANT_KEY] = player.name
    session.permanent = True
    session.modified = True
    logger.info(f"Participant selected: {player.name}")

    return jsonify({"participant": player.name})


@bp.route("/session", methods=["DELETE"])
def clear_participant():
    session.pop(SESSION_PARTICIPANT_KEY, None)
    return jsonify({"participant": None})


# Players and rounds


@bp.route("/players")
def players():
    """Get active players plus the stat and prop catalogues"""
    return jsonify(
        {
            "players": [player.to_dict() for player in Player.get_active()],
            "stats": STAT_LABELS,
            "props": PROP_BET_LABELS,
        }
    )


@bp.route("/rounds")
def rounds():
    """Get all rounds with their live phase"""
    all_rounds = Round.query.order_by(Round.number).all()
    return jsonify([game_round.to_dict() for game_round in all_rounds])


@bp.route("/rounds/current")
def current_round():
    """Get the round currently in play"""
    game_round = Round.get_current_round()
    if not game_round:
        return jsonify({"error": "No rounds scheduled"}), 404
    return jsonify(game_round.to_dict(include_roster=True))


@bp.route("/rounds/<int:number>")
def round_detail(number):
    game_round = _get_round_or_404(number)
    return jsonify(game_round.to_dict(include_roster=True))


# Predictions and lines


@bp.route("/rounds/<int:number>/predictions", methods=["GET"])
@participant_required
def get_predictions(number):
    """Get the participant's own predictions"""
    game_round = _get_round_or_404(number)
    predictions = game_round.predictions.filter_by(submitter=g.participant).all()
    return jsonify(
        {
            "round": game_round.number,
            "phase": game_round.phase().value,
            "predictions": [prediction.to_dict() for prediction in predictions],
        }
    )


@bp.route("/rounds/<int:number>/predictions", methods=["PUT"])
@limiter.limit(write_limit)
@participant_required
def save_predictions(number):
    """Replace the participant's predictions and republish the round's lines"""
    game_round = _get_round_or_404(number)
    if not game_round.accepts_predictions():
        return jsonify({"error": "Lines are locked for this round"}), 409

    data = _json_body()
    if data is None:
        return jsonify({"error": "Expected a JSON object"}), 400
    # An explicit empty list withdraws every prediction; a missing key is a mistake
    if "predictions" not in data:
        return jsonify({"error": "Missing predictions"}), 400

    forms, errors = load_entries(
        PredictionForm, data["predictions"], player=game_round.roster_players()
    )
    if errors:
        return jsonify({"error": "Invalid predictions", "details": errors}), 400

    # A repeated (player, stat) keeps the last value sent
    entries = {(form.player.data, form.stat.data): form.value.data for form in forms}

    try:
        saved = Prediction.replace_for_submitter(
            game_round.id,
            g.participant,
            [(player, stat, value) for (player, stat), value in entries.items()],
        )
        published = game_round.regenerate_lines()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to save predictions for round {number}: {e}")
        return jsonify({"error": "Could not save predictions"}), 500

    error = _commit("predictions")
    if error:
        return error

    logger.info(f"{g.participant} saved {saved} predictions for round {number}")
    return jsonify({"saved": saved, "lines_published": published})


@bp.route("/rounds/<int:number>/lines")
def get_lines(number):
    """Get the published lines"""
    game_round = _get_round_or_404(number)
    lines = game_round.lines.order_by(Line.player, Line.stat).all()
    return jsonify(
        {
            "round": game_round.number,
            "phase": game_round.phase().value,
            "lines": [line.to_dict() for line in lines],
        }
    )


# Picks


@bp.route("/rounds/<int:number>/picks", methods=["GET"])
@participant_required
def get_picks(number):
    """Get the participant's picks with suggestions from their own lines"""
    game_round = _get_round_or_404(number)

    picks = game_round.picks.filter_by(picker=g.participant).all()
    prop_picks = game_round.prop_picks.filter_by(picker=g.participant).all()
    suggestions = suggest_picks(
        game_round.predictions.filter_by(submitter=g.participant).all(),
        game_round.lines.all(),
        g.participant,
    )

    return jsonify(
        {
            "round": game_round.number,
            "phase": game_round.phase().value,
            "picks": [pick.to_dict() for pick in picks],
            "prop_picks": [prop_pick.to_dict() for prop_pick in prop_picks],
            "suggestions": [
                {"player": player, "stat": stat, "suggested": suggested}
                for (player, stat), suggested in sorted(suggestions.items())
            ],
        }
    )


@bp.route("/rounds/<int:number>/picks", methods=["PUT"])
@limiter.limit(write_limit)
@participant_required
def save_picks(number):
    """Upsert the participant's over picks and prop picks"""
    game_round = _get_round_or_404(number)
    if not game_round.accepts_picks():
        return jsonify({"error": "Picks are locked. Game has started!"}), 409

    data = _json_body()
    if data is None:
        return jsonify({"error": "Expected a JSON object"}), 400

    roster = game_round.roster_players()
    pick_forms, pick_errors = load_entries(PickForm, data.get("picks", []), player=roster)
    prop_forms, prop_errors = load_entries(
        PropPickForm, data.get("prop_picks", []), player_picked=sorted(Player.active_names())
    )
    if pick_errors or prop_errors:
        return (
            jsonify(
                {
                    "error": "Invalid picks",
                    "details": {"picks": pick_errors, "prop_picks": prop_errors},
                }
            ),
            400,
        )

    for form in pick_forms:
        Pick.upsert(
            game_round.id, g.participant, form.player.data, form.stat.data, form.picked.data
        )
    for form in prop_forms:
        PropPick.upsert(
            game_round.id, g.participant, form.prop_type.data, form.player_picked.data
        )

    error = _commit("picks")
    if error:
        return error

    logger.info(
        f"{g.participant} saved {len(pick_forms)} picks and "
        f"{len(prop_forms)} prop picks for round {number}"
    )
    return jsonify({"picks": len(pick_forms), "prop_picks": len(prop_forms)})


# Results and scores


@bp.route("/rounds/<int:number>/results", methods=["GET"])
def get_results(number):
    game_round = _get_round_or_404(number)
    results = game_round.results.order_by(Result.player, Result.stat).all()
    prop_results = game_round.prop_results.order_by(PropResult.prop_type).all()
    return jsonify(
        {
            "round": game_round.number,
            "results": [result.to_dict() for result in results],
            "prop_results": [prop_result.to_dict() for prop_result in prop_results],
        }
    )


@bp.route("/rounds/<int:number>/results", methods=["PUT"])
@limiter.limit(write_limit)
@participant_required
def save_results(number):
    """
    Record final stats for a round.

    A "results" list replaces every stat stored for the round, so a stat
    left out of it is untracked; without the key, stored stats are kept.
    Prop results are upserted per category; an empty winner list clears
    the category.
    """
    game_round = _get_round_or_404(number)
    if not game_round.is_locked():
        return jsonify({"error": "Results can be entered once the game starts"}), 409

    data = _json_body()
    if data is None:
        return jsonify({"error": "Expected a JSON object"}), 400

    roster = game_round.roster_players()
    result_forms, result_errors = load_entries(
        ResultForm, data.get("results", []), player=roster
    )
    prop_forms, prop_errors = load_entries(
        PropResultForm,
        data.get("prop_results", []),
        form_kwargs={"known_players": Player.active_names()},
    )
    if result_errors or prop_errors:
        return (
            jsonify(
                {
                    "error": "Invalid results",
                    "details": {"results": result_errors, "prop_results": prop_errors},
                }
            ),
            400,
        )

    entries = {(form.player.data, form.stat.data): form.value.data for form in result_forms}

    saved = None
    try:
        if "results" in data:
            saved = Result.replace_for_round(
                game_round.id,
                [(player, stat, value) for (player, stat), value in entries.items()],
            )
        for form in prop_forms:
            if form.winner_set:
                PropResult.upsert(game_round.id, form.prop_type.data, form.winner_set)
            else:
                PropResult.query.filter_by(
                    round_id=game_round.id, prop_type=form.prop_type.data
                ).delete()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to save results for round {number}: {e}")
        return jsonify({"error": "Could not save results"}), 500

    error = _commit("results")
    if error:
        return error

    invalidate_standings()
    logger.info(
        f"{g.participant} saved results for round {number}: "
        f"{'kept' if saved is None else saved} stats, {len(prop_forms)} prop categories"
    )
    return jsonify({"results": saved, "prop_results": len(prop_forms)})


@bp.route("/rounds/<int:number>/scores", methods=["GET"])
def get_scores(number):
    game_round = _get_round_or_404(number)
    scores = game_round.scores.order_by(Score.total_points.desc(), Score.player).all()
    return jsonify(
        {
            "round": game_round.number,
            "scores": [score.to_dict(round_number=game_round.number) for score in scores],
        }
    )


@bp.route("/rounds/<int:number>/scores", methods=["POST"])
@limiter.limit(write_limit)
@participant_required
def calculate_scores(number):
    """Score the round and overwrite the stored scores"""
    game_round = _get_round_or_404(number)
    if not game_round.is_locked():
        return jsonify({"error": "Scores can be calculated once the game starts"}), 409

    try:
        game_round.calculate_scores()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to calculate scores for round {number}: {e}")
        return jsonify({"error": "Could not calculate scores"}), 500

    error = _commit("scores")
    if error:
        return error

    invalidate_standings()
    return get_scores(number)


# Standings


@bp.route("/leaderboard")
@cached_standings(LEADERBOARD_KEY)
def leaderboard():
    return {"leaderboard": Score.get_leaderboard()}


@bp.route("/stats")
@cached_standings(STATS_KEY)
def season_stats():
    """Season stat totals and weekly MVPs"""
    return {
        "stats": STAT_LABELS,
        "players": Result.get_season_stats(),
        "weekly_mvps": PropResult.get_weekly_winners(MVP_PROP),
    }
