"""
Jungle Sportsbook

Flask JSON service around the line, scoring and phase engines in
sportsbook.utils. Extensions live at module level so models and routes can
import them; create_app() binds them to an app.
"""

import logging
import os

from flask import Flask, g, jsonify, request, session
from flask_caching import Cache
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy

from config import config

logger = logging.getLogger(__name__)

db = SQLAlchemy()
cache = Cache()

SESSION_PARTICIPANT_KEY = "participant"


def get_real_ip():
    """Client IP behind a reverse proxy: first X-Forwarded-For hop, then X-Real-IP"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or get_remote_address()


# Storage and default limits come from the RATELIMIT_* config keys
limiter = Limiter(key_func=get_real_ip)


def create_app(config_name=None):
    """
    Build the app for FLASK_CONFIG (or config_name): extensions, the /api
    blueprint, per-request participant lookup, JSON errors, logging and
    tables. The lock scheduler starts everywhere except under TestingConfig.
    """
    app = Flask(__name__)
    app.config.from_object(config[config_name or os.environ.get("FLASK_CONFIG", "default")]())

    from sportsbook.utils.logging_config import setup_logging

    setup_logging(app)

    db.init_app(app)
    cache.init_app(app)
    limiter.init_app(app)

    from sportsbook.routes.api import bp as api_bp

    app.register_blueprint(api_bp, url_prefix="/api")
    register_request_hooks(app)
    register_error_handlers(app)

    with app.app_context():
        db.create_all()

    if not app.testing:
        from sportsbook.services.scheduler_service import scheduler_service

        scheduler_service.init_app(app)

    return app


def register_request_hooks(app):
    """Register per-request identity resolution and response headers"""

    @app.before_request
    def resolve_participant():
        from sportsbook.models import Player

        g.participant = None
        name = session.get(SESSION_PARTICIPANT_KEY)
        if not name:
            return

        player = Player.query.filter_by(name=name, is_active=True).first()
        if player and player.is_bettor:
            g.participant = player.name
        else:
            # Player was removed or deactivated since it was selected
            logger.info(f"Dropping stale participant selection: {name}")
            session.pop(SESSION_PARTICIPANT_KEY, None)

    @app.after_request
    def after_request(response):
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Cache-Control"] = "no-store"
        return response


ERROR_MESSAGES = {
    400: "Bad request",
    404: "Resource not found",
    405: "Method not allowed",
    429: "Too many requests",
    500: "Internal server error",
}


def register_error_handlers(app):
    """Answer every HTTP error in ERROR_MESSAGES with a JSON body"""

    def json_error(error):
        code = getattr(error, "code", None) or 500

        if code >= 500:
            db.session.rollback()
            logger.error(f"{code} on {request.method} {request.path}: {error}")
        elif code in (400, 429):
            logger.warning(f"{code} on {request.method} {request.path}: {error}")

        return jsonify({"error": ERROR_MESSAGES.get(code, "Request failed")}), code

    for code in ERROR_MESSAGES:
        app.register_error_handler(code, json_error)


from sportsbook import models  # noqa: F401, E402 - imported for model registration
