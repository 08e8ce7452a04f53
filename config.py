import os
import secrets
import warnings

from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, ".env"))


def env_flag(name, default=True):
    return os.environ.get(name, str(default)).lower() == "true"


def env_int(name, default):
    return int(os.environ.get(name) or default)


def database_uri():
    """DATABASE_URL wins; otherwise DB_TYPE=postgresql builds a psycopg URL from DB_* parts"""
    if os.environ.get("DATABASE_URL"):
        return os.environ["DATABASE_URL"]

    if os.environ.get("DB_TYPE", "sqlite").lower() != "postgresql":
        return "sqlite:///" + os.path.join(basedir, "sportsbook.db")

    user = os.environ.get("DB_USER") or "sportsbook"
    password = os.environ.get("DB_PASSWORD") or "sportsbook"
    host = os.environ.get("DB_HOST") or "localhost"
    port = os.environ.get("DB_PORT") or "5432"
    name = os.environ.get("DB_NAME") or "sportsbook_db"
    return f"postgresql+psycopg://{user}:{password}@{host}:{port}/{name}"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY")
    if not SECRET_KEY:
        SECRET_KEY = secrets.token_urlsafe(32)
        warnings.warn(
            "SECRET_KEY not set, using a generated one. Selected participants "
            "reset whenever the app restarts. Run 'python3 generate_secrets.py' "
            "and put the result in .env.",
            UserWarning,
        )

    def __init__(self):
        self.SQLALCHEMY_DATABASE_URI = database_uri()

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # The selected participant lives in the session cookie
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_HTTPONLY = True
    PERMANENT_SESSION_LIFETIME = env_int("PERMANENT_SESSION_LIFETIME", 86400 * 30)

    # League
    TIMEZONE = os.environ.get("TIMEZONE", "America/Chicago")
    RESULTS_CUTOFF_HOUR = env_int("RESULTS_CUTOFF_HOUR", 8)

    # JSON entries go through WTForms without tokens
    WTF_CSRF_ENABLED = False

    CACHE_TYPE = os.environ.get("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = env_int("CACHE_DEFAULT_TIMEOUT", 300)
    CACHE_REDIS_URL = os.environ.get("CACHE_REDIS_URL", "redis://localhost:6379/0")
    CACHE_KEY_PREFIX = "sportsbook:"

    RATELIMIT_ENABLED = env_flag("RATELIMIT_ENABLED")
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "10000 per day;1000 per hour")
    RATELIMIT_WRITE = os.environ.get("RATELIMIT_WRITE", "60 per minute")

    SCHEDULER_ENABLED = env_flag("SCHEDULER_ENABLED")
    LOCK_CHECK_INTERVAL = env_int("LOCK_CHECK_INTERVAL", 60)  # seconds

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_TO_CONSOLE = env_flag("LOG_TO_CONSOLE")
    LOG_TO_FILE = env_flag("LOG_TO_FILE")
    LOG_DIR = os.environ.get("LOG_DIR", "logs")

    FLASK_ENV = os.environ.get("FLASK_ENV", "development")
    DEBUG = FLASK_ENV == "development"
    TESTING = False


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_ECHO = env_flag("SQLALCHEMY_ECHO", False)


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True

    def __init__(self):
        super().__init__()
        if not os.environ.get("SECRET_KEY"):
            warnings.warn(
                "Production is running on a generated SECRET_KEY; every restart "
                "logs all participants out.",
                UserWarning,
            )


class TestingConfig(Config):
    TESTING = True
    DEBUG = False
    CACHE_TYPE = "NullCache"
    RATELIMIT_ENABLED = False
    SCHEDULER_ENABLED = False
    LOG_TO_FILE = False
    LOG_TO_CONSOLE = False

    def __init__(self):
        super().__init__()
        self.SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
