import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _split_env_list(name, default):
    raw = os.environ.get(name)
    if raw is None:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or os.urandom(32).hex()
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", f"sqlite:///{BASE_DIR / 'tagfield.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Tag fields
    TAGFIELD_URL_PREFIX = os.environ.get("TAGFIELD_URL_PREFIX", "/_tagfield")
    TAGFIELD_DEFAULT_SEPARATOR = os.environ.get("TAGFIELD_DEFAULT_SEPARATOR", " ")
    # Relative paths resolve against the extension's static folder. Only the
    # stylesheet ships there; the host supplies jQuery and the tagSuggest plugin.
    TAGFIELD_SCRIPTS = _split_env_list("TAGFIELD_SCRIPTS", [])
    TAGFIELD_STYLES = _split_env_list("TAGFIELD_STYLES", ["css/tagfield.css"])
    TAGFIELD_SUGGEST_RATE_LIMIT = os.environ.get("TAGFIELD_SUGGEST_RATE_LIMIT", "120 per minute")

    # Rate limiting
    RATELIMIT_DEFAULT = os.environ.get("RATELIMIT_DEFAULT", "600 per hour")
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")

    # Session
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_SAMESITE = "Lax"


class DevelopmentConfig(Config):
    DEBUG = True

    @classmethod
    def init_app(cls, app):
        if not os.environ.get("SECRET_KEY"):
            app.logger.warning("SECRET_KEY not set, using an ephemeral key. Sessions will not survive restarts.")


class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True

    @classmethod
    def init_app(cls, app):
        secret_key = os.environ.get("SECRET_KEY", "").strip()
        if not secret_key:
            raise RuntimeError("SECRET_KEY environment variable must be set in production")
        if len(secret_key) < 32:
            raise RuntimeError(
                "SECRET_KEY is too short for production (minimum 32 characters). "
                'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
            )
        lowered_secret = secret_key.lower()
        weak_markers = ("changeme", "change-this", "replace", "secret", "example", "default")
        if any(marker in lowered_secret for marker in weak_markers):
            raise RuntimeError("SECRET_KEY appears to be a placeholder and is not allowed in production.")

        separator = os.environ.get("TAGFIELD_DEFAULT_SEPARATOR", " ")
        if len(separator) != 1:
            raise RuntimeError("TAGFIELD_DEFAULT_SEPARATOR must be a single character.")


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    WTF_CSRF_ENABLED = False
    RATELIMIT_ENABLED = False
    SERVER_NAME = "localhost"
    SECRET_KEY = "testing-secret-key"
    TAGFIELD_DEFAULT_SEPARATOR = " "
    TAGFIELD_SCRIPTS = ["js/jquery.js", "js/jquery.tags.js"]
    TAGFIELD_STYLES = ["css/tagfield.css"]


config_by_name = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}
