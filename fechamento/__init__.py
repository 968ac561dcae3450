# fechamento/__init__.py
import logging
from typing import Any, Mapping, Optional

from flask import Flask, jsonify

from .config import Config
from .extensions import db, cors, mail
from .errors import register_error_handlers

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def register_blueprints(app: Flask):
    from .blueprints import auth_bp, selection_bp, closings_bp

    app.register_blueprint(auth_bp,       url_prefix="/api")
    app.register_blueprint(selection_bp,  url_prefix="/api")
    app.register_blueprint(closings_bp,   url_prefix="/api")


def bootstrap_or_exit(app: Flask):
    """Run the startup initializer; an unrecoverable failure stops the process."""
    from .services.bootstrap import initialize_database

    with app.app_context():
        try:
            initialize_database()
        except Exception:
            logger.exception("Database initialization failed")
            raise SystemExit(1)


def create_app(overrides: Optional[Mapping[str, Any]] = None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=LOG_FORMAT)

    db.init_app(app)
    mail.init_app(app)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": "*"}},
        send_wildcard=True,
        methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", app.config["AUTH_HEADER"]],
    )

    register_blueprints(app)
    register_error_handlers(app)

    from .cli import register_commands
    register_commands(app)

    @app.get("/")
    def health():
        return jsonify({"ok": True, "service": "fechamento-api"})

    if app.config["BOOTSTRAP_ON_START"]:
        bootstrap_or_exit(app)

    return app
