# wellness/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_object=Config, clock=None):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    CORS(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Missing or invalid auth token",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "message": "Invalid auth token",
                    "error": reason,
                }
            ),
            422,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401

    # -----------------------------
    # Badge engine (one per app, sessions are scoped per request)
    # -----------------------------
    from .achievements.clock import SystemClock
    from .achievements.datastore import SqlAlchemyDatastore
    from .achievements.engine import BadgeEngine

    app.extensions["badge_engine"] = BadgeEngine(
        SqlAlchemyDatastore(db),
        clock or SystemClock(),
        max_retries=app.config.get("BADGE_STATS_MAX_RETRIES", 3),
    )

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.journal_routes import journal_bp
    from .routes.calendar_routes import calendar_bp
    from .routes.friends_routes import friends_bp
    from .routes.chat_routes import chat_bp
    from .routes.daily_focus_routes import daily_focus_bp
    from .routes.badges_routes import badges_bp
    from .routes.notifications_routes import notifications_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(journal_bp, url_prefix="/api/journal")
    app.register_blueprint(calendar_bp, url_prefix="/api/calendar")
    app.register_blueprint(friends_bp, url_prefix="/api/friends")
    app.register_blueprint(chat_bp, url_prefix="/api/chat")
    app.register_blueprint(daily_focus_bp, url_prefix="/api/daily-focus")
    app.register_blueprint(badges_bp, url_prefix="/api/badges")
    app.register_blueprint(notifications_bp, url_prefix="/api/notifications")

    from .cli import register_commands

    register_commands(app)

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        # models must be imported before create_all sees their tables
        from .models import user, journal, event, social, chat, focus, badges, notifications  # noqa: F401

        db.create_all()

    return app
