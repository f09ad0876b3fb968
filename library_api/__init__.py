import os

from flask import Flask, jsonify

from library_api.config import Config, config_by_name, validate_config
from library_api.extensions import db, migrate, jwt


def _load_config(app: Flask, config_name, test_config) -> None:
    resolved_name = config_name or os.environ.get("FLASK_CONFIG", "production")
    app.config.from_object(config_by_name.get(resolved_name, Config))
    if test_config:
        app.config.update(test_config)


def create_app(config_name=None, test_config=None):
    if isinstance(config_name, dict) and test_config is None:
        test_config = config_name
        config_name = None

    app = Flask(__name__)
    _load_config(app, config_name, test_config)

    # missing DATABASE_URL / JWT_SECRET_KEY / PORT stops startup here
    validate_config(app.config)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) db + migrations
    db.init_app(app)
    migrate.init_app(app, db)

    # 2) JWT: Bearer header, subject resolved to a User
    from library_api.utils.auth import register_jwt_callbacks
    jwt.init_app(app)
    register_jwt_callbacks(jwt)

    # 3) errors -> {"success": false, "message": ...}
    from library_api.errors import register_error_handlers
    register_error_handlers(app)

    # 4) API blueprints
    from library_api.controllers.user_controller import user_bp
    from library_api.controllers.book_controller import book_bp
    from library_api.controllers.borrowing_controller import borrowing_bp
    from library_api.controllers.report_controller import report_bp
    prefix = app.config.get("API_PREFIX", "").rstrip("/")
    app.register_blueprint(user_bp, url_prefix=f"{prefix}/users")
    app.register_blueprint(book_bp, url_prefix=f"{prefix}/books")
    app.register_blueprint(report_bp, url_prefix=f"{prefix}/reports")
    app.register_blueprint(borrowing_bp, url_prefix=prefix or None)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    from library_api.cli import register_commands
    register_commands(app)

    app.logger.info(f"[startup] Library API ready (prefix={prefix or '/'})")
    return app
