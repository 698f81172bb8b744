import logging
import time

from flask import Flask, g, jsonify, request
from flask.logging import default_handler
from werkzeug.exceptions import HTTPException

from configs import Config, db, login
from utils.errors import AppError, Internal, Unauthorized


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])
    # dao modules log under "dao"; route them to the same stream as app.logger
    dao_logger = logging.getLogger("dao")
    dao_logger.setLevel(app.config["LOG_LEVEL"])
    if default_handler not in dao_logger.handlers:
        dao_logger.addHandler(default_handler)

    db.init_app(app)
    login.init_app(app)

    # db.models registers every table on import
    from db.models.user import User
    from dao import session as session_dao
    from utils.auth import token_from_request

    @login.request_loader
    def load_user_from_request(req):
        identity = session_dao.resolve_session(token_from_request(req))
        if identity is None:
            return None
        return db.session.get(User, identity.user_id)

    @login.unauthorized_handler
    def unauthorized():
        raise Unauthorized()

    _register_error_handlers(app)
    _register_request_logging(app)

    from admin.setup import init_admin
    from blueprint import blue_print

    init_admin(app)  # /manage
    blue_print(app)

    if app.config["AUTO_CREATE_TABLES"]:
        with app.app_context():
            db.create_all()

    return app


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(e: AppError):
        if e.status_code >= 500:
            app.logger.error("%s %s failed: %s", request.method, request.path, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"message": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        err = Internal()
        return jsonify(err.to_dict()), err.status_code


def _register_request_logging(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        if request.path.startswith("/api"):
            started = g.get("request_started", time.perf_counter())
            app.logger.info(
                "%s %s %s in %dms",
                request.method,
                request.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        return response


if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
