import logging

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db

logger = logging.getLogger(__name__)


def problem(status: int, title: str, detail: str = None, type_: str = "about:blank", **ext):
    payload = {"type": type_, "title": title, "status": status}
    if detail:
        payload["detail"] = detail
    payload.update(ext)
    return jsonify(payload), status, {"Content-Type": "application/problem+json"}


# ---------------------------
# Service-level errors
# ---------------------------

class ServiceError(Exception):
    status = 500
    title = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    status = 400
    title = "validation_error"


class Unauthorized(ServiceError):
    status = 401
    title = "unauthorized"


class NotFound(ServiceError):
    status = 404
    title = "not_found"


class Conflict(ServiceError):
    status = 409
    title = "conflict"


class InternalError(ServiceError):
    pass


def register_error_handlers(app: Flask):
    @app.errorhandler(ServiceError)
    def service_error(e: ServiceError):
        if e.status >= 500:
            logger.error("%s: %s", e.title, e.message)
        return problem(e.status, e.title, e.message, error=e.message)

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        db.session.rollback()
        logger.exception("Database error")
        return problem(500, "Internal Server Error", "Database error", error="Database error")

    @app.errorhandler(400)
    def bad_request(e): return problem(400, "Bad Request", str(e), error=str(e))
    @app.errorhandler(401)
    def unauthorized(e): return problem(401, "Unauthorized", str(e), error=str(e))
    @app.errorhandler(403)
    def forbidden(e): return problem(403, "Forbidden", str(e), error=str(e))
    @app.errorhandler(404)
    def notfound(e): return problem(404, "Not Found", str(e), error=str(e))
    @app.errorhandler(405)
    def not_allowed(e): return problem(405, "Method Not Allowed", str(e), error=str(e))
    @app.errorhandler(409)
    def conflict(e): return problem(409, "Conflict", str(e), error=str(e))
    @app.errorhandler(422)
    def unproc(e): return problem(422, "Unprocessable Entity", str(e), error=str(e))
    @app.errorhandler(500)
    def server(e):
        logger.error("Unhandled error: %r", getattr(e, "original_exception", e))
        return problem(500, "Internal Server Error", "Unexpected server error", error="Unexpected server error")
