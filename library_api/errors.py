"""Error taxonomy shared by services and the HTTP layer.

Services raise these; ``register_error_handlers`` turns them into
``{"success": false, "message": ...}`` responses with the matching status.
"""
from __future__ import annotations

from flask import current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from library_api.extensions import db


class LibraryError(Exception):
    """Base class for every failure surfaced to API callers."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(LibraryError):
    status_code = 400
    default_message = "Invalid input"


class AuthenticationError(LibraryError):
    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(LibraryError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFoundError(LibraryError):
    status_code = 404
    default_message = "Not found"


class ConflictError(LibraryError):
    status_code = 409
    default_message = "Conflict"


class UserExistsError(ConflictError):
    status_code = 400
    default_message = "User Exist"


class InsufficientCopiesError(ConflictError):
    status_code = 404
    default_message = "No enough copies"


class InternalError(LibraryError):
    status_code = 500
    default_message = "Server error"


def _json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def handle_library_error(err: LibraryError):
        return _json_error(err.message, err.status_code)

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(err: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception(f"[db] Unhandled database error: {err}")
        return _json_error(InternalError.default_message, 500)

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        if err.code == 404:
            return _json_error(f"Not Found - {request.path}", 404)
        return _json_error(err.name, err.code)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        current_app.logger.exception(f"[app] Unexpected error: {err}")
        return _json_error(InternalError.default_message, 500)
