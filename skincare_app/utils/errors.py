import traceback

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from ..extensions import db


class AppError(Exception):
    """An error that maps directly onto an HTTP status code."""

    status_code = 500

    def __init__(self, message="Internal Server Error", status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(AppError):
    status_code = 400


class Unauthorized(AppError):
    status_code = 401


class Forbidden(AppError):
    status_code = 403


class NotFound(AppError):
    status_code = 404


class InternalServerError(AppError):
    status_code = 500


def error_response(status_code, message, stack=None):
    if not current_app.config.get("ERROR_INCLUDE_STACK"):
        stack = None
    return (
        jsonify(
            {
                "status": "error",
                "statusCode": status_code,
                "message": message,
                "stack": stack,
            }
        ),
        status_code,
    )


def register_error_handlers(app):
    """Funnel every failure into the same JSON error envelope."""

    @app.errorhandler(AppError)
    def handle_app_error(err):
        if err.status_code >= 500:
            db.session.rollback()
            current_app.logger.error(f"{err.message}: {err.__cause__}")
        stack = "".join(traceback.format_exception(err))
        return error_response(err.status_code, err.message, stack)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return error_response(err.code, err.description)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error: {err}")
        stack = "".join(traceback.format_exception(err))
        return error_response(500, "Internal Server Error", stack)
