"""API error types and their JSON rendering."""

import logging

from flask import jsonify
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationFailed(ApiError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(ApiError):
    status_code = 400
    default_message = "Already exists"


class AuthenticationFailed(ApiError):
    status_code = 401
    default_message = "Not authenticated"


class NotAuthorized(ApiError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


def found(entity, what="Record"):
    """Turn a storage ``None`` into a 404."""
    if entity is None:
        raise NotFound(f"{what} not found")
    return entity


def _validation_details(exc: ValidationError) -> list[dict]:
    return [
        {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def register_error_handlers(app) -> None:

    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        return jsonify(message=exc.message), exc.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify(message="Invalid request", errors=_validation_details(exc)), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify(message=exc.description or exc.name), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        return jsonify(message="Internal server error"), 500
