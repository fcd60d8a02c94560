# Overview: Error taxonomy shared by services and routes; every error renders as {"message": ...}.

from __future__ import annotations

from flask import jsonify


class DenimTrackError(Exception):
    """Base class for errors that map onto an HTTP status."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DenimTrackError):
    """400-level input problem."""
    status_code = 400


class UnauthorizedError(DenimTrackError):
    """401: missing, invalid or expired credentials."""
    status_code = 401


class ForbiddenError(DenimTrackError):
    """403: authenticated, but the role does not allow the action."""
    status_code = 403


class NotFoundError(DenimTrackError):
    status_code = 404


class ConflictError(DenimTrackError):
    """409-level business rule conflict (e.g., duplicate username)."""
    status_code = 409


def json_error(message: str, status_code: int):
    return jsonify({"message": message}), status_code


def error_response(exc: DenimTrackError):
    return json_error(exc.message, exc.status_code)
