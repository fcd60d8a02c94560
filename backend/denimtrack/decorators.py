# Overview: Request decorator that authenticates the bearer token and enforces a route's Requirement.

from functools import wraps
from flask import request, g, current_app

from .errors import UnauthorizedError, ForbiddenError, error_response
from .permissions import Requirement, authorize
from .services import token_service


NO_TOKEN_MESSAGE = "Not authorized, no token"


def bearer_token(auth_header: str | None) -> str:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    if not auth_header:
        raise UnauthorizedError(NO_TOKEN_MESSAGE)

    parts = auth_header.split()
    if len(parts) != 2 or parts[0] != "Bearer":
        raise UnauthorizedError(NO_TOKEN_MESSAGE)

    return parts[1]


def requires(requirement: Requirement):
    """
    Protect a route with a declarative access requirement.

    Sets g.identity (token_service.Identity) for the view. Returns 401 when
    the token is missing, malformed, badly signed or expired, and 403 when
    the identity's role does not satisfy the requirement.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                token = bearer_token(request.headers.get("Authorization"))
                identity = token_service.decode_token(token)
                authorize(identity, requirement)
            except UnauthorizedError as e:
                current_app.logger.warning("Rejected token on %s %s: %s", request.method, request.path, e.message)
                return error_response(e)
            except ForbiddenError as e:
                current_app.logger.warning(
                    "User %s (%s) denied %s on %s", identity.username, identity.role, requirement.name, request.path
                )
                return error_response(e)

            g.identity = identity
            return f(*args, **kwargs)

        return decorated_function
    return decorator
