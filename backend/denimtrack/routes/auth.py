# Overview: Flask API routes for registration and login; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..errors import DenimTrackError, error_response, json_error
from ..extensions import db
from ..services import auth_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/register")
def register_route():
    """
    Create a user account.

    Request body: {"username": str, "password": str, "role": "ADMIN" | "DATA_ENTRY"}

    Returns:
        201: User created (never includes the password hash)
        400: Missing fields or invalid role
        409: Username already exists
    """
    data = request.get_json(silent=True) or {}

    try:
        user = auth_service.register_user(
            username=data.get("username"),
            password=data.get("password"),
            role=data.get("role"),
        )
    except DenimTrackError as e:
        return error_response(e)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to register user")
        return json_error("Server error during registration. Please try again later.", 500)

    current_app.logger.info("Registered user %s with role %s", user.username, user.role)
    return jsonify({
        "message": "User registered successfully!",
        "user": user.to_dict(),
    }), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a signed token.

    The token goes in the Authorization header (Bearer <token>) for every
    protected route and expires after TOKEN_TTL_SECONDS.

    Returns:
        200: {"message", "token", "user": {id, username, role}}
        400: Missing username or password
        401: Invalid credentials (same message for unknown user and wrong password)
    """
    data = request.get_json(silent=True) or {}

    try:
        token, user = auth_service.login(data.get("username"), data.get("password"))
    except DenimTrackError as e:
        return error_response(e)
    except Exception:
        current_app.logger.exception("Failed to login user")
        return json_error("Server error during login. Please try again later.", 500)

    return jsonify({
        "message": "Login successful!",
        "token": token,
        "user": {
            "id": user.id,
            "username": user.username,
            "role": user.role,
        },
    }), 200
