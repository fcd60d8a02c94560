# Overview: Flask API routes for the special notes board (admin only).

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import requires
from ..errors import DenimTrackError, error_response, json_error
from ..extensions import db
from ..permissions import ADMIN_ONLY
from ..services import get_note_board


special_notes_bp = Blueprint("special_notes", __name__, url_prefix="/api/special-notes")


@special_notes_bp.post("/")
@requires(ADMIN_ONLY)
def add_note():
    """
    Request body: {"note_content": str, "note_date": "YYYY-MM-DD" (optional, defaults to today)}
    """
    data = request.get_json(silent=True) or {}

    try:
        note = get_note_board().add(
            data.get("note_content"),
            g.identity.id,
            note_date=data.get("note_date"),
        )
    except DenimTrackError as e:
        return error_response(e)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to add special note")
        return json_error("Server error adding special note.", 500)

    return jsonify({"message": "Special note added successfully.", "note": note.to_dict()}), 201


@special_notes_bp.get("/")
@requires(ADMIN_ONLY)
def list_notes():
    try:
        notes = get_note_board().list_active()
    except Exception:
        current_app.logger.exception("Failed to fetch special notes")
        return json_error("Server error fetching special notes.", 500)

    return jsonify(notes), 200


@special_notes_bp.delete("/<int:note_id>")
@requires(ADMIN_ONLY)
def deactivate_note(note_id: int):
    """Soft delete. Repeating the call on an inactive note succeeds; unknown ids are 404."""
    try:
        note = get_note_board().deactivate(note_id)
    except DenimTrackError as e:
        return error_response(e)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to deactivate special note %s", note_id)
        return json_error("Server error deactivating special note.", 500)

    return jsonify({"message": "Special note deactivated successfully.", "noteId": note.id}), 200
