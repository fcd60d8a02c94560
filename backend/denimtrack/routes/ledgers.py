# Overview: Flask API routes shared by the five production ledgers (submit, review, report).

"""
One blueprint per ledger, all built by create_ledger_blueprint():

    POST /api/<resource>/              submit (DATA_ENTRY or ADMIN)
    GET  /api/<resource>/pending       pending queue (ADMIN)
    PUT  /api/<resource>/approve/<id>  approve (ADMIN)
    PUT  /api/<resource>/reject/<id>   reject (ADMIN)
    GET  /api/<resource>/report        approved rows in a date range (ADMIN)
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import requires
from ..errors import DenimTrackError, error_response, json_error
from ..extensions import db
from ..permissions import ADMIN_ONLY, DATA_ENTRY_ACCESS
from ..services import get_ledger
from ..services.ledger_registry import LEDGER_DEFINITIONS
from ..services.ledger_service import OUTCOME_APPROVE, OUTCOME_REJECT


def create_ledger_blueprint(key: str, label: str) -> Blueprint:
    bp = Blueprint(f"ledger_{key.replace('-', '_')}", __name__, url_prefix=f"/api/{key}")

    @bp.post("/")
    @requires(DATA_ENTRY_ACCESS)
    def submit_entry():
        """
        Returns:
            201: Created entry (status PENDING)
            400: Missing/invalid field
        """
        payload = request.get_json(silent=True)

        try:
            entry = get_ledger(key).submit(payload, g.identity.id)
        except DenimTrackError as e:
            return error_response(e)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Failed to add %s entry", label)
            return json_error(f"Server error adding {label} entry.", 500)

        return jsonify(entry.to_dict()), 201

    @bp.get("/pending")
    @requires(ADMIN_ONLY)
    def list_pending():
        try:
            rows = get_ledger(key).list_pending()
        except Exception:
            current_app.logger.exception("Failed to fetch pending %s entries", label)
            return json_error(f"Server error fetching pending {label} entries.", 500)

        return jsonify(rows), 200

    def _resolve(entry_id: int, outcome: str):
        try:
            entry = get_ledger(key).resolve(entry_id, g.identity.id, outcome)
        except DenimTrackError as e:
            return error_response(e)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Failed to %s %s entry %s", outcome.lower(), label, entry_id)
            return json_error(f"Server error processing {label} entry.", 500)

        current_app.logger.info(
            "%s entry %s %s by user %s", label, entry_id, entry.status, g.identity.id
        )
        return jsonify(entry.to_dict()), 200

    @bp.put("/approve/<int:entry_id>")
    @requires(ADMIN_ONLY)
    def approve_entry(entry_id: int):
        """
        Returns:
            200: Approved entry
            404: Entry absent or already processed
        """
        return _resolve(entry_id, OUTCOME_APPROVE)

    @bp.put("/reject/<int:entry_id>")
    @requires(ADMIN_ONLY)
    def reject_entry(entry_id: int):
        return _resolve(entry_id, OUTCOME_REJECT)

    @bp.get("/report")
    @requires(ADMIN_ONLY)
    def approved_report():
        """
        Query: ?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD (inclusive)

        Returns:
            200: Approved entries, entry_date desc then id desc
            400: Missing, unparsable or reversed range
        """
        try:
            rows = get_ledger(key).report_approved(
                request.args.get("startDate"),
                request.args.get("endDate"),
            )
        except DenimTrackError as e:
            return error_response(e)
        except Exception:
            current_app.logger.exception("Failed to build %s report", label)
            return json_error(f"Server error fetching report data for {label} entries.", 500)

        return jsonify(rows), 200

    return bp


ledger_blueprints = [
    create_ledger_blueprint(definition.key, definition.label)
    for definition in LEDGER_DEFINITIONS
]
