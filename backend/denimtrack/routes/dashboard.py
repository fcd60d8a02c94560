from flask import Blueprint, jsonify, request, current_app

from ..decorators import requires
from ..errors import json_error
from ..permissions import AUTHENTICATED
from ..services import get_dashboard
from ..services.dashboard_service import TIMEFRAME_DAYS


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


def _timeframe_arg() -> str | None:
    timeframe = request.args.get("timeframe")
    if timeframe not in TIMEFRAME_DAYS:
        current_app.logger.warning('Invalid or missing timeframe: "%s", defaulting to daily.', timeframe)
    return timeframe


@dashboard_bp.get("/summary")
@requires(AUTHENTICATED)
def summary():
    try:
        data = get_dashboard().summary()
    except Exception:
        current_app.logger.exception("Failed to build dashboard summary")
        return json_error("Server error fetching dashboard summary.", 500)
    return jsonify(data), 200


@dashboard_bp.get("/chart/dry-process")
@requires(AUTHENTICATED)
def dry_process_chart():
    """?timeframe=daily|weekly|monthly (anything else means daily)"""
    timeframe = _timeframe_arg()
    try:
        data = get_dashboard().dry_process_chart(timeframe)
    except Exception:
        current_app.logger.exception("Failed to build dry process chart")
        return json_error("Server error fetching dry process chart data.", 500)
    return jsonify(data), 200


@dashboard_bp.get("/chart/washing")
@requires(AUTHENTICATED)
def washing_chart():
    timeframe = _timeframe_arg()
    try:
        data = get_dashboard().washing_chart(timeframe)
    except Exception:
        current_app.logger.exception("Failed to build washing chart")
        return json_error("Server error fetching washing chart data.", 500)
    return jsonify(data), 200
