# Overview: Service objects bound to the application's store handle.

from __future__ import annotations

from flask import current_app


EXTENSION_KEY = "denimtrack"


def init_services(app, store) -> None:
    """
    Build the service objects once per app, injecting the store handle.

    Routes look them up through get_ledger()/get_note_board()/get_dashboard().
    """
    from .ledger_registry import build_ledgers
    from .note_service import NoteBoard
    from .dashboard_service import Dashboard

    app.extensions[EXTENSION_KEY] = {
        "ledgers": build_ledgers(store),
        "notes": NoteBoard(store),
        "dashboard": Dashboard(store, awaiting_gate_pass=app.config["AWAITING_GATE_PASS_PLACEHOLDER"]),
    }


def _services() -> dict:
    return current_app.extensions[EXTENSION_KEY]


def get_ledger(key: str):
    return _services()["ledgers"][key]


def get_note_board():
    return _services()["notes"]


def get_dashboard():
    return _services()["dashboard"]
