# Overview: Service-layer read-only rollups over the approved ledgers for the dashboard.

from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import func

from ..models import BulkInput, DryProcessEntry, WashingEntry, GatePassEntry
from ..models.entries import STATUS_APPROVED
from ..time_utils import local_today


TIMEFRAME_DAILY = "daily"
TIMEFRAME_WEEKLY = "weekly"
TIMEFRAME_MONTHLY = "monthly"

# Window length in calendar days, inclusive of today
TIMEFRAME_DAYS = {
    TIMEFRAME_DAILY: 1,
    TIMEFRAME_WEEKLY: 7,
    TIMEFRAME_MONTHLY: 30,
}


def normalize_timeframe(timeframe: str | None) -> str:
    """Unknown or missing timeframes fall back to daily."""
    if timeframe in TIMEFRAME_DAYS:
        return timeframe
    return TIMEFRAME_DAILY


def chart_window(timeframe: str | None, today: date) -> tuple[date, date]:
    days = TIMEFRAME_DAYS[normalize_timeframe(timeframe)]
    return today - timedelta(days=days - 1), today


def humanize_code(code: str | None) -> str:
    """'HAND_SHINE' -> 'Hand Shine'."""
    if not code:
        return "Unknown Process"
    return " ".join(word.capitalize() for word in code.split("_") if word)


class Dashboard:
    """
    Summary figures and chart series for the admin dashboard.

    awaiting_gate_pass is reported verbatim: there is no finished-goods
    inventory to derive it from yet.
    """

    def __init__(self, store, awaiting_gate_pass: int = 50):
        self.store = store
        self.awaiting_gate_pass = awaiting_gate_pass

    @property
    def session(self):
        return self.store.session

    def _approved_quantity(self, model, *criteria) -> int:
        total = (
            self.session.query(func.coalesce(func.sum(model.quantity), 0))
            .filter(model.status == STATUS_APPROVED, *criteria)
            .scalar()
        )
        return int(total or 0)

    def summary(self, today: date | None = None) -> dict:
        today = today or local_today()

        bulk_inputs_today = (
            self.session.query(func.count(BulkInput.id))
            .filter(BulkInput.entry_date == today)
            .scalar()
        )
        units_completed_today = self._approved_quantity(
            WashingEntry,
            WashingEntry.entry_date == today,
            WashingEntry.wash_category == "FINISH",
        )
        shipped_today = self._approved_quantity(GatePassEntry, GatePassEntry.entry_date == today)

        return {
            "bulkInputsToday": int(bulk_inputs_today or 0),
            "unitsCompletedToday": units_completed_today,
            "finishedGoodsAwaitingGatePass": self.awaiting_gate_pass,
            "shippedViaGatePassToday": shipped_today,
        }

    def _chart(self, group_column, model, timeframe: str | None, today: date | None) -> list[dict]:
        start, end = chart_window(timeframe, today or local_today())
        processed = func.sum(model.quantity)
        rows = (
            self.session.query(group_column, processed.label("processed"))
            .filter(
                model.status == STATUS_APPROVED,
                model.entry_date >= start,
                model.entry_date <= end,
            )
            .group_by(group_column)
            .order_by(processed.desc(), group_column)
            .all()
        )
        return [{"name": humanize_code(name), "processed": int(total or 0)} for name, total in rows]

    def dry_process_chart(self, timeframe: str | None = None, today: date | None = None) -> list[dict]:
        """Approved dry-process quantity per process over the timeframe window."""
        return self._chart(DryProcessEntry.process_name, DryProcessEntry, timeframe, today)

    def washing_chart(self, timeframe: str | None = None, today: date | None = None) -> list[dict]:
        """Approved washing quantity per wash category over the timeframe window."""
        return self._chart(WashingEntry.wash_category, WashingEntry, timeframe, today)
