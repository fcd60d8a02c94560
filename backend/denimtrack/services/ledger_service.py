# Overview: Generic approvable ledger; one implementation configured per production-stage table.

"""
Approvable ledger.

Every production stage (bulk input, dry process, washing, sub-contract,
gate pass) follows the same lifecycle:

    PENDING --approve--> APPROVED
    PENDING --reject-->  REJECTED

Both outcomes are terminal. Resolution is a single conditional UPDATE
guarded by status = 'PENDING', so when two admins resolve the same entry
concurrently the store lets exactly one UPDATE match; the other sees zero
rows and gets NotFoundError. Nothing is retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import update
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import aliased

from ..errors import NotFoundError, ValidationError
from ..models import User
from ..models.entries import STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED
from ..time_utils import parse_iso_date, utcnow
from ..validation import FieldRule, validate_submission


OUTCOME_APPROVE = "APPROVE"
OUTCOME_REJECT = "REJECT"

OUTCOME_STATUS = {
    OUTCOME_APPROVE: STATUS_APPROVED,
    OUTCOME_REJECT: STATUS_REJECTED,
}


@dataclass(frozen=True)
class LedgerDefinition:
    """
    Configuration for one ledger instance.

    - key: registry name, also the URL segment (e.g. "bulk-inputs")
    - label: human name used in messages ("bulk input")
    - model: SQLAlchemy model using ApprovableEntryMixin
    - fields: submission rules, in the order clients are told about them
    """
    key: str
    label: str
    model: type
    fields: tuple[FieldRule, ...]


def integrity_detail(exc) -> str:
    """Driver-provided detail for a constraint violation."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    detail = getattr(diag, "message_detail", None) if diag is not None else None
    return detail or str(orig or exc)


class Ledger:
    """
    One approvable ledger bound to a store handle.

    The store is the Flask-SQLAlchemy extension; its scoped session is
    created per app context and removed at teardown.
    """

    def __init__(self, definition: LedgerDefinition, store):
        self.definition = definition
        self.store = store

    @property
    def model(self):
        return self.definition.model

    @property
    def session(self):
        return self.store.session

    def __repr__(self) -> str:
        return f"<Ledger {self.definition.key}>"

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit(self, payload: dict, submitter_id: int):
        """
        Validate and insert a new PENDING entry.

        Raises ValidationError for missing/malformed fields and for
        CHECK-constraint or value-range violations reported by the store.
        """
        values = validate_submission(self.definition.fields, payload)

        entry = self.model(
            **values,
            status=STATUS_PENDING,
            entered_by_user_id=submitter_id,
            entry_timestamp=utcnow(),
        )
        self.session.add(entry)
        try:
            self.session.commit()
        except (IntegrityError, DataError) as exc:
            self.session.rollback()
            raise ValidationError(f"Invalid data provided. Error: {integrity_detail(exc)}") from exc
        return entry

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def list_pending(self) -> list[dict]:
        """All PENDING entries, newest submission first, with submitter username."""
        model = self.model
        rows = (
            self.session.query(model, User.username)
            .join(User, model.entered_by_user_id == User.id)
            .filter(model.status == STATUS_PENDING)
            .order_by(model.entry_timestamp.desc(), model.id.desc())
            .all()
        )
        return [dict(entry.to_dict(), entered_by_username=username) for entry, username in rows]

    def resolve(self, entry_id: int, admin_id: int, outcome: str):
        """
        Move a PENDING entry to APPROVED or REJECTED.

        Raises NotFoundError when the entry is absent or no longer PENDING;
        the row is left untouched in that case.
        """
        try:
            new_status = OUTCOME_STATUS[outcome]
        except KeyError:
            raise ValueError(f"Unknown outcome: {outcome}")

        model = self.model
        stmt = (
            update(model)
            .where(model.id == entry_id, model.status == STATUS_PENDING)
            .values(
                status=new_status,
                approved_by_user_id=admin_id,
                approval_timestamp=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFoundError(
                f"Pending {self.definition.label} entry not found or already processed."
            )

        self.session.commit()
        return self.session.get(model, entry_id)

    def approve(self, entry_id: int, admin_id: int):
        return self.resolve(entry_id, admin_id, OUTCOME_APPROVE)

    def reject(self, entry_id: int, admin_id: int):
        return self.resolve(entry_id, admin_id, OUTCOME_REJECT)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def report_approved(self, start_date, end_date) -> list[dict]:
        """
        APPROVED entries with start_date <= entry_date <= end_date.

        Ordered by entry_date desc, then id desc. Each row carries the
        submitter's and approver's usernames.
        """
        start, end = parse_report_range(start_date, end_date)

        model = self.model
        submitter = aliased(User)
        approver = aliased(User)
        rows = (
            self.session.query(model, submitter.username, approver.username)
            .join(submitter, model.entered_by_user_id == submitter.id)
            .outerjoin(approver, model.approved_by_user_id == approver.id)
            .filter(
                model.status == STATUS_APPROVED,
                model.entry_date >= start,
                model.entry_date <= end,
            )
            .order_by(model.entry_date.desc(), model.id.desc())
            .all()
        )
        return [
            dict(entry.to_dict(), entered_by_username=entered_by, approved_by_username=approved_by)
            for entry, entered_by, approved_by in rows
        ]


def parse_report_range(start_date, end_date) -> tuple[date, date]:
    """Validate an inclusive report range; both ends are required."""
    if not start_date or not end_date:
        raise ValidationError("Both startDate and endDate are required for the report.")
    try:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
    except (TypeError, ValueError):
        raise ValidationError("startDate and endDate must be valid dates (YYYY-MM-DD).")
    if start is None or end is None:
        raise ValidationError("Both startDate and endDate are required for the report.")
    if start > end:
        raise ValidationError("Start date cannot be after end date.")
    return start, end
