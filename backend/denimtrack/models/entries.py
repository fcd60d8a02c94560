from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import declared_attr

from ..extensions import db
from ..time_utils import to_iso_date, to_utc_z


# Entry lifecycle: PENDING -> APPROVED | REJECTED, both terminal
STATUS_PENDING = "PENDING"
STATUS_APPROVED = "APPROVED"
STATUS_REJECTED = "REJECTED"
ENTRY_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

SUPPLIERS = ("CIB", "G_FLOCK")
WASH_CATEGORIES = ("BEFORE_WASH", "AFTER_WASH", "FINISH")
DRY_PROCESS_NAMES = (
    "HAND_SHINE",
    "WHISKER",
    "TACKING",
    "GRINDING",
    "DESTROY",
    "PP_SPRAY",
    "PP_SPONGE",
    "LASER",
)


def _in_list(column: str, values) -> str:
    return f"{column} IN (" + ", ".join(f"'{value}'" for value in values) + ")"


def entry_table_args(tablename: str, *extra):
    """
    CHECK constraints shared by every ledger table, plus table-specific ones.

    The store enforces the same rules the submission validator does, and
    keeps approved_by/approval_timestamp in step with status.
    """
    return (
        db.CheckConstraint("quantity > 0", name=f"ck_{tablename}_quantity_positive"),
        db.CheckConstraint(_in_list("status", ENTRY_STATUSES), name=f"ck_{tablename}_status"),
        db.CheckConstraint(
            "(status = 'PENDING' AND approved_by_user_id IS NULL AND approval_timestamp IS NULL)"
            " OR (status <> 'PENDING' AND approved_by_user_id IS NOT NULL AND approval_timestamp IS NOT NULL)",
            name=f"ck_{tablename}_resolution",
        ),
        db.Index(f"ix_{tablename}_status_date", "status", "entry_date"),
        *extra,
        {"sqlite_autoincrement": True},
    )


def _serialize(value):
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return value


class ApprovableEntryMixin:
    """
    Columns and serialization shared by the five production ledgers.

    detail_columns lists the entry-specific columns in display order.
    """
    detail_columns: tuple[str, ...] = ()

    id = db.Column(db.Integer, primary_key=True)
    entry_date = db.Column(db.Date, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING)
    entry_timestamp = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    approval_timestamp = db.Column(db.DateTime(timezone=True), nullable=True)

    @declared_attr
    def entered_by_user_id(cls):
        return db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    @declared_attr
    def approved_by_user_id(cls):
        return db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    @declared_attr
    def entered_by(cls):
        return db.relationship("User", foreign_keys=f"[{cls.__name__}.entered_by_user_id]")

    @declared_attr
    def approved_by(cls):
        return db.relationship("User", foreign_keys=f"[{cls.__name__}.approved_by_user_id]")

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "entry_date": to_iso_date(self.entry_date),
        }
        for name in self.detail_columns:
            data[name] = _serialize(getattr(self, name))
        data.update({
            "status": self.status,
            "entered_by_user_id": self.entered_by_user_id,
            "entry_timestamp": to_utc_z(self.entry_timestamp),
            "approved_by_user_id": self.approved_by_user_id,
            "approval_timestamp": to_utc_z(self.approval_timestamp),
        })
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id} {self.status}>"


class BulkInput(ApprovableEntryMixin, db.Model):
    """Bulk fabric/garment receipt from a supplier."""
    __tablename__ = "bulk_inputs"
    __table_args__ = entry_table_args(
        "bulk_inputs",
        db.CheckConstraint(_in_list("supplier", SUPPLIERS), name="ck_bulk_inputs_supplier"),
    )
    detail_columns = ("style_number", "quantity", "supplier")

    style_number = db.Column(db.String(64), nullable=False)
    supplier = db.Column(db.String(16), nullable=False)


class DryProcessEntry(ApprovableEntryMixin, db.Model):
    """Units put through a dry process (hand shine, whiskers, ...)."""
    __tablename__ = "dry_process_entries"
    __table_args__ = entry_table_args(
        "dry_process_entries",
        db.CheckConstraint(_in_list("process_name", DRY_PROCESS_NAMES), name="ck_dry_process_entries_process"),
    )
    detail_columns = ("style_number", "process_name", "quantity")

    style_number = db.Column(db.String(64), nullable=False)
    process_name = db.Column(db.String(32), nullable=False)


class WashingEntry(ApprovableEntryMixin, db.Model):
    __tablename__ = "washing_entries"
    __table_args__ = entry_table_args(
        "washing_entries",
        db.CheckConstraint(_in_list("wash_category", WASH_CATEGORIES), name="ck_washing_entries_category"),
    )
    detail_columns = ("style_number", "wash_category", "quantity")

    style_number = db.Column(db.String(64), nullable=False)
    wash_category = db.Column(db.String(16), nullable=False)


class SubContractEntry(ApprovableEntryMixin, db.Model):
    """
    Work done by an outside sub-contractor.

    calculated_salary is what the client computed from unit_price_used;
    it is stored as submitted, not recomputed.
    """
    __tablename__ = "sub_contract_entries"
    __table_args__ = entry_table_args(
        "sub_contract_entries",
        db.CheckConstraint("unit_price_used >= 0", name="ck_sub_contract_entries_unit_price"),
        db.CheckConstraint("calculated_salary >= 0", name="ck_sub_contract_entries_salary"),
    )
    detail_columns = (
        "sub_contractor_name",
        "style_number",
        "process_name",
        "quantity",
        "unit_price_used",
        "calculated_salary",
    )

    sub_contractor_name = db.Column(db.String(120), nullable=False)
    style_number = db.Column(db.String(64), nullable=False)
    process_name = db.Column(db.String(64), nullable=False)
    unit_price_used = db.Column(db.Numeric(10, 2), nullable=False)
    calculated_salary = db.Column(db.Numeric(12, 2), nullable=False)


class GatePassEntry(ApprovableEntryMixin, db.Model):
    """Finished goods leaving the factory gate."""
    __tablename__ = "gate_pass_entries"
    __table_args__ = entry_table_args("gate_pass_entries")
    detail_columns = ("style_number", "destination", "quantity")

    style_number = db.Column(db.String(64), nullable=False)
    destination = db.Column(db.String(120), nullable=False)
