# Overview: The five production-stage ledgers and the submission rules for each.

from __future__ import annotations

from decimal import Decimal

from ..models import BulkInput, DryProcessEntry, WashingEntry, SubContractEntry, GatePassEntry
from ..models.entries import SUPPLIERS, WASH_CATEGORIES, DRY_PROCESS_NAMES
from ..validation import FieldRule, FIELD_DATE, FIELD_DECIMAL, FIELD_INT
from .ledger_service import Ledger, LedgerDefinition


BULK_INPUTS = "bulk-inputs"
DRY_PROCESS = "dry-process"
WASHING = "washing"
SUB_CONTRACTS = "sub-contracts"
GATE_PASS = "gate-pass"

# Largest values the columns hold: Integer, Numeric(10, 2), Numeric(12, 2)
MAX_QUANTITY = 2147483647
MAX_UNIT_PRICE = Decimal("99999999.99")
MAX_SALARY = Decimal("9999999999.99")


_DATE = FieldRule(key="date", column="entry_date", label="Date", kind=FIELD_DATE)
_STYLE = FieldRule(key="styleNumber", column="style_number", label="Style Number", max_length=64)
_QUANTITY = FieldRule(key="quantity", column="quantity", label="Quantity", kind=FIELD_INT, positive=True, maximum=MAX_QUANTITY)


LEDGER_DEFINITIONS = (
    LedgerDefinition(
        key=BULK_INPUTS,
        label="bulk input",
        model=BulkInput,
        fields=(
            _DATE,
            _STYLE,
            _QUANTITY,
            FieldRule(key="supplier", column="supplier", label="Supplier", choices=SUPPLIERS),
        ),
    ),
    LedgerDefinition(
        key=DRY_PROCESS,
        label="dry process",
        model=DryProcessEntry,
        fields=(
            _DATE,
            _STYLE,
            FieldRule(key="processName", column="process_name", label="Process Name", choices=DRY_PROCESS_NAMES),
            _QUANTITY,
        ),
    ),
    LedgerDefinition(
        key=WASHING,
        label="washing",
        model=WashingEntry,
        fields=(
            _DATE,
            _STYLE,
            FieldRule(key="washCategory", column="wash_category", label="Wash Category", choices=WASH_CATEGORIES),
            _QUANTITY,
        ),
    ),
    LedgerDefinition(
        key=SUB_CONTRACTS,
        label="sub contract",
        model=SubContractEntry,
        fields=(
            _DATE,
            FieldRule(key="subContractorName", column="sub_contractor_name", label="Sub Contractor Name", max_length=120),
            _STYLE,
            FieldRule(key="processName", column="process_name", label="Process Name", max_length=64),
            _QUANTITY,
            FieldRule(key="unitPriceUsed", column="unit_price_used", label="Unit Price", kind=FIELD_DECIMAL,
                      minimum=Decimal("0"), maximum=MAX_UNIT_PRICE),
            FieldRule(key="calculatedSalary", column="calculated_salary", label="Calculated Salary", kind=FIELD_DECIMAL,
                      minimum=Decimal("0"), maximum=MAX_SALARY),
        ),
    ),
    LedgerDefinition(
        key=GATE_PASS,
        label="gate pass",
        model=GatePassEntry,
        fields=(
            _DATE,
            _STYLE,
            FieldRule(key="destination", column="destination", label="Destination", max_length=120),
            _QUANTITY,
        ),
    ),
)


def build_ledgers(store) -> dict[str, Ledger]:
    """Instantiate every ledger against the given store handle, keyed by URL segment."""
    return {definition.key: Ledger(definition, store) for definition in LEDGER_DEFINITIONS}
