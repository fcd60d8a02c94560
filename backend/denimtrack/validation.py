from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import ValidationError
from .time_utils import parse_iso_date


FIELD_STR = "str"
FIELD_INT = "int"
FIELD_DECIMAL = "decimal"
FIELD_DATE = "date"


@dataclass(frozen=True)
class FieldRule:
    """
    One client-supplied field of a ledger submission.

    - key: name in the JSON payload (what clients send)
    - column: model attribute the cleaned value is written to
    - label: human name used in error messages
    - choices: closed enumeration the value must belong to
    - minimum: lower bound; exclusive when positive=True
    - maximum: inclusive upper bound, the largest value the column stores
    """
    key: str
    column: str
    label: str
    kind: str = FIELD_STR
    choices: tuple[str, ...] | None = None
    minimum: int | Decimal | None = None
    maximum: int | Decimal | None = None
    positive: bool = False
    max_length: int | None = None


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _join_labels(labels: list[str]) -> str:
    if len(labels) == 1:
        return labels[0]
    if len(labels) == 2:
        return f"{labels[0]} and {labels[1]}"
    return f"{', '.join(labels[:-1])}, and {labels[-1]}"


def _coerce_int(rule: FieldRule, value: Any) -> int:
    # bool is a subclass of int but never a quantity
    if isinstance(value, bool):
        raise ValidationError(f"{rule.label} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValidationError(f"{rule.label} must be an integer, not a decimal")
    if isinstance(value, str):
        stripped = value.strip()
        if "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{rule.label} must be a plain integer")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{rule.label} must be an integer")
    raise ValidationError(f"{rule.label} must be an integer")


def _coerce_decimal(rule: FieldRule, value: Any) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f"{rule.label} must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{rule.label} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{rule.label} must be a number")
    return number


def _coerce_value(rule: FieldRule, value: Any):
    if rule.kind == FIELD_INT:
        return _coerce_int(rule, value)

    if rule.kind == FIELD_DECIMAL:
        return _coerce_decimal(rule, value)

    if rule.kind == FIELD_DATE:
        try:
            return parse_iso_date(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{rule.label} must be a valid date (YYYY-MM-DD)")

    # Strings / categorical codes
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ValidationError(f"{rule.label} must be text")
    text = str(value).strip()
    if rule.max_length and len(text) > rule.max_length:
        raise ValidationError(f"{rule.label} exceeds max length {rule.max_length}")
    return text


def _check_bounds(rule: FieldRule, value) -> None:
    if rule.positive and value <= 0:
        raise ValidationError(f"{rule.label} must be a positive number.")
    if rule.minimum is not None and value < rule.minimum:
        if rule.minimum == 0:
            raise ValidationError(f"{rule.label} must be a non-negative number.")
        raise ValidationError(f"{rule.label} must be at least {rule.minimum}.")
    if rule.maximum is not None and value > rule.maximum:
        raise ValidationError(f"{rule.label} must not exceed {rule.maximum}.")


def validate_submission(rules: tuple[FieldRule, ...], payload: Any) -> dict:
    """
    Validates + normalizes a submission payload against its field rules.

    All required fields are checked first so the client sees every missing
    field in one message. Returns a dict keyed by model column.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    missing = [rule.label for rule in rules if _is_missing(payload.get(rule.key))]
    if missing:
        verb = "is" if len(missing) == 1 else "are"
        raise ValidationError(f"{_join_labels(missing)} {verb} required.")

    cleaned: dict = {}
    for rule in rules:
        value = _coerce_value(rule, payload[rule.key])

        if rule.kind in (FIELD_INT, FIELD_DECIMAL):
            _check_bounds(rule, value)

        if rule.choices is not None and value not in rule.choices:
            raise ValidationError(
                f"Invalid {rule.label} specified. Must be one of: {', '.join(rule.choices)}."
            )

        cleaned[rule.column] = value

    return cleaned
