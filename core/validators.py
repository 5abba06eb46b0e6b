# core/validators.py

"""
Field-level validation rules and step validators for wizard flows.

A FieldRule inspects one field of the accumulated form data and returns
an error message (or None when the field is fine). step_rule() combines
rules into the validator bound to a wizard step.
"""

import re
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional

from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError


PHONE_DIGITS = 10

_email_adapter = TypeAdapter(EmailStr)
_non_digit = re.compile(r"\D")


# ============================================================
# Normalizers
# ============================================================

def normalize_phone(value: Any) -> str:
    """Strip non-digits; longer numbers keep their last 10 digits (country code dropped)."""
    if value is None:
        return ""
    return _non_digit.sub("", str(value))[-PHONE_DIGITS:]


def parse_date(value: Any) -> Optional[date]:
    """date, datetime or ISO string → date. Anything else → None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def format_date(value: Any) -> Optional[str]:
    """Format as yyyy-MM-dd (the column format used by Supabase date fields)."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


# ============================================================
# Step validation result
# ============================================================

class StepValidation(BaseModel):
    valid: bool
    message: Optional[str] = None
    field_errors: Dict[str, str] = {}

    def __bool__(self) -> bool:
        return self.valid


VALID = StepValidation(valid=True)


# ============================================================
# Field rules
# ============================================================

class FieldRule:
    """One check on one field. check(value, form_data) -> bool."""

    def __init__(self, field: str, check: Callable[[Any, dict], bool], message: str):
        self.field = field
        self.check = check
        self.message = message

    def __call__(self, form_data: dict) -> Optional[str]:
        value = form_data.get(self.field)
        return None if self.check(value, form_data) else self.message

    def __repr__(self) -> str:
        return f"FieldRule({self.field!r})"


def required(field: str, label: Optional[str] = None) -> FieldRule:
    label = label or field.replace("_", " ").capitalize()
    return FieldRule(field, lambda v, _: not is_blank(v), f"{label} is required")


def phone(field: str, optional: bool = False) -> FieldRule:
    def check(value, _):
        if optional and is_blank(value):
            return True
        # Formatting characters are tolerated; the digit count is what matters
        return value is not None and len(_non_digit.sub("", str(value))) == PHONE_DIGITS

    return FieldRule(field, check, "Please enter a valid 10-digit phone number")


def email(field: str, optional: bool = False) -> FieldRule:
    def check(value, _):
        if is_blank(value):
            return optional
        try:
            _email_adapter.validate_python(str(value).strip())
            return True
        except ValidationError:
            return False

    return FieldRule(field, check, "Please enter a valid email")


def future_date(field: str, today: Callable[[], date] = date.today) -> FieldRule:
    """Date strictly after today (today itself is not selectable)."""

    def check(value, _):
        parsed = parse_date(value)
        return parsed is not None and parsed > today()

    return FieldRule(field, check, "Please select a future date")


def min_value(field: str, minimum: float, message: Optional[str] = None, inclusive: bool = True) -> FieldRule:
    def check(value, _):
        try:
            number = float(value)
        except (TypeError, ValueError):
            return False
        return number >= minimum if inclusive else number > minimum

    return FieldRule(field, check, message or f"Must be at least {minimum:g}")


def positive(field: str, message: Optional[str] = None) -> FieldRule:
    return min_value(field, 0, message or "Must be greater than 0", inclusive=False)


def min_length(field: str, length: int, message: Optional[str] = None) -> FieldRule:
    def check(value, _):
        return isinstance(value, str) and len(value.strip()) >= length

    return FieldRule(field, check, message or f"Must be at least {length} characters")


def non_empty(field: str, message: Optional[str] = None) -> FieldRule:
    def check(value, _):
        return isinstance(value, (list, tuple, set)) and len(value) > 0

    return FieldRule(field, check, message or "Select at least one option")


def min_count(
    field: str,
    count: int,
    message: Optional[str] = None,
    predicate: Optional[Callable[[Any], bool]] = None,
) -> FieldRule:
    """At least `count` items (optionally only those matching predicate)."""

    def check(value, _):
        if not isinstance(value, (list, tuple)):
            return False
        items = [v for v in value if predicate(v)] if predicate else list(value)
        return len(items) >= count

    return FieldRule(field, check, message or f"Add at least {count}")


def accepted(field: str, message: str) -> FieldRule:
    return FieldRule(field, lambda v, _: v is True, message)


def one_of(field: str, choices: Iterable[Any], message: Optional[str] = None) -> FieldRule:
    allowed = list(choices)
    return FieldRule(field, lambda v, _: v in allowed, message or f"Choose one of: {', '.join(map(str, allowed))}")


def custom(field: str, check: Callable[[Any, dict], bool], message: str) -> FieldRule:
    """Cross-field rule: check receives the field value and the whole form."""
    return FieldRule(field, check, message)


# ============================================================
# Step validators
# ============================================================

StepValidator = Callable[[dict], StepValidation]


def step_rule(*rules: FieldRule, message: Optional[str] = None) -> StepValidator:
    """
    Combine field rules into a step validator.
    Only the first failing rule per field is reported. The step-level
    message is `message` when given, else the first field error.
    """

    def validate(form_data: dict) -> StepValidation:
        errors: Dict[str, str] = {}
        for rule in rules:
            if rule.field in errors:
                continue
            error = rule(form_data)
            if error:
                errors[rule.field] = error

        if not errors:
            return VALID

        return StepValidation(
            valid=False,
            message=message or next(iter(errors.values())),
            field_errors=errors,
        )

    return validate


def always_valid(form_data: dict) -> StepValidation:
    return VALID
