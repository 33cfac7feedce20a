"""
utils.py
Validation, currency formatting, exports, sample data.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

import pandas as pd

import customer_api
from errors import ValidationError
from models import AMOUNT_FIELDS, CUSTOMER_FIELDS, STATUS_OPTIONS, Customer, CustomerInput

CURRENCY_LABEL = "CAD"

STATUS_BADGES = {
    "Open": "🔵",
    "Inactive": "⚪",
    "Paid": "🟢",
    "Due": "🔴",
}


def _to_number(value) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            number = float(str(value).strip())
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def validate_customer_inputs(raw: Mapping) -> dict[str, str]:
    """
    Field-level checks for the customer form. Returns {field: message};
    an empty dict means the input is valid.
    """
    errors: dict[str, str] = {}
    if not str(raw.get("name") or "").strip():
        errors["name"] = "Name is required"
    if not str(raw.get("description") or "").strip():
        errors["description"] = "Description is required"
    if raw.get("status") not in STATUS_OPTIONS:
        errors["status"] = f"Status must be one of: {', '.join(STATUS_OPTIONS)}"
    for field in AMOUNT_FIELDS:
        if _to_number(raw.get(field)) is None:
            errors[field] = f"{field.capitalize()} must be a number"
    return errors


def clean_customer_inputs(raw: Mapping) -> CustomerInput:
    errors = validate_customer_inputs(raw)
    if errors:
        raise ValidationError(errors)
    return CustomerInput(
        name=str(raw["name"]).strip(),
        description=str(raw["description"]).strip(),
        status=raw["status"],
        rate=_to_number(raw["rate"]),
        balance=_to_number(raw["balance"]),
        deposit=_to_number(raw["deposit"]),
    )


def format_currency(value: float) -> str:
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


def format_amount(value: float, show_sign: bool = False) -> str:
    """
    Two-decimal currency text with the fixed currency label.
    With show_sign, positive amounts get a leading "+".
    """
    text = format_currency(value)
    if show_sign and value > 0:
        text = f"+{text}"
    return f"{text} {CURRENCY_LABEL}"


def status_badge(status: str) -> str:
    return f"{STATUS_BADGES.get(status, '⚫')} {status}"


def customers_to_csv_bytes(customers: Iterable[Customer]) -> bytes:
    df = pd.DataFrame([c.to_dict() for c in customers], columns=list(CUSTOMER_FIELDS))
    return df.to_csv(index=False).encode("utf-8")


SAMPLE_CUSTOMERS = [
    CustomerInput("Ahmed Hassan", "Monthly retainer, invoiced on the 1st", "Open", 120.0, 450.5, 200.0),
    CustomerInput("Mona Ali", "Paid in full for Q3", "Paid", 95.0, 0.0, 150.0),
    CustomerInput("Omar Samy", "Two invoices overdue", "Due", 80.0, -320.75, 0.0),
    CustomerInput("Nour Khaled", "Account paused by request", "Inactive", 0.0, 0.0, 50.0),
    CustomerInput("Youssef Adel", "Weekly deliveries", "Open", 60.0, 1250.0, 300.0),
]


async def insert_sample_data() -> list[Customer]:
    """
    Insert a few demo customers (adds new rows each run).
    """
    created = []
    for payload in SAMPLE_CUSTOMERS:
        created.append(await customer_api.create_customer(payload))
    return created
