# core/fees.py
"""
Fee ledger arithmetic.

Bills and payments are additive only; the balance is a property of
FeeStatus so it cannot drift from the two totals.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation
from typing import Union

from core.errors import InvalidAmountError
from core.models import FeeStatus

Amount = Union[Decimal, int, float, str]

CURRENCY_LABEL = "Ksh."


def parse_amount(value: Amount) -> Decimal:
    """Turn user input into a positive Decimal or raise InvalidAmountError."""
    if isinstance(value, bool):
        raise InvalidAmountError("Amount must be a number")
    text = str(value).strip().replace(",", "") if value is not None else ""
    if not text:
        raise InvalidAmountError("Amount is required")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidAmountError(f"Amount must be a number, got {value!r}")
    if not amount.is_finite():
        raise InvalidAmountError("Amount must be a finite number")
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero")
    return amount


def apply_bill(status: FeeStatus, amount: Amount) -> FeeStatus:
    amount = parse_amount(amount)
    return FeeStatus(total_billed=status.total_billed + amount, total_paid=status.total_paid)


def apply_payment(status: FeeStatus, amount: Amount) -> FeeStatus:
    amount = parse_amount(amount)
    return FeeStatus(total_billed=status.total_billed, total_paid=status.total_paid + amount)


def format_currency(amount: Amount) -> str:
    """Ksh. 1,234.50 style; negative balances keep their sign."""
    value = Decimal(str(amount)).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{CURRENCY_LABEL} {sign}{abs(value):,.2f}"
