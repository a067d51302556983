"""
Tip and split arithmetic.

Everything here is a pure function of its inputs and is re-evaluated on
every change to the form. Invalid input never raises; it degrades to zero.
"""
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .config import DEFAULT_TIP_PERCENT, DEFAULT_PARTY_SIZE, MAX_AMOUNT_LENGTH

Number = Union[int, float]


class Category(str, Enum):
    """What the bill was for."""
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    BAR = "bar"
    DELIVERY = "delivery"
    TAXI = "taxi"
    SALON = "salon"
    OTHER = "other"


@dataclass(frozen=True)
class BillInput:
    """Snapshot of the form fields."""
    amount: str = ""
    tip_percent: int = DEFAULT_TIP_PERCENT
    party_size: int = DEFAULT_PARTY_SIZE
    category: Optional[Category] = None


@dataclass(frozen=True)
class Calculation:
    """Derived values for a BillInput."""
    bill: float
    tip_percent: int
    party_size: int
    tip_amount: float
    total_amount: float
    tip_per_person: float
    total_per_person: float


def parse_amount(text: Optional[str]) -> float:
    """
    Leniently parse a bill amount for live display.

    Returns 0.0 for anything that is not a finite, strictly positive number.
    """
    if text is None:
        return 0.0
    text = str(text).strip()
    # float() also takes digit separators, which a typed amount never has
    if len(text) > MAX_AMOUNT_LENGTH or "_" in text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        return 0.0
    if not math.isfinite(value) or value <= 0:
        return 0.0
    return value


def tip_amount(bill: Number, percent: Number) -> float:
    if not (math.isfinite(bill) and math.isfinite(percent)) or bill <= 0:
        return 0.0
    return bill * percent / 100


def total_amount(bill: Number, percent: Number) -> float:
    if not math.isfinite(bill) or bill <= 0:
        return 0.0
    return bill + tip_amount(bill, percent)


def per_person(amount: Number, party_size: int) -> float:
    if not math.isfinite(amount) or party_size <= 0:
        return 0.0
    return amount / party_size


def calculate(bill_input: BillInput) -> Calculation:
    """
    Recompute every derived value from the current form state.

    Args:
        bill_input: Current form fields

    Returns:
        Calculation with tip, total and per-person values
    """
    bill = parse_amount(bill_input.amount)
    tip = tip_amount(bill, bill_input.tip_percent)
    total = total_amount(bill, bill_input.tip_percent)
    return Calculation(
        bill=bill,
        tip_percent=bill_input.tip_percent,
        party_size=bill_input.party_size,
        tip_amount=tip,
        total_amount=total,
        tip_per_person=per_person(tip, bill_input.party_size),
        total_per_person=per_person(total, bill_input.party_size),
    )


def format_currency(amount: Number) -> str:
    """Render a monetary value as dollars with two decimals."""
    if not math.isfinite(amount):
        amount = 0.0
    return f"${amount:.2f}"


def format_percent(percent: Number) -> str:
    """Render a percentage as a whole number."""
    if not math.isfinite(percent):
        percent = 0
    return f"{int(percent)}%"
