"""
Save-time validation of the bill amount.
"""
import math

from .config import MAX_AMOUNT_LENGTH

MISSING_AMOUNT = "missing amount"
NOT_POSITIVE = "must be a positive number"


class InputError(Exception):
    """Raised when the form cannot be saved as entered."""

    def __init__(self, message: str, hint: str):
        super().__init__(message)
        self.message = message
        self.hint = hint


def validate_amount(text: str) -> float:
    """
    Classify the raw bill text.

    Args:
        text: Amount exactly as typed

    Returns:
        The bill value as a float

    Raises:
        InputError: If the amount is missing or not a positive number
    """
    text = "" if text is None else str(text).strip()
    if not text:
        raise InputError(MISSING_AMOUNT, "Please enter a bill amount.")

    if len(text) > MAX_AMOUNT_LENGTH or "_" in text:
        raise InputError(NOT_POSITIVE, "Enter a valid number greater than 0.")

    try:
        bill = float(text)
    except ValueError:
        raise InputError(NOT_POSITIVE, "Enter a valid number greater than 0.")

    if not math.isfinite(bill) or bill <= 0:
        raise InputError(NOT_POSITIVE, "Enter a valid number greater than 0.")

    return bill
