"""
Validation utilities for parsed transactions.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from statement_normalizer.models import ParsedTransaction, TransactionType


UNUSUAL_DATE_WARNING = "Date seems unusual - please verify"
UNUSUAL_DATE_CONFIDENCE_CAP = 0.6

# Amount tokens outside this range are reference numbers, not money
MIN_AMOUNT = 0.01
MAX_AMOUNT = 100_000_000


@dataclass
class ValidationResult:
    """Result of validating a transaction."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)


def is_plausible_amount(amount: float) -> bool:
    """Check an amount candidate is inside the plausible money range."""
    if amount is None or math.isnan(amount):
        return False
    return MIN_AMOUNT < abs(amount) < MAX_AMOUNT


def is_plausible_date(iso_date: str, today: date,
                      years_back: int = 2, years_forward: int = 1) -> bool:
    """
    Check a date falls inside the window around the processing date.

    Args:
        iso_date: Date in YYYY-MM-DD format
        today: Processing date
        years_back: Years before today still accepted
        years_forward: Years after today still accepted

    Returns:
        True if the date is inside the window
    """
    try:
        parsed = date.fromisoformat(iso_date)
    except (TypeError, ValueError):
        return False

    earliest = today - relativedelta(years=years_back)
    latest = today + relativedelta(years=years_forward)
    return earliest <= parsed <= latest


def validate_transaction(tx: ParsedTransaction) -> ValidationResult:
    """
    Check the output invariants of a transaction.

    Checks:
    - Date is a real ISO calendar date
    - Amount is a positive number
    - Type is debit or credit
    - Confidence is in [0, 1]
    - Description is not empty
    """
    errors = []

    try:
        date.fromisoformat(tx.date)
    except (TypeError, ValueError):
        errors.append(f"Invalid date: {tx.date}")

    if tx.amount is None or math.isnan(tx.amount) or tx.amount <= 0:
        errors.append(f"Invalid amount: {tx.amount}")

    if not isinstance(tx.type, TransactionType):
        errors.append(f"Invalid type: {tx.type}")

    if not 0.0 <= tx.confidence <= 1.0:
        errors.append(f"Confidence out of range: {tx.confidence}")

    if not tx.description or not tx.description.strip():
        errors.append("Description is empty")

    return ValidationResult(is_valid=not errors, errors=errors)


def cap_confidence(confidence: float, cap: Optional[float]) -> float:
    """Lower confidence to the cap; never raises it."""
    if cap is None:
        return confidence
    return min(confidence, cap)
