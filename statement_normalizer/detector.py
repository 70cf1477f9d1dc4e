"""
Bank identity detection.

Scans the raw statement text once:
1. Lowercase and collapse whitespace
2. Find the first registry bank whose keyword appears in the text
3. Pull the account number from the original-case text with that bank's rule

Detection never fails; unknown statements get the sentinel result.
"""

import logging
from typing import Sequence

from statement_normalizer.models import (
    BankDetectionResult,
    UNKNOWN_ACCOUNT,
    UNKNOWN_BANK,
)
from statement_normalizer.patterns.banks import BANK_REGISTRY, BankPattern, lookup_bank

logger = logging.getLogger(__name__)

KNOWN_BANK_CONFIDENCE = 0.9
UNKNOWN_BANK_CONFIDENCE = 0.1


def detect_bank(text: str, registry: Sequence[BankPattern] = BANK_REGISTRY) -> BankDetectionResult:
    """
    Detect the issuing bank and account number from statement text.

    Args:
        text: Raw statement text (header lines are enough)
        registry: Ordered bank patterns; tests may pass a smaller table

    Returns:
        BankDetectionResult with the bank name, last four account
        characters and confidence
    """
    if not text:
        return BankDetectionResult(UNKNOWN_BANK, UNKNOWN_ACCOUNT, UNKNOWN_BANK_CONFIDENCE)

    normalized = ' '.join(text.lower().split())
    entry = lookup_bank(normalized, registry)

    if entry is None:
        return BankDetectionResult(UNKNOWN_BANK, UNKNOWN_ACCOUNT, UNKNOWN_BANK_CONFIDENCE)

    account = entry.find_account(text) or UNKNOWN_ACCOUNT
    logger.debug("Detected %s (account ending %s)", entry.name, account)

    return BankDetectionResult(
        bank_name=entry.name,
        account_number=account,
        confidence=KNOWN_BANK_CONFIDENCE,
    )
