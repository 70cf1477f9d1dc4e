"""
Bank identity registry.

Each entry maps a bank name to the lowercase keywords that identify it in
statement text and the regex used to pull the account number out of the
header. The table is read-only; order matters because the first entry with
a matching keyword wins.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence, Tuple


# "Account No: 123456789012", "A/c No. XXXXXXXX4651", "AC Number - 5012"
ACCOUNT_NUMBER_PATTERN = re.compile(
    r'\b(?:account|a/c|a-c|ac)\.?\s*'      # Account / A/c / A-c / Ac
    r'(?:no\.?|number|num\.?|#)?\s*'       # No / Number / #
    r'[:\-]?\s*'                            # Separator
    r'((?:[xX*]+)?\d{4,})',                 # Optional mask + digits
    re.IGNORECASE
)


@dataclass(frozen=True)
class BankPattern:
    """Keywords and account rule for one bank."""
    name: str
    keywords: Tuple[str, ...]
    account_pattern: Pattern = ACCOUNT_NUMBER_PATTERN

    def matches(self, lowered_text: str) -> bool:
        return any(keyword in lowered_text for keyword in self.keywords)

    def find_account(self, text: str) -> Optional[str]:
        """Return the last four characters of the account match, if any."""
        match = self.account_pattern.search(text)
        if not match:
            return None
        return match.group(1)[-4:]


BANK_REGISTRY: Tuple[BankPattern, ...] = (
    BankPattern('HDFC Bank', ('hdfc', 'hdfc bank')),
    BankPattern('ICICI Bank', ('icici', 'icici bank')),
    BankPattern('State Bank of India', ('sbi', 'state bank', 'state bank of india')),
    BankPattern('Axis Bank', ('axis', 'axis bank')),
    BankPattern('Kotak Mahindra Bank', ('kotak', 'kotak mahindra')),
    BankPattern('Punjab National Bank', ('pnb', 'punjab national')),
    BankPattern('Bank of Baroda', ('bob', 'bank of baroda', 'baroda')),
    BankPattern('Canara Bank', ('canara', 'canara bank')),
    BankPattern('Union Bank', ('union', 'union bank')),
    BankPattern('IDFC First Bank', ('idfc', 'idfc first')),
)


def lookup_bank(lowered_text: str,
                registry: Sequence[BankPattern] = BANK_REGISTRY) -> Optional[BankPattern]:
    """
    Find the first registry entry whose keyword occurs in the text.

    Args:
        lowered_text: Lowercased statement text
        registry: Ordered bank patterns to search

    Returns:
        The matching BankPattern, or None
    """
    for entry in registry:
        if entry.matches(lowered_text):
            return entry
    return None
