"""
Statement Normalizer Library

Turns bank statement content (CSV text, spreadsheet rows, free-form text or
positioned PDF text) into normalized transactions with confidence scores and
review warnings, and detects the issuing bank and account.

Usage:
    from statement_normalizer import StatementNormalizer

    normalizer = StatementNormalizer()
    result = normalizer.parse_file("statement.pdf")
    for tx in result.transactions:
        print(tx.to_dict())
"""

from .config import ParseOptions
from .detector import detect_bank
from .exceptions import (
    MissingColumnError,
    NoTransactionsError,
    StatementParseError,
    UnsupportedInputError,
)
from .models import (
    BankDetectionResult,
    InputKind,
    ParsedTransaction,
    StatementResult,
    TextFragment,
    TransactionType,
)
from .parser import StatementNormalizer

__version__ = "0.1.0"
__all__ = [
    "StatementNormalizer",
    "ParseOptions",
    "InputKind",
    "ParsedTransaction",
    "BankDetectionResult",
    "StatementResult",
    "TextFragment",
    "TransactionType",
    "detect_bank",
    "StatementParseError",
    "MissingColumnError",
    "NoTransactionsError",
    "UnsupportedInputError",
]
