"""
Data model shared by the extractors and the pipeline.

Cells coming from delimited text or spreadsheets are wrapped in a small
tagged union (TextCell, NumberCell, DateCell, EmptyCell) so the tabular
extractor can dispatch on the variant instead of guessing at raw values.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Union


UNKNOWN_BANK = "Unknown Bank"
UNKNOWN_ACCOUNT = "XXXX"


class TransactionType(str, Enum):
    """Direction of money movement."""
    DEBIT = "debit"
    CREDIT = "credit"


class InputKind(Enum):
    """Input kinds a caller may declare."""
    DELIMITED = "delimited"      # Comma-separated text with a header row
    SPREADSHEET = "spreadsheet"  # Rows of cells decoded by a workbook reader
    TEXT = "text"                # Free-form statement text
    PAGES = "pages"              # Positioned text fragments per page


# Cell variants

@dataclass(frozen=True)
class TextCell:
    text: str


@dataclass(frozen=True)
class NumberCell:
    value: float


@dataclass(frozen=True)
class DateCell:
    value: date


@dataclass(frozen=True)
class EmptyCell:
    pass


Cell = Union[TextCell, NumberCell, DateCell, EmptyCell]


def to_cell(value: Any) -> Cell:
    """
    Wrap a native reader value in the matching Cell variant.

    Args:
        value: Value as produced by the csv module or openpyxl

    Returns:
        One of TextCell, NumberCell, DateCell or EmptyCell
    """
    if isinstance(value, (TextCell, NumberCell, DateCell, EmptyCell)):
        return value
    if value is None:
        return EmptyCell()
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return DateCell(value.date())
    if isinstance(value, date):
        return DateCell(value)
    if isinstance(value, bool):
        return TextCell(str(value))
    if isinstance(value, (int, float)):
        return NumberCell(float(value))

    text = str(value).strip()
    if not text:
        return EmptyCell()
    return TextCell(text)


def cell_text(cell: Cell) -> str:
    """Render a cell as plain text (used for descriptions and raw text)."""
    if isinstance(cell, TextCell):
        return cell.text
    if isinstance(cell, NumberCell):
        value = cell.value
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(cell, DateCell):
        return cell.value.isoformat()
    return ""


def is_empty(cell: Cell) -> bool:
    """True for EmptyCell and blank text."""
    if isinstance(cell, EmptyCell):
        return True
    if isinstance(cell, TextCell):
        return not cell.text.strip()
    return False


@dataclass(frozen=True)
class TextFragment:
    """A piece of text positioned on a page (y grows upwards)."""
    text: str
    x: float
    y: float


@dataclass
class TransactionCandidate:
    """Raw extraction from one logical line, before resolution."""
    raw_date: str
    description_parts: List[str]
    numeric_tokens: List[str]
    credit_marker: bool = False
    debit_marker: bool = False
    line_number: int = 0


@dataclass
class ParsedTransaction:
    """A normalized transaction."""
    date: str
    description: str
    amount: float
    type: TransactionType
    confidence: float
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'date': self.date,
            'description': self.description,
            'amount': self.amount,
            'type': self.type.value,
            'confidence': self.confidence,
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class BankDetectionResult:
    """Best guess at the issuing bank and account."""
    bank_name: str = UNKNOWN_BANK
    account_number: str = UNKNOWN_ACCOUNT
    confidence: float = 0.1

    @property
    def is_known(self) -> bool:
        return self.bank_name != UNKNOWN_BANK

    def to_dict(self) -> Dict[str, Any]:
        return {
            'bankName': self.bank_name,
            'accountNumber': self.account_number,
            'confidence': self.confidence,
        }


@dataclass
class Resolution:
    """Outcome of resolving amount and type for one candidate."""
    amount: float
    type: TransactionType
    confidence: float
    warnings: List[str] = field(default_factory=list)


@dataclass
class StatementResult:
    """Result of normalizing one document."""
    transactions: List[ParsedTransaction]
    bank: BankDetectionResult
    input_kind: InputKind
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'transactions': [tx.to_dict() for tx in self.transactions],
            'bank': self.bank.to_dict(),
            'input_kind': self.input_kind.value,
            'metadata': self.metadata,
            'transaction_count': len(self.transactions),
        }

    def to_list(self) -> List[Dict[str, Any]]:
        """Return just the transactions as dictionaries."""
        return [tx.to_dict() for tx in self.transactions]

    def low_confidence(self, threshold: float = 0.7) -> List[ParsedTransaction]:
        """Transactions a reviewer should look at first."""
        return [tx for tx in self.transactions if tx.confidence < threshold]

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of parsed transactions."""
        total_credit = 0.0
        total_debit = 0.0

        for tx in self.transactions:
            if tx.type == TransactionType.CREDIT:
                total_credit += tx.amount
            else:
                total_debit += tx.amount

        return {
            'total_transactions': len(self.transactions),
            'total_credits': round(total_credit, 2),
            'total_debits': round(total_debit, 2),
            'net_amount': round(total_credit - total_debit, 2),
            'bank': self.bank.bank_name,
            'warnings': sum(len(tx.warnings) for tx in self.transactions),
        }
