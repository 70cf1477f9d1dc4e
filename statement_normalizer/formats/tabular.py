"""
Tabular statement extractor (CSV text and spreadsheet rows).

Column roles are read from the header row once:
- date, description: mandatory
- debit, credit, amount: at least one of them

Each data row becomes at most one transaction. A filled debit column wins
over credit, and credit over a signed amount column.
"""

import logging
import math
import re
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from statement_normalizer.exceptions import MissingColumnError
from statement_normalizer.formats.base import (
    BaseExtractor,
    DATE_FALLBACK_CONFIDENCE_CAP,
    ExtractionResult,
)
from statement_normalizer.models import (
    Cell,
    DateCell,
    NumberCell,
    ParsedTransaction,
    TextCell,
    TransactionType,
    cell_text,
    is_empty,
    to_cell,
)
from statement_normalizer.utils.formatting import clean_description, parse_amount
from statement_normalizer.utils.validation import cap_confidence

logger = logging.getLogger(__name__)

COLUMN_CONFIDENCE = 0.9
SIGN_CONFIDENCE = 0.7
SIGN_INFERRED_WARNING = "Transaction type inferred from amount sign"

ROLE_KEYWORDS = {
    'date': ('date', 'value dt', 'txn dt'),
    'description': ('description', 'narration', 'particulars', 'remarks', 'details'),
    'debit': ('debit', 'withdrawal'),
    'credit': ('credit', 'deposit'),
}

# The amount role needs the whole label, "Withdrawal Amount" is a debit column
AMOUNT_LABEL = re.compile(r'^(?:transaction\s+|txn\s+)?(?:amount|amt)\.?(?:\s*\(\s*\w+\s*\))?$')

AMOUNT_ROLES = ('debit', 'credit', 'amount')

# "1,200.00 Dr" or "1,200.00Dr"
_TRAILING_TYPE = re.compile(r'(?:(?<=\d)|\b)(cr|dr)\.?$', re.IGNORECASE)


def _normalize_label(label: str) -> str:
    return ' '.join(str(label).lower().replace('"', '').split())


def detect_column_roles(header: Sequence[str]) -> Dict[str, int]:
    """
    Map logical roles to column indices using header keywords.

    The first matching column wins for each role; roles without a matching
    column are left out.

    Args:
        header: Header labels in column order

    Returns:
        Dict mapping role name to zero-based column index
    """
    labels = [_normalize_label(label) for label in header]
    roles: Dict[str, int] = {}

    for role, keywords in ROLE_KEYWORDS.items():
        for i, label in enumerate(labels):
            if any(kw in label for kw in keywords):
                roles[role] = i
                break

    for i, label in enumerate(labels):
        if AMOUNT_LABEL.match(label):
            roles['amount'] = i
            break

    return roles


def missing_roles(roles: Dict[str, int]) -> List[str]:
    """List the roles a usable header still lacks."""
    missing = [role for role in ('date', 'description') if role not in roles]
    if not any(role in roles for role in AMOUNT_ROLES):
        missing.append('debit/credit/amount')
    return missing


def _magnitude(cell: Cell) -> float:
    """Numeric value of a cell, NaN when it holds no number."""
    if isinstance(cell, NumberCell):
        return cell.value
    if isinstance(cell, TextCell):
        return parse_amount(cell.text)
    return math.nan


def _date_value(cell: Cell) -> Any:
    if isinstance(cell, DateCell):
        return cell.value
    if isinstance(cell, NumberCell):
        return cell.value
    if isinstance(cell, TextCell):
        return cell.text
    return None


class TabularExtractor(BaseExtractor):
    """
    Extractor for row/column statements.

    Handles comma-separated exports and spreadsheet rows already decoded
    into cells.
    """

    name = "tabular"

    def find_header(self, rows: Sequence[Sequence[Cell]]) -> int:
        """
        Find the header row index.

        Statement exports often start with a few lines of account details;
        the header is the first row that names both a date and a description
        column. Falls back to the first row.
        """
        limit = min(len(rows), self.options.header_scan_lines)
        for i in range(limit):
            roles = detect_column_roles([cell_text(c) for c in rows[i]])
            if 'date' in roles and 'description' in roles:
                return i
        return 0

    def extract(self, document: Sequence[Sequence[Any]], today: date) -> ExtractionResult:
        """
        Extract transactions from rows whose first usable row is the header.

        Args:
            document: Rows of raw values or cells
            today: Processing date used for unreadable dates

        Returns:
            ExtractionResult with one transaction per surviving row

        Raises:
            MissingColumnError: if mandatory column roles are absent
        """
        rows = [[to_cell(value) for value in row] for row in document]
        rows = [row for row in rows if row and not all(is_empty(c) for c in row)]
        if not rows:
            raise MissingColumnError(['date', 'description', 'debit/credit/amount'])

        header_idx = self.find_header(rows)
        header = [cell_text(c) for c in rows[header_idx]]
        roles = detect_column_roles(header)

        missing = missing_roles(roles)
        if missing:
            raise MissingColumnError(missing)

        logger.debug("Header at row %d, column roles %s", header_idx, roles)

        transactions = []
        dropped = 0
        for row_number, row in enumerate(rows[header_idx + 1:], start=header_idx + 2):
            tx = self._parse_row(row, len(header), roles, today)
            if tx is None or not self._accept(tx, f"row {row_number}"):
                dropped += 1
                continue
            transactions.append(tx)

        return ExtractionResult(
            transactions=transactions,
            dropped=dropped,
            metadata={
                'extractor': self.name,
                'header_row': header_idx,
                'columns_detected': roles,
            },
        )

    def _parse_row(self, row: List[Cell], width: int, roles: Dict[str, int],
                   today: date) -> Optional[ParsedTransaction]:
        """Turn one data row into a transaction, or None to drop it."""
        if len(row) < width:
            logger.debug("Dropping short row: %d of %d cells", len(row), width)
            return None

        description = clean_description(
            cell_text(row[roles['description']]),
            self.options.max_description_length,
        )
        if len(description) < self.options.min_description_length:
            return None

        resolved = self._resolve_amount(row, roles)
        if resolved is None:
            return None
        amount, tx_type, confidence, warnings = resolved

        iso_date, fell_back = self._resolve_date(_date_value(row[roles['date']]), today, warnings)
        if fell_back:
            confidence = cap_confidence(confidence, DATE_FALLBACK_CONFIDENCE_CAP)

        return ParsedTransaction(
            date=iso_date,
            description=description,
            amount=amount,
            type=tx_type,
            confidence=confidence,
            warnings=warnings,
        )

    def _resolve_amount(self, row: List[Cell],
                        roles: Dict[str, int]) -> Optional[Tuple[float, TransactionType, float, List[str]]]:
        """
        Pick amount and type from the debit, credit or amount column.

        Debit and credit cells count only when they hold a non-zero number;
        many exports write 0.00 into the unused column.
        """
        for role, tx_type in (('debit', TransactionType.DEBIT), ('credit', TransactionType.CREDIT)):
            if role not in roles:
                continue
            cell = row[roles[role]]
            if is_empty(cell):
                continue
            value = abs(_magnitude(cell))
            if not math.isnan(value) and value > 0:
                return value, tx_type, COLUMN_CONFIDENCE, []

        if 'amount' not in roles:
            return None

        cell = row[roles['amount']]
        signed = _magnitude(cell)
        if math.isnan(signed) or signed == 0:
            return None

        # An explicit Cr/Dr suffix states the type outright
        if isinstance(cell, TextCell):
            suffix = _TRAILING_TYPE.search(cell.text)
            if suffix:
                tx_type = TransactionType.DEBIT if suffix.group(1).lower() == 'dr' else TransactionType.CREDIT
                return abs(signed), tx_type, COLUMN_CONFIDENCE, []

        tx_type = TransactionType.DEBIT if signed < 0 else TransactionType.CREDIT
        return abs(signed), tx_type, SIGN_CONFIDENCE, [SIGN_INFERRED_WARNING]
