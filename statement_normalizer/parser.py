"""
StatementNormalizer - the primary entry point for normalizing statements.

This class orchestrates the pipeline:
1. Picks the extractor for the declared input kind
2. Rebuilds text from positioned fragments for page input
3. Extracts and normalizes transactions
4. Detects the bank and account once over the raw text
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from statement_normalizer.config import ParseOptions
from statement_normalizer.detector import detect_bank
from statement_normalizer.exceptions import NoTransactionsError, UnsupportedInputError
from statement_normalizer.formats.base import BaseExtractor
from statement_normalizer.formats.line_oriented import LineOrientedExtractor
from statement_normalizer.formats.tabular import TabularExtractor
from statement_normalizer.models import InputKind, StatementResult, cell_text, is_empty, to_cell
from statement_normalizer.patterns.banks import BANK_REGISTRY, BankPattern
from statement_normalizer.utils.layout import reconstruct_text
from statement_normalizer.utils.pdf import extract_fragments
from statement_normalizer.utils.spreadsheet import read_delimited, read_text_file, read_workbook

logger = logging.getLogger(__name__)


def rows_to_text(rows: Sequence[Sequence[Any]]) -> str:
    """Flatten rows into text for bank detection, one line per row."""
    lines = []
    for row in rows:
        cells = [to_cell(value) for value in row]
        lines.append(' '.join(cell_text(c) for c in cells if not is_empty(c)))
    return '\n'.join(lines)


class StatementNormalizer:
    """
    Main class for normalizing bank statements.

    Usage:
        from statement_normalizer import StatementNormalizer

        normalizer = StatementNormalizer()
        result = normalizer.parse_csv(open("statement.csv").read())

        print(result.bank.bank_name, result.bank.account_number)
        for tx in result.transactions:
            print(tx.date, tx.description, tx.amount, tx.type.value, tx.confidence)
    """

    def __init__(self, options: Optional[ParseOptions] = None,
                 registry: Sequence[BankPattern] = BANK_REGISTRY):
        """
        Initialize the normalizer.

        Args:
            options: ParseOptions for customizing parsing behavior
            registry: Bank patterns used for identity detection
        """
        self.options = options or ParseOptions()
        self.registry = registry
        self.extractors = {
            InputKind.DELIMITED: TabularExtractor,
            InputKind.SPREADSHEET: TabularExtractor,
            InputKind.TEXT: LineOrientedExtractor,
            InputKind.PAGES: LineOrientedExtractor,
        }

    def parse(self, content: Any, kind: InputKind,
              options: Optional[ParseOptions] = None) -> StatementResult:
        """
        Normalize a document of a declared kind.

        Args:
            content: str for DELIMITED/TEXT, rows for SPREADSHEET,
                pages of fragments for PAGES
            kind: Declared input kind
            options: Override options for this parse

        Returns:
            StatementResult with transactions and bank detection

        Raises:
            MissingColumnError: tabular input without mandatory columns
            NoTransactionsError: nothing survived extraction
            UnsupportedInputError: unknown input kind
        """
        if kind == InputKind.DELIMITED:
            return self.parse_csv(content, options)
        if kind == InputKind.SPREADSHEET:
            return self.parse_rows(content, options)
        if kind == InputKind.TEXT:
            return self.parse_text(content, options)
        if kind == InputKind.PAGES:
            return self.parse_pages(content, options)
        raise UnsupportedInputError(f"Unsupported input kind: {kind}")

    def parse_csv(self, text: str, options: Optional[ParseOptions] = None) -> StatementResult:
        """Normalize comma-separated text with a header row."""
        return self._run(InputKind.DELIMITED, read_delimited(text), text, options)

    def parse_rows(self, rows: Sequence[Sequence[Any]],
                   options: Optional[ParseOptions] = None) -> StatementResult:
        """Normalize spreadsheet rows (header row first)."""
        rows = [list(row) for row in rows]
        return self._run(InputKind.SPREADSHEET, rows, rows_to_text(rows), options)

    def parse_text(self, text: str, options: Optional[ParseOptions] = None) -> StatementResult:
        """Normalize free-form statement text."""
        return self._run(InputKind.TEXT, text, text, options)

    def parse_pages(self, pages: Sequence[Sequence[Any]],
                    options: Optional[ParseOptions] = None) -> StatementResult:
        """Normalize positioned fragments, one sequence per page."""
        text = reconstruct_text(pages)
        return self._run(InputKind.PAGES, text, text, options)

    def parse_file(self, filepath: Union[str, Path],
                   options: Optional[ParseOptions] = None) -> StatementResult:
        """
        Read a statement file and normalize it.

        Supports .csv, .txt, .xlsx/.xlsm and .pdf.

        Args:
            filepath: Path to the statement file
            options: Override options for this parse

        Returns:
            StatementResult with parsed transactions
        """
        options = options or self.options
        filepath = Path(filepath)
        ext = filepath.suffix.lower()

        if ext == '.csv':
            return self.parse_csv(read_text_file(filepath), options)
        if ext == '.txt':
            return self.parse_text(read_text_file(filepath), options)
        if ext in ('.xlsx', '.xlsm'):
            return self.parse_rows(read_workbook(filepath), options)
        if ext == '.pdf':
            return self.parse_pages(extract_fragments(filepath, options.pdf_password), options)

        raise UnsupportedInputError(f"Unsupported file type: {ext or filepath.name}")

    def _select_extractor(self, kind: InputKind, options: ParseOptions) -> BaseExtractor:
        """Create the extractor for the input kind."""
        return self.extractors[kind](options)

    def _run(self, kind: InputKind, document: Any, raw_text: str,
             options: Optional[ParseOptions]) -> StatementResult:
        options = options or self.options
        today = options.resolve_today()

        extractor = self._select_extractor(kind, options)
        extraction = extractor.extract(document, today)

        if not extraction.transactions:
            raise NoTransactionsError(
                f"No valid transactions found ({extraction.dropped} candidate rows dropped)"
            )

        bank = detect_bank(raw_text, self.registry)

        logger.info(
            "Parsed %d transactions (%d dropped) with %s extractor, bank: %s",
            len(extraction.transactions), extraction.dropped, extractor.name, bank.bank_name,
        )

        metadata = dict(extraction.metadata)
        metadata['transaction_count'] = len(extraction.transactions)
        metadata['dropped'] = extraction.dropped

        return StatementResult(
            transactions=extraction.transactions,
            bank=bank,
            input_kind=kind,
            metadata=metadata,
        )
