"""
Row readers for delimited text and workbooks.

Both readers return rows of Cell values; finding the header row is left
to the tabular extractor.
"""

import csv
import io
import logging
from pathlib import Path
from typing import List, Optional, Union

import openpyxl

from statement_normalizer.exceptions import UnsupportedInputError
from statement_normalizer.models import Cell, to_cell

logger = logging.getLogger(__name__)

Rows = List[List[Cell]]


def read_delimited(text: str, delimiter: str = ',') -> Rows:
    """Read delimited text into rows of cells, honouring quoted fields."""
    reader = csv.reader(io.StringIO(text), delimiter=delimiter, skipinitialspace=True)
    return [[to_cell(value) for value in row] for row in reader]


def read_text_file(filepath: Union[str, Path]) -> str:
    """Read text from a text or CSV file."""
    # Try UTF-8 first, then latin-1
    encodings = ['utf-8-sig', 'latin-1', 'cp1252']

    for encoding in encodings:
        try:
            with open(filepath, 'r', encoding=encoding, newline='') as f:
                return f.read()
        except UnicodeDecodeError:
            continue

    raise UnsupportedInputError(f"Could not decode file {filepath} with any known encoding")


def read_workbook(filepath: Union[str, Path], sheet_name: Optional[str] = None) -> Rows:
    """
    Read a worksheet into rows of cells.

    Args:
        filepath: Path to an .xlsx/.xlsm workbook
        sheet_name: Worksheet to read (default: the active sheet)

    Returns:
        Rows of cells in sheet order
    """
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    try:
        ws = wb[sheet_name] if sheet_name else wb.active
        rows = [[to_cell(value) for value in row] for row in ws.iter_rows(values_only=True)]
    finally:
        wb.close()

    logger.debug("Read %d rows from %s", len(rows), Path(filepath).name)
    return rows
