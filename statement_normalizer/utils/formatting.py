"""
Formatting utilities for number and date normalization.
"""

import math
import re
from datetime import date, datetime
from typing import Optional, Union

from dateutil import parser as date_parser
from openpyxl.utils.datetime import from_excel


DATE_FALLBACK_WARNING = "Date could not be read - defaulted to processing date"

# Pre-compiled regex patterns (compiled once at module load)
# Optional time of day after a numeric date: "2024-03-01 10:15:00", "2024-03-01T10:15"
_TIME = r'(?:[T\s]+\d{1,2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:\s*[ap]\.?m\.?)?)?'
_DATE_DDMMYYYY = re.compile(r'^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})' + _TIME + r'$', re.IGNORECASE)
_DATE_DDMMYY = re.compile(r'^(\d{1,2})[-/.](\d{1,2})[-/.](\d{2})$')
_DATE_YYYYMMDD = re.compile(r'^(\d{4})[-/.](\d{1,2})[-/.](\d{1,2})' + _TIME + r'$', re.IGNORECASE)
_DATE_SERIAL = re.compile(r'^\d+(?:\.\d+)?$')
_DATE_DDMONYYYY = re.compile(r'^(\d{1,2})[-\s]+([A-Za-z]{3,9})[-\s,]+(\d{4}|\d{2})$')
_MONTH_WORD = re.compile(r'\b(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)[a-z]*\b',
                         re.IGNORECASE)

_SUFFIX_CR_DR = re.compile(r'\s*(?:cr|dr)\.?$', re.IGNORECASE)
_CURRENCY_WORDS = re.compile(r'\brs\.?|\binr\b', re.IGNORECASE)

# Spreadsheet serials openpyxl can convert (1900-01-01 .. 9999-12-31)
_MAX_SERIAL = 2958465

# Month name to number mapping (compiled once)
_MONTH_NAMES = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}

# Anchor for fields dateutil cannot find; keeps the result independent of the clock
_DATEUTIL_DEFAULT = datetime(2000, 1, 1)

DateValue = Union[str, int, float, date, datetime, None]


def _iso(year: int, month: int, day: int) -> Optional[str]:
    """Build an ISO date, or None when the components are not a real date."""
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _from_serial(serial: float) -> Optional[str]:
    """Convert a spreadsheet serial number to an ISO date."""
    if serial < 1 or serial > _MAX_SERIAL:
        return None
    converted = from_excel(serial)
    if converted is None:
        return None
    if isinstance(converted, datetime):
        return converted.date().isoformat()
    if isinstance(converted, date):
        return converted.isoformat()
    return None


def parse_date(value: DateValue) -> Optional[str]:
    """
    Parse a date token and return an ISO YYYY-MM-DD string.

    Supports formats (tried in order):
    - DD-MM-YYYY (also / and . separators, optional time of day)
    - DD-MM-YY (year prefixed with 20)
    - YYYY-MM-DD (optional time of day)
    - Spreadsheet serial numbers (native or all-digit text)
    - DD-Mon-YYYY / DD Month YY
    - Other textual dates with a month name (dateutil, day first)

    Args:
        value: Date token, spreadsheet number or date object

    Returns:
        ISO date string, or None if parsing fails
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return _from_serial(float(value))

    date_str = str(value).strip()
    if not date_str:
        return None

    match = _DATE_DDMMYYYY.match(date_str)
    if match:
        day, month, year = match.groups()
        return _iso(int(year), int(month), int(day))

    match = _DATE_DDMMYY.match(date_str)
    if match:
        day, month, year = match.groups()
        return _iso(int(f"20{year}"), int(month), int(day))

    match = _DATE_YYYYMMDD.match(date_str)
    if match:
        year, month, day = match.groups()
        return _iso(int(year), int(month), int(day))

    if _DATE_SERIAL.match(date_str):
        return _from_serial(float(date_str))

    # Handle DD Mon YYYY format (e.g., "06-Oct-2025", "6 October 25")
    match = _DATE_DDMONYYYY.match(date_str)
    if match:
        day, month_str, year = match.groups()
        month_num = _MONTH_NAMES.get(month_str[:3].lower())
        if month_num:
            if len(year) == 2:
                year = f"20{year}"
            return _iso(int(year), month_num, int(day))

    # Fallback: only for text that names a month
    if not _MONTH_WORD.search(date_str):
        return None
    try:
        parsed = date_parser.parse(date_str, dayfirst=True, default=_DATEUTIL_DEFAULT)
    except (ValueError, OverflowError):
        return None
    return parsed.date().isoformat()


def normalize_date(value: DateValue, today: date) -> str:
    """
    Parse a date, falling back to today when nothing matches.

    Callers that get the fallback must attach DATE_FALLBACK_WARNING
    themselves; use parse_date to tell the two cases apart.
    """
    return parse_date(value) or today.isoformat()


def parse_amount(value) -> float:
    """
    Parse an amount token and return a signed float.

    Handles formats:
    - 1,234.56 (standard)
    - 1,00,000.50 (Indian lakh format)
    - ₹1,234.56 / INR 1,234.56 / $1,234.56
    - -500.00
    - 1,234.56 Cr / 1,234.56DR (suffix dropped)
    - native int/float cells

    Args:
        value: Amount token or spreadsheet number

    Returns:
        Float value, or NaN if nothing numeric remains
    """
    if value is None or isinstance(value, bool):
        return math.nan

    if isinstance(value, (int, float)):
        return float(value)

    amount_str = str(value).strip()
    amount_str = _SUFFIX_CR_DR.sub('', amount_str)
    amount_str = _CURRENCY_WORDS.sub('', amount_str)

    first_digit = re.search(r'\d', amount_str)
    if not first_digit:
        return math.nan

    # Only a minus before the first digit counts as a sign
    negative = '-' in amount_str[:first_digit.start()]
    digits = re.sub(r'[^0-9.]', '', amount_str)

    try:
        result = float(digits)
    except ValueError:
        return math.nan
    return -result if negative else result


def clean_description(description: str, max_length: int = 100) -> str:
    """
    Normalize transaction description text.

    - Remove decorative characters (*, #, @)
    - Collapse whitespace
    - Remove leading/trailing punctuation
    - Limit length

    Args:
        description: Raw description text
        max_length: Maximum length kept

    Returns:
        Cleaned description
    """
    if not description:
        return ""

    description = re.sub(r'[*#@]', '', description)
    description = ' '.join(description.split())
    description = description.strip(' .,-_:;|')

    if len(description) > max_length:
        description = description[:max_length].rstrip()

    return description
