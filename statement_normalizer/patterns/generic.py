"""
Generic regex patterns for statement text.
These patterns work across banks and are shared by the extractors.
"""

import re
from typing import List, Tuple

# Month names (abbreviated, with optional full spelling)
MONTHS = r'(?:jan|feb|mar|apr|may|jun|jul|aug|sep|sept|oct|nov|dec)[a-z]*'

# Date tokens found inside a line, most specific first
DATE_TOKEN_PATTERN = re.compile(
    r'(?<![\d/.\-])(?:'
    r'\d{4}[-/.]\d{1,2}[-/.]\d{1,2}'                      # 2024-03-01
    r'|\d{1,2}[-/.]\d{1,2}[-/.](?:\d{4}|\d{2})'           # 01-03-2024, 01/03/24
    r'|\d{1,2}[-\s]' + MONTHS + r'[-\s,]+(?:\d{4}|\d{2})'  # 01-Mar-2024, 1 March 2024
    r')(?![\d/.\-]\d)(?!\d)',
    re.IGNORECASE
)

# Indian (1,00,000.00) and western (100,000.00) grouping, or plain numbers
_GROUPED_NUMBER = re.compile(r'^(?:\d{1,3}(?:,\d{2,3})+|\d+)(?:\.\d+)?$')
_NUMBER_RUN = re.compile(r'\d[\d,]*(?:\.\d+)?')

# Characters that glue a number to a reference code
_GLUE_CHARS = set('/:_\\@#')

# Currency written straight before an amount: "INR500.00", "Rs.750", "₹1,200"
_CURRENCY_PREFIX = re.compile(r'(?:\brs\.?|\binr|₹)$', re.IGNORECASE)
CURRENCY_WORDS = re.compile(r'\brs\b\.?|\binr\b|₹', re.IGNORECASE)

# Cr/Dr written straight after an amount: "1,500.00Cr"
_ATTACHED_SUFFIX = re.compile(r'(\d)(cr|dr)\b', re.IGNORECASE)

# Lines that are summaries, banners or page furniture
NOISE_PATTERNS = [
    re.compile(r'\bopening\s+balance\b', re.IGNORECASE),
    re.compile(r'\bclosing\s+balance\b', re.IGNORECASE),
    re.compile(r'\b(?:balance\s+)?(?:brought|carried)\s+forward\b', re.IGNORECASE),
    re.compile(r'\bbalance\s+[bc]/f\b', re.IGNORECASE),
    re.compile(r'^\s*(?:grand\s+)?totals?\b', re.IGNORECASE),
    re.compile(r'\btotal\s+(?:debits?|credits?|withdrawals?|deposits?|amount|transactions?)\b',
               re.IGNORECASE),
    re.compile(r'\bstatement\s+(?:period|from|for\s+the\s+period|of\s+accounts?|date)\b',
               re.IGNORECASE),
    re.compile(r'\bpage\s+\d+(?:\s*(?:of|/)\s*\d+)?\b', re.IGNORECASE),
    re.compile(r'^\s*[-=(\s]*continued\b', re.IGNORECASE),
    re.compile(r'\bcontinued\s+(?:on|from)\s+(?:next|previous)\s+page\b', re.IGNORECASE),
    re.compile(r'^\s*[-_=*]+\s*$'),
]

# Column header keywords
HEADER_DATE_KEYWORDS = re.compile(r'\b(?:date|txn\s+dt|value\s+dt)\b', re.IGNORECASE)
HEADER_FIELD_KEYWORDS = re.compile(
    r'\b(?:amount|amt|debits?|credits?|withdrawals?|deposits?|balance|'
    r'description|narration|particulars|details|remarks)\b',
    re.IGNORECASE
)

# Type markers; matched on word starts so "credited" counts as "credit"
CREDIT_MARKER = re.compile(
    r'\b(?:credit|deposit|received|salary|refund|interest\s+credited|transfer\s+from)'
    r'|\bcr\b',
    re.IGNORECASE
)
DEBIT_MARKER = re.compile(
    r'\b(?:debit|withdrawal|purchase|transfer\s+to|paid\s+to|payment\s+to|bill\s+payment)'
    r'|\bdr\b',
    re.IGNORECASE
)


def find_date_tokens(line: str) -> List[re.Match]:
    """Return every date token in the line, left to right."""
    return list(DATE_TOKEN_PATTERN.finditer(line))


def has_date_token(line: str) -> bool:
    return DATE_TOKEN_PATTERN.search(line) is not None


def remove_date_tokens(line: str) -> str:
    return DATE_TOKEN_PATTERN.sub(' ', line)


def split_amount_suffixes(text: str) -> str:
    """Turn "500.00Cr" into "500.00 Cr" so both the amount and marker are seen."""
    return _ATTACHED_SUFFIX.sub(r'\1 \2', text)


def _is_glued(text: str, start: int, end: int) -> bool:
    """Check whether a number run is part of a reference code or identifier."""
    if start > 0 and not _CURRENCY_PREFIX.search(text[:start]):
        prev = text[start - 1]
        if prev.isalnum() or prev in _GLUE_CHARS:
            return True
        # "12.50" after a digit and a dot/comma: tail of a longer number
        if prev in '.,' and start > 1 and text[start - 2].isdigit():
            return True
        # "IMPS-123456" but not " -500"
        if prev == '-' and start > 1 and text[start - 2].isalnum():
            return True
    if end < len(text):
        nxt = text[end]
        if nxt.isalnum() or nxt in _GLUE_CHARS:
            return True
        if nxt == '-' and end + 1 < len(text) and text[end + 1].isalnum():
            return True
    return False


def find_amount_tokens(text: str) -> List[Tuple[int, int, str]]:
    """
    Find numeric tokens that look like money amounts.

    Rejects numbers glued to letters or reference separators, numbers with
    leading zeros (reference numbers) and malformed digit grouping.

    Args:
        text: Line text with date tokens already removed

    Returns:
        List of (start, end, token) tuples in order of appearance
    """
    tokens = []
    for match in _NUMBER_RUN.finditer(text):
        start, end = match.span()
        token = match.group(0)
        # A trailing comma is punctuation, not grouping
        while token.endswith(','):
            token = token[:-1]
            end -= 1
        if not token or not _GROUPED_NUMBER.match(token):
            continue
        if len(token) > 1 and token[0] == '0' and token[1] != '.':
            continue
        if _is_glued(text, start, end):
            continue
        tokens.append((start, end, token))
    return tokens


def strip_amount_tokens(text: str) -> str:
    """Remove amount tokens from text, keeping everything else in place."""
    pieces = []
    last = 0
    for start, end, _token in find_amount_tokens(text):
        pieces.append(text[last:start])
        last = end
    pieces.append(text[last:])
    return ' '.join(pieces)


def strip_currency_words(text: str) -> str:
    """Remove currency words and symbols left behind by stripped amounts."""
    return CURRENCY_WORDS.sub(' ', text)


def is_noise_line(line: str) -> bool:
    """Check if a line is a summary, banner or page marker."""
    if not line or not line.strip():
        return True
    return any(pattern.search(line) for pattern in NOISE_PATTERNS)


def is_header_line(line: str) -> bool:
    """Check if a line looks like a column header row (and carries no date value)."""
    if has_date_token(line):
        return False
    return bool(HEADER_DATE_KEYWORDS.search(line) and HEADER_FIELD_KEYWORDS.search(line))


def detect_markers(text: str) -> Tuple[bool, bool]:
    """Return (credit_marker, debit_marker) for the text."""
    return bool(CREDIT_MARKER.search(text)), bool(DEBIT_MARKER.search(text))
