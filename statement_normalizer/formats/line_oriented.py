"""
Line-oriented statement extractor.

Handles free-form statement text, including text rebuilt from PDF pages:
1. Find the column header within the first lines; data starts after it
2. Skip summary lines, banners and page furniture
3. Anchor each transaction on a line with a date token
4. Merge following undated lines when the description is too short
5. Collect amount candidates and credit/debit markers
6. Resolve amount, type and confidence with fixed tie-break rules
7. Lower confidence for dates far from the processing date

Resolution rules (first candidate always wins):
- 1 amount:  one marker -> 0.95, otherwise debit at 0.6
- 2 amounts: one marker -> 0.85, otherwise debit at 0.65
- 3+:        one marker -> 0.75, otherwise debit at 0.5
"""

import logging
import math
import re
from datetime import date
from typing import Optional, Sequence, Tuple

from statement_normalizer.formats.base import (
    BaseExtractor,
    DATE_FALLBACK_CONFIDENCE_CAP,
    ExtractionResult,
)
from statement_normalizer.models import (
    ParsedTransaction,
    Resolution,
    TransactionCandidate,
    TransactionType,
)
from statement_normalizer.patterns.generic import (
    detect_markers,
    find_amount_tokens,
    find_date_tokens,
    has_date_token,
    is_header_line,
    is_noise_line,
    remove_date_tokens,
    split_amount_suffixes,
    strip_amount_tokens,
    strip_currency_words,
)
from statement_normalizer.utils.formatting import clean_description, parse_amount
from statement_normalizer.utils.validation import (
    UNUSUAL_DATE_CONFIDENCE_CAP,
    UNUSUAL_DATE_WARNING,
    cap_confidence,
    is_plausible_amount,
    is_plausible_date,
)

logger = logging.getLogger(__name__)

TYPE_UNCLEAR_WARNING = "Transaction type unclear - please verify"
MULTIPLE_AMOUNTS_WARNING = "Multiple amounts found - first amount used, please verify"
MANY_AMOUNTS_WARNING = "Multiple amounts detected - please verify amount"
MANY_AMOUNTS_UNMARKED_WARNING = "Multiple amounts detected - verification advised"

# Cr/Dr left at the end of a description once the amounts are gone
_TRAILING_MARKERS = re.compile(r'(?:\s+\b(?:cr|dr)\b\.?)+\s*$', re.IGNORECASE)


def resolve(candidates: Sequence[float], credit_marker: bool,
            debit_marker: bool) -> Optional[Resolution]:
    """
    Choose amount, type and confidence for one transaction.

    Args:
        candidates: Plausible amount magnitudes in order of appearance
        credit_marker: A credit keyword or CR token was seen
        debit_marker: A debit keyword or DR token was seen

    Returns:
        Resolution, or None when no positive amount can be chosen
    """
    if not candidates:
        return None

    amount = candidates[0]
    if amount is None or math.isnan(amount) or amount <= 0:
        return None

    single_marker = credit_marker != debit_marker
    marked_type = TransactionType.CREDIT if credit_marker else TransactionType.DEBIT

    if len(candidates) == 1:
        if single_marker:
            return Resolution(amount, marked_type, 0.95)
        return Resolution(amount, TransactionType.DEBIT, 0.6, [TYPE_UNCLEAR_WARNING])

    if len(candidates) == 2:
        if single_marker:
            return Resolution(amount, marked_type, 0.85)
        return Resolution(amount, TransactionType.DEBIT, 0.65,
                          [TYPE_UNCLEAR_WARNING, MULTIPLE_AMOUNTS_WARNING])

    if single_marker:
        return Resolution(amount, marked_type, 0.75, [MANY_AMOUNTS_WARNING])
    return Resolution(amount, TransactionType.DEBIT, 0.5,
                      [TYPE_UNCLEAR_WARNING, MANY_AMOUNTS_UNMARKED_WARNING])


class LineOrientedExtractor(BaseExtractor):
    """
    Extractor for line-per-transaction statement text.

    Works on any bank's layout as long as each transaction starts on a
    line carrying its date.
    """

    name = "line_oriented"

    def find_data_start(self, lines: Sequence[str]) -> int:
        """Index of the first data line (0 when no header row is found)."""
        for i, line in enumerate(lines[:self.options.header_scan_lines]):
            if is_header_line(line):
                return i + 1
        return 0

    def _is_skippable(self, line: str) -> bool:
        return is_noise_line(line) or is_header_line(line)

    def _describe(self, parts: Sequence[str]) -> str:
        text = strip_currency_words(strip_amount_tokens(' '.join(parts)))
        text = clean_description(text, max_length=len(text))
        text = _TRAILING_MARKERS.sub('', text)
        return clean_description(text, self.options.max_description_length)

    def extract(self, document: str, today: date) -> ExtractionResult:
        """
        Extract transactions from statement text.

        Args:
            document: Statement text, one row per line
            today: Processing date for fallbacks and the plausibility window

        Returns:
            ExtractionResult in document order
        """
        lines = [line.strip() for line in document.splitlines()]
        lines = [line for line in lines if line]

        start = self.find_data_start(lines)
        if start:
            logger.debug("Header row found at line %d", start)

        transactions = []
        dropped = 0
        i = start
        while i < len(lines):
            line = lines[i]
            if self._is_skippable(line) or not has_date_token(line):
                i += 1
                continue

            candidate, consumed = self.build_candidate(lines, i)
            i += 1 + consumed

            tx = self.normalize_candidate(candidate, today)
            if tx is None or not self._accept(tx, f"line {candidate.line_number}"):
                dropped += 1
                continue
            transactions.append(tx)

        return ExtractionResult(
            transactions=transactions,
            dropped=dropped,
            metadata={
                'extractor': self.name,
                'header_line': start - 1 if start else None,
                'lines': len(lines),
            },
        )

    def build_candidate(self, lines: Sequence[str], index: int) -> Tuple[TransactionCandidate, int]:
        """
        Build a candidate from a dated line and any continuation lines.

        Returns:
            Tuple of (candidate, number of continuation lines consumed)
        """
        line = split_amount_suffixes(lines[index])
        raw_date = find_date_tokens(line)[0].group(0)
        parts = [remove_date_tokens(line)]

        consumed = 0
        if len(self._describe(parts)) < self.options.min_description_length:
            end = min(len(lines), index + 1 + self.options.continuation_lookahead)
            for j in range(index + 1, end):
                nxt = lines[j]
                if has_date_token(nxt) or self._is_skippable(nxt):
                    break
                parts.append(split_amount_suffixes(nxt))
                consumed += 1
                if len(self._describe(parts)) >= self.options.min_description_length:
                    break

        combined = ' '.join(parts)
        credit_marker, debit_marker = detect_markers(combined)

        return TransactionCandidate(
            raw_date=raw_date,
            description_parts=parts,
            numeric_tokens=[token for _, _, token in find_amount_tokens(combined)],
            credit_marker=credit_marker,
            debit_marker=debit_marker,
            line_number=index + 1,
        ), consumed

    def normalize_candidate(self, candidate: TransactionCandidate,
                            today: date) -> Optional[ParsedTransaction]:
        """Resolve a candidate into a transaction, or None to drop it."""
        description = self._describe(candidate.description_parts)
        if len(description) < self.options.min_description_length:
            return None

        amounts = [abs(parse_amount(token)) for token in candidate.numeric_tokens]
        amounts = [amount for amount in amounts if is_plausible_amount(amount)]

        resolution = resolve(amounts, candidate.credit_marker, candidate.debit_marker)
        if resolution is None:
            return None

        warnings = list(resolution.warnings)
        confidence = resolution.confidence

        iso_date, fell_back = self._resolve_date(candidate.raw_date, today, warnings)
        if fell_back:
            confidence = cap_confidence(confidence, DATE_FALLBACK_CONFIDENCE_CAP)
        elif not is_plausible_date(iso_date, today,
                                   self.options.plausible_years_back,
                                   self.options.plausible_years_forward):
            warnings.append(UNUSUAL_DATE_WARNING)
            confidence = cap_confidence(confidence, UNUSUAL_DATE_CONFIDENCE_CAP)

        return ParsedTransaction(
            date=iso_date,
            description=description,
            amount=resolution.amount,
            type=resolution.type,
            confidence=confidence,
            warnings=warnings,
        )
