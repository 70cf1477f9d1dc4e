"""
Base extractor class for all statement extractors.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from statement_normalizer.config import ParseOptions
from statement_normalizer.models import ParsedTransaction
from statement_normalizer.utils.formatting import DATE_FALLBACK_WARNING, parse_date
from statement_normalizer.utils.validation import validate_transaction

logger = logging.getLogger(__name__)

# Confidence ceiling when the date had to be replaced by the processing date
DATE_FALLBACK_CONFIDENCE_CAP = 0.5


@dataclass
class ExtractionResult:
    """Transactions found by one extractor, plus bookkeeping."""
    transactions: List[ParsedTransaction]
    dropped: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseExtractor(ABC):
    """
    Abstract base class for statement extractors.

    Extractors hold only read-only options, so one instance can be reused
    for any number of documents.
    """

    name: str = "base"

    def __init__(self, options: Optional[ParseOptions] = None):
        """
        Initialize the extractor.

        Args:
            options: ParseOptions for thresholds and limits
        """
        self.options = options or ParseOptions()

    @abstractmethod
    def extract(self, document: Any, today: date) -> ExtractionResult:
        """Extract transactions from one document."""
        pass

    def _resolve_date(self, raw: Any, today: date, warnings: List[str]) -> Tuple[str, bool]:
        """
        Normalize a raw date, falling back to today with a warning.

        Returns:
            Tuple of (ISO date, whether the fallback was used)
        """
        iso = parse_date(raw)
        if iso is not None:
            return iso, False
        warnings.append(DATE_FALLBACK_WARNING)
        return today.isoformat(), True

    def _accept(self, tx: ParsedTransaction, source: str) -> bool:
        """Final invariant check before a transaction is emitted."""
        result = validate_transaction(tx)
        if not result.is_valid:
            logger.debug("Dropping %s: %s", source, "; ".join(result.errors))
        return result.is_valid
