"""
Parsing options.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass
class ParseOptions:
    """Options for parsing a statement."""
    today: Optional[date] = None          # Processing date; None means date.today()
    max_description_length: int = 100     # Descriptions are cut to this length
    min_description_length: int = 3       # Shorter descriptions are noise
    header_scan_lines: int = 25           # Lines searched for a column header
    continuation_lookahead: int = 3       # Lines merged into a short description
    plausible_years_back: int = 2         # Date window for line-oriented text
    plausible_years_forward: int = 1
    pdf_password: Optional[str] = None    # For encrypted PDFs

    def resolve_today(self) -> date:
        """Processing date for one call."""
        return self.today or date.today()
