"""
Document-level failures raised by the normalizer.

Row and line problems never raise; they lower confidence and add a warning
on the affected transaction instead.
"""

from typing import Iterable, Tuple


class StatementParseError(ValueError):
    """Base class for failures that stop a whole document."""


class MissingColumnError(StatementParseError):
    """Tabular input lacks a mandatory column role."""

    def __init__(self, missing_roles: Iterable[str]):
        self.missing_roles: Tuple[str, ...] = tuple(missing_roles)
        super().__init__(
            "Statement is missing required column(s): " + ", ".join(self.missing_roles)
        )


class NoTransactionsError(StatementParseError):
    """Extraction finished but no transaction survived."""


class UnsupportedInputError(StatementParseError):
    """The declared input kind or file type cannot be handled."""
