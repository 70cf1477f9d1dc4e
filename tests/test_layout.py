"""
Tests for positioned-text reconstruction and PDF word conversion.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from statement_normalizer.models import TextFragment
from statement_normalizer.utils.layout import reconstruct_page, reconstruct_text
from statement_normalizer.utils.pdf import fragments_from_words


class TestReconstruction:
    """Tests for reading-order reconstruction."""

    def test_groups_by_rounded_baseline(self):
        """Fragments on nearly the same baseline form one line, sorted by x."""
        fragments = [
            ("Coffee", 100, 700.2),
            ("01-03-2024", 20, 700.4),
            ("150.00", 300, 699.8),
            ("HDFC", 20, 750.0),
        ]
        assert reconstruct_page(fragments) == ["HDFC", "01-03-2024 Coffee 150.00"]

    def test_whitespace_fragments_dropped(self):
        """Blank fragments never produce lines."""
        fragments = [TextFragment("   ", 10, 500), TextFragment("Hello", 10, 400)]
        assert reconstruct_page(fragments) == ["Hello"]

    def test_pages_concatenate(self):
        """Pages are joined in order with newlines."""
        pages = [[("first", 0, 10)], [("second", 0, 10), ("top", 0, 90)]]
        assert reconstruct_text(pages) == "first\ntop\nsecond"

    def test_equal_x_keeps_input_order(self):
        """Ties on x keep the order fragments were given in."""
        fragments = [("a", 5, 10), ("b", 5, 10)]
        assert reconstruct_page(fragments) == ["a b"]

    def test_empty(self):
        """No fragments, no text."""
        assert reconstruct_text([]) == ""
        assert reconstruct_text([[]]) == ""


class TestPdfWords:
    """Tests for converting pdfplumber words to fragments."""

    def test_fragments_from_words(self):
        """The y coordinate is measured from the bottom of the page."""
        words = [
            {'text': 'Hello', 'x0': 10, 'bottom': 100},
            {'text': 'World', 'x0': 60.5, 'bottom': 100},
            {'text': ' ', 'x0': 90, 'bottom': 100},
        ]
        fragments = fragments_from_words(words, page_height=800)
        assert fragments == [
            TextFragment('Hello', 10.0, 700.0),
            TextFragment('World', 60.5, 700.0),
        ]

    def test_top_of_page_is_first_line(self):
        """Words nearer the top of the page come first after reconstruction."""
        words = [
            {'text': 'second', 'x0': 10, 'bottom': 200},
            {'text': 'first', 'x0': 10, 'bottom': 50},
        ]
        assert reconstruct_page(fragments_from_words(words, 800)) == ['first', 'second']
