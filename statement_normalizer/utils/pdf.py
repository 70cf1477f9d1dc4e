"""
PDF reading utilities.

This module turns a PDF file into positioned text fragments:
1. Encrypted PDFs are checked with PyPDF2 and opened with the password
2. Words are extracted with pdfplumber together with their coordinates
3. Coordinates are converted so that y grows upwards, like PDF user space
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from statement_normalizer.exceptions import UnsupportedInputError
from statement_normalizer.models import TextFragment

logger = logging.getLogger(__name__)


def fragments_from_words(words: Iterable[Dict[str, Any]], page_height: float) -> List[TextFragment]:
    """
    Convert pdfplumber word dicts to fragments.

    pdfplumber measures 'bottom' from the top of the page; the fragment y is
    the baseline distance from the bottom so larger y means higher up.

    Args:
        words: Word dicts with 'text', 'x0' and 'bottom' keys
        page_height: Height of the page in points

    Returns:
        List of TextFragment
    """
    fragments = []
    for word in words:
        text = word.get('text', '')
        if not text or not text.strip():
            continue
        fragments.append(TextFragment(
            text=text,
            x=float(word['x0']),
            y=float(page_height) - float(word['bottom']),
        ))
    return fragments


def _check_encryption(filepath: Path, password: Optional[str]) -> Optional[str]:
    """Return the password to open the PDF with, or raise if it cannot be decrypted."""
    try:
        import PyPDF2
    except ImportError:
        raise ImportError(
            "PyPDF2 is required for PDF parsing. "
            "Install with: pip install PyPDF2"
        )

    with open(filepath, 'rb') as f:
        reader = PyPDF2.PdfReader(f)
        if not reader.is_encrypted:
            return password

        # Try empty password first
        if password is None:
            password = ""
        try:
            result = reader.decrypt(password)
        except Exception as e:
            raise UnsupportedInputError(f"Could not decrypt PDF - check password ({e})")
        if result == 0:
            raise UnsupportedInputError("Invalid password for encrypted PDF")

    return password


def extract_fragments(filepath: Union[str, Path], password: Optional[str] = None) -> List[List[TextFragment]]:
    """
    Extract positioned text fragments from every page of a PDF.

    Args:
        filepath: Path to the PDF file
        password: Optional password for encrypted PDFs

    Returns:
        One list of fragments per page
    """
    filepath = Path(filepath)
    password = _check_encryption(filepath, password)

    try:
        import pdfplumber
    except ImportError:
        raise ImportError(
            "pdfplumber is required for PDF parsing. "
            "Install with: pip install pdfplumber"
        )

    pages = []
    with pdfplumber.open(filepath, password=password) as pdf:
        for page in pdf.pages:
            words = page.extract_words(use_text_flow=False, keep_blank_chars=False) or []
            pages.append(fragments_from_words(words, page.height))

    logger.debug("Extracted %d pages from %s", len(pages), filepath.name)
    return pages
