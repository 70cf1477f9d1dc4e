"""
Formats package for statement extractors.
"""

from .base import BaseExtractor, ExtractionResult
from .line_oriented import LineOrientedExtractor, resolve
from .tabular import TabularExtractor, detect_column_roles

__all__ = [
    'BaseExtractor',
    'ExtractionResult',
    'LineOrientedExtractor',
    'TabularExtractor',
    'detect_column_roles',
    'resolve',
]
