"""
Shared helpers: normalizers, validation, layout and file readers.
"""
