"""
Regex patterns used to recognise statement text.
"""
