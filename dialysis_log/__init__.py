"""Dialysis session log converter.

Decodes the fixed-width binary logs written by dialysis machines and
re-serializes them as CSV.
"""

__version__ = "1.0.0"
