"""
REST API for EDGAR funding eligibility.

Serves the standard and special fundable amounts computed from the
companies imported into the SQLite store.
"""

__version__ = "1.0.0"
