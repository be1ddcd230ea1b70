"""Test suite for the population report.

This package contains tests for the report pipeline including:
- Unit tests for loading, derived columns, aggregation and ranking
- Integration tests for building and exporting the report tables
"""

__version__ = "0.1.0"
