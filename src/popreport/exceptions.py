"""
Custom exceptions for the popreport package.

This module defines a hierarchy of exceptions to provide more
precise error handling and debugging across the report pipeline.
"""


class PopReportBaseError(Exception):
    """
    Base exception for all report pipeline errors.

    All custom exceptions in the package should inherit from this class.
    Provides a common base for catching and handling pipeline-specific errors.
    """

    pass


class ConfigurationError(PopReportBaseError):
    """
    Raised when there are configuration-related issues.

    This exception is used when:
    - Configuration values are invalid (e.g. a non-integer top-N size)
    - The output directory cannot be created
    - An unknown log level is requested
    """

    pass


class LoadError(PopReportBaseError):
    """
    Raised when the population CSV cannot be loaded.

    Covers:
    - Missing or unreadable input file
    - A required source column absent from the header
    - Values that cannot be parsed as year or population

    The offending path is available as ``path`` and, when a column is
    at fault, its name as ``column``.
    """

    def __init__(self, message: str, path: str = None, column: str = None):
        super().__init__(message)
        self.path = path
        self.column = column


class SchemaViolation(PopReportBaseError):
    """
    Raised when the observation set breaks its (country, year) grain.

    Derived columns are only defined over a strictly increasing year
    sequence per country, so a duplicate pair aborts the run.
    """

    def __init__(self, message: str, country: str = None, year: int = None):
        super().__init__(message)
        self.country = country
        self.year = year


class ExportError(PopReportBaseError):
    """
    Raised when the prepared tables cannot be written out.

    Covers file system errors while exporting CSV or JSON products.
    """

    pass
