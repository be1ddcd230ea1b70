"""Population report package.

This package loads country population estimates, derives per-country
growth rate and population index, and prepares the decade summary and
top-N country tables used by the population report.
"""

from popreport.exceptions import (
    ConfigurationError,
    ExportError,
    LoadError,
    PopReportBaseError,
    SchemaViolation,
)
from popreport.models import CountrySummary, DecadeSummary, Observation

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "CountrySummary",
    "DecadeSummary",
    "ExportError",
    "LoadError",
    "Observation",
    "PopReportBaseError",
    "SchemaViolation",
]
