"""Report package assembling the tables handed to the presenter."""

from popreport.report.run import Report, ReportTables

__all__ = ["Report", "ReportTables"]
