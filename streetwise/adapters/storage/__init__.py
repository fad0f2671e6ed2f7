"""
Storage adapters for StreetWise hexagonal architecture.

This module contains the SQLite-based store for user incident reports.
"""

from .sqlite_reports import SQLiteReportStore

__all__ = ["SQLiteReportStore"]
