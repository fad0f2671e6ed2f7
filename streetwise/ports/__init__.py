"""
Port interfaces for StreetWise hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external adapters.
"""

from .location import LocationPort
from .crime_source import CrimeSourcePort
from .reports import ReportStorePort
from .dispatch import AlertDispatchPort

__all__ = ["LocationPort", "CrimeSourcePort", "ReportStorePort", "AlertDispatchPort"]
