"""
Orchestrators for StreetWise.

This module contains the orchestrators that coordinate
the flow between ports, adapters and the core.
"""
from .session import SafetySession

__all__ = ["SafetySession"]
