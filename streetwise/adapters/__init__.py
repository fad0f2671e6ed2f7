"""
Adapters for StreetWise hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O and infrastructure concerns.
"""

from .storage import SQLiteReportStore
from .police_uk.client import PoliceUKClient
from .mqtt.alert_publisher import MqttAlertPublisher

__all__ = ["SQLiteReportStore", "PoliceUKClient", "MqttAlertPublisher"]
