"""
Core domain models and pure functions for StreetWise.

This module contains the geofence engine, the crime feed normalizer
and their domain models, independent of external I/O and
infrastructure concerns.
"""

from .models import (
    Zone, PositionSample, GeofenceState, GeofenceEvent, CategoryInfo,
    SourceMeta, NormalizedCrime, SessionStats, FeedResult,
)
from .categories import CategoryTaxonomy, DEFAULT_TAXONOMY
from .geofence import GeofenceEngine, InvalidPositionError, evaluate, locate_zone
from .normalize import normalize, normalize_batches
from .stats import compute_stats
from .zones import DEFAULT_ZONES, build_zones, load_zones

__all__ = [
    "Zone", "PositionSample", "GeofenceState", "GeofenceEvent", "CategoryInfo",
    "SourceMeta", "NormalizedCrime", "SessionStats", "FeedResult",
    "CategoryTaxonomy", "DEFAULT_TAXONOMY",
    "GeofenceEngine", "InvalidPositionError", "evaluate", "locate_zone",
    "normalize", "normalize_batches", "compute_stats",
    "DEFAULT_ZONES", "build_zones", "load_zones",
]
