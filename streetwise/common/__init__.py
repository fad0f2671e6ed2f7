"""
Common utilities for StreetWise.

Geodesic helpers and retry/backoff utilities shared by the core
and the network adapters.
"""
