"""
Observability for StreetWise: loguru logging, prometheus metrics
and the FastAPI HTTP surface.
"""
