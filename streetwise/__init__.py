"""
StreetWise: geofencing and crime-feed core for a London street safety map.
"""

__version__ = "0.2.0"
