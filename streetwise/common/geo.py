"""
Geographic utilities for StreetWise.

This module provides the geodesic calculations used by the geofence
engine and coordinate validation/parsing used by the crime feed
normalizer.
"""

import math
from typing import Any, Optional

# 지구 평균 반지름 (미터)
EARTH_RADIUS_M = 6_371_000.0

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (미터).
    
    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도
        
    Returns:
        두 지점 간의 거리 (미터)
    """
    # 도를 라디안으로 변환
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    
    # Haversine 공식
    a = (math.sin(dphi / 2) ** 2 +
         math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2)
    # 부동소수 오차로 a가 1을 넘는 경우 방지
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    
    return EARTH_RADIUS_M * c

def validate_coordinates(lat: Any, lon: Any) -> bool:
    """
    좌표가 유효한지 확인합니다.
    
    Args:
        lat: 위도
        lon: 경도
        
    Returns:
        유한한 실수이고 범위 안에 있으면 True
    """
    for value in (lat, lon):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        if not math.isfinite(value):
            return False
    return -90 <= lat <= 90 and -180 <= lon <= 180

def parse_coordinate(value: Any) -> Optional[float]:
    """숫자 또는 숫자 문자열을 float로 변환합니다. 실패하면 None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (ValueError, TypeError):
        return None
    if not math.isfinite(result):
        return None
    return result
