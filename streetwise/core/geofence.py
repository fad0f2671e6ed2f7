"""
Geofence evaluation for StreetWise.

This module classifies a position sample against an ordered list of
circular zones and emits one-shot "entered" events per zone per
session. The engine is a pure function of (sample, state) and never
mutates the state it is given.
"""

from typing import Iterable, List, Optional, Tuple

from streetwise.common.geo import haversine_distance, validate_coordinates
from streetwise.core.models import GeofenceEvent, GeofenceState, PositionSample, Zone
from streetwise.core.zones import build_zones
from streetwise.observability.logging_setup import get_logger

log = get_logger("streetwise.geofence")

class InvalidPositionError(ValueError):
    """범위를 벗어나거나 유한하지 않은 좌표"""

def locate_zone(lat: float, lon: float, zones: Iterable[Zone]) -> Optional[Tuple[Zone, float]]:
    """
    좌표를 포함하는 첫 번째 구역을 찾습니다.
    
    구역은 설정 순서대로 검사하며, 일치하는 구역을 찾으면
    나머지 구역은 검사하지 않습니다.
    
    Args:
        lat: 위도
        lon: 경도
        zones: 설정 순서의 구역 목록
        
    Returns:
        (구역, 중심까지 거리(미터)) 또는 None
    """
    for zone in zones:
        distance = haversine_distance(lat, lon, zone.latitude, zone.longitude)
        if distance <= zone.radius_m:
            return zone, distance
    return None

def evaluate(
    position: PositionSample,
    state: GeofenceState,
    zones: Iterable[Zone],
) -> Tuple[GeofenceState, List[GeofenceEvent]]:
    """
    위치 샘플로 지오펜스 상태를 갱신합니다.
    
    Args:
        position: 위치 샘플
        state: 현재 세션 상태
        zones: 설정 순서의 구역 목록
        
    Returns:
        (갱신된 상태, 진입 이벤트 목록)
        
    Raises:
        InvalidPositionError: 좌표가 유효하지 않은 경우 (상태는 변경되지 않음)
    """
    lat, lon = position.latitude, position.longitude
    if not validate_coordinates(lat, lon):
        raise InvalidPositionError(f"invalid coordinates: ({lat}, {lon})")
    
    match = locate_zone(lat, lon, zones)
    if match is None:
        if state.current_zone is not None:
            log.debug(f"구역 이탈 zone:{state.current_zone}")
        return state.model_copy(update={"current_zone": None}), []
    
    zone, distance = match
    events: List[GeofenceEvent] = []
    alerted = state.alerted_zones
    
    # 세션당 구역별 1회만 알림 (재진입 시에도 알림 없음)
    if zone.name not in alerted:
        alerted = alerted | {zone.name}
        events.append(GeofenceEvent(
            zone=zone.name,
            latitude=lat,
            longitude=lon,
            distance_m=distance,
            timestamp=position.timestamp,
        ))
        log.info(f"고위험 구역 진입 zone:{zone.name} distance:{distance:.1f}m")
    
    new_state = GeofenceState(current_zone=zone.name, alerted_zones=alerted)
    return new_state, events

class GeofenceEngine:
    """주입된 구역 설정으로 지오펜스를 평가하는 엔진"""
    
    def __init__(self, zones: Iterable[Zone]):
        self._zones = build_zones(zones)
        log.info(f"지오펜스 엔진 초기화 zones:{len(self._zones)}")
    
    @property
    def zones(self) -> Tuple[Zone, ...]:
        return self._zones
    
    def new_state(self) -> GeofenceState:
        """세션 시작 상태를 반환합니다."""
        return GeofenceState()
    
    def evaluate(self, position: PositionSample,
                 state: GeofenceState) -> Tuple[GeofenceState, List[GeofenceEvent]]:
        return evaluate(position, state, self._zones)
