"""
Alert dispatch port interface.

This module defines the protocol for delivering geofence events and
feed statistics to the presentation layer.
"""

from typing import Protocol

from streetwise.core.models import GeofenceEvent, SessionStats

class AlertDispatchPort(Protocol):
    """경보 발송 포트 인터페이스"""
    
    async def notify_zone_entered(self, event: GeofenceEvent) -> None:
        """
        고위험 구역 진입 이벤트를 발송합니다.
        
        Args:
            event: 구역 진입 이벤트
        """
        ...
    
    async def publish_feed(self, stats: SessionStats) -> None:
        """
        범죄 피드 집계를 발송합니다.
        
        Args:
            stats: 현재 피드 집계
        """
        ...
