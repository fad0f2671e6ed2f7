"""
Location port interface.

This module defines the protocol for position sample sources.
"""

from typing import AsyncIterator, Protocol

from streetwise.core.models import PositionSample

class LocationPort(Protocol):
    """위치 샘플 공급 포트 인터페이스"""
    
    def samples(self) -> AsyncIterator[PositionSample]:
        """
        위치 샘플을 하나씩 비동기적으로 공급합니다.
        
        같은 좌표의 샘플이 중복 전달될 수 있습니다.
        
        Yields:
            PositionSample
        """
        ...
