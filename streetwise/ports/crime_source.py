"""
Crime source port interface.

This module defines the protocol for upstream crime record sources.
"""

from typing import Any, Dict, List, Optional, Protocol

class CrimeSourcePort(Protocol):
    """범죄 데이터 공급 포트 인터페이스"""
    
    async def fetch_crimes(self, lat: float, lng: float,
                           date: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        중심 좌표 주변의 원본 범죄 레코드를 가져옵니다.
        
        Args:
            lat: 중심 위도
            lng: 중심 경도
            date: 기간 (YYYY-MM), None이면 최신
            
        Returns:
            원본 레코드 목록
        """
        ...
    
    async def last_updated(self) -> str:
        """최신 데이터 기간(YYYY-MM)을 반환합니다."""
        ...
