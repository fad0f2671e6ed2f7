"""
Report store port interface.

This module defines the protocol for user incident report persistence.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol

class ReportStorePort(Protocol):
    """사용자 사건 신고 저장소 포트 인터페이스"""
    
    async def add_report(self, report_type: str, description: str, lat: float, lng: float,
                         timestamp: Optional[datetime] = None) -> str:
        """신고를 저장하고 ID를 반환합니다."""
        ...
    
    async def list_reports(self, limit: int = 100) -> List[Dict[str, Any]]:
        """최신 신고부터 원본 레코드 형태로 반환합니다."""
        ...
