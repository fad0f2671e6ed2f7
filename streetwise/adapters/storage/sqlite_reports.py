"""
SQLite-based user incident report store for StreetWise.

This module implements persistence for user-submitted incident
reports. Rows are returned in the raw report shape consumed by the
crime feed normalizer.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiosqlite

from streetwise.common.geo import validate_coordinates
from streetwise.observability.logging_setup import get_logger

log = get_logger("streetwise.reports")

REPORT_TYPES = ("theft", "suspicious", "safe")
MAX_DESCRIPTION_LENGTH = 200

def _to_utc(value: datetime) -> datetime:
    """naive 시각은 UTC로 간주합니다."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS reports (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    description TEXT NOT NULL,
    lat REAL NOT NULL,
    lng REAL NOT NULL,
    ts TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_reports_ts ON reports(ts);
"""

class SQLiteReportStore:
    """SQLite 기반 사용자 신고 저장소"""
    
    def __init__(self, path: str):
        """
        초기화합니다.
        
        Args:
            path: SQLite 데이터베이스 파일 경로
        """
        self.path = path
        log.info(f"SQLiteReportStore 초기화: {path}")
    
    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info(f"SQLiteReportStore 스키마 초기화 완료 reports:{await self.count()}")
    
    async def add_report(self, report_type: str, description: str, lat: float, lng: float,
                         timestamp: Optional[datetime] = None) -> str:
        """
        신고를 저장합니다.
        
        Args:
            report_type: 신고 유형 (theft, suspicious, safe)
            description: 설명 (공백 제거 후 1~200자)
            lat: 위도
            lng: 경도
            timestamp: 신고 시각 (None이면 현재 UTC)
            
        Returns:
            생성된 신고 ID
            
        Raises:
            ValueError: 입력이 유효하지 않은 경우
        """
        if report_type not in REPORT_TYPES:
            raise ValueError(f"unknown report type: {report_type}")
        text = (description or "").strip()
        if not text:
            raise ValueError("description must not be empty")
        if len(text) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(f"description exceeds {MAX_DESCRIPTION_LENGTH} characters")
        if not validate_coordinates(lat, lng):
            raise ValueError(f"invalid coordinates: ({lat}, {lng})")
        
        # UTC로 저장해야 ts 문자열 정렬이 시간순과 일치
        ts = _to_utc(timestamp or datetime.now(timezone.utc)).isoformat()
        report_id = uuid.uuid4().hex
        
        async with aiosqlite.connect(self.path) as db:
            await db.execute(
                "INSERT INTO reports (id, type, description, lat, lng, ts) VALUES (?, ?, ?, ?, ?, ?)",
                (report_id, report_type, text, float(lat), float(lng), ts)
            )
            await db.commit()
        
        log.info(f"신고 저장 완료 id:{report_id} type:{report_type}")
        return report_id
    
    async def list_reports(self, limit: int = 100) -> List[Dict[str, Any]]:
        """
        최신 신고부터 조회합니다.
        
        Args:
            limit: 최대 개수
            
        Returns:
            신고 레코드 목록
        """
        async with aiosqlite.connect(self.path) as db:
            async with db.execute(
                "SELECT id, type, description, lat, lng, ts FROM reports ORDER BY ts DESC LIMIT ?",
                (limit,)
            ) as cursor:
                rows = await cursor.fetchall()
        
        return [
            {"id": r[0], "type": r[1], "description": r[2], "lat": r[3], "lng": r[4], "timestamp": r[5]}
            for r in rows
        ]
    
    async def count(self) -> int:
        """저장된 신고 수를 반환합니다."""
        async with aiosqlite.connect(self.path) as db:
            async with db.execute("SELECT COUNT(*) FROM reports") as cursor:
                row = await cursor.fetchone()
                return row[0] if row else 0
