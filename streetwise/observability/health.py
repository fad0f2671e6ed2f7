"""
HTTP endpoints for StreetWise.

This module implements health, readiness, metrics and info endpoints
together with the geofence and crime feed endpoints consumed by the
presentation layer.
"""

import time
from typing import Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from streetwise.common.geo import validate_coordinates
from streetwise.core.models import PositionSample
from streetwise.observability.logging_setup import get_logger
from streetwise.orchestrators.session import SafetySession
from streetwise.settings import Settings

log = get_logger("streetwise.http")

class ReportIn(BaseModel):
    type: str
    description: str
    lat: float
    lng: float

def create_app(settings: Settings, session: Optional[SafetySession] = None) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="StreetWise geofence and crime feed service"
    )
    
    start_time = time.time()
    
    def _session() -> SafetySession:
        if session is None:
            raise HTTPException(status_code=503, detail="Session not running")
        return session
    
    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })
    
    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트 (피드가 한 번 이상 갱신되었는지)"""
        is_ready = session is not None and session.last_refresh is not None
        return JSONResponse({
            "status": "ready" if is_ready else "starting",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        }, status_code=200 if is_ready else 503)
    
    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
    
    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level
        })
    
    @app.get("/zones")
    async def zones():
        """설정된 고위험 구역 (우선순위 순)"""
        return [z.model_dump() for z in _session().engine.zones]
    
    @app.post("/positions")
    async def positions(sample: PositionSample):
        """위치 샘플을 평가하고 새 진입 이벤트를 반환합니다."""
        s = _session()
        if not validate_coordinates(sample.latitude, sample.longitude):
            raise HTTPException(status_code=422, detail="Invalid coordinates")
        events = await s.handle_position(sample)
        return {
            "current_zone": s.state.current_zone,
            "events": [e.model_dump(mode="json") for e in events],
        }
    
    @app.get("/geofence")
    async def geofence():
        """현재 지오펜스 세션 상태"""
        state = _session().state
        return {
            "current_zone": state.current_zone,
            "alerted_zones": sorted(state.alerted_zones),
        }
    
    @app.post("/geofence/reset")
    async def geofence_reset():
        """새 세션 시작 (알림 기록 초기화)"""
        _session().reset_session()
        return {"ok": True}
    
    @app.get("/feed")
    async def feed():
        """현재 정규화된 범죄 피드"""
        s = _session()
        return {
            "crimes": [c.model_dump(mode="json") for c in s.feed.crimes],
            "skipped": s.feed.skipped,
            "duplicates": s.feed.duplicates,
            "stats": s.stats.model_dump(),
        }
    
    @app.get("/feed/stats")
    async def feed_stats():
        """카테고리별 집계"""
        return _session().stats.model_dump()
    
    @app.post("/feed/refresh")
    async def feed_refresh(payload: dict = Body(default={})):
        """피드를 즉시 갱신합니다 (선택적으로 중심 좌표 지정)."""
        s = _session()
        lat, lng = payload.get("lat"), payload.get("lng")
        if (lat is None) != (lng is None) or (lat is not None and not validate_coordinates(lat, lng)):
            raise HTTPException(status_code=422, detail="Invalid coordinates")
        result = await s.refresh_feed(lat, lng)
        return {"total": len(result.crimes), "skipped": result.skipped, "duplicates": result.duplicates}
    
    @app.post("/reports")
    async def add_report(report: ReportIn):
        """사용자 사건 신고를 저장합니다."""
        s = _session()
        if s.reports is None:
            raise HTTPException(status_code=503, detail="Report store not configured")
        try:
            report_id = await s.reports.add_report(report.type, report.description, report.lat, report.lng)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        log.info(f"신고 접수 id:{report_id}")
        return {"ok": True, "id": report_id}
    
    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info",
                "zones": "/zones",
                "positions": "/positions",
                "geofence": "/geofence",
                "feed": "/feed",
                "feed_stats": "/feed/stats",
                "reports": "/reports"
            }
        })
    
    return app
