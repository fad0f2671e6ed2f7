"""
Safety session orchestrator for StreetWise.

This module wires the location, crime source, report store and
dispatch collaborators to the geofence engine and the crime feed
normalizer. It owns the per-session geofence state and the latest
feed snapshot.
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

from streetwise.core.categories import DEFAULT_TAXONOMY, CategoryTaxonomy
from streetwise.core.geofence import GeofenceEngine, InvalidPositionError
from streetwise.core.models import FeedResult, GeofenceEvent, GeofenceState, PositionSample, SessionStats
from streetwise.core.normalize import normalize_batches
from streetwise.core.stats import compute_stats
from streetwise.observability import metrics
from streetwise.observability.logging_setup import get_logger
from streetwise.ports.crime_source import CrimeSourcePort
from streetwise.ports.dispatch import AlertDispatchPort
from streetwise.ports.location import LocationPort
from streetwise.ports.reports import ReportStorePort

log = get_logger("streetwise.session")

class SafetySession:
    """지오펜스 + 범죄 피드 세션 오케스트레이터"""
    
    def __init__(self,
                 engine: GeofenceEngine,
                 *,
                 location: Optional[LocationPort] = None,
                 crimes: Optional[CrimeSourcePort] = None,
                 reports: Optional[ReportStorePort] = None,
                 dispatch: Optional[AlertDispatchPort] = None,
                 taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY,
                 center: tuple = (51.5074, -0.1276),
                 refresh_interval_sec: float = 900.0,
                 report_limit: int = 100):
        """
        초기화합니다.
        
        Args:
            engine: 지오펜스 엔진
            location: 위치 샘플 공급 포트
            crimes: 범죄 데이터 공급 포트
            reports: 사용자 신고 저장소 포트
            dispatch: 경보 발송 포트
            taxonomy: 카테고리 분류표
            center: 피드 기본 중심 좌표 (위도, 경도)
            refresh_interval_sec: 피드 갱신 주기 (초)
            report_limit: 피드에 포함할 최대 신고 수
        """
        self.engine = engine
        self.location = location
        self.crimes = crimes
        self.reports = reports
        self.dispatch = dispatch
        self.taxonomy = taxonomy
        self.center = center
        self.refresh_interval_sec = refresh_interval_sec
        self.report_limit = report_limit
        
        self.state: GeofenceState = engine.new_state()
        self.feed: FeedResult = FeedResult()
        self.stats: SessionStats = SessionStats()
        self.last_refresh: Optional[float] = None
        self._running = False
    
    def reset_session(self) -> None:
        """알림 기록을 지우고 새 세션을 시작합니다."""
        self.state = self.engine.new_state()
        log.info("지오펜스 세션 초기화")
    
    async def handle_position(self, sample: PositionSample) -> List[GeofenceEvent]:
        """
        위치 샘플을 평가하고 진입 이벤트를 발송합니다.
        
        잘못된 좌표는 경고만 남기고 상태를 유지합니다.
        
        Args:
            sample: 위치 샘플
            
        Returns:
            발생한 진입 이벤트 목록
        """
        try:
            self.state, events = self.engine.evaluate(sample, self.state)
        except InvalidPositionError as e:
            metrics.positions_rejected.inc()
            log.warning(f"위치 샘플 거부: {e}")
            return []
        
        metrics.positions_evaluated.inc()
        for event in events:
            metrics.zone_alerts.labels(zone=event.zone).inc()
            if self.dispatch is None:
                continue
            try:
                await self.dispatch.notify_zone_entered(event)
            except Exception as e:
                metrics.dispatch_failures.labels(kind="zone").inc()
                log.error(f"구역 진입 알림 발송 실패 zone:{event.zone} error:{e}")
        return events
    
    async def _fetch_police(self, lat: float, lng: float) -> List[Dict[str, Any]]:
        if self.crimes is None:
            return []
        try:
            # 최신 공개 기간 기준 조회
            period = await self.crimes.last_updated()
            return await self.crimes.fetch_crimes(lat, lng, date=period)
        except Exception as e:
            # 상위 장애는 빈 배치로 처리
            metrics.upstream_failures.labels(source="police").inc()
            log.error(f"범죄 데이터 조회 실패 error:{e}")
            return []
    
    async def _fetch_reports(self) -> List[Dict[str, Any]]:
        if self.reports is None:
            return []
        try:
            return await self.reports.list_reports(self.report_limit)
        except Exception as e:
            metrics.upstream_failures.labels(source="reports").inc()
            log.error(f"사용자 신고 조회 실패 error:{e}")
            return []
    
    async def refresh_feed(self, lat: Optional[float] = None, lng: Optional[float] = None) -> FeedResult:
        """
        범죄 데이터와 사용자 신고를 가져와 피드를 갱신합니다.
        
        Args:
            lat: 중심 위도 (None이면 기본값)
            lng: 중심 경도 (None이면 기본값)
            
        Returns:
            정규화 결과
        """
        lat = self.center[0] if lat is None else lat
        lng = self.center[1] if lng is None else lng
        
        police, user_reports = await asyncio.gather(
            self._fetch_police(lat, lng),
            self._fetch_reports(),
        )
        
        with metrics.normalize_seconds.time():
            result = normalize_batches([police, user_reports], taxonomy=self.taxonomy)
        
        for crime in result.crimes:
            metrics.records_normalized.labels(source=crime.source_meta.source).inc()
        metrics.records_skipped.inc(result.skipped)
        metrics.records_duplicate.inc(result.duplicates)
        metrics.crimes_in_feed.set(len(result.crimes))
        
        self.feed = result
        self.stats = compute_stats(result.crimes)
        self.last_refresh = time.time()
        log.info(f"피드 갱신 완료 total:{self.stats.total} police:{len(police)} reports:{len(user_reports)}")
        
        if self.dispatch is not None:
            try:
                await self.dispatch.publish_feed(self.stats)
            except Exception as e:
                metrics.dispatch_failures.labels(kind="feed").inc()
                log.error(f"피드 집계 발송 실패 error:{e}")
        return result
    
    async def _location_loop(self) -> None:
        """위치 샘플 소비자"""
        if self.location is None:
            return
        async for sample in self.location.samples():
            await self.handle_position(sample)
            if not self._running:
                break
    
    async def _refresh_loop(self) -> None:
        """주기적 피드 갱신"""
        while self._running:
            await self.refresh_feed()
            await asyncio.sleep(self.refresh_interval_sec)
    
    async def start(self) -> None:
        """
        세션을 시작합니다.
        
        위치 소비와 주기적 피드 갱신을 함께 실행합니다.
        """
        self._running = True
        log.info("안전 세션 시작")
        await asyncio.gather(self._location_loop(), self._refresh_loop())
    
    def stop(self) -> None:
        """세션을 중지합니다."""
        self._running = False
        log.info("안전 세션 중지")
