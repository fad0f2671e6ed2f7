"""
UK Police street crime API client for StreetWise.

This module provides a client for the public data.police.uk API
(https://data.police.uk/docs/) returning raw street crime records
for the crime feed normalizer.
"""

import asyncio
import json
from datetime import date
from typing import Any, Dict, List, Optional

import aiohttp

from streetwise.common.retry import retry_with_backoff
from streetwise.observability.logging_setup import get_logger

log = get_logger("streetwise.police_uk")

DEFAULT_BASE_URL = "https://data.police.uk/api"

class PoliceApiError(Exception):
    """Police API 오류 (재시도하지 않음)"""

class PoliceApiUnavailable(PoliceApiError):
    """일시적인 Police API 오류 (재시도 대상)"""

def _check_status(status: int, reason: Optional[str]) -> None:
    if status < 400:
        return
    if status in (429, 503):
        raise PoliceApiUnavailable("Police API is temporarily unavailable. Please try again later.")
    if status == 404:
        raise PoliceApiError("No crime data available for this location.")
    if status == 403:
        raise PoliceApiError("Police API access denied. This may be due to rate limiting or geo-restrictions.")
    raise PoliceApiError(f"Police API error: {status} {reason or ''}".rstrip())

def _parse_body(text: str) -> Any:
    stripped = text.strip()
    # 접근 거부 시 JSON 대신 텍스트/HTML 응답
    if stripped == "Access denied" or stripped.startswith("<!DOCTYPE") or stripped.startswith("<html"):
        raise PoliceApiError("Police API access denied. The API may be temporarily unavailable.")
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        log.error(f"Police API 응답 파싱 실패 body:{stripped[:200]}")
        raise PoliceApiError("Invalid response from Police API. Please try again later.")

def months_ago(today: date, months: int) -> str:
    """today 기준 months개월 전의 YYYY-MM 문자열"""
    index = today.year * 12 + (today.month - 1) - months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"

class PoliceUKClient:
    """UK Police API 클라이언트"""
    
    def __init__(self,
                 base_url: str = DEFAULT_BASE_URL,
                 timeout: int = 15,
                 *,
                 max_retries: int = 3,
                 backoff_initial: float = 1.0,
                 backoff_max: float = 30.0,
                 category: str = "all-crime"):
        """
        초기화합니다.
        
        Args:
            base_url: Police API 기본 URL
            timeout: 요청 타임아웃 (초)
            max_retries: 일시적 오류 시 최대 재시도 횟수
            backoff_initial: 초기 백오프 시간
            backoff_max: 최대 백오프 시간
            category: 기본 조회 카테고리
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_initial = backoff_initial
        self.backoff_max = backoff_max
        self.category = category
        self.session: Optional[aiohttp.ClientSession] = None
        
        log.info("Police API 클라이언트 초기화됨")
    
    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        self.session = aiohttp.ClientSession(
            headers={"Accept": "application/json"},
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self
    
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None
    
    async def _get_json(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        GET 요청 후 JSON 본문을 반환합니다.
        
        Args:
            endpoint: API 엔드포인트
            params: 쿼리 매개변수
            
        Returns:
            파싱된 응답 데이터
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")
        
        url = f"{self.base_url}{endpoint}"
        
        async def _request():
            try:
                async with self.session.request("GET", url, params=params) as response:
                    _check_status(response.status, response.reason)
                    text = await response.text()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise PoliceApiUnavailable(f"Police API request failed: {e}") from e
            return _parse_body(text)
        
        return await retry_with_backoff(
            _request,
            max_retries=self.max_retries,
            base_delay=self.backoff_initial,
            max_delay=self.backoff_max,
            retry_on=(PoliceApiUnavailable,),
        )
    
    async def fetch_crimes(self, lat: float, lng: float,
                           date: Optional[str] = None,
                           category: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        중심 좌표 주변(반경 약 1마일)의 거리 범죄 레코드를 가져옵니다.
        
        Args:
            lat: 중심 위도
            lng: 중심 경도
            date: 기간 (YYYY-MM), None이면 최신
            category: 범죄 카테고리 (None이면 기본값)
            
        Returns:
            원본 레코드 목록
        """
        params = {"lat": str(lat), "lng": str(lng)}
        if date:
            params["date"] = date
        
        data = await self._get_json(f"/crimes-street/{category or self.category}", params)
        if not isinstance(data, list):
            raise PoliceApiError("Invalid response from Police API. Please try again later.")
        
        log.info(f"범죄 레코드 조회 완료 count:{len(data)} lat:{lat} lng:{lng}")
        return data
    
    async def last_updated(self) -> str:
        """
        최신 데이터 기간(YYYY-MM)을 가져옵니다.
        
        실패 시 두 달 전으로 폴백합니다 (데이터는 보통 1-2개월 지연).
        """
        try:
            data = await self._get_json("/crime-last-updated")
            return str(data["date"])[:7]
        except (PoliceApiError, KeyError, TypeError) as e:
            fallback = months_ago(date.today(), 2)
            log.warning(f"최신 기간 조회 실패, 폴백 사용 fallback:{fallback} error:{e}")
            return fallback
