"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest
import asyncio
import tempfile
import os
from unittest.mock import AsyncMock
from streetwise.settings import Settings
from streetwise.core.geofence import GeofenceEngine
from streetwise.core.zones import DEFAULT_ZONES


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    settings.observability.http_port = 8080
    return settings


@pytest.fixture
def london_engine():
    """기본 런던 구역 지오펜스 엔진"""
    return GeofenceEngine(DEFAULT_ZONES)


@pytest.fixture
def mock_dependencies():
    """테스트용 협력자 목업"""
    crimes = AsyncMock()
    crimes.last_updated.return_value = "2026-08"
    return {
        'crimes': crimes,
        'reports': AsyncMock(),
        'dispatch': AsyncMock(),
    }


@pytest.fixture
def police_record():
    """Police API 거리 범죄 레코드 생성기"""
    def _make(persistent_id="", crime_id=1, category="theft-from-the-person",
              lat="51.5010", lng="-0.1410", street="On or near Parliament Street",
              month="2026-07", outcome=None):
        return {
            "category": category,
            "location_type": "Force",
            "location": {
                "latitude": lat,
                "longitude": lng,
                "street": {"id": 1000 + crime_id, "name": street},
            },
            "context": "",
            "outcome_status": {"category": outcome, "date": month} if outcome else None,
            "persistent_id": persistent_id,
            "location_subtype": "",
            "id": crime_id,
            "month": month,
        }
    return _make


@pytest.fixture
def report_record():
    """사용자 신고 레코드 생성기"""
    def _make(report_id="r1", report_type="theft", lat=51.5074, lng=-0.1276,
              description="Phone snatched by cyclist", timestamp="2026-10-01T12:00:00+00:00"):
        return {
            "id": report_id,
            "type": report_type,
            "description": description,
            "lat": lat,
            "lng": lng,
            "timestamp": timestamp,
        }
    return _make


# pytest 설정
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "slow: 느린 테스트 마커"
    )
    config.addinivalue_line(
        "markers", "integration: 통합 테스트 마커"
    )


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 비동기 테스트에 asyncio 마커 추가
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
        
        # 통합 테스트 마커 추가
        if "integration" in item.name:
            item.add_marker(pytest.mark.integration)
