"""
Core domain models for StreetWise.

This module defines the geofence and crime feed domain models using
Pydantic v2 for type safety and validation.
"""

from datetime import datetime
from typing import Dict, FrozenSet, List, Literal, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from streetwise.common.geo import validate_coordinates

# 신고/레코드 출처
Source = Literal["police", "report", "unknown"]

class Zone(BaseModel):
    """원형 고위험 구역 모델"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    latitude: float
    longitude: float
    radius_m: float = Field(gt=0)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("zone name must not be blank")
        return v

    @model_validator(mode="after")
    def _check_center(self) -> "Zone":
        if not validate_coordinates(self.latitude, self.longitude):
            raise ValueError(f"invalid zone center: ({self.latitude}, {self.longitude})")
        return self

    @property
    def center(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

class PositionSample(BaseModel):
    """위치 추적 샘플 (범위 검증은 엔진에서 수행)"""
    latitude: float
    longitude: float
    accuracy_m: Optional[float] = None
    timestamp: Optional[datetime] = None

class GeofenceState(BaseModel):
    """세션 단위 지오펜스 상태"""
    model_config = ConfigDict(frozen=True)

    current_zone: Optional[str] = None
    alerted_zones: FrozenSet[str] = Field(default_factory=frozenset)

class GeofenceEvent(BaseModel):
    """구역 진입 이벤트"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["entered"] = "entered"
    zone: str
    latitude: float
    longitude: float
    distance_m: float
    timestamp: Optional[datetime] = None

class CategoryInfo(BaseModel):
    """범죄 카테고리 분류 결과"""
    model_config = ConfigDict(frozen=True)

    category: str
    label: str
    color: str
    priority: int

class SourceMeta(BaseModel):
    """레코드 출처 메타데이터"""
    model_config = ConfigDict(frozen=True)

    source: Source = "unknown"
    street: Optional[str] = None
    description: Optional[str] = None
    period: Optional[str] = None
    outcome_status: Optional[str] = None

class NormalizedCrime(BaseModel):
    """정규화된 범죄/사건 레코드"""
    model_config = ConfigDict(frozen=True)

    id: str
    category: str
    latitude: float
    longitude: float
    display_label: str
    color_weight: str
    priority: int
    source_meta: SourceMeta = Field(default_factory=SourceMeta)

    @property
    def location(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

class SessionStats(BaseModel):
    """카테고리별 집계"""
    model_config = ConfigDict(frozen=True)

    total: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)

    def count(self, category: str) -> int:
        return self.by_category.get(category, 0)

class FeedResult(BaseModel):
    """정규화 결과 (출력 + 건너뛴/중복 레코드 수)"""
    crimes: List[NormalizedCrime] = Field(default_factory=list)
    skipped: int = 0
    duplicates: int = 0
