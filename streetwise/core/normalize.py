"""
Crime feed normalization for StreetWise.

This module contains pure functions for converting raw crime and
incident records from heterogeneous sources (UK Police street crime
records, user incident reports, previously normalized records) into
a deduplicated, classified NormalizedCrime collection.
"""

import hashlib
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from streetwise.common.geo import parse_coordinate, validate_coordinates
from streetwise.core.categories import DEFAULT_TAXONOMY, CategoryTaxonomy
from streetwise.core.models import FeedResult, NormalizedCrime, SourceMeta
from streetwise.observability.logging_setup import get_logger

log = get_logger("streetwise.normalize")

Record = Mapping[str, Any]

def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    # Firestore Timestamp 등 to_datetime()/isoformat()을 가진 객체
    for attr in ("to_datetime", "isoformat"):
        fn = getattr(value, attr, None)
        if callable(fn):
            result = fn()
            return result.isoformat() if isinstance(result, datetime) else str(result)
    text = str(value).strip()
    return text or None

def _nested(raw: Record, *path: str) -> Any:
    cur: Any = raw
    for key in path:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    return cur

def _first(*values: Any) -> Any:
    for v in values:
        if v is not None and v != "":
            return v
    return None

def _source(raw: Record) -> str:
    meta_source = _nested(raw, "source_meta", "source")
    if meta_source in ("police", "report"):
        return meta_source
    if "persistent_id" in raw or isinstance(raw.get("location"), Mapping):
        return "police"
    if "type" in raw or "lat" in raw:
        return "report"
    return "unknown"

def synthetic_id(category: str, lat: float, lon: float, period: Optional[str]) -> str:
    """
    식별자가 없는 레코드의 결정적 ID를 생성합니다.
    
    동일한 레코드를 다시 가져와도 같은 ID가 되도록
    (카테고리, 반올림한 좌표, 기간)에서 도출합니다.
    """
    key = f"{category}|{lat:.5f}|{lon:.5f}|{period or ''}"
    return "syn-" + hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]

def normalize_record(raw: Any, *, taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY) -> Optional[NormalizedCrime]:
    """
    단일 원본 레코드를 정규화합니다.
    
    Args:
        raw: 원본 레코드 (dict 또는 NormalizedCrime)
        taxonomy: 카테고리 분류표
        
    Returns:
        정규화된 레코드, 좌표가 유효하지 않으면 None
    """
    if isinstance(raw, NormalizedCrime):
        raw = raw.model_dump()
    if not isinstance(raw, Mapping):
        return None
    
    # 좌표 추출 (Police: location.latitude, 신고: lat/lng, 정규화: latitude/longitude)
    lat = parse_coordinate(_first(_nested(raw, "location", "latitude"), raw.get("latitude"), raw.get("lat")))
    lon = parse_coordinate(_first(_nested(raw, "location", "longitude"), raw.get("longitude"),
                                  raw.get("lng"), raw.get("lon")))
    if lat is None or lon is None or not validate_coordinates(lat, lon):
        return None
    
    info = taxonomy.classify(_first(raw.get("category"), raw.get("type")))
    
    period = _text(_first(raw.get("month"), _nested(raw, "source_meta", "period"), raw.get("timestamp")))
    street = _text(_first(_nested(raw, "location", "street", "name"), _nested(raw, "source_meta", "street"),
                          raw.get("street")))
    description = _text(_first(raw.get("description"), raw.get("context"),
                               _nested(raw, "source_meta", "description")))
    outcome = _first(raw.get("outcome_status"), _nested(raw, "source_meta", "outcome_status"))
    if isinstance(outcome, Mapping):
        outcome = outcome.get("category")
    
    # ID: persistent_id 우선, 다음 id, 없으면 합성 ID
    record_id = _text(_first(raw.get("persistent_id"), raw.get("id")))
    if record_id is None:
        record_id = synthetic_id(info.category, lat, lon, period)
    
    return NormalizedCrime(
        id=record_id,
        category=info.category,
        latitude=lat,
        longitude=lon,
        display_label=info.label,
        color_weight=info.color,
        priority=info.priority,
        source_meta=SourceMeta(
            source=_source(raw),
            street=street,
            description=description,
            period=period,
            outcome_status=_text(outcome),
        ),
    )

def normalize_batches(batches: Iterable[Iterable[Any]], *,
                      taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY) -> FeedResult:
    """
    여러 배치를 연결하여 중복 제거/분류된 결과를 만듭니다.
    
    잘못된 좌표의 레코드는 제외하고 건너뛴 수로 집계하며,
    같은 ID는 처음 나온 레코드만 유지합니다. 배치 전체를
    거부하지 않습니다.
    
    Args:
        batches: 원본 레코드 배치 목록 (순서대로 연결)
        taxonomy: 카테고리 분류표
        
    Returns:
        FeedResult
    """
    crimes: List[NormalizedCrime] = []
    seen: Set[str] = set()
    skipped = 0
    duplicates = 0
    
    for batch in batches:
        for raw in batch or ():
            crime = normalize_record(raw, taxonomy=taxonomy)
            if crime is None:
                skipped += 1
                log.debug(f"좌표가 유효하지 않은 레코드 제외 record:{raw!r:.120}")
                continue
            if crime.id in seen:
                duplicates += 1
                continue
            seen.add(crime.id)
            crimes.append(crime)
    
    log.info(f"범죄 피드 정규화 완료 kept:{len(crimes)} skipped:{skipped} duplicates:{duplicates}")
    return FeedResult(crimes=crimes, skipped=skipped, duplicates=duplicates)

def normalize(*batches: Iterable[Any], taxonomy: CategoryTaxonomy = DEFAULT_TAXONOMY) -> List[NormalizedCrime]:
    return normalize_batches(batches, taxonomy=taxonomy).crimes
