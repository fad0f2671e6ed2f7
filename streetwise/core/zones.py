"""
Zone configuration for StreetWise.

This module holds the default London high-theft zones and the
loaders that turn configuration entries into an ordered, immutable
zone tuple.
"""

import csv
import json
import os
from typing import Any, Iterable, Mapping, Tuple, Union

from streetwise.core.models import Zone
from streetwise.observability.logging_setup import get_logger

log = get_logger("streetwise.zones")

ZoneLike = Union[Zone, Mapping[str, Any]]

# 범죄 통계 기준 런던 고위험 구역 (설정 순서 = 우선순위)
DEFAULT_ZONES: Tuple[Zone, ...] = (
    Zone(name="Westminster", latitude=51.4975, longitude=-0.1357, radius_m=1000),
    Zone(name="Camden Town", latitude=51.5394, longitude=-0.1426, radius_m=800),
    Zone(name="Shoreditch", latitude=51.5267, longitude=-0.0777, radius_m=700),
    Zone(name="Oxford Street", latitude=51.5152, longitude=-0.1413, radius_m=600),
    Zone(name="King's Cross", latitude=51.5308, longitude=-0.1246, radius_m=750),
    Zone(name="Brixton", latitude=51.4613, longitude=-0.1146, radius_m=800),
    Zone(name="Stratford", latitude=51.5415, longitude=-0.0023, radius_m=900),
    Zone(name="Elephant & Castle", latitude=51.4943, longitude=-0.0988, radius_m=700),
    Zone(name="Tottenham Court Road", latitude=51.5165, longitude=-0.1307, radius_m=500),
    Zone(name="Liverpool Street", latitude=51.5178, longitude=-0.0822, radius_m=600),
)

def build_zones(items: Iterable[ZoneLike]) -> Tuple[Zone, ...]:
    """
    구역 설정을 검증하고 순서를 유지한 튜플로 만듭니다.
    
    Args:
        items: Zone 또는 dict 목록
        
    Returns:
        불변 구역 튜플
        
    Raises:
        ValueError: 구역 이름이 중복되거나 값이 유효하지 않은 경우
    """
    zones = []
    seen = set()
    for item in items:
        zone = item if isinstance(item, Zone) else Zone.model_validate(dict(item))
        if zone.name in seen:
            raise ValueError(f"duplicate zone name: {zone.name}")
        seen.add(zone.name)
        zones.append(zone)
    return tuple(zones)

def load_zones(path: str) -> Tuple[Zone, ...]:
    """구역 설정을 JSON 또는 CSV 파일에서 로드합니다."""
    ext = os.path.splitext(path)[1].lower()
    
    if ext == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"zone file must contain a list: {path}")
        rows = data
    elif ext == ".csv":
        with open(path, newline="", encoding="utf-8") as f:
            try:
                rows = [
                    {
                        "name": r["name"],
                        "latitude": float(r["latitude"]),
                        "longitude": float(r["longitude"]),
                        "radius_m": float(r["radius_m"]),
                    }
                    for r in csv.DictReader(f)
                ]
            except KeyError as e:
                raise ValueError(f"zone file missing column {e}: {path}") from e
    else:
        raise ValueError(f"지원하지 않는 구역 파일 형식: {ext}")
    
    zones = build_zones(rows)
    log.info(f"구역 설정 로드 완료 path:{path} count:{len(zones)}")
    return zones
