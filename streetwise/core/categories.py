"""
Crime category taxonomy for StreetWise.

This module maps raw upstream category strings (UK Police street
crime categories and user report types) onto the canonical category
set with display labels, marker colours and priorities.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from streetwise.core.models import CategoryInfo

# 알 수 없는 카테고리용 중립 색상/우선순위
NEUTRAL_COLOR = "#999999"
LOWEST_PRIORITY = 99
FALLBACK_CATEGORY = "other"

# (정규 카테고리, 표시명, 색상, 우선순위) - 우선순위 0이 가장 심각
CATEGORY_ENTRIES: Tuple[CategoryInfo, ...] = (
    CategoryInfo(category="theft-from-person", label="Theft from person", color="#FF0000", priority=0),
    CategoryInfo(category="violent-crime", label="Violent crime", color="#CC0000", priority=0),
    CategoryInfo(category="robbery", label="Robbery", color="#FF3300", priority=1),
    CategoryInfo(category="weapons", label="Weapons", color="#990000", priority=1),
    CategoryInfo(category="theft", label="Theft", color="#EF4444", priority=1),
    CategoryInfo(category="other-theft", label="Other theft", color="#FF6600", priority=2),
    CategoryInfo(category="burglary", label="Burglary", color="#FF9900", priority=2),
    CategoryInfo(category="suspicious", label="Suspicious Activity", color="#F59E0B", priority=2),
    CategoryInfo(category="vehicle-crime", label="Vehicle crime", color="#FFCC00", priority=3),
    CategoryInfo(category="shoplifting", label="Shoplifting", color="#FF9966", priority=3),
    CategoryInfo(category="bicycle-theft", label="Bicycle theft", color="#66CCCC", priority=3),
    CategoryInfo(category="criminal-damage", label="Criminal damage", color="#FF6699", priority=3),
    CategoryInfo(category="drugs", label="Drugs", color="#669900", priority=4),
    CategoryInfo(category="public-order", label="Public order", color="#3399FF", priority=4),
    CategoryInfo(category="anti-social-behaviour", label="Anti-social behaviour", color="#9966FF", priority=4),
    CategoryInfo(category="other", label="Other crime", color=NEUTRAL_COLOR, priority=5),
    CategoryInfo(category="safe", label="Safe Zone", color="#10B981", priority=9),
)

# Police API 원본 문자열 → 정규 카테고리
CATEGORY_ALIASES: Mapping[str, str] = MappingProxyType({
    "theft-from-the-person": "theft-from-person",
    "criminal-damage-arson": "criminal-damage",
    "possession-of-weapons": "weapons",
    "other-crime": "other",
})

class CategoryTaxonomy:
    """불변 카테고리 조회 테이블"""

    def __init__(self,
                 entries: Iterable[CategoryInfo] = CATEGORY_ENTRIES,
                 aliases: Optional[Mapping[str, str]] = None):
        table = {}
        for info in entries:
            if info.category in table:
                raise ValueError(f"duplicate category: {info.category}")
            table[info.category] = info
        
        # 정규 카테고리는 자기 자신의 별칭 (재정규화 시 동일 결과)
        lookup = dict(table)
        for raw, canonical in (aliases if aliases is not None else CATEGORY_ALIASES).items():
            if canonical not in table:
                raise ValueError(f"alias {raw!r} points to unknown category {canonical!r}")
            lookup[raw] = table[canonical]
        
        self._entries = MappingProxyType(table)
        self._lookup = MappingProxyType(lookup)
        self._fallback = table.get(FALLBACK_CATEGORY) or CategoryInfo(
            category=FALLBACK_CATEGORY, label="Other crime", color=NEUTRAL_COLOR, priority=LOWEST_PRIORITY)

    @property
    def categories(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, raw: object) -> bool:
        return isinstance(raw, str) and raw.strip().lower() in self._lookup

    def classify(self, raw: Optional[str]) -> CategoryInfo:
        """
        원본 카테고리 문자열을 분류합니다.
        
        알 수 없는 문자열은 오류 없이 그대로 통과시키고
        중립 색상과 가장 낮은 우선순위를 부여합니다.
        
        Args:
            raw: 원본 카테고리 문자열
            
        Returns:
            분류 결과
        """
        text = (str(raw) if raw is not None else "").strip()
        key = text.lower()
        if not key:
            return self._fallback

        info = self._lookup.get(key)
        if info is not None:
            return info
        
        return CategoryInfo(category=text, label=text, color=NEUTRAL_COLOR, priority=LOWEST_PRIORITY)

DEFAULT_TAXONOMY = CategoryTaxonomy()
