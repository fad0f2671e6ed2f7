"""
Session statistics for StreetWise.
"""

from collections import Counter
from typing import Iterable

from streetwise.core.models import NormalizedCrime, SessionStats

def compute_stats(crimes: Iterable[NormalizedCrime]) -> SessionStats:
    """현재 범죄 목록에서 전체/카테고리별 건수를 매번 새로 계산합니다."""
    counts = Counter(crime.category for crime in crimes)
    return SessionStats(total=sum(counts.values()), by_category=dict(counts))
