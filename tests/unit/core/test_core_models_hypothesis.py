"""
hypothesis를 활용한 models / zones / categories / stats 테스트
"""

import json
import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from streetwise.core.categories import (
    CATEGORY_ENTRIES, DEFAULT_TAXONOMY, LOWEST_PRIORITY, NEUTRAL_COLOR, CategoryTaxonomy,
)
from streetwise.core.models import CategoryInfo, GeofenceState, NormalizedCrime, SessionStats, SourceMeta, Zone
from streetwise.core.stats import compute_stats
from streetwise.core.zones import DEFAULT_ZONES, build_zones, load_zones

CANONICAL = {
    "theft-from-person", "robbery", "other-theft", "burglary", "vehicle-crime",
    "anti-social-behaviour", "criminal-damage", "drugs", "public-order", "shoplifting",
    "bicycle-theft", "weapons", "violent-crime", "other", "theft", "suspicious", "safe",
}


class TestZoneModel:
    """Zone 모델 테스트"""
    
    def test_zone_valid(self):
        zone = Zone(name=" Brixton ", latitude=51.4613, longitude=-0.1146, radius_m=800)
        assert zone.name == "Brixton"
        assert zone.center == (51.4613, -0.1146)
    
    @pytest.mark.parametrize("radius", [0, -1])
    def test_zone_radius_must_be_positive(self, radius):
        with pytest.raises(ValidationError):
            Zone(name="z", latitude=51.5, longitude=-0.1, radius_m=radius)
    
    @pytest.mark.parametrize("lat,lon", [(91, 0), (0, 181), (float("nan"), 0)])
    def test_zone_center_must_be_valid(self, lat, lon):
        with pytest.raises(ValidationError):
            Zone(name="z", latitude=lat, longitude=lon, radius_m=10)
    
    def test_zone_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            Zone(name="   ", latitude=51.5, longitude=-0.1, radius_m=10)
    
    def test_zone_is_immutable(self):
        zone = DEFAULT_ZONES[0]
        with pytest.raises(ValidationError):
            zone.radius_m = 5
    
    def test_geofence_state_is_immutable(self):
        state = GeofenceState()
        with pytest.raises(ValidationError):
            state.current_zone = "Westminster"


class TestZoneConfig:
    """구역 설정 로드 테스트"""
    
    def test_default_zones(self):
        names = [z.name for z in DEFAULT_ZONES]
        assert len(names) == 10
        assert names[0] == "Westminster"
        assert len(set(names)) == len(names)
        westminster = DEFAULT_ZONES[0]
        assert westminster.center == (51.4975, -0.1357)
        assert westminster.radius_m == 1000
    
    def test_build_zones_from_dicts(self):
        zones = build_zones([
            {"name": "A", "latitude": 51.5, "longitude": -0.1, "radius_m": 100},
            {"name": "B", "latitude": 51.6, "longitude": -0.2, "radius_m": 200},
        ])
        assert [z.name for z in zones] == ["A", "B"]
        assert isinstance(zones, tuple)
    
    def test_build_zones_duplicate_names(self):
        with pytest.raises(ValueError, match="duplicate zone name"):
            build_zones([
                {"name": "A", "latitude": 51.5, "longitude": -0.1, "radius_m": 100},
                {"name": "A", "latitude": 51.6, "longitude": -0.2, "radius_m": 200},
            ])
    
    def test_load_zones_json(self, tmp_path):
        path = tmp_path / "zones.json"
        path.write_text(json.dumps([
            {"name": "Soho", "latitude": 51.5136, "longitude": -0.1365, "radius_m": 400},
        ]), encoding="utf-8")
        zones = load_zones(str(path))
        assert zones[0].name == "Soho"
        assert zones[0].radius_m == 400
    
    def test_load_zones_csv(self, tmp_path):
        path = tmp_path / "zones.csv"
        path.write_text(
            "name,latitude,longitude,radius_m\n"
            "Soho,51.5136,-0.1365,400\n"
            "Covent Garden,51.5117,-0.1240,350\n",
            encoding="utf-8",
        )
        zones = load_zones(str(path))
        assert [z.name for z in zones] == ["Soho", "Covent Garden"]
    
    def test_load_zones_csv_missing_column(self, tmp_path):
        """필수 열이 없으면 설정 오류"""
        path = tmp_path / "zones.csv"
        path.write_text("name,latitude,longitude\nSoho,51.5136,-0.1365\n", encoding="utf-8")
        with pytest.raises(ValueError, match="radius_m"):
            load_zones(str(path))
    
    def test_load_zones_unknown_extension(self, tmp_path):
        path = tmp_path / "zones.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            load_zones(str(path))
    
    def test_load_zones_json_must_be_list(self, tmp_path):
        path = tmp_path / "zones.json"
        path.write_text('{"name": "Soho"}', encoding="utf-8")
        with pytest.raises(ValueError):
            load_zones(str(path))


class TestCategoryTaxonomy:
    """카테고리 분류표 테스트"""
    
    def test_canonical_set(self):
        assert set(DEFAULT_TAXONOMY.categories) == CANONICAL
    
    @pytest.mark.parametrize("category", sorted(CANONICAL))
    def test_canonical_classifies_to_itself(self, category):
        assert DEFAULT_TAXONOMY.classify(category).category == category
    
    def test_user_report_colours(self):
        assert DEFAULT_TAXONOMY.classify("theft").color == "#EF4444"
        assert DEFAULT_TAXONOMY.classify("suspicious").color == "#F59E0B"
        assert DEFAULT_TAXONOMY.classify("safe").color == "#10B981"
    
    def test_case_and_whitespace_insensitive(self):
        assert DEFAULT_TAXONOMY.classify("  ROBBERY ").category == "robbery"
        assert "Theft-From-The-Person" in DEFAULT_TAXONOMY
    
    @given(raw=st.text(min_size=1, max_size=30).filter(
        lambda s: s.strip() and s.strip().lower() not in DEFAULT_TAXONOMY))
    def test_unknown_passes_through(self, raw):
        """알 수 없는 문자열은 앞뒤 공백만 제거하고 통과"""
        info = DEFAULT_TAXONOMY.classify(raw)
        assert info.category == raw.strip()
        assert info.label == raw.strip()
        assert DEFAULT_TAXONOMY.classify(info.category) == info
        assert info.color == NEUTRAL_COLOR
        assert info.priority == LOWEST_PRIORITY
    
    def test_padded_unknown_is_stripped(self):
        """공백이 붙은 미분류 문자열도 같은 카테고리로 집계"""
        padded = DEFAULT_TAXONOMY.classify("  pickpocket ")
        assert padded.category == "pickpocket"
        assert padded.label == "pickpocket"
        assert padded == DEFAULT_TAXONOMY.classify("pickpocket")
    
    def test_empty_is_other(self):
        assert DEFAULT_TAXONOMY.classify(None).category == "other"
        assert DEFAULT_TAXONOMY.classify("").category == "other"
    
    def test_custom_taxonomy_alias_must_exist(self):
        with pytest.raises(ValueError):
            CategoryTaxonomy(CATEGORY_ENTRIES, aliases={"x": "not-a-category"})
    
    def test_custom_taxonomy_duplicate_entry(self):
        entry = CategoryInfo(category="a", label="A", color="#000000", priority=0)
        with pytest.raises(ValueError):
            CategoryTaxonomy([entry, entry], aliases={})


def _crime(i, category):
    return NormalizedCrime(
        id=str(i), category=category, latitude=51.5, longitude=-0.1,
        display_label=category, color_weight="#999999", priority=5, source_meta=SourceMeta(),
    )


class TestComputeStats:
    """집계 테스트"""
    
    def test_empty(self):
        stats = compute_stats([])
        assert stats == SessionStats(total=0, by_category={})
        assert stats.count("robbery") == 0
    
    def test_counts(self):
        crimes = [_crime(0, "robbery"), _crime(1, "robbery"), _crime(2, "theft")]
        stats = compute_stats(crimes)
        assert stats.total == 3
        assert stats.count("robbery") == 2
        assert stats.count("theft") == 1
        assert stats.count("drugs") == 0
    
    @given(categories=st.lists(st.sampled_from(sorted(CANONICAL) + ["mystery"]), max_size=60))
    def test_totals_match(self, categories):
        """전체 건수 = 입력 길이 = 카테고리별 합"""
        crimes = [_crime(i, c) for i, c in enumerate(categories)]
        stats = compute_stats(crimes)
        assert stats.total == len(crimes)
        assert sum(stats.by_category.values()) == stats.total
    
    def test_recomputed_each_call(self):
        crimes = [_crime(0, "drugs")]
        first = compute_stats(crimes)
        crimes.append(_crime(1, "drugs"))
        assert first.total == 1
        assert compute_stats(crimes).total == 2
