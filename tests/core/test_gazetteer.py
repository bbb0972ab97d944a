"""Unit tests for place-name resolution.

Pure function tests - no mocks needed.
"""

from src.core.gazetteer import GAZETTEER, find_gazetteer_key, resolve_all, resolve_coordinate
from src.core.geo import Coordinate


class TestFindGazetteerKey:
    """Tests for find_gazetteer_key() lookup order."""

    def test_exact_match(self):
        assert find_gazetteer_key("宮城県沖") == "宮城県沖"

    def test_exact_match_beats_prefix(self):
        """和歌山県北部 is its own entry, not 和歌山県."""
        assert find_gazetteer_key("和歌山県北部") == "和歌山県北部"

    def test_prefix_match(self):
        assert find_gazetteer_key("福島県浜通り") == "福島県"
        assert find_gazetteer_key("輪島市門前町走出") == "輪島市"

    def test_substring_match(self):
        assert find_gazetteer_key("北部大阪府") == "大阪府"

    def test_no_match(self):
        assert find_gazetteer_key("アトランティス") is None
        assert find_gazetteer_key("") is None

    def test_no_normalization(self):
        """Whitespace is significant."""
        assert find_gazetteer_key(" 東京都") == "東京都"
        assert find_gazetteer_key("東 京都") is None

    def test_table_order_wins(self):
        table = {"大阪": (1.0, 1.0), "大阪府": (2.0, 2.0)}
        assert find_gazetteer_key("大阪府北部", table) == "大阪"


class TestResolveCoordinate:
    """Tests for resolve_coordinate()."""

    def test_resolves(self):
        assert resolve_coordinate("大阪府") == Coordinate(*GAZETTEER["大阪府"])

    def test_unresolvable(self):
        assert resolve_coordinate("不明") is None

    def test_custom_table(self):
        table = {"テスト": (10.0, 20.0)}
        assert resolve_coordinate("テスト地方", table) == Coordinate(10.0, 20.0)


class TestResolveAll:
    """Tests for resolve_all()."""

    def test_keeps_order_and_skips_unknown(self):
        result = resolve_all(["奈良県", "どこか", "徳島県"])

        assert result == [
            Coordinate(*GAZETTEER["奈良県"]),
            Coordinate(*GAZETTEER["徳島県"]),
        ]

    def test_empty(self):
        assert resolve_all([]) == []


class TestGazetteerTable:
    """Sanity checks on the static table."""

    def test_has_all_prefectures(self):
        prefectures = [k for k in GAZETTEER if k.endswith(("都", "道", "府", "県"))]
        assert len(prefectures) >= 47

    def test_coordinates_are_in_japan(self):
        for name, (lat, lon) in GAZETTEER.items():
            assert 20 <= lat <= 50, name
            assert 120 <= lon <= 155, name
