"""test_colors.py — Hex decoding and color-similarity filament search."""

from types import SimpleNamespace

import pytest

from printshop.services.colors import (
    MAX_RGB_DISTANCE,
    color_similarity,
    filament_matches_color,
    filter_by_color,
    hex_to_rgb,
)


def _spool(color, color2=None, color3=None, name="spool"):
    return SimpleNamespace(name=name, color=color, color2=color2, color3=color3)


class TestHexToRgb:

    @pytest.mark.parametrize("value,expected", [
        ("#ff8000", (255, 128, 0)),
        ("FF8000", (255, 128, 0)),
        ("#f80", (255, 136, 0)),
        ("#000000", (0, 0, 0)),
    ])
    def test_decodes(self, value, expected):
        assert hex_to_rgb(value) == expected

    @pytest.mark.parametrize("value", ["", "#12345", "#gg0000", "red", "#+10000", None])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            hex_to_rgb(value)


class TestSimilarity:

    def test_identical_is_100(self):
        assert color_similarity("#3a7bd5", "#3a7bd5") == 100

    def test_black_white_is_0(self):
        assert color_similarity("#000000", "#ffffff") == 0

    def test_symmetric(self):
        pairs = [("#3a7bd5", "#00d2ff"), ("#ff0000", "#00ff00"), ("#123456", "#654321")]
        for a, b in pairs:
            assert color_similarity(a, b) == color_similarity(b, a)

    def test_normalised_distance(self):
        expected = 100 - (255 / MAX_RGB_DISTANCE) * 100
        assert color_similarity("#ff0000", "#000000") == pytest.approx(expected)


class TestFilamentMatching:

    def test_primary_band(self):
        assert filament_matches_color(_spool("#ff0000"), "#fa0505")

    def test_secondary_band(self):
        assert filament_matches_color(_spool("#000000", color2="#00ff00"), "#05fa05")

    def test_tertiary_band(self):
        assert filament_matches_color(_spool("#000000", "#ffffff", "#0000ff"), "#0000f0")

    def test_threshold_controls_match(self):
        spool = _spool("#808080")
        similarity = color_similarity("#808080", "#a0a0a0")
        assert filament_matches_color(spool, "#a0a0a0", threshold=similarity)
        assert not filament_matches_color(spool, "#a0a0a0", threshold=similarity + 0.1)

    def test_filter_keeps_order(self):
        spools = [
            _spool("#ff0000", name="red"),
            _spool("#0000ff", name="blue"),
            _spool("#222222", color2="#fe0101", name="black-red"),
        ]
        assert [s.name for s in filter_by_color(spools, "#ff0000")] == ["red", "black-red"]

    def test_filter_rejects_bad_search_color(self):
        with pytest.raises(ValueError):
            filter_by_color([], "not-a-color")
