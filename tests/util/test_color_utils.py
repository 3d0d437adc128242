from __future__ import annotations

import math

import pytest

from util.color import (
    clamp01,
    hsba_to_rgba,
    normalize_color,
    parse_hex_color_str,
    rgba_to_hsba,
    to_hex,
    to_u8_rgba,
)


def test_parse_hex_variants() -> None:
    assert parse_hex_color_str("#FF000080") == pytest.approx((1.0, 0.0, 0.0, 128 / 255))
    assert parse_hex_color_str("00ff00") == (0.0, 1.0, 0.0, 1.0)
    assert parse_hex_color_str("0x0000FF") == (0.0, 0.0, 1.0, 1.0)


@pytest.mark.parametrize("bad", ["#FFF", "#GGGGGG", "", "#123456789"])
def test_parse_hex_rejects_bad_input(bad: str) -> None:
    with pytest.raises(ValueError):
        parse_hex_color_str(bad)


def test_normalize_tuples() -> None:
    assert normalize_color((0.5, 0.5, 0.5)) == (0.5, 0.5, 0.5, 1.0)
    assert normalize_color((255, 0, 0)) == (1.0, 0.0, 0.0, 1.0)
    assert normalize_color([0, 0, 0, 0.5]) == (0.0, 0.0, 0.0, 0.5)
    with pytest.raises(ValueError):
        normalize_color(3)
    with pytest.raises(ValueError):
        normalize_color((1, 2))


def test_hex_round_trip_through_u8() -> None:
    assert to_hex("#1C594EFF") == "#1C594EFF"
    assert to_hex((1.0, 1.0, 1.0, 1.0), include_alpha=False) == "#FFFFFF"
    assert to_u8_rgba("#102225") == (0x10, 0x22, 0x25, 0xFF)


def test_clamp01() -> None:
    assert clamp01(-1) == 0.0
    assert clamp01(2) == 1.0
    assert clamp01(0.25) == 0.25


def test_rgba_to_hsba_known_values() -> None:
    h, s, b, a = rgba_to_hsba((1.0, 0.0, 0.0, 0.5))
    assert (h, s, b, a) == (0.0, 1.0, 1.0, 0.5)
    h, s, b, _ = rgba_to_hsba((0.5, 0.5, 0.5, 1.0))
    assert s == 0.0 and b == 0.5


@pytest.mark.parametrize(
    "bad", [(math.nan, 0.0, 0.0, 1.0), (1.5, 0.0, 0.0, 1.0), (0.0, -0.1, 0.0, 1.0), (0.0, 0.0, 0.0)]
)
def test_rgba_to_hsba_unrepresentable(bad) -> None:
    assert rgba_to_hsba(bad) is None


def test_hsba_to_rgba_wraps_hue_and_clamps() -> None:
    assert hsba_to_rgba(1.0, 1.0, 1.0, 1.0) == pytest.approx((1.0, 0.0, 0.0, 1.0))
    assert hsba_to_rgba(1 / 3, 2.0, 1.0, 2.0) == pytest.approx((0.0, 1.0, 0.0, 1.0))
