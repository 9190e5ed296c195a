from __future__ import annotations

import math

import pytest

from bigtext_overlay.display_config import (
    FONT_RATIO_MAX,
    FONT_RATIO_MIN,
    RGBA,
    WHITE,
    DisplayConfig,
    clamp_font_ratio,
    coerce_color,
    coerce_flag,
    commit,
    create_draft,
    discard,
)


@pytest.mark.parametrize("raw", [-5.0, 0.0, 0.05, 0.95, 1.0, 42.0, float("inf"), float("-inf")])
def test_clamp_font_ratio_stays_in_range_and_is_idempotent(raw):
    once = clamp_font_ratio(raw)
    assert FONT_RATIO_MIN <= once <= FONT_RATIO_MAX
    assert clamp_font_ratio(once) == once


def test_clamp_font_ratio_bounds_and_fallbacks():
    assert clamp_font_ratio(-1) == FONT_RATIO_MIN
    assert clamp_font_ratio(3) == FONT_RATIO_MAX
    assert clamp_font_ratio(0.42) == pytest.approx(0.42)
    assert clamp_font_ratio("0.3") == pytest.approx(0.3)
    assert clamp_font_ratio("bad") == 0.5
    assert clamp_font_ratio(float("nan"), fallback=0.7) == pytest.approx(0.7)


def test_display_config_clamps_on_construction():
    assert DisplayConfig(font_size_ratio=2.0).font_size_ratio == FONT_RATIO_MAX
    assert DisplayConfig(font_size_ratio=0.0).font_size_ratio == FONT_RATIO_MIN
    config = DisplayConfig(text=None, color="#ff000080", mirrored=1)  # type: ignore[arg-type]
    assert config.text == ""
    assert config.color == RGBA(255, 0, 0, 128)
    assert config.mirrored is True


def test_display_config_is_frozen():
    config = DisplayConfig(text="hi")
    with pytest.raises(AttributeError):
        config.text = "changed"  # type: ignore[misc]
    assert config.text == "hi"
    assert DisplayConfig(mirrored="off").mirrored is False


def test_coerce_color_variants():
    assert coerce_color("#00ff00") == RGBA(0, 255, 0, 255)
    assert coerce_color("0000ffcc") == RGBA(0, 0, 255, 204)
    assert coerce_color((1.0, 0.0, 0.0)) == RGBA(255, 0, 0, 255)
    assert coerce_color((10, 20, 30, 40)) == RGBA(10, 20, 30, 40)
    assert coerce_color((300, -4, 0)) == RGBA(255, 0, 0, 255)
    assert coerce_color("nope") is None
    assert coerce_color(["a", 1, 2]) is None
    assert coerce_color((True, 0, 0)) is None
    assert coerce_color(12, WHITE) is WHITE
    assert RGBA(1, 2, 3, 4).hex() == "#01020304"
    assert RGBA.from_floats(0.5, 0.0, 1.0, float("nan")).as_tuple() == (128, 0, 255, 0)


def test_draft_is_a_value_copy():
    config = DisplayConfig(text="committed", font_size_ratio=0.4)
    draft = create_draft(config)
    draft.set_field("text", "edited")
    draft.set_field("font_size_ratio", 0.8)
    assert config.text == "committed"
    assert math.isclose(config.font_size_ratio, 0.4)
    assert draft.text == "edited"


def test_draft_set_field_clamps_and_reports_changes():
    draft = create_draft(DisplayConfig())
    assert draft.set_field("fontSizeRatio", 5.0) is True
    assert draft.font_size_ratio == FONT_RATIO_MAX
    assert draft.set_field("font_size_ratio", 7.0) is False
    assert draft.set_field("font_size_ratio", "garbage") is False
    assert draft.font_size_ratio == FONT_RATIO_MAX
    assert draft.set_field("color", "#123456") is True
    assert draft.set_field("color", "not a color") is False
    assert draft.color == RGBA(0x12, 0x34, 0x56)
    assert draft.set_field("mirrored", True) is True
    assert draft.set_field("mirrored", True) is False
    assert draft.set_field("text", None) is False
    assert draft.set_field("unknown", 1) is False


def test_commit_copies_every_field_and_closes_draft():
    draft = create_draft(DisplayConfig(text="a"))
    draft.set_field("text", "b")
    draft.set_field("color", (0, 0, 255))
    draft.set_field("font_size_ratio", 0.25)
    draft.set_field("mirrored", True)

    config = commit(draft)

    assert config == DisplayConfig(text="b", color=RGBA(0, 0, 255), font_size_ratio=0.25, mirrored=True)
    assert draft.closed is True
    assert draft.set_field("text", "late") is False
    assert config.text == "b"


def test_discard_closes_draft():
    draft = create_draft(DisplayConfig())
    discard(draft)
    assert draft.closed is True
    assert draft.set_field("mirrored", True) is False


def test_integer_channel_tuples_are_eight_bit():
    assert coerce_color((1, 1, 1)) == RGBA(1, 1, 1, 255)
    assert coerce_color((1.0, 1.0, 1.0)) == WHITE
    assert coerce_color((1, 1.0, 0)) == RGBA(255, 255, 0, 255)
    assert coerce_color((128.0, 0, 0)) == RGBA(128, 0, 0, 255)


def test_coerce_flag_parses_strings_and_numbers():
    assert coerce_flag(True) is True
    assert coerce_flag(0) is False
    assert coerce_flag(2.5) is True
    assert coerce_flag(" Yes ") is True
    assert coerce_flag("false") is False
    assert coerce_flag("off") is False
    assert coerce_flag("maybe") is None
    assert coerce_flag(None) is None


def test_mirrored_string_edits_are_parsed_not_truthy():
    draft = create_draft(DisplayConfig(mirrored=True))
    assert draft.set_field("mirrored", "false") is True
    assert draft.mirrored is False
    assert draft.set_field("mirrored", "on") is True
    assert draft.mirrored is True
    assert draft.set_field("mirrored", "sideways") is False
    assert draft.mirrored is True
