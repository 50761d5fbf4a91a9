import numpy as np
import pytest
from PIL import Image

from thumbgen.compositor import BASELINE_FACTOR, compose_thumbnail, resolve_badge_box
from thumbgen.errors import InputError
from thumbgen.template import BadgeConfig, Item, resolve_template

QUIET = {"effects": {"textureSteps": 0}}


def compose(surface, item, template=QUIET, **kwargs):
    return compose_thumbnail(surface, item, template, np.random.default_rng(1), **kwargs)


def test_title_layout_is_centered_on_baselines(surface):
    layout = compose(surface, Item(id=1, title="Hello World"))

    assert layout.fit.font_size == 132
    assert layout.fit.lines == ("Hello World",)
    assert layout.line_height == 140
    assert layout.first_baseline == pytest.approx((720 - 140) / 2 + 132 * BASELINE_FACTOR)

    strokes = surface.named("stroke_text")
    fills = [c for c in surface.named("fill_text") if c[1] == "Hello World"]
    assert len(strokes) == 1 and len(fills) == 1
    assert strokes[0][2] == 72
    assert strokes[0][5] == 10
    # outline goes under the fill
    assert surface.calls.index(strokes[0]) < surface.calls.index(fills[0])


def test_multiline_title_baselines_step_by_line_height(surface):
    template = {"effects": {"textureSteps": 0}, "layout": {"padding": 400}}
    layout = compose(surface, Item(id=1, title="one two three four"), template)

    assert len(layout.fit.lines) > 1
    ys = [c[3] for c in surface.named("stroke_text")]
    assert ys[0] == pytest.approx(layout.first_baseline)
    assert ys[1] - ys[0] == pytest.approx(layout.line_height)


def test_empty_title_is_rejected(surface):
    with pytest.raises(InputError):
        compose(surface, Item(id=3, title="   "))
    assert surface.calls == []


def test_no_badge_without_badge_text(surface):
    layout = compose(surface, Item(id=1, title="Title", badge=""))
    assert layout.badge is None
    assert surface.named("rounded_rect") == []


def test_badge_is_upper_cased_pill(surface):
    layout = compose(surface, Item(id=1, title="Title", badge="new"))

    box = layout.badge
    assert box.text == "NEW"
    # 3 chars * 42px * 0.5 + 2 * 22 padding
    assert box.width == pytest.approx(63 + 44)
    assert box.height == pytest.approx(42 + 24)
    assert (box.x, box.y) == (72, 72)
    assert box.radius == pytest.approx(33)

    rect = surface.named("rounded_rect")[0]
    assert rect[1:6] == (box.x, box.y, box.width, box.height, box.radius)
    label = [c for c in surface.named("fill_text") if c[1] == "NEW"][0]
    assert label[5] == "lm"
    assert label[2] == pytest.approx(72 + 22)
    assert label[3] == pytest.approx(72 + 33)


@pytest.mark.parametrize("position,expected", [
    ("top-left", (30, 30)),
    ("top-right", (1280 - 30 - 100, 30)),
    ("bottom-left", (30, 720 - 30 - 60)),
    ("bottom-right", (1280 - 30 - 100, 720 - 30 - 60)),
    ("middle", (30, 30)),
])
def test_badge_positions(position, expected):
    config = BadgeConfig(font_size=40, padding_x=10, padding_y=10, margin=30, position=position)
    box = resolve_badge_box("TAG", 80, config, 1280, 720)
    assert (box.x, box.y) == expected
    assert (box.width, box.height) == (100, 60)


def test_badge_radius_clamped_to_half_the_smaller_side():
    box = resolve_badge_box("X", 200, BadgeConfig(radius=999), 1280, 720)
    assert box.radius == box.height / 2
    box = resolve_badge_box("X", 200, BadgeConfig(radius=4), 1280, 720)
    assert box.radius == 4


def test_footer_falls_back_to_template_default(surface):
    template = {"effects": {"textureSteps": 0}, "defaults": {"footer": "My Channel"}}
    layout = compose(surface, Item(id=1, title="Title"), template)

    assert layout.footer_text == "My Channel"
    footer = [c for c in surface.named("fill_text") if c[1] == "My Channel"][0]
    assert footer[2:4] == (72, 720 - 30)
    assert footer[5] == "ld"


def test_item_footer_wins_over_default(surface):
    template = {"effects": {"textureSteps": 0}, "defaults": {"footer": "Default"}}
    layout = compose(surface, Item(id=1, title="Title", footer="Mine"), template)
    assert layout.footer_text == "Mine"


def test_no_footer_when_both_empty(surface):
    layout = compose(surface, Item(id=1, title="Title"))
    assert layout.footer_text == ""
    assert [c[1] for c in surface.named("fill_text")] == ["Title"]


def test_shadow_applies_to_title_only(surface):
    template = {"effects": {"textureSteps": 0, "shadow": True}}
    compose(surface, Item(id=1, title="Title", badge="hot", footer="Chan"), template)

    by_text = {c[1]: c[6] for c in surface.named("fill_text")}
    assert by_text["Title"] is not None
    assert by_text["Title"].blur == 22
    assert by_text["HOT"] is None
    assert by_text["Chan"] is None


def test_generated_background_draws_texture(surface):
    template = resolve_template({"effects": {"textureSteps": 25}})
    compose(surface, Item(id=1, title="Title"), template)
    assert len(surface.named("linear")) == 1
    assert len(surface.named("radial")) == 25


def test_frame_background_replaces_generated_one(surface):
    frame = Image.new("RGB", (640, 360), "red")
    compose(surface, Item(id=1, title="Title"), frame=frame)
    assert surface.named("blit") == [("blit", (1280, 720), 0, 0)]
    assert surface.named("radial") == []
