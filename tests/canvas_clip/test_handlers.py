import logging

import numpy as np
import pytest
from PIL import Image

from canvas_clip import handlers
from canvas_clip.config import PipelineConfig
from canvas_clip.orders import (
    BackgroundOrder,
    ClipOrder,
    MarkOrder,
    RoundOrder,
    ShadowOrder,
)

logger = logging.getLogger(__name__)

CONFIG = PipelineConfig()
RETINA = PipelineConfig(device_pixel_ratio=2.0)


def _alpha(image):
    return np.asarray(image.getchannel("A"))


@pytest.fixture
def surface():
    return Image.new("RGBA", (100, 40), (255, 0, 0, 255))


def test_registry_covers_all_orders():
    assert set(handlers.HANDLERS) == {
        ClipOrder,
        MarkOrder,
        RoundOrder,
        ShadowOrder,
        BackgroundOrder,
    }
    assert handlers.clip.order_class is ClipOrder


def test_apply_order_rejects_unknown(surface):
    with pytest.raises(TypeError):
        handlers.apply_order(surface, {"type": "clip"}, CONFIG)


@pytest.mark.parametrize(
    "order, expected",
    [
        (ClipOrder(0, 0, 50, 20), (50, 20)),
        (RoundOrder(10), (100, 40)),
        (ShadowOrder(shadow_blur=10), (120, 60)),
        (ShadowOrder(shadow_blur=0), (100, 40)),
        (BackgroundOrder("#fff"), (100, 40)),
        (MarkOrder("A", 0, 0), (100, 40)),
    ],
)
def test_output_size(surface, order, expected):
    assert handlers.apply_order(surface, order, CONFIG).size == expected


@pytest.mark.parametrize(
    "order, expected",
    [
        (ClipOrder(0, 0, 50, 20), (100, 40)),
        (ClipOrder(0, 0, 50, 20, use_device_pixel=False), (50, 20)),
        (ShadowOrder(shadow_blur=5), (120, 60)),
        (ShadowOrder(shadow_blur=5, use_device_pixel=False), (110, 50)),
    ],
)
def test_output_size_scaled(surface, order, expected):
    assert handlers.apply_order(surface, order, RETINA).size == expected


@pytest.mark.parametrize(
    "order",
    [ClipOrder(0, 0, 50, 20), RoundOrder(10), ShadowOrder(), BackgroundOrder("#fff")],
)
def test_handlers_do_not_modify_input(surface, order):
    before = np.asarray(surface).copy()
    result = handlers.apply_order(surface, order, CONFIG)
    assert result is not surface
    assert np.array_equal(np.asarray(surface), before)


def test_clip_translates_source():
    source = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
    source.putpixel((5, 6), (1, 2, 3, 255))
    result = handlers.clip(source, ClipOrder(4, 4, 4, 4), CONFIG)
    assert result.getpixel((1, 2)) == (1, 2, 3, 255)


def test_clip_out_of_bounds_is_transparent(surface):
    result = handlers.clip(surface, ClipOrder(80, 30, 40, 20), CONFIG)
    assert result.size == (40, 20)
    assert result.getpixel((0, 0)) == (255, 0, 0, 255)
    assert result.getpixel((19, 9)) == (255, 0, 0, 255)
    assert result.getpixel((20, 0))[3] == 0
    assert result.getpixel((0, 10))[3] == 0


def test_clip_negative_size_is_empty(surface):
    result = handlers.clip(surface, ClipOrder(0, 0, -10, 10), CONFIG)
    assert result.size == (0, 10)


def test_round_masks_corners(surface):
    result = handlers.round_(surface, RoundOrder(10), CONFIG)
    alpha = _alpha(result)
    for x, y in [(0, 0), (99, 0), (0, 39), (99, 39)]:
        assert alpha[y, x] == 0
    assert alpha[20, 50] == 255
    assert alpha[1, 50] == 255
    assert alpha[20, 1] == 255


def test_round_clamps_radius(surface):
    clamped = handlers.round_(surface, RoundOrder(1000), CONFIG)
    exact = handlers.round_(surface, RoundOrder(20), CONFIG)
    assert np.array_equal(np.asarray(clamped), np.asarray(exact))


def test_round_scales_radius(surface):
    scaled = handlers.round_(surface, RoundOrder(5), RETINA)
    exact = handlers.round_(surface, RoundOrder(10), CONFIG)
    assert np.array_equal(np.asarray(scaled), np.asarray(exact))


def test_round_zero_radius_keeps_corners(surface):
    result = handlers.round_(surface, RoundOrder(0), CONFIG)
    assert result.getpixel((1, 1)) == (255, 0, 0, 255)
    assert result.getpixel((98, 38)) == (255, 0, 0, 255)


def test_shadow_places_source_inset():
    source = Image.new("RGBA", (20, 10), (0, 0, 255, 255))
    result = handlers.shadow(source, ShadowOrder(shadow_blur=5), CONFIG)
    assert result.size == (30, 20)
    assert result.getpixel((5, 5)) == (0, 0, 255, 255)
    assert result.getpixel((24, 14)) == (0, 0, 255, 255)
    # Shadow below the source, shifted down by the offset.
    below = result.getpixel((15, 16))
    assert below[3] > 0
    assert abs(below[0] - 0x66) <= 2
    assert below[0] == below[1] == below[2]


def test_shadow_transparent_color_draws_nothing():
    source = Image.new("RGBA", (20, 10), (0, 0, 255, 255))
    result = handlers.shadow(
        source, ShadowOrder(shadow_color="transparent", shadow_blur=5), CONFIG
    )
    alpha = _alpha(result)
    assert alpha[5:15, 5:25].min() == 255
    assert alpha.sum() == 255 * 200


def test_shadow_offset_without_blur():
    source = Image.new("RGBA", (4, 4), (255, 255, 255, 255))
    order = ShadowOrder(
        shadow_color="#000", shadow_blur=0, shadow_offset_x=2, shadow_offset_y=2
    )
    result = handlers.shadow(source, order, CONFIG)
    assert result.size == (4, 4)
    assert result.getpixel((0, 0)) == (255, 255, 255, 255)


def test_background_fills_transparent_regions():
    source = Image.new("RGBA", (10, 10), (0, 0, 0, 0))
    source.putpixel((3, 3), (255, 0, 0, 255))
    result = handlers.background(source, BackgroundOrder("#00ff00"), CONFIG)
    assert result.getpixel((0, 0)) == (0, 255, 0, 255)
    assert result.getpixel((3, 3)) == (255, 0, 0, 255)


def test_background_composites_translucent_source():
    source = Image.new("RGBA", (2, 2), (255, 255, 255, 128))
    result = handlers.background(source, BackgroundOrder("black"), CONFIG)
    r, g, b, a = result.getpixel((0, 0))
    assert a == 255
    assert 120 <= r <= 136
    assert r == g == b


@pytest.mark.fonts
def test_mark_returns_same_surface(surface):
    order = MarkOrder("Hello", 50, 20, color="#fff", text_align="center",
                      text_baseline="middle")
    result = handlers.mark(surface, order, CONFIG)
    assert result is surface
    pixels = np.asarray(result)
    assert (pixels[..., 1] > 0).any()


@pytest.mark.fonts
def test_mark_is_deterministic():
    order = MarkOrder("Determinism", 2, 2, font_size=12)
    results = []
    for _ in range(2):
        surface = Image.new("RGBA", (120, 30), (255, 255, 255, 255))
        results.append(np.asarray(handlers.mark(surface, order, CONFIG)).copy())
    assert np.array_equal(results[0], results[1])


@pytest.mark.fonts
def test_mark_scales_position():
    order = MarkOrder("X", 40, 0, color="#000", font_size=10)
    surface = Image.new("RGBA", (100, 40), (255, 255, 255, 255))
    result = handlers.mark(surface, order, RETINA)
    pixels = np.asarray(result)
    # Text starts at x = 80 on a 2x display.
    assert pixels[:, :75, 0].min() == 255
    assert pixels[:, 80:, 0].min() < 255


@pytest.mark.parametrize(
    "blur, size, bbox",
    [
        (6.5, (33, 33), (7, 7, 27, 27)),
        (7.5, (35, 35), (8, 8, 28, 28)),
    ],
)
def test_shadow_fractional_blur_inset(blur, size, bbox):
    source = Image.new("RGBA", (20, 20), (0, 0, 255, 255))
    order = ShadowOrder(
        shadow_color="transparent", shadow_blur=blur, use_device_pixel=False
    )
    result = handlers.shadow(source, order, CONFIG)
    assert result.size == size
    assert result.getchannel("A").getbbox() == bbox
