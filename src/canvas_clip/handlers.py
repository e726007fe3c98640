"""
Transform handlers.

Each handler takes the current surface, an order and the pipeline config, and
returns the resulting surface. Handlers never modify their input surface,
except :py:func:`mark`, which draws onto the current surface and returns it.

Handlers are registered against their order class. :py:func:`apply_order`
dispatches on the class of the order, so an object that is not one of the
five order kinds is rejected rather than ignored.
"""

import logging
from typing import Callable, Tuple

from PIL import Image

from canvas_clip.config import PipelineConfig
from canvas_clip.orders import (
    BackgroundOrder,
    ClipOrder,
    ImageOrder,
    MarkOrder,
    RoundOrder,
    ShadowOrder,
)
from canvas_clip.registry import new_registry
from canvas_clip.surface import create_surface, get_context

logger = logging.getLogger(__name__)

Handler = Callable[[Image.Image, ImageOrder, PipelineConfig], Image.Image]

HANDLERS, register = new_registry(attribute="order_class")


def _scale(use_device_pixel: bool, config: PipelineConfig, *values: float) -> Tuple[float, ...]:
    if use_device_pixel:
        ratio = config.device_pixel_ratio
        return tuple(value * ratio for value in values)
    return values


def apply_order(
    surface: Image.Image, order: ImageOrder, config: PipelineConfig
) -> Image.Image:
    """
    Apply ``order`` to ``surface``.

    :param surface: Current surface.
    :param order: One of the order classes in :py:mod:`canvas_clip.orders`.
    :param config: Pipeline config providing the display scale factor.
    :return: Resulting surface.
    :raises TypeError: If ``order`` is not a registered order class.
    """
    handler = HANDLERS.get(type(order))
    if handler is None:
        raise TypeError("Unsupported order: %r" % (order,))
    logger.debug("Applying %r to %dx%d surface", order, surface.width, surface.height)
    return handler(surface, order, config)


@register(ClipOrder)
def clip(surface: Image.Image, order: ClipOrder, config: PipelineConfig) -> Image.Image:
    x, y, width, height = _scale(
        order.use_device_pixel, config, order.x, order.y, order.width, order.height
    )
    canvas, context = create_surface(width, height)
    context.draw_image(surface, -x, -y)
    return canvas


@register(MarkOrder)
def mark(surface: Image.Image, order: MarkOrder, config: PipelineConfig) -> Image.Image:
    x, y, font_size = _scale(
        order.use_device_pixel, config, order.x, order.y, order.font_size
    )
    context = get_context(surface)
    context.font = "%gpx %s" % (font_size, order.font_family)
    context.text_baseline = order.text_baseline.value
    context.text_align = order.text_align.value
    context.fill_style = order.color
    context.fill_text(order.text, x, y)
    return surface


def round_rect_path(context, x: float, y: float, width: float, height: float, radius: float) -> None:
    """
    Build a rounded rectangle path on ``context``.

    ``radius`` is clamped to half of the smaller side so that the corner arcs
    never overlap.
    """
    radius = min(radius, min(width, height) / 2)
    context.begin_path()
    context.move_to(x + radius, y)
    context.arc_to(x + width, y, x + width, y + height, radius)
    context.arc_to(x + width, y + height, x, y + height, radius)
    context.arc_to(x, y + height, x, y, radius)
    context.arc_to(x, y, x + width, y, radius)
    context.close_path()


@register(RoundOrder)
def round_(surface: Image.Image, order: RoundOrder, config: PipelineConfig) -> Image.Image:
    (radius,) = _scale(order.use_device_pixel, config, order.radius)
    width, height = surface.size
    canvas, context = create_surface(width, height)
    round_rect_path(context, 0, 0, width, height, max(0.0, radius))
    context.clip()
    context.draw_image(surface, 0, 0)
    return canvas


@register(ShadowOrder)
def shadow(surface: Image.Image, order: ShadowOrder, config: PipelineConfig) -> Image.Image:
    blur, offset_x, offset_y = _scale(
        order.use_device_pixel,
        config,
        order.shadow_blur,
        order.shadow_offset_x,
        order.shadow_offset_y,
    )
    width, height = surface.size
    canvas, context = create_surface(width + 2 * blur, height + 2 * blur)
    context.shadow_color = order.shadow_color
    context.shadow_blur = blur
    context.shadow_offset_x = offset_x
    context.shadow_offset_y = offset_y
    context.draw_image(surface, blur, blur)
    return canvas


@register(BackgroundOrder)
def background(
    surface: Image.Image, order: BackgroundOrder, config: PipelineConfig
) -> Image.Image:
    width, height = surface.size
    canvas, context = create_surface(width, height)
    context.fill_style = order.background_color
    context.fill_rect(0, 0, width, height)
    context.draw_image(surface, 0, 0)
    return canvas
