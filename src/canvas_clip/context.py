"""
2D drawing context.

:py:class:`Context2D` offers the subset of the HTML canvas 2D API used by the
transform handlers, on top of a Pillow ``RGBA`` image:

- ``draw_image``, ``fill_rect`` and ``fill_text`` composite with source-over
- ``begin_path``, ``move_to``, ``line_to``, ``arc_to``, ``close_path`` and
  ``clip`` restrict subsequent drawing to a path
- ``fill_style``, ``font``, ``text_baseline``, ``text_align``,
  ``shadow_color``, ``shadow_blur``, ``shadow_offset_x`` and
  ``shadow_offset_y`` style properties

Every drawing operation renders into a transparent layer the size of the
surface, applies the shadow and the clip mask to it, and composites the result
onto the surface in place.

Like canvas, assigning an invalid value to a style property is ignored and the
previous value is kept.

Example::

    from canvas_clip.surface import create_surface

    surface, context = create_surface(100, 40)
    context.fill_style = '#fff'
    context.fill_rect(0, 0, 100, 40)
    context.font = '16px sans-serif'
    context.fill_style = '#000'
    context.fill_text('Hello', 4, 4)
"""

import logging
import math
from typing import Optional

import numpy as np
from PIL import Image, ImageDraw, ImageFilter, ImageFont

from canvas_clip import color as color_utils
from canvas_clip import font as font_utils
from canvas_clip.constants import TextAlign, TextBaseline
from canvas_clip.path import Path

logger = logging.getLogger(__name__)

_WHITESPACE = str.maketrans("\t\n\x0b\x0c\r", "     ")


class Context2D:
    """
    Canvas-like drawing context bound to a surface.

    :param surface: PIL Image in ``RGBA`` mode, modified in place.
    :raises ValueError: If the surface is not ``RGBA``.
    """

    def __init__(self, surface: Image.Image):
        if surface.mode != "RGBA":
            raise ValueError("Surface must be in RGBA mode, got %s" % surface.mode)
        self._surface = surface
        self._path = Path()
        self._clip_mask: Optional[Image.Image] = None

        self._fill_style = "#000000"
        self._fill_rgba = color_utils.parse_color(self._fill_style)
        self._font = font_utils.DEFAULT_FONT
        self._font_key = font_utils.parse_font(self._font)
        self._text_baseline = TextBaseline.ALPHABETIC
        self._text_align = TextAlign.START
        self._shadow_color = "rgba(0, 0, 0, 0)"
        self._shadow_rgba = color_utils.TRANSPARENT
        self._shadow_blur = 0.0
        self._shadow_offset_x = 0.0
        self._shadow_offset_y = 0.0

    def __repr__(self) -> str:
        return "%s(size=%dx%d)" % (self.__class__.__name__, self.width, self.height)

    @property
    def canvas(self) -> Image.Image:
        """The surface this context draws into."""
        return self._surface

    @property
    def width(self) -> int:
        return self._surface.width

    @property
    def height(self) -> int:
        return self._surface.height

    @property
    def fill_style(self) -> str:
        """Fill color as a CSS color string."""
        return self._fill_style

    @fill_style.setter
    def fill_style(self, value: str) -> None:
        try:
            self._fill_rgba = color_utils.parse_color(value)
        except ValueError:
            logger.debug("Ignoring invalid fill style %r", value)
            return
        self._fill_style = value

    @property
    def font(self) -> str:
        """Font as a CSS shorthand string, e.g. ``'16px sans-serif'``."""
        return self._font

    @font.setter
    def font(self, value: str) -> None:
        try:
            self._font_key = font_utils.parse_font(value)
        except ValueError:
            logger.debug("Ignoring invalid font %r", value)
            return
        self._font = value

    @property
    def text_baseline(self) -> str:
        return self._text_baseline.value

    @text_baseline.setter
    def text_baseline(self, value: str) -> None:
        try:
            self._text_baseline = TextBaseline(value)
        except ValueError:
            logger.debug("Ignoring invalid text baseline %r", value)

    @property
    def text_align(self) -> str:
        return self._text_align.value

    @text_align.setter
    def text_align(self, value: str) -> None:
        try:
            self._text_align = TextAlign(value)
        except ValueError:
            logger.debug("Ignoring invalid text align %r", value)

    @property
    def shadow_color(self) -> str:
        return self._shadow_color

    @shadow_color.setter
    def shadow_color(self, value: str) -> None:
        try:
            self._shadow_rgba = color_utils.parse_color(value)
        except ValueError:
            logger.debug("Ignoring invalid shadow color %r", value)
            return
        self._shadow_color = value

    @property
    def shadow_blur(self) -> float:
        return self._shadow_blur

    @shadow_blur.setter
    def shadow_blur(self, value: float) -> None:
        if _is_finite(value) and value >= 0:
            self._shadow_blur = float(value)

    @property
    def shadow_offset_x(self) -> float:
        return self._shadow_offset_x

    @shadow_offset_x.setter
    def shadow_offset_x(self, value: float) -> None:
        if _is_finite(value):
            self._shadow_offset_x = float(value)

    @property
    def shadow_offset_y(self) -> float:
        return self._shadow_offset_y

    @shadow_offset_y.setter
    def shadow_offset_y(self, value: float) -> None:
        if _is_finite(value):
            self._shadow_offset_y = float(value)

    def begin_path(self) -> None:
        self._path = Path()

    def move_to(self, x: float, y: float) -> None:
        self._path.move_to(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.line_to(x, y)

    def arc_to(self, x1: float, y1: float, x2: float, y2: float, radius: float) -> None:
        self._path.arc_to(x1, y1, x2, y2, radius)

    def close_path(self) -> None:
        self._path.close_path()

    def clip(self) -> None:
        """Intersect the clipping region with the current path."""
        mask = self._path.rasterize(self._surface.size)
        if self._clip_mask is None:
            self._clip_mask = mask
        else:
            self._clip_mask = _multiply(self._clip_mask, mask)

    def draw_image(self, image: Image.Image, dx: float, dy: float) -> None:
        """
        Draw ``image`` with its top-left corner at ``(dx, dy)``.

        Parts outside the surface are discarded. Fractional offsets snap to
        the nearest pixel, with halves rounding up.
        """
        if self._is_empty() or 0 in image.size:
            return
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        layer = self._new_layer()
        layer.paste(image, (_snap(dx), _snap(dy)))
        self._composite(layer)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        """Fill a rectangle with :py:attr:`fill_style`."""
        if self._is_empty():
            return
        left, right = sorted((x, x + width))
        top, bottom = sorted((y, y + height))
        left, top = _snap(left), _snap(top)
        right, bottom = _snap(right), _snap(bottom)
        if right <= left or bottom <= top:
            return
        layer = self._new_layer()
        ImageDraw.Draw(layer).rectangle(
            (left, top, right - 1, bottom - 1), fill=self._fill_rgba
        )
        self._composite(layer)

    def fill_text(self, text: str, x: float, y: float) -> None:
        """
        Draw ``text`` at ``(x, y)`` with :py:attr:`fill_style`, anchored by
        :py:attr:`text_align` and :py:attr:`text_baseline`.
        """
        text = text.translate(_WHITESPACE)
        if not text or self._is_empty():
            return
        size, families = self._font_key
        pil_font = font_utils.load_font(families, size)
        anchor = None
        if isinstance(pil_font, ImageFont.FreeTypeFont):
            anchor = self._text_align.anchor + self._text_baseline.anchor
        # Rasterize coverage first so anti-aliased edges keep the fill color.
        coverage = Image.new("L", self._surface.size, 0)
        ImageDraw.Draw(coverage).text(
            (x, y), text, font=pil_font, fill=255, anchor=anchor
        )
        alpha = np.asarray(coverage, dtype=np.float32) * (self._fill_rgba[3] / 255.0)
        layer = Image.new("RGBA", self._surface.size, self._fill_rgba[:3] + (0,))
        layer.putalpha(Image.fromarray(np.rint(alpha).astype(np.uint8), "L"))
        self._composite(layer)

    def measure_text(self, text: str) -> float:
        """Return the advance width of ``text`` in pixels."""
        size, families = self._font_key
        return float(font_utils.load_font(families, size).getlength(text))

    def _is_empty(self) -> bool:
        return self._surface.width == 0 or self._surface.height == 0

    def _new_layer(self) -> Image.Image:
        return Image.new("RGBA", self._surface.size, color_utils.TRANSPARENT)

    def _has_shadow(self) -> bool:
        return self._shadow_rgba[3] > 0 and (
            self._shadow_blur > 0
            or self._shadow_offset_x != 0
            or self._shadow_offset_y != 0
        )

    def _render_shadow(self, layer: Image.Image) -> Image.Image:
        """
        Render the shadow of ``layer``: its alpha tinted with the shadow
        color, offset, then blurred with a standard deviation of half the
        shadow blur.
        """
        alpha = np.asarray(layer.getchannel("A"), dtype=np.float32)
        alpha = alpha * (self._shadow_rgba[3] / 255.0)
        shifted = Image.new("L", layer.size, 0)
        shifted.paste(
            Image.fromarray(np.rint(alpha).astype(np.uint8), "L"),
            (_snap(self._shadow_offset_x), _snap(self._shadow_offset_y)),
        )
        if self._shadow_blur > 0:
            shifted = shifted.filter(ImageFilter.GaussianBlur(self._shadow_blur / 2.0))
        shadow = Image.new("RGBA", layer.size, self._shadow_rgba[:3] + (0,))
        shadow.putalpha(shifted)
        return shadow

    def _apply_clip(self, layer: Image.Image) -> None:
        if self._clip_mask is None:
            return
        layer.putalpha(_multiply(layer.getchannel("A"), self._clip_mask))

    def _composite(self, layer: Image.Image) -> None:
        if self._has_shadow():
            shadow = self._render_shadow(layer)
            self._apply_clip(shadow)
            self._surface.alpha_composite(shadow)
        self._apply_clip(layer)
        self._surface.alpha_composite(layer)


def _multiply(a: Image.Image, b: Image.Image) -> Image.Image:
    """Multiply two ``L`` masks."""
    product = np.asarray(a, dtype=np.float32) * np.asarray(b, dtype=np.float32)
    return Image.fromarray(np.rint(product / 255.0).astype(np.uint8), "L")


def _snap(value: float) -> int:
    """Round to the nearest integer, halves up."""
    return int(math.floor(value + 0.5))


def _is_finite(value: float) -> bool:
    try:
        return math.isfinite(value)
    except TypeError:
        return False
