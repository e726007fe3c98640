"""
Surface provider.

A surface is a Pillow image in ``RGBA`` mode. :py:func:`create_surface`
allocates a fully transparent one together with a
:py:class:`~canvas_clip.context.Context2D` bound to it::

    surface, context = create_surface(200, 100)
    context.draw_image(image, 0, 0)
"""

from typing import Tuple

from PIL import Image

from canvas_clip.color import TRANSPARENT
from canvas_clip.context import Context2D


def create_surface(width: float, height: float) -> Tuple[Image.Image, Context2D]:
    """
    Create a transparent surface and a drawing context bound to it.

    Sizes are truncated to integers the way canvas dimensions are, and
    negative sizes produce an empty surface.

    :param width: Width in pixels.
    :param height: Height in pixels.
    :return: Tuple of (surface, context)
    """
    size = (max(0, int(width)), max(0, int(height)))
    surface = Image.new("RGBA", size, TRANSPARENT)
    return surface, Context2D(surface)


def get_context(surface: Image.Image) -> Context2D:
    """
    Return a new drawing context for an existing surface.

    Style state belongs to the context, so every call starts from the
    default fill color, font and shadow.

    :param surface: PIL Image in ``RGBA`` mode.
    :return: :py:class:`~canvas_clip.context.Context2D`
    """
    return Context2D(surface)
