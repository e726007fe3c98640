"""
canvas-clip: asynchronous image editing pipeline.

This package applies an ordered sequence of raster transforms (crop, rounded
corners, drop shadow, background fill, text) to a source image and returns
the result as a data URI or a Pillow image.

Basic usage::

    import asyncio

    from canvas_clip import ImagePipeline

    async def main():
        pipeline = ImagePipeline('photo.png')
        pipeline.add_order([
            {'type': 'clip', 'options': {'x': 10, 'y': 10,
                                         'width': 100, 'height': 100}},
            {'type': 'round', 'options': {'radius': 12}},
            {'type': 'shadow', 'options': {'shadowBlur': 8}},
        ])
        uri = await pipeline.exec().get_uri()

    asyncio.run(main())

Architecture:

- :py:mod:`canvas_clip.pipeline`: Load, queue and drain state machine
- :py:mod:`canvas_clip.orders`: The five image order kinds
- :py:mod:`canvas_clip.handlers`: Per-order surface transforms
- :py:mod:`canvas_clip.surface`: Surface provider
- :py:mod:`canvas_clip.context`: Canvas-like 2D drawing context
"""

from canvas_clip.config import PipelineConfig
from canvas_clip.errors import LoadError
from canvas_clip.orders import (
    BackgroundOrder,
    ClipOrder,
    ImageOrder,
    MarkOrder,
    RoundOrder,
    ShadowOrder,
    parse_order,
)
from canvas_clip.pipeline import ImagePipeline
from canvas_clip.surface import create_surface, get_context
from canvas_clip.version import __version__

__all__ = [
    "BackgroundOrder",
    "ClipOrder",
    "ImageOrder",
    "ImagePipeline",
    "LoadError",
    "MarkOrder",
    "PipelineConfig",
    "RoundOrder",
    "ShadowOrder",
    "__version__",
    "create_surface",
    "get_context",
    "parse_order",
]
