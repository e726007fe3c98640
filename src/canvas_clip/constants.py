"""
Various constants for canvas_clip
"""
from enum import Enum


class OrderType(Enum):
    """
    Kind of an image order.
    """
    CLIP = "clip"
    MARK = "mark"
    ROUND = "round"
    SHADOW = "shadow"
    BACKGROUND = "background"


class TextBaseline(Enum):
    """
    Vertical text anchor, as in the 2D canvas ``textBaseline`` property.
    """
    TOP = "top"
    HANGING = "hanging"
    MIDDLE = "middle"
    ALPHABETIC = "alphabetic"
    IDEOGRAPHIC = "ideographic"
    BOTTOM = "bottom"

    @property
    def anchor(self) -> str:
        """Vertical part of the Pillow text anchor."""
        return {
            TextBaseline.TOP: "a",
            TextBaseline.HANGING: "t",
            TextBaseline.MIDDLE: "m",
            TextBaseline.ALPHABETIC: "s",
            TextBaseline.IDEOGRAPHIC: "d",
            TextBaseline.BOTTOM: "d",
        }[self]


class TextAlign(Enum):
    """
    Horizontal text anchor, as in the 2D canvas ``textAlign`` property.

    ``start`` and ``end`` resolve for left-to-right text.
    """
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    START = "start"
    END = "end"

    @property
    def anchor(self) -> str:
        """Horizontal part of the Pillow text anchor."""
        return {
            TextAlign.LEFT: "l",
            TextAlign.START: "l",
            TextAlign.CENTER: "m",
            TextAlign.RIGHT: "r",
            TextAlign.END: "r",
        }[self]


class ImageFormat(Enum):
    """
    Encoding formats supported by data URI export.
    """
    PNG = "PNG"
    JPEG = "JPEG"
    WEBP = "WEBP"

    @property
    def mime_type(self) -> str:
        return "image/%s" % self.value.lower()

    @property
    def has_alpha(self) -> bool:
        return self is not ImageFormat.JPEG
