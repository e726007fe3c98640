"""
Font parsing and loading.

The drawing context takes fonts as CSS shorthand strings such as
``'16px sans-serif'``. Families are resolved to TrueType fonts installed on
the system; generic families map to common font files. When nothing can be
found, Pillow's built-in scalable font is used.
"""

import functools
import logging
import re
from typing import Tuple, Union

from PIL import ImageFont

logger = logging.getLogger(__name__)

Font = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

DEFAULT_FONT = "10px sans-serif"

GENERIC_FAMILIES = {
    "sans-serif": (
        "DejaVuSans.ttf",
        "LiberationSans-Regular.ttf",
        "Arial.ttf",
        "Helvetica.ttc",
    ),
    "serif": (
        "DejaVuSerif.ttf",
        "LiberationSerif-Regular.ttf",
        "Times New Roman.ttf",
        "Times.ttc",
    ),
    "monospace": (
        "DejaVuSansMono.ttf",
        "LiberationMono-Regular.ttf",
        "Courier New.ttf",
        "Menlo.ttc",
    ),
}

_FONT_RE = re.compile(
    r"^\s*(?:(?P<style>[a-z-]+(?:\s+[a-z0-9-]+)*)\s+)?"
    r"(?P<size>\d*\.?\d+)(?P<unit>px|pt)\s+(?P<family>.+?)\s*$",
    re.IGNORECASE,
)


def parse_font(value: str) -> Tuple[float, Tuple[str, ...]]:
    """
    Parse a CSS font shorthand into size in pixels and family names.

    Style and weight keywords preceding the size are accepted and ignored.

    :param value: e.g. ``'bold 16px "Noto Sans", sans-serif'``
    :return: ``(size, families)``
    :raises ValueError: If the string is not a font shorthand.
    """
    match = _FONT_RE.match(value)
    if not match:
        raise ValueError("Invalid font: %r" % value)
    size = float(match.group("size"))
    if match.group("unit").lower() == "pt":
        size = size * 4.0 / 3.0
    if size <= 0:
        raise ValueError("Invalid font size: %r" % value)
    families = tuple(
        name.strip().strip("\"'")
        for name in match.group("family").split(",")
        if name.strip().strip("\"'")
    )
    if not families:
        raise ValueError("Invalid font: %r" % value)
    return size, families


def _candidates(family: str) -> Tuple[str, ...]:
    generic = GENERIC_FAMILIES.get(family.lower())
    if generic:
        return generic
    if family.lower().endswith((".ttf", ".otf", ".ttc")):
        return (family,)
    return (family, family + ".ttf", family.replace(" ", "") + ".ttf")


@functools.lru_cache(maxsize=64)
def load_font(families: Tuple[str, ...], size: float) -> Font:
    """
    Load the first available font among ``families`` at ``size`` pixels.

    :param families: Family names or font file names, in preference order.
    :param size: Font size in pixels.
    :return: Pillow font object.
    """
    for family in families:
        for candidate in _candidates(family):
            try:
                return ImageFont.truetype(candidate, size)
            except OSError:
                continue
    logger.debug("No font found for %r, using the built-in font", families)
    return ImageFont.load_default(size=size)
