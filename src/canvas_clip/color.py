"""
CSS color parsing.

Colors are given as CSS strings, the same way canvas ``fillStyle`` and
``shadowColor`` are assigned. Pillow's :py:mod:`PIL.ImageColor` understands
hex notation, ``rgb()``, ``hsl()`` and named colors; CSS ``rgba()`` and
``hsla()`` with a fractional alpha and the ``transparent`` keyword are
handled here.
"""

import re
from typing import Tuple

from PIL import ImageColor

RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)

_FUNCTIONAL = re.compile(
    r"^(?P<func>rgba?|hsla?)\(\s*(?P<args>[^)]*)\)$", re.IGNORECASE
)


def _parse_alpha(value: str) -> int:
    value = value.strip()
    if value.endswith("%"):
        alpha = float(value[:-1]) / 100.0
    else:
        alpha = float(value)
    return int(round(min(1.0, max(0.0, alpha)) * 255))


def parse_color(value: str) -> RGBA:
    """
    Parse a CSS color string into an RGBA tuple.

    :param value: CSS color, e.g. ``'#666'``, ``'rgba(0, 0, 0, 0.5)'``.
    :return: Tuple of four ints in ``[0, 255]``.
    :raises ValueError: If the color is not recognized.
    """
    if not isinstance(value, str):
        raise ValueError("Color must be a string: %r" % (value,))
    text = value.strip()
    if text.lower() == "transparent":
        return TRANSPARENT

    match = _FUNCTIONAL.match(text)
    if match and match.group("func").lower() in ("rgba", "hsla"):
        args = re.split(r"\s*[,/]\s*|\s+", match.group("args").strip())
        if len(args) == 4:
            base = "%s(%s)" % (match.group("func")[:3], ", ".join(args[:3]))
            r, g, b = ImageColor.getrgb(base)[:3]
            return (r, g, b, _parse_alpha(args[3]))

    color = ImageColor.getrgb(text)
    if len(color) == 3:
        return color + (255,)  # type: ignore[return-value]
    return color  # type: ignore[return-value]
