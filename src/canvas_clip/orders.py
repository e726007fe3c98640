"""
Image orders.

An order is a declarative transform request queued on an
:py:class:`~canvas_clip.pipeline.ImagePipeline`. There are exactly five kinds,
each an immutable attrs class:

- :py:class:`ClipOrder`: select a sub-region
- :py:class:`MarkOrder`: draw text onto the current surface
- :py:class:`RoundOrder`: mask corners to a rounded rectangle
- :py:class:`ShadowOrder`: composite a drop shadow, growing the surface
- :py:class:`BackgroundOrder`: fill a solid color behind the current surface

Geometry is in logical units. When ``use_device_pixel`` is true (the
default), values are multiplied by the display scale factor before use.

Orders may also be written as mappings in the ``{"type", "options"}`` form,
with camelCase or snake_case option names::

    from canvas_clip.orders import parse_order

    order = parse_order({
        'type': 'clip',
        'options': {'x': 0, 'y': 0, 'width': 50, 'height': 50,
                    'useDevicePixel': False},
    })
"""

import logging
import re
from typing import Any, ClassVar, Dict, Mapping, Type, Union

from attrs import define, field

from canvas_clip.constants import OrderType, TextAlign, TextBaseline

logger = logging.getLogger(__name__)


@define(frozen=True)
class ClipOrder:
    """
    Crop to the rectangle ``(x, y, width, height)``.

    Regions of the rectangle outside the current surface become transparent.
    """

    type: ClassVar[OrderType] = OrderType.CLIP

    x: float
    y: float
    width: float
    height: float
    use_device_pixel: bool = True


@define(frozen=True)
class MarkOrder:
    """
    Draw ``text`` at ``(x, y)`` on the current surface.

    ``x``, ``y`` and ``font_size`` are scaled. ``text_baseline`` and
    ``text_align`` take the canvas keywords, see
    :py:class:`~canvas_clip.constants.TextBaseline` and
    :py:class:`~canvas_clip.constants.TextAlign`.
    """

    type: ClassVar[OrderType] = OrderType.MARK

    text: str
    x: float
    y: float
    font_family: str = "sans-serif"
    font_size: float = 16
    text_baseline: TextBaseline = field(
        default=TextBaseline.TOP, converter=TextBaseline
    )
    text_align: TextAlign = field(default=TextAlign.LEFT, converter=TextAlign)
    color: str = "#000"
    use_device_pixel: bool = True


@define(frozen=True)
class RoundOrder:
    """
    Round the corners with ``radius``.

    The radius is clamped to half of the smaller surface dimension.
    """

    type: ClassVar[OrderType] = OrderType.ROUND

    radius: float
    use_device_pixel: bool = True


@define(frozen=True)
class ShadowOrder:
    """
    Add a drop shadow.

    The surface grows by ``2 * shadow_blur`` in each dimension.
    """

    type: ClassVar[OrderType] = OrderType.SHADOW

    shadow_color: str = "#666"
    shadow_blur: float = 10
    shadow_offset_x: float = 0
    shadow_offset_y: float = 2
    use_device_pixel: bool = True


@define(frozen=True)
class BackgroundOrder:
    """Fill ``background_color`` behind the current surface."""

    type: ClassVar[OrderType] = OrderType.BACKGROUND

    background_color: str


ImageOrder = Union[ClipOrder, MarkOrder, RoundOrder, ShadowOrder, BackgroundOrder]

ORDER_CLASSES: Dict[OrderType, Type[Any]] = {
    OrderType.CLIP: ClipOrder,
    OrderType.MARK: MarkOrder,
    OrderType.ROUND: RoundOrder,
    OrderType.SHADOW: ShadowOrder,
    OrderType.BACKGROUND: BackgroundOrder,
}

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_RE.sub(r"_\1", name).lower()


def parse_order(value: Mapping[str, Any]) -> ImageOrder:
    """
    Build an order from its mapping form.

    :param value: Mapping with a ``type`` key and an ``options`` mapping.
    :return: Order instance.
    :raises ValueError: If the type is unknown or an enumerated option is
        invalid.
    :raises TypeError: If an option is missing or not recognized.
    """
    try:
        order_type = OrderType(value["type"])
    except KeyError:
        raise ValueError("Order has no type: %r" % (value,)) from None
    except ValueError:
        raise ValueError("Unknown order type: %r" % (value["type"],)) from None
    options = {
        _snake_case(key): option for key, option in (value.get("options") or {}).items()
    }
    order = ORDER_CLASSES[order_type](**options)
    logger.debug("Parsed %r", order)
    return order
