"""
Surface encoding.

:py:func:`to_data_uri` serializes a surface the way canvas ``toDataURL``
does: PNG by default, with JPEG output flattened onto opaque black.
"""

import base64
import io
import logging
from typing import Any, Union

from PIL import Image

from canvas_clip.constants import ImageFormat

logger = logging.getLogger(__name__)


def to_data_uri(
    image: Image.Image, format: Union[str, ImageFormat] = ImageFormat.PNG, **params: Any
) -> str:
    """
    Encode ``image`` as a ``data:`` URI.

    :param image: PIL Image.
    :param format: :py:class:`~canvas_clip.constants.ImageFormat` or its name.
    :param params: Extra parameters passed to :py:meth:`PIL.Image.Image.save`.
    :return: ``data:<mime type>;base64,<payload>``, or ``data:,`` for an empty
        image as canvas ``toDataURL`` returns.
    :raises ValueError: If the format is not supported.
    """
    if isinstance(format, str):
        format = ImageFormat(format.upper())
    if 0 in image.size:
        logger.debug("Empty %dx%d image, nothing to encode", image.width, image.height)
        return "data:,"
    if not format.has_alpha and image.mode in ("RGBA", "LA"):
        flattened = Image.new("RGBA", image.size, (0, 0, 0, 255))
        flattened.alpha_composite(image.convert("RGBA"))
        image = flattened.convert("RGB")

    with io.BytesIO() as f:
        image.save(f, format=format.value, **params)
        payload = base64.b64encode(f.getvalue()).decode("ascii")
    logger.debug("Encoded %dx%d image as %s", image.width, image.height, format.value)
    return "data:%s;base64,%s" % (format.mime_type, payload)
