"""
Pipeline configuration.

A :py:class:`PipelineConfig` carries the environment values the pipeline
would otherwise read from ambient globals, such as the display scale
factor. It is passed explicitly to
:py:class:`~canvas_clip.pipeline.ImagePipeline`::

    from canvas_clip import ImagePipeline, PipelineConfig

    config = PipelineConfig(device_pixel_ratio=2.0)
    pipeline = ImagePipeline('photo.png', config=config)
"""

import logging
from typing import Any, Mapping

from attrs import define, field, fields

from canvas_clip.constants import ImageFormat
from canvas_clip.validators import in_, range_

logger = logging.getLogger(__name__)


@define(frozen=True)
class PipelineConfig:
    """
    Environment settings for an image pipeline.

    .. py:attribute:: device_pixel_ratio

        Ratio between logical units and device pixels. Order options with
        ``use_device_pixel`` set are multiplied by this value.

    .. py:attribute:: default_format

        Encoding used by :py:meth:`~canvas_clip.pipeline.ImagePipeline.get_uri`
        when no format is given. See
        :py:class:`~canvas_clip.constants.ImageFormat`.

    .. py:attribute:: http_timeout

        Timeout in seconds for fetching ``http(s)`` sources.
    """

    device_pixel_ratio: float = field(
        default=1.0, converter=float, validator=range_(0, 16, exclude_minimum=True)
    )
    default_format: ImageFormat = field(
        default=ImageFormat.PNG,
        converter=lambda x: ImageFormat(x.upper() if isinstance(x, str) else x),
        validator=in_(ImageFormat),
    )
    http_timeout: float = field(
        default=30.0, converter=float, validator=range_(0, 3600, exclude_minimum=True)
    )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "PipelineConfig":
        """
        Create a config from plain values, ignoring unknown keys.

        :param values: Mapping of attribute names to values.
        :return: :py:class:`PipelineConfig`
        """
        names = {item.name for item in fields(cls)}
        unknown = set(values) - names
        if unknown:
            logger.debug("Ignoring unknown config keys: %s", sorted(unknown))
        return cls(**{key: value for key, value in values.items() if key in names})
