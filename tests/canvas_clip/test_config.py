import logging

import pytest

from canvas_clip.config import PipelineConfig
from canvas_clip.constants import ImageFormat

logger = logging.getLogger(__name__)


def test_defaults():
    config = PipelineConfig()
    assert config.device_pixel_ratio == 1.0
    assert config.default_format is ImageFormat.PNG
    assert config.http_timeout == 30.0


@pytest.mark.parametrize("ratio", [0, -1, 17])
def test_invalid_device_pixel_ratio(ratio):
    with pytest.raises(ValueError):
        PipelineConfig(device_pixel_ratio=ratio)


@pytest.mark.parametrize(
    "value, expected",
    [("png", ImageFormat.PNG), ("JPEG", ImageFormat.JPEG), (ImageFormat.WEBP, ImageFormat.WEBP)],
)
def test_default_format(value, expected):
    assert PipelineConfig(default_format=value).default_format is expected


def test_invalid_default_format():
    with pytest.raises(ValueError):
        PipelineConfig(default_format="gif")


def test_from_mapping_ignores_unknown_keys():
    config = PipelineConfig.from_mapping({"device_pixel_ratio": "2", "theme": "dark"})
    assert config.device_pixel_ratio == 2.0
