import logging

import pytest
from PIL import Image

from canvas_clip.constants import ImageFormat
from canvas_clip.encoding import to_data_uri

from .utils import decode_data_uri

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "format, mime, mode",
    [
        ("PNG", "image/png", "RGBA"),
        ("png", "image/png", "RGBA"),
        (ImageFormat.JPEG, "image/jpeg", "RGB"),
        ("WEBP", "image/webp", "RGBA"),
    ],
)
def test_to_data_uri(format, mime, mode):
    image = Image.new("RGBA", (8, 4), (10, 20, 30, 128))
    uri = to_data_uri(image, format)
    header, decoded = decode_data_uri(uri)
    assert header == "data:%s;base64" % mime
    assert decoded.size == (8, 4)
    assert decoded.mode == mode


def test_jpeg_flattens_onto_black():
    image = Image.new("RGBA", (8, 8), (255, 255, 255, 0))
    _, decoded = decode_data_uri(to_data_uri(image, "JPEG", quality=95))
    r, g, b = decoded.getpixel((4, 4))
    assert max(r, g, b) < 8


def test_png_is_lossless():
    image = Image.new("RGBA", (3, 3), (1, 2, 3, 4))
    _, decoded = decode_data_uri(to_data_uri(image))
    assert decoded.getpixel((1, 1)) == (1, 2, 3, 4)


def test_unsupported_format():
    with pytest.raises(ValueError):
        to_data_uri(Image.new("RGBA", (1, 1)), "BMP")


@pytest.mark.parametrize("size", [(0, 0), (0, 10), (10, 0)])
@pytest.mark.parametrize("format", ["PNG", "JPEG", "WEBP"])
def test_empty_image(size, format):
    assert to_data_uri(Image.new("RGBA", size), format) == "data:,"


def test_empty_image_unsupported_format():
    with pytest.raises(ValueError):
        to_data_uri(Image.new("RGBA", (0, 0)), "BMP")
