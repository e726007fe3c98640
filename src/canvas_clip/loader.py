"""
Source image resolver.

:py:func:`load_image` turns a source identifier into a decoded Pillow image.
Supported identifiers:

- ``data:`` URIs, base64 or percent-encoded
- ``http://`` and ``https://`` URLs, fetched with httpx
- ``file://`` URIs and plain file system paths

Every failure is reported as :py:class:`~canvas_clip.errors.LoadError`.
"""

import asyncio
import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote_to_bytes, urlparse
from urllib.request import url2pathname

import httpx
from PIL import Image

from canvas_clip.errors import LoadError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def decode_data_uri(uri: str) -> bytes:
    """
    Return the payload of a ``data:`` URI.

    :raises ValueError: If the URI is malformed.
    """
    if not uri.startswith("data:"):
        raise ValueError("Not a data URI")
    header, sep, payload = uri[5:].partition(",")
    if not sep:
        raise ValueError("Missing ',' in data URI")
    if header.split(";")[-1].strip().lower() == "base64":
        try:
            return base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError("Invalid base64 payload: %s" % e) from e
    return unquote_to_bytes(payload)


def decode_image(data: bytes) -> Image.Image:
    """
    Decode image bytes into a fully loaded ``RGBA`` image.

    :raises OSError: If the data is not a supported image.
    """
    with Image.open(io.BytesIO(data)) as image:
        image.load()
        return image.convert("RGBA")


async def fetch(
    url: str,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """Fetch ``url`` and return the response body."""
    if client is not None:
        response = await client.get(url, follow_redirects=True)
    else:
        async with httpx.AsyncClient(timeout=timeout) as session:
            response = await session.get(url, follow_redirects=True)
    response.raise_for_status()
    return response.content


def _file_path(source: str) -> Path:
    if source.startswith("file:"):
        parsed = urlparse(source)
        return Path(url2pathname(parsed.path))
    return Path(source)


async def read_source(
    source: str,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> bytes:
    """
    Read the raw bytes behind ``source``.

    :raises LoadError: If the source cannot be read.
    """
    scheme = source.split(":", 1)[0].lower() if ":" in source else ""
    try:
        if scheme == "data":
            return decode_data_uri(source)
        if scheme in ("http", "https"):
            return await fetch(source, timeout=timeout, client=client)
        if scheme in ("", "file") or len(scheme) == 1:
            # Single letter schemes are Windows drive letters.
            return await asyncio.to_thread(_file_path(source).read_bytes)
    except httpx.HTTPStatusError as e:
        raise LoadError(source, "HTTP %d" % e.response.status_code) from e
    except httpx.HTTPError as e:
        raise LoadError(source, str(e) or e.__class__.__name__) from e
    except (OSError, ValueError) as e:
        raise LoadError(source, str(e)) from e
    raise LoadError(source, "Unsupported scheme %r" % scheme)


async def load_image(
    source: str,
    timeout: float = DEFAULT_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None,
) -> Image.Image:
    """
    Resolve ``source`` into a decoded ``RGBA`` image.

    :param source: Data URI, URL or file path.
    :param timeout: Timeout in seconds for HTTP requests.
    :param client: Optional httpx client used for HTTP requests.
    :return: PIL Image in ``RGBA`` mode.
    :raises LoadError: If the source cannot be read or decoded.
    """
    data = await read_source(source, timeout=timeout, client=client)
    try:
        image = decode_image(data)
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise LoadError(source, "Cannot decode image: %s" % e) from e
    logger.debug("Decoded %dx%d image", image.width, image.height)
    return image
