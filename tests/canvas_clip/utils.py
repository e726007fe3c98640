import asyncio
import base64
import io

from PIL import Image


def make_resolver(image, delay=0.0):
    """Return a resolver that yields a copy of ``image``."""
    calls = []

    async def resolver(source):
        calls.append(source)
        if delay:
            await asyncio.sleep(delay)
        return image.copy()

    resolver.calls = calls
    return resolver


def png_bytes(image):
    with io.BytesIO() as f:
        image.save(f, format="PNG")
        return f.getvalue()


def png_data_uri(image):
    return "data:image/png;base64," + base64.b64encode(png_bytes(image)).decode("ascii")


def decode_data_uri(uri):
    header, payload = uri.split(",", 1)
    return header, Image.open(io.BytesIO(base64.b64decode(payload)))
