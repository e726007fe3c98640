"""
Image pipeline module.

This module provides :py:class:`ImagePipeline`, the main entry point of
canvas_clip. A pipeline loads a source image asynchronously, accepts image
orders, and applies them strictly in the order they were added.

Key functionality:

- **Loading**: construction schedules the source load on the running loop
- **Queueing**: :py:meth:`ImagePipeline.add_order` appends orders
- **Execution**: :py:meth:`ImagePipeline.exec` drains the queue
- **Results**: :py:meth:`ImagePipeline.get_uri` and
  :py:meth:`ImagePipeline.get_canvas`

Example usage::

    import asyncio

    from canvas_clip import ImagePipeline, ClipOrder, RoundOrder

    async def main():
        pipeline = ImagePipeline('photo.png')
        pipeline.add_order([
            ClipOrder(x=0, y=0, width=120, height=120),
            RoundOrder(radius=60),
        ]).exec()
        uri = await pipeline.get_uri()

    asyncio.run(main())

The drain does not snapshot the queue. It pops the front order until the
queue is empty, so orders added while a drain is running are applied by that
drain. Calling :py:meth:`ImagePipeline.exec` while a drain is running reuses
the running drain; calling it after the drain finished starts a new one for
the orders added since.
"""

import asyncio
import functools
import logging
from collections import deque
from typing import (
    Any,
    Awaitable,
    Callable,
    Deque,
    Iterable,
    Mapping,
    Optional,
    Union,
)

from PIL import Image

from canvas_clip import encoding, handlers, loader
from canvas_clip.config import PipelineConfig
from canvas_clip.errors import LoadError
from canvas_clip.orders import ORDER_CLASSES, ImageOrder, parse_order
from canvas_clip.surface import create_surface

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[Image.Image]]

OrderLike = Union[ImageOrder, Mapping[str, Any]]

_ORDER_TYPES = tuple(ORDER_CLASSES.values())


def _to_order(value: OrderLike) -> ImageOrder:
    if isinstance(value, _ORDER_TYPES):
        return value
    if isinstance(value, Mapping):
        return parse_order(value)
    raise TypeError("Expected an image order, got %s" % type(value).__name__)


class ImagePipeline:
    """
    Ordered raster transforms over a source image.

    Must be constructed while an asyncio event loop is running; the source
    load is scheduled immediately.

    Example::

        pipeline = ImagePipeline('data:image/png;base64,...')
        pipeline.add_order({'type': 'shadow', 'options': {'shadowBlur': 8}})
        canvas = await pipeline.exec().get_canvas()

    :param source: Source identifier: data URI, URL or file path.
    :param config: :py:class:`~canvas_clip.config.PipelineConfig`.
    :param resolver: Coroutine function resolving ``source`` into a PIL
        Image. Defaults to :py:func:`canvas_clip.loader.load_image`.
    """

    def __init__(
        self,
        source: str,
        *,
        config: Optional[PipelineConfig] = None,
        resolver: Optional[Resolver] = None,
    ):
        self._source = source
        self._config = config or PipelineConfig()
        self._resolver: Resolver = resolver or functools.partial(
            loader.load_image, timeout=self._config.http_timeout
        )
        self._orders: Deque[ImageOrder] = deque()
        self._result: Optional[Image.Image] = None
        self._exec_task: Optional["asyncio.Task[None]"] = None
        self._load_task: "asyncio.Task[Image.Image]" = (
            asyncio.get_running_loop().create_task(self._load())
        )

    def __repr__(self) -> str:
        source = self._source
        if len(source) > 32:
            source = source[:29] + "..."
        return "%s(source=%r, pending=%d, loaded=%s, executing=%s)" % (
            self.__class__.__name__,
            source,
            self.pending,
            self.loaded,
            self.executing,
        )

    @property
    def source(self) -> str:
        """Source identifier given at construction."""
        return self._source

    @property
    def config(self) -> PipelineConfig:
        return self._config

    @property
    def pending(self) -> int:
        """Number of queued orders not yet applied."""
        return len(self._orders)

    @property
    def loaded(self) -> bool:
        """True once the source image has been loaded successfully."""
        task = self._load_task
        return task.done() and not task.cancelled() and task.exception() is None

    @property
    def executing(self) -> bool:
        """True while a drain is running."""
        return self._exec_task is not None and not self._exec_task.done()

    async def _load(self) -> Image.Image:
        logger.debug("Loading %r", self)
        try:
            image = await self._resolver(self._source)
        except LoadError as e:
            logger.debug("%s", e)
            raise
        except Exception as e:
            logger.debug("Resolver failed: %s", e)
            raise LoadError(self._source, str(e) or e.__class__.__name__) from e

        surface, context = create_surface(image.width, image.height)
        context.draw_image(image, 0, 0)
        self._result = surface
        logger.debug("Loaded %dx%d image", image.width, image.height)
        return image

    async def _drain(self) -> None:
        await self._load_task
        while self._orders:
            order = self._orders.popleft()
            self._result = handlers.apply_order(self._result, order, self._config)
            # Let add_order callers interleave with the drain.
            await asyncio.sleep(0)
        logger.debug("Drained queue")

    def add_order(
        self, orders: Union[OrderLike, Iterable[OrderLike]]
    ) -> "ImagePipeline":
        """
        Append one order or an iterable of orders to the queue. Iterables
        are validated in full before anything is queued.

        Orders are image order instances or mappings in the
        ``{"type": ..., "options": {...}}`` form.

        :return: The pipeline itself.
        :raises TypeError: If an item is not an order.
        :raises ValueError: If a mapping has an unknown type or option value.
        """
        if isinstance(orders, _ORDER_TYPES + (Mapping, str)) or not isinstance(
            orders, Iterable
        ):
            items = [_to_order(orders)]  # type: ignore[arg-type]
        else:
            items = [_to_order(order) for order in orders]
        self._orders.extend(items)
        return self

    def exec(self) -> "ImagePipeline":
        """
        Start draining the order queue.

        Returns immediately; use :py:meth:`get_uri` or :py:meth:`get_canvas`
        to wait for the result.

        :return: The pipeline itself.
        """
        if self.executing:
            logger.debug("Drain already running")
            return self
        self._exec_task = asyncio.get_running_loop().create_task(self._drain())
        return self

    async def get_uri(self, format: Optional[str] = None, **params: Any) -> str:
        """
        Return the result as a data URI.

        Before :py:meth:`exec` is called, the source identifier is returned
        unchanged.

        :param format: ``'PNG'``, ``'JPEG'`` or ``'WEBP'``. Defaults to
            :py:attr:`PipelineConfig.default_format`.
        :param params: Extra encoder parameters, e.g. ``quality``.
        :return: Data URI string.
        :raises LoadError: If the source could not be loaded.
        """
        if self._exec_task is None:
            return self._source
        await self._exec_task
        return encoding.to_data_uri(
            self._result, format or self._config.default_format, **params
        )

    async def get_canvas(self) -> Optional[Image.Image]:
        """
        Return the current surface.

        Before :py:meth:`exec` is called, this is the loaded source image.
        The surface is shared with the pipeline.

        :return: PIL Image in ``RGBA`` mode.
        :raises LoadError: If the source could not be loaded.
        """
        if self._exec_task is None:
            await self._load_task
        else:
            await self._exec_task
        return self._result
