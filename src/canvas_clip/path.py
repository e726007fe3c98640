"""
Path construction and rasterization.

:py:class:`Path` records sub-paths built with the canvas path API
(``move_to``, ``line_to``, ``arc_to``, ``close_path``). Arcs are flattened
into line segments when they are added, so a path is always a list of
polygons. Rasterization uses aggdraw for anti-aliased coverage.
"""

import logging
import math
from typing import List, Optional, Tuple

import aggdraw  # type: ignore[import-not-found]
import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

#: Maximum angle in radians covered by one segment of a flattened arc.
ARC_STEP = math.pi / 32

_EPSILON = 1e-9


class SubPath(list):
    """List of points with a closed flag."""

    def __init__(self, *args):
        super().__init__(*args)
        self.closed = False

    def __repr__(self) -> str:
        return "SubPath(%s, closed=%r)" % (list.__repr__(self), self.closed)


class Path:
    """
    Canvas-like path builder.

    Example::

        path = Path()
        path.move_to(10, 0)
        path.arc_to(100, 0, 100, 40, 10)
        path.close_path()
        mask = path.rasterize((100, 40))
    """

    def __init__(self):
        self._subpaths: List[SubPath] = []

    def __len__(self) -> int:
        return len(self._subpaths)

    def __iter__(self):
        return iter(self._subpaths)

    def __repr__(self) -> str:
        return "Path(%r)" % (self._subpaths,)

    @property
    def current_point(self) -> Optional[Point]:
        if not self._subpaths or not self._subpaths[-1]:
            return None
        return self._subpaths[-1][-1]

    def move_to(self, x: float, y: float) -> None:
        subpath = SubPath([(float(x), float(y))])
        self._subpaths.append(subpath)

    def line_to(self, x: float, y: float) -> None:
        if self.current_point is None:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((float(x), float(y)))

    def close_path(self) -> None:
        """Close the current sub-path and start a new one at its first point."""
        if not self._subpaths or not self._subpaths[-1]:
            return
        subpath = self._subpaths[-1]
        subpath.closed = True
        self.move_to(*subpath[0])

    def arc_to(self, x1: float, y1: float, x2: float, y2: float, radius: float) -> None:
        """
        Add a circular arc tangent to the lines (current point, p1) and
        (p1, p2), connected to the current point by a straight line.

        :raises ValueError: If ``radius`` is negative.
        """
        if radius < 0:
            raise ValueError("Negative radius: %r" % radius)
        if self.current_point is None:
            self.move_to(x1, y1)
        x0, y0 = self.current_point  # type: ignore[misc]

        v1 = np.array([x0 - x1, y0 - y1], dtype=np.float64)
        v2 = np.array([x2 - x1, y2 - y1], dtype=np.float64)
        n1, n2 = np.hypot(*v1), np.hypot(*v2)
        if radius == 0 or n1 < _EPSILON or n2 < _EPSILON:
            self.line_to(x1, y1)
            return
        u1, u2 = v1 / n1, v2 / n2
        cos_theta = float(np.clip(np.dot(u1, u2), -1.0, 1.0))
        theta = math.acos(cos_theta)
        if math.sin(theta) < _EPSILON:
            # Collinear points.
            self.line_to(x1, y1)
            return

        p1 = np.array([x1, y1], dtype=np.float64)
        distance = radius / math.tan(theta / 2)
        tangent1 = p1 + u1 * distance
        tangent2 = p1 + u2 * distance
        bisector = (u1 + u2) / np.hypot(*(u1 + u2))
        center = p1 + bisector * (radius / math.sin(theta / 2))

        start = math.atan2(tangent1[1] - center[1], tangent1[0] - center[0])
        end = math.atan2(tangent2[1] - center[1], tangent2[0] - center[0])
        sweep = (end - start + math.pi) % (2 * math.pi) - math.pi

        self.line_to(*tangent1)
        steps = max(1, int(math.ceil(abs(sweep) / ARC_STEP)))
        for index in range(1, steps + 1):
            angle = start + sweep * index / steps
            self.line_to(
                center[0] + radius * math.cos(angle),
                center[1] + radius * math.sin(angle),
            )

    def polygons(self) -> List[List[Point]]:
        """Return sub-paths with at least three points, implicitly closed."""
        polygons = []
        for subpath in self._subpaths:
            if len(subpath) < 3:
                if len(subpath) > 1:
                    logger.debug("not enough points: %d" % len(subpath))
                continue
            polygons.append(list(subpath))
        return polygons

    def rasterize(self, size: Tuple[int, int]) -> Image.Image:
        """
        Rasterize the filled path into an ``L`` coverage mask.

        :param size: ``(width, height)`` of the mask.
        :return: PIL Image in mode ``L``.
        """
        mask = Image.new("L", size, 0)
        polygons = self.polygons()
        if not polygons or size[0] <= 0 or size[1] <= 0:
            return mask

        draw = aggdraw.Draw(mask)
        brush = aggdraw.Brush(255)
        for polygon in polygons:
            symbol = aggdraw.Symbol(" ".join(_generate_symbol(polygon)))
            draw.symbol((0, 0), symbol, None, brush)
        draw.flush()
        del draw
        return mask


def _generate_symbol(polygon: List[Point]):
    """Sequence generator for SVG path."""
    x, y = polygon[0]
    yield "M %.4f %.4f" % (x, y)
    for x, y in polygon[1:]:
        yield "L %.4f %.4f" % (x, y)
    yield "Z"
