"""
Integer line rasterization (Bresenham).

Both variants are lazy and visit one grid coordinate per step along the
major axis. The end point itself is not visited.
"""

from typing import Iterator


def _as_ints(point) -> tuple[int, int]:
    return int(point[0]), int(point[1])


def ordered_line(start, end) -> Iterator[tuple[int, int]]:
    """
    Rasterize from start towards end, preserving the caller's direction.

    Args:
        start: (x, y) start point; floats are truncated
        end: (x, y) end point

    Yields:
        (x, y) integer grid coordinates
    """
    x0, y0 = _as_ints(start)
    x1, y1 = _as_ints(end)

    steep = abs(y1 - y0) > abs(x1 - x0)
    if steep:
        x0, y0 = y0, x0
        x1, y1 = y1, x1

    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    error = dx // 2

    y = y0
    ystep = 1 if y0 < y1 else -1
    increment = 1 if x0 < x1 else -1

    x = x0
    while x != x1:
        yield (y, x) if steep else (x, y)

        error -= dy
        if error < 0:
            y += ystep
            error += dx

        x += increment


def normalized_line(start, end) -> Iterator[tuple[int, int]]:
    """
    Rasterize so the major axis always increases, whichever endpoint is start.

    Yields:
        (x, y) integer grid coordinates
    """
    x0, y0 = _as_ints(start)
    x1, y1 = _as_ints(end)

    steep = abs(y1 - y0) > abs(x1 - x0)
    if steep:
        x0, y0 = y0, x0
        x1, y1 = y1, x1

    if x0 > x1:
        x0, x1 = x1, x0
        y0, y1 = y1, y0

    dx = x1 - x0
    dy = abs(y1 - y0)
    error = dx // 2

    y = y0
    ystep = 1 if y0 < y1 else -1

    for x in range(x0, x1):
        yield (y, x) if steep else (x, y)

        error -= dy
        if error < 0:
            y += ystep
            error += dx
