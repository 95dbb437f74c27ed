"""
Sub-pixel edge detection along a rasterized line.

Intensity samples are pushed through a small ring buffer. Each step
produces a discrete Laplacian at the centre of the window; a zero crossing
between two consecutive Laplacian values marks an edge, which is located
by linear interpolation between the two tap coordinates. Crossings in flat
regions are suppressed by a local contrast test.
"""

from typing import Iterable, Iterator

import numpy as np

from tflow.core.image import Image
from tflow.features.rasterizer import ordered_line


DEFAULT_WINDOW_SIZE = 5
DEFAULT_CONTRAST_THRESHOLD = 600.0


def intensity(pixel) -> float:
    """Mean of the three colour channels."""
    return (float(pixel[0]) + float(pixel[1]) + float(pixel[2])) / 3.0


class LaplacianWindow:
    """
    Ring buffer of the last `size` samples and the two latest Laplacians.

    Attributes:
        previous: Laplacian one sample before `current`
        current: Laplacian centred on the sample returned by push()
        count: Number of samples pushed so far
    """

    def __init__(self, size: int = DEFAULT_WINDOW_SIZE):
        if size < 5 or size % 2 == 0:
            raise ValueError(f"Window size must be odd and >= 5, got {size}")

        self.size = size
        self.samples = [0.0] * size
        self.count = 0
        self.previous = 0.0
        self.current = 0.0

    @property
    def half(self) -> int:
        return (self.size - 1) // 2

    def index(self) -> int:
        """Ring slot the next sample will be written to."""
        return self.count % self.size

    def at(self, i: int) -> float:
        """Sample at absolute index i (only the last `size` are retained)."""
        return self.samples[i % self.size]

    def laplacian(self, offset: int) -> float:
        """Second derivative at the centre of the window starting at ring slot offset."""
        mid = (self.half + offset) % self.size
        total = self.samples[mid] * (self.size - 1)

        for i in range(1, self.half + 1):
            total -= self.samples[(mid - i) % self.size]
            total -= self.samples[(mid + i) % self.size]

        return total

    def push(self, value: float) -> int | None:
        """
        Add a sample.

        Returns:
            Absolute index of the sample the current Laplacian is centred
            on, once both `previous` and `current` are valid; None before
        """
        k = self.count
        self.samples[k % self.size] = value
        self.count += 1

        if k < self.size - 1:
            return None

        self.previous = self.current
        self.current = self.laplacian((k - (self.size - 1)) % self.size)

        if k < self.size:
            return None
        return k - self.half

    def variance_left_right(self, index: int) -> float:
        """Squared step from the left pair to the centre plus centre to the right pair."""
        left = (self.at(index - 2) + self.at(index - 1)) / 2.0
        centre = self.at(index)
        right = (self.at(index + 2) + self.at(index + 1)) / 2.0

        d_left = centre - left
        d_right = right - centre
        return d_left * d_left + d_right * d_right

    def good_edge(self, index: int, threshold: float = DEFAULT_CONTRAST_THRESHOLD) -> bool:
        return self.variance_left_right(index) >= threshold


def detect_edges(
    samples: Iterable[float],
    coordinates: Iterable,
    window_size: int = DEFAULT_WINDOW_SIZE,
    threshold: float = DEFAULT_CONTRAST_THRESHOLD,
) -> Iterator[np.ndarray]:
    """
    Find sub-pixel edge positions in a stream of intensity samples.

    Args:
        samples: Scalar intensities, one per coordinate
        coordinates: 2D positions matching the samples
        window_size: Laplacian window length (odd, >= 5)
        threshold: Minimum left/right contrast for a crossing to count

    Yields:
        Edge positions as float arrays of shape (2,)
    """
    window = LaplacianWindow(window_size)
    positions = [None] * window_size

    for value, coordinate in zip(samples, coordinates):
        positions[window.index()] = np.asarray(coordinate, dtype=np.float64)

        index = window.push(value)
        if index is None:
            continue

        a = window.previous
        b = window.current

        if a != 0 and b == 0:
            # Exact zero at the current tap
            if window.good_edge(index, threshold):
                yield positions[index % window_size].copy()
        elif (a < 0 < b) or (b < 0 < a):
            if window.good_edge(index, threshold):
                t = -a / (b - a)
                p0 = positions[(index - 1) % window_size]
                p1 = positions[index % window_size]
                yield p0 + (p1 - p0) * t


def features_along_line(
    image: Image,
    start,
    end,
    window_size: int = DEFAULT_WINDOW_SIZE,
    threshold: float = DEFAULT_CONTRAST_THRESHOLD,
) -> list[np.ndarray]:
    """
    Detect edges along the segment start -> end in image coordinates.

    The segment is rasterized with the origin in the bottom-left corner and
    each grid coordinate is mapped back to top-left image coordinates for
    sampling and reporting. Endpoints must lie inside the image.
    """
    height = image.height

    # Rasterize with the origin in the bottom left
    flipped_start = (int(start[0]), height - int(start[1]))
    flipped_end = (int(end[0]), height - int(end[1]))

    coordinates = []
    samples = []
    for x, y in ordered_line(flipped_start, flipped_end):
        y = height - y
        coordinates.append((x, y))
        samples.append(intensity(image.read(x, y)))

    return list(detect_edges(samples, coordinates, window_size, threshold))
