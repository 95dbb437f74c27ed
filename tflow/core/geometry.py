"""
Geometry primitives used by the scan-line feature pipeline.

Points are numpy arrays of shape (2,). Transforms are 3x3 homogeneous
matrices so they can be combined with np.matmul.
"""

from dataclasses import dataclass
import math

import numpy as np


def rotation_matrix(angle: float) -> np.ndarray:
    """2x2 counter-clockwise rotation by angle (radians)."""
    c = math.cos(angle)
    s = math.sin(angle)
    return np.array([[c, -s], [s, c]], dtype=np.float64)


def rotate(angle: float) -> np.ndarray:
    """Homogeneous 3x3 rotation about the origin."""
    M = np.eye(3, dtype=np.float64)
    M[:2, :2] = rotation_matrix(angle)
    return M


def translate(offset) -> np.ndarray:
    """Homogeneous 3x3 translation."""
    M = np.eye(3, dtype=np.float64)
    M[0, 2] = offset[0]
    M[1, 2] = offset[1]
    return M


def apply_transform(M: np.ndarray, point) -> np.ndarray:
    """Apply a homogeneous transform to a single 2D point."""
    x, y = point
    p = M @ np.array([x, y, 1.0])
    return p[:2]


@dataclass(eq=False)
class AlignedBox:
    """Axis-aligned 2D box defined by its min and max corners."""
    min: np.ndarray
    max: np.ndarray

    @classmethod
    def from_origin_and_size(cls, origin, size) -> "AlignedBox":
        origin = np.asarray(origin, dtype=np.float64)
        return cls(origin.copy(), origin + np.asarray(size, dtype=np.float64))

    @classmethod
    def from_center_and_size(cls, center, size) -> "AlignedBox":
        center = np.asarray(center, dtype=np.float64)
        half = np.asarray(size, dtype=np.float64) / 2
        return cls(center - half, center + half)

    @classmethod
    def from_points(cls, points) -> "AlignedBox":
        """Smallest box containing every point."""
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
        if len(pts) == 0:
            raise ValueError("Cannot build a box from zero points")
        return cls(pts.min(axis=0), pts.max(axis=0))

    def union_with_point(self, point) -> "AlignedBox":
        p = np.asarray(point, dtype=np.float64)
        self.min = np.minimum(self.min, p)
        self.max = np.maximum(self.max, p)
        return self

    @property
    def size(self) -> np.ndarray:
        return self.max - self.min

    @property
    def center(self) -> np.ndarray:
        return (self.min + self.max) / 2

    def corners(self) -> list[np.ndarray]:
        """All four corners, counter-clockwise from min."""
        return [
            np.array([self.min[0], self.min[1]]),
            np.array([self.max[0], self.min[1]]),
            np.array([self.max[0], self.max[1]]),
            np.array([self.min[0], self.max[1]]),
        ]

    def contains(self, point) -> bool:
        x, y = point
        return (self.min[0] <= x <= self.max[0]) and (self.min[1] <= y <= self.max[1])


@dataclass(frozen=True, eq=False)
class LineSegment:
    """Directed segment from start to end."""
    start: np.ndarray
    end: np.ndarray

    @property
    def direction(self) -> np.ndarray:
        return self.end - self.start

    def clip(self, box: AlignedBox) -> "LineSegment | None":
        """
        Clip the segment to a box (Liang-Barsky).

        The clipped segment keeps the original direction. Returns None if
        the segment does not intersect the box.
        """
        d = self.direction
        t0, t1 = 0.0, 1.0

        for axis in range(2):
            p0 = self.start[axis]
            if d[axis] == 0:
                if p0 < box.min[axis] or p0 > box.max[axis]:
                    return None
                continue

            ta = (box.min[axis] - p0) / d[axis]
            tb = (box.max[axis] - p0) / d[axis]
            if ta > tb:
                ta, tb = tb, ta

            t0 = max(t0, ta)
            t1 = min(t1, tb)
            if t0 > t1:
                return None

        return LineSegment(self.start + d * t0, self.start + d * t1)
