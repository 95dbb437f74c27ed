"""
Tests for Bresenham line rasterization.
"""

import itertools

import pytest

from tflow.features.rasterizer import normalized_line, ordered_line


ENDPOINTS = [(0, 0), (7, 2), (-3, 5), (4, -6), (10, 10), (2, 9), (-8, -1)]


class TestOrderedLine:
    """Tests for the direction-preserving variant."""

    def test_horizontal(self):
        """Test a horizontal line excludes its end point."""
        assert list(ordered_line((0, 3), (4, 3))) == [(0, 3), (1, 3), (2, 3), (3, 3)]

    def test_reversed_direction(self):
        """Test that swapping endpoints walks the other way."""
        assert list(ordered_line((4, 3), (0, 3))) == [(4, 3), (3, 3), (2, 3), (1, 3)]

    def test_steep(self):
        """Test a line whose major axis is y."""
        points = list(ordered_line((0, 0), (2, 6)))
        assert points == [(0, 0), (0, 1), (1, 2), (1, 3), (1, 4), (2, 5)]

    def test_degenerate(self):
        """Test that a single-pixel segment yields nothing."""
        assert list(ordered_line((3, 3), (3, 3))) == []

    def test_float_endpoints_truncated(self):
        """Test float endpoints are truncated to the grid."""
        assert list(ordered_line((0.9, 0.2), (3.7, 0.0))) == [(0, 0), (1, 0), (2, 0)]

    def test_starts_at_start(self):
        """Test the first coordinate is always the start point."""
        for start, end in itertools.permutations(ENDPOINTS, 2):
            assert next(ordered_line(start, end)) == start

    def test_lazy(self):
        """Test that the rasterizer is a generator."""
        line = ordered_line((0, 0), (1_000_000, 3))
        assert next(line) == (0, 0)
        assert next(line) == (1, 0)


class TestNormalizedLine:
    """Tests for the major-axis-increasing variant."""

    def test_independent_of_order(self):
        """Test that swapping endpoints gives the same pixels."""
        for start, end in itertools.permutations(ENDPOINTS, 2):
            assert list(normalized_line(start, end)) == list(normalized_line(end, start))

    def test_major_axis_increases(self):
        """Test the major axis increases by one per step."""
        for start, end in itertools.permutations(ENDPOINTS, 2):
            steep = abs(end[1] - start[1]) > abs(end[0] - start[0])
            axis = 1 if steep else 0
            major = [p[axis] for p in normalized_line(start, end)]
            assert major == list(range(min(start[axis], end[axis]), max(start[axis], end[axis])))

    def test_degenerate(self):
        """Test that a single-pixel segment yields nothing."""
        assert list(normalized_line((5, 5), (5, 5))) == []


@pytest.mark.parametrize("rasterize", [ordered_line, normalized_line])
class TestLineProperties:
    """Properties shared by both variants."""

    def test_point_count(self, rasterize):
        """Test one coordinate per step along the major axis."""
        for start, end in itertools.permutations(ENDPOINTS, 2):
            expected = max(abs(end[0] - start[0]), abs(end[1] - start[1]))
            assert len(list(rasterize(start, end))) == expected

    def test_connected(self, rasterize):
        """Test consecutive coordinates differ by at most one on each axis."""
        for start, end in itertools.permutations(ENDPOINTS, 2):
            points = list(rasterize(start, end))
            for (x0, y0), (x1, y1) in zip(points, points[1:]):
                assert abs(x1 - x0) <= 1
                assert abs(y1 - y0) <= 1

    def test_integer_coordinates(self, rasterize):
        """Test all coordinates are ints."""
        for x, y in rasterize((1.5, 2.5), (9.2, 4.8)):
            assert isinstance(x, int) and isinstance(y, int)
