"""
Tests for feature table alignment.
"""

import numpy as np
import pytest

from tflow.core.geometry import AlignedBox
from tflow.features.alignment import align_tables, best_bin_shift, bin_histogram
from tflow.features.average import Average
from tflow.features.table import FeatureTable


def make_table(points, bin_count=10):
    # 200x100 image, 20 px per bin with 10 bins
    table = FeatureTable(bin_count, AlignedBox.from_origin_and_size((0, 0), (200, 100)))
    table.update(points)
    return table


class TestAverage:
    """Tests for the running average."""

    def test_empty(self):
        average = Average()
        assert average.has_samples is False
        assert average.value == 0.0

    def test_mean(self):
        average = Average()
        average.add_samples([1.0, 2.0, 6.0])
        assert average.count == 3
        assert average.value == pytest.approx(3.0)

    def test_combine(self):
        """Test adding two averages pools their samples."""
        combined = Average(4.0, 2) + Average(8.0, 2)
        assert combined.count == 4
        assert combined.value == pytest.approx(3.0)


class TestBinShift:
    """Tests for the whole-bin search."""

    def test_identical(self):
        histogram = np.array([0, 1, 4, 1, 0, 0, 2, 0], dtype=float)
        assert best_bin_shift(histogram, histogram) == 0

    @pytest.mark.parametrize("shift", [-2, -1, 1, 2])
    def test_recovers_shift(self, shift):
        """Test a shifted histogram is matched back."""
        histogram = np.array([0, 0, 0, 5, 1, 0, 3, 0, 0, 0], dtype=float)
        other = np.roll(histogram, shift)
        assert best_bin_shift(histogram, other) == shift

    def test_limited_search(self):
        """Test shifts beyond max_shift are never returned."""
        histogram = np.array([0, 0, 5, 0, 0, 0, 0, 0, 0, 0], dtype=float)
        other = np.roll(histogram, 4)
        assert abs(best_bin_shift(histogram, other, max_shift=2)) <= 2

    def test_empty_histograms(self):
        """Test no information means no shift."""
        zeros = np.zeros(6)
        assert best_bin_shift(zeros, zeros) == 0

    def test_histogram_counts(self):
        table = make_table([(45, 10), (45, 40), (65, 10)])
        assert bin_histogram(table).tolist() == [0, 0, 2, 1, 0, 0, 0, 0, 0, 0]


class TestAlignTables:
    """Tests for sub-bin offset estimation."""

    def test_small_offset(self):
        """Test a sub-bin shift is measured in every occupied bin."""
        a = make_table([(20 * k + 5, 50) for k in range(10)])
        b = make_table([(20 * k + 8, 50) for k in range(10)])

        offset = align_tables(a, b)
        assert offset.count == 10
        assert offset.value == pytest.approx(3.0)

    def test_negative_offset(self):
        a = make_table([(20 * k + 8, 50) for k in range(10)])
        b = make_table([(20 * k + 5, 50) for k in range(10)])
        assert align_tables(a, b).value == pytest.approx(-3.0)

    def test_whole_bin_offset(self):
        """Test a shift of one bin is found before centroids are compared."""
        a = make_table([(45, 10), (45, 40), (45, 70), (65, 10)])
        b = make_table([(65, 10), (65, 40), (65, 70), (85, 10)])

        assert best_bin_shift(bin_histogram(a), bin_histogram(b)) == 1

        offset = align_tables(a, b)
        assert offset.count == 2
        assert offset.value == pytest.approx(20.0)

    def test_empty_tables(self):
        """Test empty tables give no samples."""
        offset = align_tables(make_table([]), make_table([]))
        assert offset.has_samples is False
        assert offset.value == 0.0

    def test_bin_count_mismatch(self):
        with pytest.raises(ValueError):
            align_tables(make_table([], bin_count=10), make_table([], bin_count=12))

    def test_calculate_offset(self):
        """Test the table method delegates to align_tables."""
        a = make_table([(20 * k + 5, 50) for k in range(10)])
        b = make_table([(20 * k + 8, 50) for k in range(10)])

        offset = a.calculate_offset(b, max_shift=1, sigma=0.0)
        assert offset.count == 10
        assert offset.value == pytest.approx(3.0)
