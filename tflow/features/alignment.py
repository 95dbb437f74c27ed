"""
Horizontal alignment of two feature tables.

The per-bin link counts of both tables are smoothed and cross-correlated
to find the best whole-bin shift. Per-bin centroids are then compared
across that shift, and the mean difference is the sub-bin offset.
"""

import numpy as np
from scipy.ndimage import gaussian_filter1d

from tflow.features.average import Average


def bin_histogram(table) -> np.ndarray:
    """Number of links in each bin."""
    return np.array([len(links) for links in table.bins], dtype=np.float64)


def best_bin_shift(
    histogram: np.ndarray,
    other: np.ndarray,
    max_shift: int = 2,
    sigma: float = 1.0,
) -> int:
    """
    Shift s maximising sum(histogram[i] * other[i + s]).

    Ties go to the smallest |s|.
    """
    n = len(histogram)
    if sigma > 0:
        histogram = gaussian_filter1d(histogram, sigma=sigma, mode="constant")
        other = gaussian_filter1d(other, sigma=sigma, mode="constant")

    best_shift = 0
    best_score = None

    for shift in sorted(range(-max_shift, max_shift + 1), key=abs):
        if abs(shift) >= n:
            continue
        if shift >= 0:
            score = float(np.dot(histogram[:n - shift], other[shift:]))
        else:
            score = float(np.dot(histogram[-shift:], other[:n + shift]))

        if best_score is None or score > best_score:
            best_shift = shift
            best_score = score

    return best_shift


def align_tables(table, other, max_shift: int = 2, sigma: float = 1.0) -> Average:
    """
    Estimate the aligned-space x offset of other relative to table.

    Args:
        table: Reference FeatureTable
        other: FeatureTable to compare, with the same bin count
        max_shift: Largest whole-bin shift to search
        sigma: Gaussian sigma (in bins) applied to the count histograms

    Returns:
        Average of per-bin centroid differences (other - table)

    Raises:
        ValueError: If the bin counts differ
    """
    if table.bin_count != other.bin_count:
        raise ValueError(
            f"Cannot align tables with {table.bin_count} and {other.bin_count} bins"
        )

    shift = best_bin_shift(bin_histogram(table), bin_histogram(other), max_shift, sigma)

    result = Average()
    for index in range(table.bin_count):
        other_index = index + shift
        if not (0 <= other_index < other.bin_count):
            continue

        a = table.average_chain_position(index)
        b = other.average_chain_position(other_index)
        if a.has_samples and b.has_samples:
            result.add_sample(b.value - a.value)

    return result
