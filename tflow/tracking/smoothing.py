"""
Offset curve filtering for stabilization.

Per-frame offsets are accumulated into a camera path; the stabilizing
correction for each frame is the difference between a Gaussian-smoothed
path and the raw path.
"""

import numpy as np
from scipy.ndimage import gaussian_filter1d


def accumulate_offsets(offsets) -> np.ndarray:
    """
    Camera path from per-frame offsets.

    Args:
        offsets: Sequence of (dx, dy) per frame

    Returns:
        Nx2 array of cumulative positions
    """
    arr = np.asarray(offsets, dtype=np.float64).reshape(-1, 2)
    return np.cumsum(arr, axis=0)


def smooth_offsets(offsets, sigma: float = 5.0) -> np.ndarray:
    """
    Apply a Gaussian filter to an offset curve to remove jitter.

    Args:
        offsets: Sequence of (x, y) values, one per frame
        sigma: Gaussian filter sigma in frames (higher = more smoothing)

    Returns:
        Nx2 array of filtered values
    """
    arr = np.asarray(offsets, dtype=np.float64).reshape(-1, 2)
    if len(arr) < 3 or sigma <= 0:
        return arr.copy()

    x_filtered = gaussian_filter1d(arr[:, 0], sigma=sigma, mode='nearest')
    y_filtered = gaussian_filter1d(arr[:, 1], sigma=sigma, mode='nearest')
    return np.column_stack([x_filtered, y_filtered])


def stabilizing_corrections(offsets, sigma: float = 5.0) -> np.ndarray:
    """Per-frame translation that moves the raw path onto the smoothed path."""
    path = accumulate_offsets(offsets)
    return smooth_offsets(path, sigma) - path
