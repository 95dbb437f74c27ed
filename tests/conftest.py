"""
Shared fixtures: synthetic frames.
"""

import numpy as np
import pytest


def stripe_frame(
    width: int = 200,
    height: int = 100,
    left: int = 80,
    right: int = 120,
    background: int = 50,
    stripe: int = 200,
) -> np.ndarray:
    """BGR frame with one vertical stripe covering columns [left, right)."""
    frame = np.full((height, width, 3), background, dtype=np.uint8)
    frame[:, left:right] = stripe
    return frame


@pytest.fixture
def make_stripe_frame():
    return stripe_frame


@pytest.fixture
def stripe_image():
    from tflow.core.image import Image
    return Image(stripe_frame())


def write_stripe_video(path, shifts, width=200, height=100):
    """MJPG video of the stripe frame, moved right by shifts[i] in frame i + 1."""
    import cv2

    writer = cv2.VideoWriter(
        str(path), cv2.CAP_OPENCV_MJPEG, cv2.VideoWriter_fourcc(*'MJPG'), 10.0, (width, height)
    )
    if not writer.isOpened():
        pytest.skip("MJPG video encoder not available")
    writer.set(cv2.VIDEOWRITER_PROP_QUALITY, 100)

    for shift in shifts:
        writer.write(stripe_frame(width, height, left=80 + shift, right=120 + shift))
    writer.release()
    return path


@pytest.fixture
def make_stripe_video():
    return write_stripe_video
