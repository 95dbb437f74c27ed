"""
Core module - Images, video frames, geometry, configuration and base classes.
"""

from tflow.core.base import BaseMotionModel, MotionEstimate
from tflow.core.image import Image
from tflow.core.video import read_frames
from tflow.core.geometry import AlignedBox, LineSegment, rotate, translate
from tflow.core.config import (
    Config,
    ScanSettings,
    TableSettings,
    AlignSettings,
    load_config,
    save_config,
)

__all__ = [
    "BaseMotionModel",
    "MotionEstimate",
    "Image",
    "read_frames",
    "AlignedBox",
    "LineSegment",
    "rotate",
    "translate",
    "Config",
    "ScanSettings",
    "TableSettings",
    "AlignSettings",
    "load_config",
    "save_config",
]
