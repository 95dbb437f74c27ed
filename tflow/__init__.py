"""
Transform Flow
==============

Sub-pixel scan-line edge features and frame-to-frame alignment for
video stabilization.

Main modules:
- tflow.features: Scan-line rasterization, edge detection, feature tables
- tflow.tracking: Motion models and offset smoothing
- tflow.outputs: CSV and .crv writers
- tflow.core: Images, video input, geometry and configuration

Quick start:
    >>> from tflow import FeatureScanner, Image
    >>> scanner = FeatureScanner()
    >>> points, segments, table = scanner.scan(Image.from_file("a.png"), tilt=0.0)
"""

__version__ = "0.1.0"

# Convenience imports
from tflow.core.image import Image
from tflow.core.config import Config
from tflow.features import FeatureScanner, FeatureTable
from tflow.tracking import ScanLineMotionModel, OpticalFlowMotionModel

__all__ = [
    "__version__",
    "Image",
    "Config",
    "FeatureScanner",
    "FeatureTable",
    "ScanLineMotionModel",
    "OpticalFlowMotionModel",
]
