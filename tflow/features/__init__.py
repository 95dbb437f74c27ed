"""
Features module - Scan-line edge features and chain tables.

This module provides:
- ordered_line / normalized_line: Bresenham rasterization
- LaplacianWindow / detect_edges: Sub-pixel zero-crossing edge detection
- FeatureScanner: Gravity-aligned scan-line feature detection
- FeatureTable: Binning and chaining of feature points
- align_tables: Offset estimate between two feature tables

Example:
    >>> from tflow.features import FeatureScanner
    >>> scanner = FeatureScanner()
    >>> points, segments, table = scanner.scan(image, tilt=0.0, spacing=12)
    >>> offset = table.calculate_offset(other_table).value
"""

from tflow.features.rasterizer import ordered_line, normalized_line
from tflow.features.edges import (
    LaplacianWindow,
    detect_edges,
    features_along_line,
    intensity,
)
from tflow.features.average import Average
from tflow.features.alignment import align_tables
from tflow.features.table import FeatureTable, ChainLink, LinkRef, BinningError
from tflow.features.scanner import FeatureScanner

__all__ = [
    "ordered_line",
    "normalized_line",
    "LaplacianWindow",
    "detect_edges",
    "features_along_line",
    "intensity",
    "Average",
    "align_tables",
    "FeatureTable",
    "ChainLink",
    "LinkRef",
    "BinningError",
    "FeatureScanner",
]
