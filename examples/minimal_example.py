#!/usr/bin/env python3
"""
Minimal Example: tflow API Usage
================================

Shows the essential API calls without extra boilerplate.
This is the "quick reference" version.
"""

import math

import numpy as np

from tflow.core.config import ScanSettings
from tflow.core.image import Image
from tflow.features import FeatureScanner
from tflow.outputs import write_chains_csv, write_offsets_crv
from tflow.tracking import ScanLineMotionModel, stabilizing_corrections


def make_frame(shift: float, width: int = 320, height: int = 240) -> np.ndarray:
    """A few vertical bars, moved right by shift pixels."""
    frame = np.full((height, width, 3), 40, dtype=np.uint8)
    for left in (60, 140, 230):
        x0 = int(round(left + shift))
        frame[:, x0:x0 + 20] = 210
    return frame


# =============================================================================
# STEP 1: SCAN ONE FRAME
# Equivalent to: tflow scan frame.png --tilt 2 --spacing 8 --chains chains.csv
# =============================================================================

tilt = math.radians(2.0)
image = Image(make_frame(0))

scanner = FeatureScanner(ScanSettings(spacing=8))
points, segments, table = scanner.scan(image, tilt=tilt)

print(f"{len(segments)} scan lines, {len(points)} points, {table.chain_count} chains")
print(table.format_table())
write_chains_csv("chains.csv", table)


# =============================================================================
# STEP 2: ALIGN A SEQUENCE
# Equivalent to: tflow track input.mp4 --tilt 2 --spacing 8 -o offsets.crv --smooth 3
# =============================================================================

model = ScanLineMotionModel(ScanSettings(spacing=8), tilt=tilt)

offsets = []
for frame_num, shift in enumerate([0, 2, 3, 7, 8, 8, 11, 13], start=1):
    estimate = model.update(make_frame(shift))
    if estimate is None:
        offsets.append((0.0, 0.0))
        continue
    offsets.append(estimate.offset)
    print(f"Frame {frame_num}: dx={estimate.offset[0]:.2f} ({estimate.samples} bins)")

write_offsets_crv("offsets.crv", stabilizing_corrections(offsets, sigma=3.0))
print("Wrote chains.csv, offsets.crv")
