"""
Tests for FeatureScanner and the scan command.
"""

import sys

import numpy as np
import pytest

from tflow.core.image import Image
from tflow.features.scanner import FeatureScanner, default_spacing


class TestFeatureScanner:
    """Tests for gravity-aligned scanning."""

    def test_stripe_edges(self, stripe_image):
        """Test a vertical stripe yields its two edges on every scan line."""
        scanner = FeatureScanner()
        points, segments, table = scanner.scan(stripe_image, 0.0, spacing=10)

        # Lines at y = 10, 20, ..., 80
        assert len(segments) == 8
        assert len(points) == 16

        xs = sorted({round(float(p[0]), 6) for p in points})
        assert xs == [79.5, 119.5]
        ys = sorted({float(p[1]) for p in points})
        assert ys == [10.0, 20.0, 30.0, 40.0, 50.0, 60.0, 70.0, 80.0]

    def test_stripe_chains(self, stripe_image):
        """Test the stripe edges chain into exactly two chains."""
        _, _, table = FeatureScanner().scan(stripe_image, 0.0, spacing=10)

        assert table.bin_count == 10
        assert table.chain_count == 2

        chains = list(table.chains())
        assert [len(chain) for chain in chains] == [8, 8]
        for chain in chains:
            xs = {round(float(link.offset[0]), 6) for link in chain}
            assert len(xs) == 1

    def test_segments_clipped(self, stripe_image):
        """Test segments are clipped to 98% of the image."""
        _, segments, _ = FeatureScanner().scan(stripe_image, 0.0, spacing=10)

        for segment in segments:
            assert segment.start == pytest.approx([2.0, segment.start[1]])
            assert segment.end == pytest.approx([198.0, segment.end[1]])

    def test_bounding_box(self, stripe_image):
        """Test the rotated bounding box for zero tilt is the image box."""
        scanner = FeatureScanner()
        scanner.scan(stripe_image, 0.0, spacing=10)
        assert scanner.bounding_box.min == pytest.approx([0, 0])
        assert scanner.bounding_box.max == pytest.approx([200, 100])

    def test_tilted_scan(self, make_stripe_frame):
        """Test a tilted scan keeps every segment and point inside the image."""
        image = Image(make_stripe_frame(width=160, height=120, left=60, right=100))
        points, segments, table = FeatureScanner().scan(image, 0.2, spacing=8)

        assert len(points) > 0
        assert len(table) == len(points)
        for segment in segments:
            for p in (segment.start, segment.end):
                assert 1.6 - 1e-9 <= p[0] <= 158.4 + 1e-9
                assert 1.2 - 1e-9 <= p[1] <= 118.8 + 1e-9
        for p in points:
            assert 0 <= p[0] < 160
            assert 0 <= p[1] < 120

    def test_idempotent(self, stripe_image, make_stripe_frame):
        """Test a populated scanner ignores further scans."""
        scanner = FeatureScanner()
        first = scanner.scan(stripe_image, 0.0, spacing=10)
        second = scanner.scan(Image(make_stripe_frame(left=20, right=40)), 0.3, spacing=5)

        assert second[0] is first[0]
        assert second[2] is first[2]
        assert len(second[0]) == 16

    def test_blank_image(self):
        """Test a featureless image yields segments but no points."""
        image = Image(np.full((50, 80, 3), 128, dtype=np.uint8))
        points, segments, table = FeatureScanner().scan(image, 0.0, spacing=5)

        assert points == []
        assert len(segments) > 0
        assert table.chain_count == 0

    def test_bin_count_override(self, stripe_image):
        """Test the bin count can be set independently of the spacing."""
        _, _, table = FeatureScanner().scan(stripe_image, 0.0, spacing=10, bin_count=25)
        assert table.bin_count == 25

    def test_settings_defaults(self, stripe_image):
        """Test tilt, spacing and bins come from the settings."""
        from tflow.core.config import ScanSettings

        settings = ScanSettings(spacing=10, bin_count=20)
        points, segments, table = FeatureScanner(settings).scan(stripe_image)

        assert len(segments) == 8
        assert table.bin_count == 20
        assert table.chain_count == 2

    def test_invalid_spacing(self, stripe_image):
        with pytest.raises(ValueError):
            FeatureScanner().scan(stripe_image, 0.0, spacing=0)

    def test_default_spacing(self):
        assert default_spacing(100) == 2
        assert default_spacing(800) == 20
        assert default_spacing(100, divisor=10) == 10


class TestScanCommand:
    """Tests for the tflow scan command."""

    def test_scan_writes_chains(self, tmp_path, monkeypatch, capsys, make_stripe_frame):
        """Test the scan command end to end."""
        import cv2
        from tflow.__main__ import main

        image_path = tmp_path / "stripe.png"
        cv2.imwrite(str(image_path), make_stripe_frame())
        chains_path = tmp_path / "chains.csv"

        monkeypatch.setattr(sys, "argv", [
            "tflow", "scan", str(image_path),
            "--spacing", "10", "--chains", str(chains_path),
        ])
        assert main() == 0

        out = capsys.readouterr().out
        assert "16 feature points" in out
        assert "2 chains" in out

        lines = chains_path.read_text().splitlines()
        assert lines[0] == "chain,link,x,y,aligned_x,aligned_y"
        assert len(lines) == 17
