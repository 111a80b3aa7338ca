"""Test module for flextrack.bed

The tests are run using pytest.
"""

import logging

import pytest
import shapely.geometry

from flextrack.bed import track_bed_area, track_bed_polygon
from flextrack.curve import CurveEngine

ARCH = [(0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0)]


class TestTrackBed:
    """Test the polygon between the offset polylines."""

    def test_straight_bed_is_rectangle(self):
        """A straight segment gives a rectangle of length times twice the distance."""
        curve = CurveEngine([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)], resolution=0.1)
        polygon = track_bed_polygon(curve)

        assert isinstance(polygon, shapely.geometry.Polygon)
        assert polygon.area == pytest.approx(270.0)
        assert polygon.bounds == pytest.approx((0.0, -4.5, 30.0, 4.5))

    def test_curved_bed_area(self):
        """A gentle curve has about its length times the bed width as area."""
        curve = CurveEngine([(0.0, 0.0), (40.0, 0.0), (60.0, 50.0), (100.0, 50.0)], resolution=0.05)
        assert track_bed_area(curve) == pytest.approx(curve.get_length() * 9.0, rel=0.05)

    def test_bed_contains_centerline(self):
        """The centerline lies inside the bed."""
        curve = CurveEngine([(0.0, 0.0), (40.0, 0.0), (60.0, 50.0), (100.0, 50.0)], resolution=0.05)
        polygon = track_bed_polygon(curve)
        centerline = shapely.geometry.LineString(curve.get_curve(0)[1:-1].tolist())
        assert polygon.buffer(1e-9).contains(centerline)

    def test_gentle_curve_logs_nothing(self, caplog):
        """A valid outline needs no repair."""
        caplog.set_level(logging.WARNING, logger="flextrack.bed")
        curve = CurveEngine([(0.0, 0.0), (40.0, 0.0), (60.0, 50.0), (100.0, 50.0)], resolution=0.05)
        track_bed_polygon(curve)
        assert caplog.text == ""

    def test_zero_width_bed(self):
        """A bed without width is rejected."""
        curve = CurveEngine([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0), (30.0, 0.0)], parallel_distance=0.0)
        with pytest.raises(ValueError, match="no area"):
            track_bed_polygon(curve)


class TestTrackBedRepair:
    """Test outlines that intersect themselves."""

    def test_tight_bend_is_repaired(self, caplog):
        """A bed wider than the bend radius folds over and is repaired into a valid polygon."""
        caplog.set_level(logging.WARNING, logger="flextrack.bed")
        curve = CurveEngine(ARCH, resolution=0.025, parallel_distance=8.0)
        assert not shapely.geometry.Polygon(
            list(curve.get_curve(1).tolist()) + list(curve.get_curve(2)[::-1].tolist())
        ).is_valid

        polygon = track_bed_polygon(curve)

        assert "self-intersecting; repairing with make_valid" in caplog.text
        assert isinstance(polygon, shapely.geometry.Polygon)
        assert polygon.is_valid
        assert polygon.area > 0.0

    def test_split_bed_keeps_largest_part(self, caplog):
        """An outline crossing itself into two lobes keeps the larger lobe."""
        caplog.set_level(logging.WARNING, logger="flextrack.bed")
        # two samples whose normals point in nearly opposite directions form a bow tie
        curve = CurveEngine([(0.0, 0.0), (0.0, 10.0), (20.0, 10.0), (10.0, -10.0)], resolution=0.9)
        assert curve.sample_count == 2

        polygon = track_bed_polygon(curve)

        assert "self-intersecting" in caplog.text
        assert "split into 2 parts; keeping the largest" in caplog.text
        assert isinstance(polygon, shapely.geometry.Polygon)
        assert polygon.is_valid
        # upper lobe: base 9 on y=0, apex where the outline crosses itself at y ~ -6.63
        assert polygon.area == pytest.approx(29.835, rel=1e-3)
        assert polygon.contains(shapely.geometry.Point(0.0, -1.0))
        assert not polygon.contains(shapely.geometry.Point(12.0, -10.85))
