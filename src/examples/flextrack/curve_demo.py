"""Sample an S-shaped track segment and print its centerline, edges and bed."""

import logging

from flextrack.bed import track_bed_area
from flextrack.common import CurveVariant
from flextrack.curve import CurveEngine, CurveSettings

CONTROL_POINTS = [(0.0, 0.0), (40.0, 0.0), (60.0, 50.0), (100.0, 50.0)]
SETTINGS = CurveSettings(resolution=0.05, parallel_distance=4.5)


def main():
    """Main"""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    curve = CurveEngine(CONTROL_POINTS, SETTINGS)
    print(curve)
    print(f"  samples:      {curve.sample_count}")
    print(f"  length:       {curve.get_length():.4f}")
    print(f"  bounding box: {curve.get_bounding_box()}")
    print(f"  bed area:     {track_bed_area(curve):.4f}")

    center = curve.get_curve(CurveVariant.CENTER)
    left = curve.get_curve(CurveVariant.LEFT)
    right = curve.get_curve(CurveVariant.RIGHT)
    for index in range(0, curve.sample_count, 5):
        print(
            f"  [{index:3d}] center=({center[index, 0]:8.3f}, {center[index, 1]:8.3f})"
            f"  left=({left[index, 0]:8.3f}, {left[index, 1]:8.3f})"
            f"  right=({right[index, 0]:8.3f}, {right[index, 1]:8.3f})"
        )

    curve.move(10.0, -5.0)
    print(f"after move: start={curve.get_curve()[0].tolist()} end={curve.get_curve()[-1].tolist()}")


if __name__ == "__main__":
    main()
