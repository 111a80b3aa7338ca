"""Track bed outline between the left and right offset polylines of a curve."""

from __future__ import annotations

import logging
from typing import List

import numpy as np
import shapely.errors
import shapely.geometry
import shapely.validation

from flextrack.common import CurveVariant
from flextrack.curve import CurveEngine

logger = logging.getLogger(__name__)


def track_bed_polygon(curve: CurveEngine) -> shapely.geometry.Polygon:
    """
    Polygon covered by the track bed of a curve.

    The ring runs along the left polyline and back along the right one.
    Self-intersections on tight bends are repaired with make_valid; if that
    splits the bed, the largest part is returned.

    Args:
        curve (CurveEngine): The curve

    Returns:
        shapely.geometry.Polygon: The track bed

    Raises:
        ValueError: If the bed has no area
    """
    left = curve.get_curve(CurveVariant.LEFT)
    right = curve.get_curve(CurveVariant.RIGHT)
    ring = np.concatenate([left, right[::-1]])

    outline = shapely.geometry.Polygon(ring.tolist())
    if outline.is_valid:
        parts = _polygon_parts(outline)
    else:
        logger.warning("Track bed outline is self-intersecting; repairing with make_valid")
        try:
            parts = _polygon_parts(shapely.validation.make_valid(outline))
        except (shapely.errors.ShapelyError, ValueError) as e:
            raise ValueError(f"Failed to repair track bed outline: {e}") from e

    if not parts:
        raise ValueError("Track bed has no area")
    if len(parts) > 1:
        logger.warning("Track bed split into %d parts; keeping the largest", len(parts))
    return max(parts, key=lambda part: part.area)


def track_bed_area(curve: CurveEngine) -> float:
    """Area of the track bed polygon of a curve."""
    return float(track_bed_polygon(curve).area)


def _polygon_parts(geometry: shapely.geometry.base.BaseGeometry) -> List[shapely.geometry.Polygon]:
    # make_valid may return lines and points next to polygons; only areas count
    if isinstance(geometry, shapely.geometry.Polygon):
        return [geometry] if not geometry.is_empty and geometry.area > 0.0 else []
    if isinstance(geometry, (shapely.geometry.MultiPolygon, shapely.geometry.GeometryCollection)):
        parts: List[shapely.geometry.Polygon] = []
        for geom in geometry.geoms:
            parts.extend(_polygon_parts(geom))
        return parts
    return []
