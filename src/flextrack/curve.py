"""Lazily sampled cubic Bezier curve with parallel offset polylines."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from flextrack.bezier import BezierCurve
from flextrack.common import (
    CONTROL_POINT_COUNT,
    DEFAULT_PARALLEL_DISTANCE,
    DEFAULT_RESOLUTION,
    CurveState,
    CurveVariant,
)
from flextrack.geom import CurveBox, Point

logger = logging.getLogger(__name__)

###############################################################################
# CurveSettings
###############################################################################


def _check_resolution(resolution: float) -> float:
    resolution = float(resolution)
    if not 0.0 < resolution < 1.0:
        raise ValueError(f"Resolution must be in the open interval (0, 1), got {resolution}")
    return resolution


def _check_finite(*values: float) -> None:
    for value in values:
        if not math.isfinite(value):
            raise ValueError(f"Coordinates must be finite, got {value}")


@dataclass(frozen=True)
class CurveSettings:
    """Settings a curve is constructed with.

    Attributes:
        resolution: Parameter step between samples, in (0, 1). Smaller is denser.
        parallel_distance: Perpendicular distance of the left and right polylines.
    """

    resolution: float = DEFAULT_RESOLUTION
    parallel_distance: float = DEFAULT_PARALLEL_DISTANCE

    def __post_init__(self):
        _check_resolution(self.resolution)
        if not math.isfinite(self.parallel_distance) or self.parallel_distance < 0.0:
            raise ValueError(f"Parallel distance must be finite and >= 0, got {self.parallel_distance}")

    @property
    def sample_count(self) -> int:
        """Number of points in each polyline."""
        return BezierCurve.sample_count(self.resolution)

    def to_dict(self) -> dict:
        """Convert settings to a dictionary for serialization."""
        return {
            "resolution": self.resolution,
            "parallel_distance": self.parallel_distance,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CurveSettings":
        """Create CurveSettings from a dictionary."""
        return cls(
            resolution=data.get("resolution", DEFAULT_RESOLUTION),
            parallel_distance=data.get("parallel_distance", DEFAULT_PARALLEL_DISTANCE),
        )


DEFAULT_SETTINGS = CurveSettings()


###############################################################################
# CurveEngine
###############################################################################


class CurveEngine:
    """A cubic Bezier curve approximated by a polyline, with two parallel offsets.

    The 4 control points all start at the origin and must be set before use.
    Sampled output is recomputed lazily by the first read after a change:
    a resolution change reallocates the buffers, a control point change only
    rewrites them.

    Polylines are returned as read-only views of shape (n, 2) into internal
    storage. A view stays valid until the curve is changed and read again;
    copy it to keep the values.

    Instances are not thread-safe. Reads update the cache, so every call on a
    shared instance has to be serialized by the caller.
    """

    def __init__(
        self,
        control_points: Optional[Union[Sequence[Tuple[float, float]], NDArray[np.float64]]] = None,
        settings: Optional[CurveSettings] = None,
        **overrides: float,
    ):
        """
        Initialize a curve.

        Args:
            control_points: Optional 4 control points (x, y); all at the origin if omitted.
            settings: Resolution and parallel distance; defaults if omitted.
            **overrides: Individual CurveSettings fields overriding _settings_.
        """
        base = settings if settings is not None else DEFAULT_SETTINGS
        if overrides:
            base = replace(base, **overrides)
        self._settings = base
        self._resolution = base.resolution

        self._control_points = np.zeros((CONTROL_POINT_COUNT, 2), dtype=np.float64)
        self._derivative_points = BezierCurve.derivative_control_points(self._control_points)

        self._curve_points = np.empty((0, 2), dtype=np.float64)
        self._left_points = np.empty((0, 2), dtype=np.float64)
        self._right_points = np.empty((0, 2), dtype=np.float64)
        self._tangent_points = np.empty((0, 2), dtype=np.float64)
        self._views: Tuple[NDArray[np.float64], ...] = ()

        self._state = CurveState.DIRTY_RESOLUTION
        self._recompute_count = 0

        if control_points is not None:
            self.set_control_points(control_points)

    ###########################################################################
    # Properties
    ###########################################################################

    @property
    def settings(self) -> CurveSettings:
        """The settings with the current resolution."""
        return CurveSettings(self._resolution, self._settings.parallel_distance)

    @property
    def resolution(self) -> float:
        """float: Parameter step between samples."""
        return self._resolution

    @property
    def parallel_distance(self) -> float:
        """float: Perpendicular distance of the offset polylines."""
        return self._settings.parallel_distance

    @property
    def state(self) -> CurveState:
        """CurveState: Whether the sampled output is up to date."""
        return self._state

    @property
    def recompute_count(self) -> int:
        """int: Number of full recomputes performed so far."""
        return self._recompute_count

    @property
    def sample_count(self) -> int:
        """int: Number of points in each polyline at the current resolution."""
        return BezierCurve.sample_count(self._resolution)

    @property
    def control_points(self) -> NDArray[np.float64]:
        """Read-only view of the 4 control points, shape (4, 2)."""
        view = self._control_points.view()
        view.flags.writeable = False
        return view

    ###########################################################################
    # Resolution
    ###########################################################################

    def get_resolution(self) -> float:
        """Get the parameter step between samples."""
        return self._resolution

    def set_resolution(self, resolution: float) -> None:
        """
        Set the parameter step between samples.

        The number of samples becomes floor(1 / resolution) + 1.

        Args:
            resolution (float): Step in the open interval (0, 1)

        Raises:
            ValueError: If resolution is outside (0, 1)
        """
        resolution = _check_resolution(resolution)
        if resolution != self._resolution:
            self._resolution = resolution
            self._state = CurveState.DIRTY_RESOLUTION

    ###########################################################################
    # Control points
    ###########################################################################

    def get_control_point(self, index: int) -> Point:
        """
        Get one control point.

        Raises:
            IndexError: If index is not in [0, 4)
        """
        self._check_index(index)
        x, y = self._control_points[index]
        return Point(float(x), float(y))

    def set_control_point(self, point: Union[Point, Tuple[float, float]], index: int) -> None:
        """
        Set one control point. Setting an equal value leaves the curve clean.

        Args:
            point: New position as Point or (x, y)
            index: Control point index in [0, 4)

        Raises:
            IndexError: If index is not in [0, 4)
        """
        if isinstance(point, Point):
            self.set_control_point_xy(point.x, point.y, index)
        else:
            x, y = point
            self.set_control_point_xy(x, y, index)

    def set_control_point_xy(self, x: float, y: float, index: int) -> None:
        """Set one control point from its coordinates; see set_control_point."""
        self._check_index(index)
        x, y = float(x), float(y)
        _check_finite(x, y)
        if self._control_points[index, 0] != x or self._control_points[index, 1] != y:
            self._control_points[index, 0] = x
            self._control_points[index, 1] = y
            self._mark_points_dirty()

    def set_control_points(self, points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]]) -> None:
        """
        Set all 4 control points at once.

        Raises:
            ValueError: If _points_ does not have shape (4, 2)
        """
        arr = np.asarray(points, dtype=np.float64)
        if arr.shape != (CONTROL_POINT_COUNT, 2):
            raise ValueError(f"Expected {CONTROL_POINT_COUNT} control points of shape (4, 2), got {arr.shape}")
        _check_finite(*arr.ravel().tolist())
        if not np.array_equal(arr, self._control_points):
            self._control_points[:] = arr
            self._mark_points_dirty()

    def move(self, dx: float, dy: float) -> None:
        """
        Translate all control points by (dx, dy).

        The curve is marked dirty and recomputed on the next read.
        Moving by (0, 0) does nothing.
        """
        dx, dy = float(dx), float(dy)
        _check_finite(dx, dy)
        if dx != 0.0 or dy != 0.0:
            self._control_points += (dx, dy)
            self._mark_points_dirty()

    ###########################################################################
    # Sampled output
    ###########################################################################

    def get_curve(self, variant: Union[CurveVariant, int] = CurveVariant.CENTER) -> NDArray[np.float64]:
        """
        Get one of the sampled polylines, recomputing it first if needed.

        Args:
            variant: 0 = centerline, 1 = left offset, 2 = right offset

        Returns:
            Read-only view of shape (n, 2), valid until the next change is read

        Raises:
            ValueError: If variant is not 0, 1 or 2
        """
        variant = CurveVariant.coerce(variant)
        self._update()
        return self._views[variant]

    def get_tangent_points(self) -> NDArray[np.float64]:
        """Read-only view of the unnormalized tangent vectors, shape (n, 2)."""
        self._update()
        return self._views[3]

    def get_derivative_control_points(self) -> NDArray[np.float64]:
        """Read-only copy of the 3 hodograph control points, shape (3, 2)."""
        self._update()
        result = self._derivative_points.copy()
        result.flags.writeable = False
        return result

    def get_length(self) -> float:
        """
        Length of the centerline polyline.

        The sum is recomputed on every call.
        """
        return BezierCurve.polyline_length(self.get_curve(CurveVariant.CENTER))

    def get_bounding_box(self) -> CurveBox:
        """The box enclosing the centerline and both offset polylines."""
        self._update()
        return CurveBox.from_points(self._curve_points, self._left_points, self._right_points)

    ###########################################################################
    # Internals
    ###########################################################################

    def _update(self) -> None:
        if self._state is CurveState.CLEAN:
            return
        if self._state is CurveState.DIRTY_RESOLUTION:
            self._resize()
        self._recompute()
        self._state = CurveState.CLEAN

    def _resize(self) -> None:
        size = BezierCurve.sample_count(self._resolution)
        logger.debug("Resizing curve buffers from %d to %d points", self._curve_points.shape[0], size)
        self._curve_points = np.empty((size, 2), dtype=np.float64)
        self._left_points = np.empty((size, 2), dtype=np.float64)
        self._right_points = np.empty((size, 2), dtype=np.float64)
        self._tangent_points = np.empty((size, 2), dtype=np.float64)

        views = []
        for buffer in (self._curve_points, self._left_points, self._right_points, self._tangent_points):
            view = buffer.view()
            view.flags.writeable = False
            views.append(view)
        self._views = tuple(views)

    def _recompute(self) -> None:
        self._derivative_points = BezierCurve.derivative_control_points(self._control_points)
        BezierCurve.sample_cubic_inplace(self._control_points, self._resolution, self._curve_points)
        self._tangent_points[:] = BezierCurve.sample_quadratic_tangents(
            self._derivative_points, self._resolution, self._curve_points.shape[0]
        )
        BezierCurve.offset_curves_inplace(
            self._curve_points,
            self._tangent_points,
            self._settings.parallel_distance,
            self._left_points,
            self._right_points,
        )
        self._recompute_count += 1
        logger.debug("Recomputed curve (%d points, recompute #%d)", self._curve_points.shape[0], self._recompute_count)

    def _mark_points_dirty(self) -> None:
        if self._state is CurveState.CLEAN:
            self._state = CurveState.DIRTY_POINTS

    @staticmethod
    def _check_index(index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise IndexError(f"Control point index must be an int, got {index!r}")
        if not 0 <= index < CONTROL_POINT_COUNT:
            raise IndexError(f"Control point index must be in [0, {CONTROL_POINT_COUNT}), got {index}")

    def __repr__(self) -> str:
        points = ", ".join(f"({x:g}, {y:g})" for x, y in self._control_points)
        return (
            f"CurveEngine(control_points=[{points}], resolution={self._resolution}, "
            f"parallel_distance={self._settings.parallel_distance}, state={self._state.name})"
        )


def main():
    """Main"""
    curve = CurveEngine([(0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0)], resolution=0.5)
    print(curve)
    for variant in CurveVariant:
        print(variant.name, curve.get_curve(variant).tolist())
    print("length:", curve.get_length())


if __name__ == "__main__":
    main()
