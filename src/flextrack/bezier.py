"""Cubic Bezier sampling kernels producing a centerline, its tangents and parallel offsets."""

from __future__ import annotations

import logging
import math
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from flextrack.common import CONTROL_POINT_COUNT, DERIVATIVE_CONTROL_POINT_COUNT

logger = logging.getLogger(__name__)


class DegenerateCurveError(ValueError):
    """Raised when no sample of a curve has a usable tangent direction."""


class BezierCurve:
    """Class to handle the sampling of a cubic Bezier curve at a uniform resolution.

    All methods work on (n, 2) float64 arrays. The in-place variants write into
    buffers owned by the caller so that a curve can reuse its storage between
    recomputes.
    """

    @staticmethod
    def sample_count(resolution: float) -> int:
        """Number of samples for the given parameter step: floor(1 / resolution) + 1."""
        return int(math.floor(1.0 / resolution)) + 1

    @classmethod
    def derivative_control_points(
        cls, points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]]
    ) -> NDArray[np.float64]:
        """
        Control points of the hodograph of a cubic Bezier curve.

        The derivative of a cubic Bezier is a quadratic Bezier with control points
        D[i] = 3 * (C[i+1] - C[i]).

        Args:
            points: The 4 control points of the cubic curve

        Returns:
            NDArray[np.float64] of shape (3, 2)
        """
        control = cls._as_control_array(points, CONTROL_POINT_COUNT)
        return 3.0 * (control[1:] - control[:-1])

    @classmethod
    def sample_cubic_inplace(
        cls,
        points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]],
        resolution: float,
        output_buffer: NDArray[np.float64],
    ) -> int:
        """
        Sample a cubic Bezier curve into a pre-allocated buffer of shape (n, 2).

        The first and last rows are the start and end control points, copied
        without evaluation so the polyline ends exactly on them. Row i in between
        is evaluated at t = resolution * (i - 1), hence row 1 repeats the start point.

        Args:
            points: The 4 control points: start, control1, control2, end
            resolution: Parameter step between samples
            output_buffer: Buffer to write the samples into

        Returns:
            Number of points written to buffer

        Raises:
            ValueError: If the buffer holds fewer than 2 rows
        """
        control = cls._as_control_array(points, CONTROL_POINT_COUNT)
        count = cls._check_buffer(output_buffer)

        t = resolution * np.arange(count - 2, dtype=np.float64)

        # B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*P1 + 3*(1-t)*t^2*P2 + t^3*P3
        omt = 1.0 - t
        omt2 = omt * omt
        omt3 = omt2 * omt
        t2 = t * t
        t3 = t2 * t

        output_buffer[0] = control[0]
        output_buffer[1:-1, 0] = (
            omt3 * control[0, 0] + 3.0 * omt2 * t * control[1, 0] + 3.0 * omt * t2 * control[2, 0] + t3 * control[3, 0]
        )
        output_buffer[1:-1, 1] = (
            omt3 * control[0, 1] + 3.0 * omt2 * t * control[1, 1] + 3.0 * omt * t2 * control[2, 1] + t3 * control[3, 1]
        )
        output_buffer[-1] = control[3]
        return count

    @classmethod
    def sample_quadratic_tangents(
        cls,
        derivative_points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]],
        resolution: float,
        count: int,
    ) -> NDArray[np.float64]:
        """
        Sample the unnormalized tangent vectors of a cubic curve from its hodograph.

        The first and last rows are the first and last derivative control points.
        Row i in between is evaluated at t = resolution * i.

        Args:
            derivative_points: The 3 derivative control points
            resolution: Parameter step between samples
            count: Number of tangent vectors, equal to the number of curve samples

        Returns:
            NDArray[np.float64] of shape (count, 2)
        """
        deriv = cls._as_control_array(derivative_points, DERIVATIVE_CONTROL_POINT_COUNT)
        if count < 2:
            raise ValueError(f"At least 2 tangent samples are required, got {count}")

        t = resolution * np.arange(1, count - 1, dtype=np.float64)

        # T(t) = (1-t)^2*D0 + 2*(1-t)*t*D1 + t^2*D2
        omt = 1.0 - t
        w0 = omt * omt
        w1 = 2.0 * omt * t
        w2 = t * t

        tangents = np.empty((count, 2), dtype=np.float64)
        tangents[0] = deriv[0]
        tangents[1:-1] = np.outer(w0, deriv[0]) + np.outer(w1, deriv[1]) + np.outer(w2, deriv[2])
        tangents[-1] = deriv[2]
        return tangents

    @classmethod
    def offset_curves_inplace(
        # pylint: disable=too-many-arguments,too-many-positional-arguments
        cls,
        curve: NDArray[np.float64],
        tangents: NDArray[np.float64],
        distance: float,
        left_buffer: NDArray[np.float64],
        right_buffer: NDArray[np.float64],
    ) -> int:
        """
        Build the two parallel polylines of a sampled curve.

        Each tangent is normalized to (ux, uy); the left point is
        curve + distance * (uy, -ux) and the right point is curve - distance * (uy, -ux).

        A zero-length tangent takes the direction of the nearest usable tangent,
        searching forward first, then backward.

        Args:
            curve: Sampled curve points of shape (n, 2)
            tangents: Unnormalized tangents of shape (n, 2)
            distance: Perpendicular offset
            left_buffer: Buffer of shape (n, 2) for the left polyline
            right_buffer: Buffer of shape (n, 2) for the right polyline

        Returns:
            Number of points written to each buffer

        Raises:
            DegenerateCurveError: If no tangent has a usable direction
        """
        count = cls._check_buffer(curve)
        if tangents.shape != curve.shape or left_buffer.shape != curve.shape or right_buffer.shape != curve.shape:
            raise ValueError(
                f"Shape mismatch: curve {curve.shape}, tangents {tangents.shape}, "
                f"left {left_buffer.shape}, right {right_buffer.shape}"
            )

        units = cls.unit_tangents(tangents)
        normal = np.column_stack([units[:, 1], -units[:, 0]]) * distance

        np.add(curve, normal, out=left_buffer)
        np.subtract(curve, normal, out=right_buffer)
        return count

    @staticmethod
    def unit_tangents(tangents: NDArray[np.float64]) -> NDArray[np.float64]:
        """
        Normalize tangent vectors, repairing zero-length ones.

        Raises:
            DegenerateCurveError: If a tangent is not finite or every tangent has zero length
        """
        norms = np.hypot(tangents[:, 0], tangents[:, 1])
        if not np.all(np.isfinite(norms)):
            raise DegenerateCurveError("Tangents are not finite; control point coordinates overflow")
        usable = norms > 0.0
        if not usable.any():
            raise DegenerateCurveError("All tangents have zero length; control points are coincident")

        source = np.arange(len(norms))
        if not usable.all():
            usable_idx = np.flatnonzero(usable)
            pos = np.searchsorted(usable_idx, source)
            source = usable_idx[np.minimum(pos, len(usable_idx) - 1)]
            logger.debug(
                "Replaced %d degenerate tangent(s) at indices %s",
                len(norms) - len(usable_idx),
                np.flatnonzero(~usable).tolist(),
            )

        return tangents[source] / norms[source, np.newaxis]

    @staticmethod
    def polyline_length(points: NDArray[np.float64]) -> float:
        """Sum of the distances between consecutive points."""
        if points.shape[0] < 2:
            return 0.0
        deltas = np.diff(points, axis=0)
        return float(np.sum(np.hypot(deltas[:, 0], deltas[:, 1])))

    @staticmethod
    def _as_control_array(
        points: Union[Sequence[Tuple[float, float]], NDArray[np.float64]], expected: int
    ) -> NDArray[np.float64]:
        if isinstance(points, np.ndarray) and points.dtype == np.float64:
            control = points
        else:
            control = np.asarray(points, dtype=np.float64)
        if control.shape != (expected, 2):
            raise ValueError(f"Expected {expected} control points of shape ({expected}, 2), got {control.shape}")
        return control

    @staticmethod
    def _check_buffer(buffer: NDArray[np.float64]) -> int:
        if buffer.ndim != 2 or buffer.shape[1] != 2:
            raise ValueError(f"Buffer must have shape (n, 2), got {buffer.shape}")
        if buffer.shape[0] < 2:
            raise ValueError(f"Buffer must hold at least 2 points, got {buffer.shape[0]}")
        return buffer.shape[0]
