"""Handling 2D geometries used by curves"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray


###############################################################################
# Point
###############################################################################
@dataclass(frozen=True)
class Point:
    """
    A 2D coordinate value.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float = 0.0
    y: float = 0.0

    def distance(self, other: Point) -> float:
        """
        Euclidean distance between this point and _other_.

        Args:
            other (Point): The other point

        Returns:
            float: the distance
        """
        return math.hypot(other.x - self.x, other.y - self.y)


###############################################################################
# CurveBox
###############################################################################
@dataclass(frozen=True)
class CurveBox:
    """
    Axis-aligned extent of the polylines sampled from a curve.

    Attributes:
        xmin (float): The minimum x-coordinate.
        ymin (float): The minimum y-coordinate.
        xmax (float): The maximum x-coordinate.
        ymax (float): The maximum y-coordinate.
    """

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def extent(self) -> Tuple[float, float, float, float]:
        """The extent of the box as Tuple (xmin, ymin, xmax, ymax)."""
        return self.xmin, self.ymin, self.xmax, self.ymax

    @classmethod
    def from_points(cls, *point_arrays: Union[Sequence[Tuple[float, float]], NDArray[np.float64]]) -> CurveBox:
        """
        Create the box enclosing all given point arrays.

        Args:
            *point_arrays: One or more arrays of shape (n, 2), e.g. the center, left and right polylines

        Raises:
            ValueError: If no points are given.
        """
        arrays = [np.asarray(points, dtype=np.float64).reshape(-1, 2) for points in point_arrays]
        stacked = np.concatenate(arrays) if arrays else np.empty((0, 2), dtype=np.float64)
        if stacked.shape[0] == 0:
            raise ValueError("Cannot create a CurveBox from zero points")
        xmin, ymin = stacked.min(axis=0)
        xmax, ymax = stacked.max(axis=0)
        return cls(xmin=float(xmin), ymin=float(ymin), xmax=float(xmax), ymax=float(ymax))
