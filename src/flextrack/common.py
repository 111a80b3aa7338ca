"""Central module containing constants and definitions for curve handling."""

from __future__ import annotations

from enum import Enum, IntEnum, auto

###############################################################################
# Enums and Consts
###############################################################################

DEFAULT_RESOLUTION: float = 0.025
DEFAULT_PARALLEL_DISTANCE: float = 4.5

CONTROL_POINT_COUNT: int = 4  # cubic Bezier
DERIVATIVE_CONTROL_POINT_COUNT: int = 3  # its hodograph (quadratic)


class CurveVariant(IntEnum):
    """Enum to select one of the polylines produced by a curve."""

    CENTER = 0
    LEFT = 1
    RIGHT = 2

    @classmethod
    def coerce(cls, value: int) -> CurveVariant:
        """Convert an int or CurveVariant into a CurveVariant.

        Raises:
            ValueError: If value does not name a variant.
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Curve variant must be one of 0, 1, 2, got {value!r}") from None


class CurveState(Enum):
    """Cache state of a curve's sampled output.

    DIRTY_RESOLUTION outranks DIRTY_POINTS: buffers are resized before recomputing.
    """

    CLEAN = auto()
    DIRTY_POINTS = auto()
    DIRTY_RESOLUTION = auto()


###############################################################################
# Functions
###############################################################################


def main() -> None:
    """Display the available curve variants and defaults."""
    for variant in CurveVariant:
        print(variant.name, int(variant))
    print()
    print("default resolution:       ", DEFAULT_RESOLUTION)
    print("default parallel distance:", DEFAULT_PARALLEL_DISTANCE)


if __name__ == "__main__":
    main()
