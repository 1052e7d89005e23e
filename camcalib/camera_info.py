"""Camera calibration data and the errors raised while handling it."""

from __future__ import annotations

from dataclasses import dataclass, field

PLUMB_BOB = "plumb_bob"
RATIONAL_POLYNOMIAL = "rational_polynomial"

_FIXED_SIZES = {"k": 9, "r": 9, "p": 12}


class CalibrationError(ValueError):
    """Raised when calibration data cannot be read, parsed or written."""


@dataclass
class RegionOfInterest:
    """Sub-window of the full image that holds valid data."""

    x_offset: int = 0
    y_offset: int = 0
    height: int = 0
    width: int = 0
    do_rectify: bool = False


@dataclass
class CameraInfo:
    """Intrinsic calibration of a camera.

    ``k`` is the 3x3 camera matrix, ``r`` the 3x3 rectification matrix and
    ``p`` the 3x4 projection matrix, all stored row-major.  ``d`` holds the
    distortion coefficients, whose number depends on ``distortion_model``.
    """

    width: int = 0
    height: int = 0
    distortion_model: str = ""
    d: list[float] = field(default_factory=list)
    k: list[float] = field(default_factory=lambda: [0.0] * 9)
    r: list[float] = field(default_factory=lambda: [0.0] * 9)
    p: list[float] = field(default_factory=lambda: [0.0] * 12)
    binning_x: int = 0
    binning_y: int = 0
    roi: RegionOfInterest = field(default_factory=RegionOfInterest)

    def __post_init__(self) -> None:
        self.d = [float(v) for v in self.d]
        for name, size in _FIXED_SIZES.items():
            values = [float(v) for v in getattr(self, name)]
            if len(values) != size:
                raise CalibrationError(
                    f"'{name}' must hold {size} values, got {len(values)}"
                )
            setattr(self, name, values)