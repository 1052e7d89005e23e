"""Command that converts a calibration file between INI and YAML."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

from .camera_info import CalibrationError
from .parse import read_calibration, write_calibration

_log = logging.getLogger("camcalib.convert")


def main(argv: Sequence[str] | None = None) -> int:
    """Convert the calibration named by the first argument into the second."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        prog = Path(sys.argv[0]).name if sys.argv and sys.argv[0] else "convert"
        print(
            f"Usage: {prog} input.yml output.ini\n"
            f"       {prog} input.ini output.yml"
        )
        return 0

    source, target = args[0], args[1]
    try:
        name, cam_info = read_calibration(source)
    except CalibrationError as exc:
        _log.error("Failed to load camera model from file %s: %s", source, exc)
        return 1
    try:
        write_calibration(target, name, cam_info)
    except CalibrationError as exc:
        _log.error("Failed to save camera model to file %s: %s", target, exc)
        return 1

    _log.info("Saved %s", target)
    return 0


if __name__ == "__main__":
    sys.exit(main())