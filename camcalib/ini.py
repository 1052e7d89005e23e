"""Reading and writing calibrations in the legacy Videre INI format."""

from __future__ import annotations

import io
import logging
import math
import re
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from .camera_info import PLUMB_BOB, RATIONAL_POLYNOMIAL, CalibrationError, CameraInfo

_log = logging.getLogger("camcalib")

_WHITESPACE = " \t\n\r\f\v"
_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"[ \t\n\r\f\v]*([+-]?\d+)")


def _is_section(line: str) -> bool:
    return "[" in line and "]" in line


def _split_sections(lines: Iterable[str]) -> list[list[str]]:
    sections: list[list[str]] = []
    section: list[str] = []
    for raw in lines:
        line = raw.strip(_WHITESPACE)
        if not line or line[0] in "#;":
            continue
        if _is_section(line) and section:
            sections.append(section)
            section = []
        section.append(line)
    if section:
        sections.append(section)
    return sections


def _parse_row(line: str, cols: int) -> list[float]:
    """Read up to ``cols`` numbers from a line; missing values become NaN.

    A token that is not a number reads as 0.0 and ends the row.
    """
    values: list[float] = []
    pos = 0
    while len(values) < cols and pos < len(line):
        while pos < len(line) and line[pos] in _WHITESPACE:
            pos += 1
        match = _NUMBER.match(line, pos)
        if match is None:
            values.append(0.0)
            break
        values.append(float(match.group()))
        pos = match.end()
    values.extend([math.nan] * (cols - len(values)))
    return values


def _parse_matrix(section: Sequence[str], start: int, rows: int, cols: int) -> list[float]:
    values: list[float] = []
    for line in section[start:start + rows]:
        values.extend(_parse_row(line, cols))
    values.extend([math.nan] * (rows * cols - len(values)))
    return values


def _find_key(section: Sequence[str], key: str, where: str) -> int:
    try:
        return section.index(key)
    except ValueError:
        raise CalibrationError(f"Failed to find key '{key}' in {where}") from None


def _read_int(section: Sequence[str], index: int, key: str) -> int:
    if index >= len(section):
        raise CalibrationError(f"Missing value for key '{key}'")
    match = _LEADING_INT.match(section[index])
    if match is None:
        raise CalibrationError(f"Invalid integer for key '{key}': {section[index]!r}")
    return int(match.group(1))


def _parse_image_section(section: Sequence[str], cam_info: CameraInfo) -> None:
    width = _find_key(section, "width", "section '[image]'")
    height = _find_key(section, "height", "section '[image]'")
    cam_info.width = _read_int(section, width + 1, "width")
    cam_info.height = _read_int(section, height + 1, "height")


def _parse_camera_section(section: Sequence[str], cam_info: CameraInfo) -> str:
    camera_name = section[0][1:-1]
    where = "camera section"
    camera_matrix = _find_key(section, "camera matrix", where)
    distortion = _find_key(section, "distortion", where)
    rectification = _find_key(section, "rectification", where)
    projection = _find_key(section, "projection", where)

    d = _parse_matrix(section, distortion + 1, 1, 8)
    if math.isnan(d[5]):
        cam_info.d = d[:5]
        cam_info.distortion_model = PLUMB_BOB
    else:
        cam_info.d = d
        cam_info.distortion_model = RATIONAL_POLYNOMIAL

    for attr, label, start, rows, cols in (
        ("k", "camera matrix", camera_matrix, 3, 3),
        ("r", "rectification", rectification, 3, 3),
        ("p", "projection", projection, 3, 4),
    ):
        values = _parse_matrix(section, start + 1, rows, cols)
        if any(math.isnan(v) for v in values):
            raise CalibrationError(f"Error parsing '{label}', incorrect size")
        setattr(cam_info, attr, values)
    return camera_name


def _check_externals_section(section: Sequence[str]) -> None:
    # Nothing is done with the externals, so missing keys are only reported.
    for key in ("translation", "rotation"):
        if key not in section:
            _log.error("Failed to find key '%s' in section '[externals]'", key)


def _format_matrix(values: Sequence[float], rows: int, cols: int) -> str:
    row_slices = (values[start:start + cols] for start in range(0, rows * cols, cols))
    return "".join("".join(f"{v:.5f} " for v in row) + "\n" for row in row_slices)


def write_calibration_ini(out: TextIO, camera_name: str, cam_info: CameraInfo) -> None:
    """Write a calibration to a text stream in INI format.

    Only the plumb bob model with five coefficients can be stored.
    """
    if cam_info.distortion_model != PLUMB_BOB or len(cam_info.d) != 5:
        raise CalibrationError(
            "Videre INI format can only save calibrations using the plumb bob "
            "distortion model. Use the YAML format instead.\n"
            f"\tdistortion_model = '{cam_info.distortion_model}', expected '{PLUMB_BOB}'\n"
            f"\tD.size() = {len(cam_info.d)}, expected 5"
        )
    out.write("# Camera intrinsics\n\n")
    out.write("[image]\n\n")
    out.write(f"width\n{cam_info.width}\n\n")
    out.write(f"height\n{cam_info.height}\n\n")
    out.write(f"[{camera_name}]\n\n")
    out.write("camera matrix\n" + _format_matrix(cam_info.k, 3, 3))
    out.write("\ndistortion\n" + _format_matrix(cam_info.d, 1, 5))
    out.write("\n\nrectification\n" + _format_matrix(cam_info.r, 3, 3))
    out.write("\nprojection\n" + _format_matrix(cam_info.p, 3, 4))


def read_calibration_ini(stream: TextIO) -> tuple[str, CameraInfo]:
    """Read a calibration in INI format; return the camera name and its data."""
    lines = list(stream)
    if not lines:
        raise CalibrationError("Failed to detect content in .ini file")
    sections = _split_sections(lines)
    if not sections:
        raise CalibrationError("Failed to detect valid sections in .ini file")

    camera_name = ""
    cam_info = CameraInfo()
    for section in sections:
        header = section[0]
        if header == "[image]":
            _parse_image_section(section, cam_info)
        elif header == "[externals]":
            _check_externals_section(section)
        else:
            camera_name = _parse_camera_section(section, cam_info)
    return camera_name, cam_info


def write_calibration_ini_file(file_name: str | Path, camera_name: str, cam_info: CameraInfo) -> None:
    """Write a calibration to an INI file, creating missing parent directories."""
    path = Path(file_name)
    parent = path.parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CalibrationError(
                f"Unable to create directory for camera calibration file [{parent}]"
            ) from exc
    try:
        out = path.open("w", encoding="utf-8")
    except OSError as exc:
        raise CalibrationError(
            f"Unable to open camera calibration file [{path}] for writing"
        ) from exc
    with out:
        write_calibration_ini(out, camera_name, cam_info)


def read_calibration_ini_file(file_name: str | Path) -> tuple[str, CameraInfo]:
    """Read a calibration from an INI file."""
    try:
        stream = open(file_name, encoding="utf-8")
    except OSError as exc:
        raise CalibrationError(f"Unable to open camera calibration file [{file_name}]") from exc
    with stream:
        return read_calibration_ini(stream)


def parse_calibration_ini(buffer: str) -> tuple[str, CameraInfo]:
    """Parse a calibration held in a string in INI format."""
    return read_calibration_ini(io.StringIO(buffer))