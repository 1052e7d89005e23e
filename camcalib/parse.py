"""Format-independent reading and writing of calibration files."""

from __future__ import annotations

from pathlib import Path

from .camera_info import CalibrationError, CameraInfo
from .ini import parse_calibration_ini, read_calibration_ini_file, write_calibration_ini_file
from .yml import read_calibration_yml_file, write_calibration_yml_file

_YAML_SUFFIXES = (".yml", ".yaml")


def _unrecognized(suffix: str) -> CalibrationError:
    return CalibrationError(
        f"Unrecognized format '{suffix}', calibration must be '.ini', '.yml', or '.yaml'"
    )


def write_calibration(file_name: str | Path, camera_name: str, cam_info: CameraInfo) -> None:
    """Write a calibration; the file extension chooses INI or YAML."""
    suffix = Path(file_name).suffix
    if suffix == ".ini":
        write_calibration_ini_file(file_name, camera_name, cam_info)
    elif suffix in _YAML_SUFFIXES:
        write_calibration_yml_file(file_name, camera_name, cam_info)
    else:
        raise _unrecognized(suffix)


def read_calibration(file_name: str | Path) -> tuple[str, CameraInfo]:
    """Read a calibration; the file extension chooses INI or YAML."""
    suffix = Path(file_name).suffix
    if suffix == ".ini":
        return read_calibration_ini_file(file_name)
    if suffix in _YAML_SUFFIXES:
        return read_calibration_yml_file(file_name)
    raise _unrecognized(suffix)


def parse_calibration(buffer: str, format: str) -> tuple[str, CameraInfo]:
    """Parse a calibration held in a string; only the "ini" format is accepted."""
    if format != "ini":
        raise CalibrationError(f"Unsupported calibration format '{format}'")
    return parse_calibration_ini(buffer)