"""Reading and writing calibrations in YAML format."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence, TextIO

import yaml

from .camera_info import PLUMB_BOB, CalibrationError, CameraInfo, RegionOfInterest

_log = logging.getLogger("camcalib")

CAM_YML_NAME = "camera_name"
WIDTH_YML_NAME = "image_width"
HEIGHT_YML_NAME = "image_height"
K_YML_NAME = "camera_matrix"
D_YML_NAME = "distortion_coefficients"
R_YML_NAME = "rectification_matrix"
P_YML_NAME = "projection_matrix"
DMODEL_YML_NAME = "distortion_model"
BINNING_X_YML_NAME = "binning_x"
BINNING_Y_YML_NAME = "binning_y"
ROI_YML_NAME = "roi"
ROI_WIDTH_YML_NAME = "width"
ROI_HEIGHT_YML_NAME = "height"
ROI_X_OFFSET_YML_NAME = "x_offset"
ROI_Y_OFFSET_YML_NAME = "y_offset"
ROI_DO_RECTIFY_YML_NAME = "do_rectify"


class _FlowList(list):
    """A list emitted in YAML flow style: ``[1, 2, 3]``."""


class _Dumper(yaml.SafeDumper):
    pass


_Dumper.add_representer(
    _FlowList,
    lambda dumper, data: dumper.represent_sequence(
        "tag:yaml.org,2002:seq", list(data), flow_style=True
    ),
)


def _matrix_node(rows: int, cols: int, values: Sequence[float]) -> dict[str, Any]:
    return {
        "rows": rows,
        "cols": cols,
        "data": _FlowList(float(v) for v in values[: rows * cols]),
    }


def _get(node: Any, key: str) -> Any:
    if not isinstance(node, Mapping) or key not in node:
        raise CalibrationError(f"Missing key '{key}'")
    return node[key]


def _as_float(value: Any, what: str) -> float:
    if isinstance(value, bool):
        raise CalibrationError(f"Expected a number for {what}, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            pass
    raise CalibrationError(f"Expected a number for {what}, got {value!r}")


def _as_int(value: Any, what: str) -> int:
    if isinstance(value, bool):
        raise CalibrationError(f"Expected an integer for {what}, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise CalibrationError(f"Expected an integer for {what}, got {value!r}")


def _as_uint(value: Any, what: str) -> int:
    number = _as_int(value, what)
    if number < 0:
        raise CalibrationError(f"Expected a non-negative integer for {what}, got {number}")
    return number


def _as_bool(value: Any, what: str) -> bool:
    if isinstance(value, bool):
        return value
    raise CalibrationError(f"Expected a boolean for {what}, got {value!r}")


def _as_str(value: Any, what: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, bool)):
        return str(value)
    raise CalibrationError(f"Expected a string for {what}, got {value!r}")


def _read_data(node: Any, count: int, key: str) -> list[float]:
    data = _get(node, "data")
    if not isinstance(data, list) or len(data) < count:
        raise CalibrationError(f"'{key}' needs {count} data values")
    return [_as_float(v, key) for v in data[:count]]


def _read_matrix(doc: Any, key: str, rows: int, cols: int) -> list[float]:
    node = _get(doc, key)
    got_rows = _as_int(_get(node, "rows"), f"{key}.rows")
    got_cols = _as_int(_get(node, "cols"), f"{key}.cols")
    if (got_rows, got_cols) != (rows, cols):
        raise CalibrationError(
            f"'{key}' must be {rows}x{cols}, got {got_rows}x{got_cols}"
        )
    return _read_data(node, rows * cols, key)


def write_calibration_yml(out: TextIO, camera_name: str, cam_info: CameraInfo) -> None:
    """Write a calibration to a text stream in YAML format."""
    roi = cam_info.roi
    doc = {
        WIDTH_YML_NAME: int(cam_info.width),
        HEIGHT_YML_NAME: int(cam_info.height),
        CAM_YML_NAME: camera_name,
        K_YML_NAME: _matrix_node(3, 3, cam_info.k),
        DMODEL_YML_NAME: cam_info.distortion_model,
        D_YML_NAME: _matrix_node(1, len(cam_info.d), cam_info.d),
        R_YML_NAME: _matrix_node(3, 3, cam_info.r),
        P_YML_NAME: _matrix_node(3, 4, cam_info.p),
        BINNING_X_YML_NAME: int(cam_info.binning_x),
        BINNING_Y_YML_NAME: int(cam_info.binning_y),
        ROI_YML_NAME: {
            ROI_X_OFFSET_YML_NAME: int(roi.x_offset),
            ROI_Y_OFFSET_YML_NAME: int(roi.y_offset),
            ROI_HEIGHT_YML_NAME: int(roi.height),
            ROI_WIDTH_YML_NAME: int(roi.width),
            ROI_DO_RECTIFY_YML_NAME: bool(roi.do_rectify),
        },
    }
    out.write(yaml.dump(doc, Dumper=_Dumper, sort_keys=False, default_flow_style=False))


def read_calibration_yml(stream: TextIO) -> tuple[str, CameraInfo]:
    """Read a calibration in YAML format; return the camera name and its data."""
    try:
        doc = yaml.safe_load(stream)
    except yaml.YAMLError as exc:
        raise CalibrationError(f"Exception parsing YAML camera calibration:\n{exc}") from exc
    if not isinstance(doc, Mapping):
        raise CalibrationError("YAML camera calibration is not a mapping")

    if CAM_YML_NAME in doc:
        camera_name = _as_str(doc[CAM_YML_NAME], CAM_YML_NAME)
    else:
        camera_name = "unknown"

    cam_info = CameraInfo()
    cam_info.width = _as_uint(_get(doc, WIDTH_YML_NAME), WIDTH_YML_NAME)
    cam_info.height = _as_uint(_get(doc, HEIGHT_YML_NAME), HEIGHT_YML_NAME)

    cam_info.k = _read_matrix(doc, K_YML_NAME, 3, 3)
    cam_info.r = _read_matrix(doc, R_YML_NAME, 3, 3)
    cam_info.p = _read_matrix(doc, P_YML_NAME, 3, 4)

    if DMODEL_YML_NAME in doc:
        cam_info.distortion_model = _as_str(doc[DMODEL_YML_NAME], DMODEL_YML_NAME)
    else:
        cam_info.distortion_model = PLUMB_BOB
        _log.warning(
            "Camera calibration file did not specify distortion model, assuming plumb bob"
        )

    d_node = _get(doc, D_YML_NAME)
    d_rows = _as_int(_get(d_node, "rows"), f"{D_YML_NAME}.rows")
    d_cols = _as_int(_get(d_node, "cols"), f"{D_YML_NAME}.cols")
    if d_rows < 0 or d_cols < 0:
        raise CalibrationError(f"'{D_YML_NAME}' has a negative size")
    cam_info.d = _read_data(d_node, d_rows * d_cols, D_YML_NAME)

    if BINNING_X_YML_NAME in doc:
        cam_info.binning_x = _as_uint(doc[BINNING_X_YML_NAME], BINNING_X_YML_NAME)
    if BINNING_Y_YML_NAME in doc:
        cam_info.binning_y = _as_uint(doc[BINNING_Y_YML_NAME], BINNING_Y_YML_NAME)

    if ROI_YML_NAME in doc:
        roi_node = doc[ROI_YML_NAME]
        cam_info.roi = RegionOfInterest(
            x_offset=_as_uint(_get(roi_node, ROI_X_OFFSET_YML_NAME), ROI_X_OFFSET_YML_NAME),
            y_offset=_as_uint(_get(roi_node, ROI_Y_OFFSET_YML_NAME), ROI_Y_OFFSET_YML_NAME),
            height=_as_uint(_get(roi_node, ROI_HEIGHT_YML_NAME), ROI_HEIGHT_YML_NAME),
            width=_as_uint(_get(roi_node, ROI_WIDTH_YML_NAME), ROI_WIDTH_YML_NAME),
            do_rectify=_as_bool(
                _get(roi_node, ROI_DO_RECTIFY_YML_NAME), ROI_DO_RECTIFY_YML_NAME
            ),
        )

    return camera_name, cam_info


def write_calibration_yml_file(
    file_name: str | Path, camera_name: str, cam_info: CameraInfo
) -> None:
    """Write a calibration to a YAML file, creating missing parent directories."""
    path = Path(file_name)
    parent = path.parent
    if not parent.exists():
        try:
            parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            _log.error(
                "Unable to create directory for camera calibration file [%s]", parent
            )
    try:
        out = path.open("w", encoding="utf-8")
    except OSError as exc:
        raise CalibrationError(
            f"Unable to open camera calibration file [{path}] for writing"
        ) from exc
    with out:
        write_calibration_yml(out, camera_name, cam_info)


def read_calibration_yml_file(file_name: str | Path) -> tuple[str, CameraInfo]:
    """Read a calibration from a YAML file."""
    try:
        stream = open(file_name, encoding="utf-8")
    except OSError as exc:
        raise CalibrationError(f"Unable to open camera calibration file [{file_name}]") from exc
    with stream:
        try:
            return read_calibration_yml(stream)
        except CalibrationError:
            _log.error("Failed to parse camera calibration from file [%s]", file_name)
            raise


def parse_calibration_yml(buffer: str) -> tuple[str, CameraInfo]:
    """Parse a calibration held in a string in YAML format."""
    return read_calibration_yml(io.StringIO(buffer))