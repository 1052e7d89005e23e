# camcalib

Read and write camera calibration data, and keep track of where a camera's
calibration is stored.

Two file formats are supported:

- **YAML** (`.yml` or `.yaml`): image size, camera name, camera matrix,
  distortion model and coefficients, rectification and projection matrices,
  binning and region of interest.
- **Videre INI** (`.ini`): the legacy format. It stores image size, camera
  name and the matrices, and can only be written for the `plumb_bob`
  distortion model with five coefficients. When read, five distortion values
  give `plumb_bob`, eight give `rational_polynomial`.

## Installation

```
pip install camcalib
```

## Converting a calibration file

The formats are chosen from the file extensions:

```
camcalib-convert input.yml output.ini
camcalib-convert input.ini output.yml
```

With fewer than two arguments the command prints its usage and exits with
status 0. If the input cannot be read or the output cannot be written, the
error is logged and the exit status is 1.

## Reading and writing from Python

```python
from camcalib.parse import read_calibration, write_calibration, parse_calibration

camera_name, info = read_calibration("left.yaml")
print(camera_name, info.width, info.height, info.k)

write_calibration("left.ini", camera_name, info)

camera_name, info = parse_calibration(ini_text, "ini")
```

`read_calibration` and `write_calibration` pick the format from the extension
(`.ini`, `.yml`, `.yaml`); any other extension raises `CalibrationError`.
Writing creates missing parent directories. `parse_calibration` parses a
string and accepts only the `"ini"` format.

Format-specific functions:

- `camcalib.ini`: `parse_calibration_ini`, `read_calibration_ini`,
  `read_calibration_ini_file`, `write_calibration_ini`,
  `write_calibration_ini_file`
- `camcalib.yml`: `parse_calibration_yml`, `read_calibration_yml`,
  `read_calibration_yml_file`, `write_calibration_yml`,
  `write_calibration_yml_file`

The `read_*`/`write_*` functions without `_file` work on open text streams.
Every reader returns a `(camera_name, CameraInfo)` tuple. A YAML file without
`camera_name` reads as `"unknown"`; one without `distortion_model` is taken
to be `plumb_bob`.

`camcalib.camera_info` holds the data classes `CameraInfo` and
`RegionOfInterest` and the `CalibrationError` exception raised on every
failure. `CameraInfo` stores `k` (3x3), `r` (3x3) and `p` (3x4) row-major as
flat lists and checks their lengths.

## Managing calibration by URL

`CameraInfoManager` in `camcalib.manager` keeps the current `CameraInfo` for
a named camera and loads or saves it through a calibration URL:

- `file:///full/path/to/file.yaml`
- `package://some_package/calibrations/camera3.yaml`

URLs may contain `${NAME}` (the camera name) and `${ROS_HOME}` (the
`ROS_HOME` environment variable, or `$HOME/.ros` when it is unset). An empty
URL means the default, `file://${ROS_HOME}/camera_info/${NAME}.yaml`.

```python
from camcalib.manager import CameraInfoManager

manager = CameraInfoManager("left_camera", "file:///tmp/${NAME}.yaml")
if manager.is_calibrated():
    info = manager.get_camera_info()

ok, message = manager.set_camera_info_service(info)  # updates and saves
```

Nothing is loaded until `load_camera_info`, `is_calibrated` or
`get_camera_info` is first called. `set_camera_name` accepts only non-empty
names of letters, digits and `_`, and forces a reload. `set_camera_info`
replaces the calibration without saving; `set_camera_info_service` replaces
it and saves it to the current URL (falling back to the default URL when the
URL is invalid), returning a success flag and a status message.

`package://` URLs are resolved through the `package_resolver` callable given
to the constructor, which maps a package name to a directory. Without one,
package URLs load and save nothing.

`parse_url`, `resolve_url`, `split` and the `UrlType` enum in
`camcalib.calibration_url` can be used on their own to check and resolve
URLs; `validate_url` on the manager tells whether a URL's syntax is
supported.

## What this package does not do

- It does not offer the calibration-storing request over any network or
  messaging service; `set_camera_info_service` is an ordinary method to be
  called by your own code.
- `flash:///` URLs are recognised but not supported: loading from them always
  fails.
- It has no built-in lookup of package directories; you supply
  `package_resolver`.