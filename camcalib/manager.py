"""Keeps the current camera calibration and loads or saves it by URL."""

from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Callable, Optional

from .calibration_url import UrlType, parse_url, resolve_url
from .camera_info import CalibrationError, CameraInfo
from .parse import read_calibration, write_calibration

_log = logging.getLogger("camcalib.manager")

DEFAULT_CAMERA_INFO_URL = "file://${ROS_HOME}/camera_info/${NAME}.yaml"

_FILE_SCHEME = "file://"
_PACKAGE_PREFIX = "package://"

PackageResolver = Callable[[str], Optional[str]]


def _valid_name_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch == "_"


class CameraInfoManager:
    """Provides a camera's calibration and stores new calibrations.

    Nothing is loaded until :meth:`load_camera_info`, :meth:`is_calibrated`
    or :meth:`get_camera_info` is called.  ``package_resolver`` maps a
    package name to its share directory for ``package://`` URLs; it may
    return an empty string or ``None``, or raise ``LookupError``, when the
    package is unknown.
    """

    def __init__(
        self,
        cname: str = "camera",
        url: str = "",
        package_resolver: PackageResolver | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._camera_name = cname
        self._url = url
        self._package_resolver = package_resolver
        self._cam_info = CameraInfo()
        self._loaded_cam_info = False

    def get_camera_info(self) -> CameraInfo:
        """Return a copy of the current calibration, loading it first if needed.

        The matrices are all zeros when no calibration is available.
        """
        while True:
            with self._lock:
                if self._loaded_cam_info:
                    return copy.deepcopy(self._cam_info)
                self._loaded_cam_info = True
                url, cname = self._url, self._camera_name
            self._load_calibration(url, cname)

    def is_calibrated(self) -> bool:
        """Tell whether the current calibration holds data, loading it if needed."""
        while True:
            with self._lock:
                if self._loaded_cam_info:
                    return self._cam_info.k[0] != 0.0
                self._loaded_cam_info = True
                url, cname = self._url, self._camera_name
            self._load_calibration(url, cname)

    def load_camera_info(self, url: str) -> bool:
        """Set a new URL and load its calibration; return whether data was found."""
        with self._lock:
            self._url = url
            cname = self._camera_name
            self._loaded_cam_info = True
        return self._load_calibration(url, cname)

    def resolve_url(self, url: str, cname: str) -> str:
        """Return ``url`` with its ``${...}`` variables substituted."""
        return resolve_url(url, cname)

    def set_camera_name(self, cname: str) -> bool:
        """Set a new camera name; return False if it has invalid characters.

        Valid names are non-empty and contain only letters, digits and '_'.
        A valid new name forces the calibration to be reloaded before use.
        """
        if not cname or not all(_valid_name_char(ch) for ch in cname):
            return False
        with self._lock:
            self._camera_name = cname
            self._loaded_cam_info = False
        return True

    def set_camera_info(self, camera_info: CameraInfo) -> bool:
        """Replace the current calibration without saving it."""
        with self._lock:
            self._cam_info = copy.deepcopy(camera_info)
            self._loaded_cam_info = True
        return True

    def validate_url(self, url: str) -> bool:
        """Tell whether the URL's syntax is supported (the resource may not exist)."""
        with self._lock:
            cname = self._camera_name
        return parse_url(resolve_url(url, cname)) < UrlType.INVALID

    def set_camera_info_service(self, camera_info: CameraInfo) -> tuple[bool, str]:
        """Handle a request to store a new calibration.

        The current calibration is always updated, even when saving fails.
        Returns the success flag and a status message.
        """
        with self._lock:
            self._cam_info = copy.deepcopy(camera_info)
            url, cname = self._url, self._camera_name
            self._loaded_cam_info = True
        success = self._save_calibration(camera_info, url, cname)
        return success, "" if success else "Error storing camera calibration."

    def _package_file_name(self, url: str) -> str:
        _log.debug("camera calibration url: %s", url)
        start = len(_PACKAGE_PREFIX)
        rest = url.find("/", start)
        package = url[start:rest]
        pkg_path = ""
        if self._package_resolver is not None:
            try:
                pkg_path = self._package_resolver(package) or ""
            except LookupError:
                pkg_path = ""
        if not pkg_path:
            _log.warning("unknown package: %s (ignored)", package)
            return ""
        return str(pkg_path) + url[rest:]

    def _load_calibration(self, url: str, cname: str) -> bool:
        res_url = resolve_url(url, cname)
        url_type = parse_url(res_url)
        if url_type != UrlType.EMPTY:
            _log.info("camera calibration URL: %s", res_url)

        if url_type == UrlType.EMPTY:
            _log.info("using default calibration URL")
            return self._load_calibration(DEFAULT_CAMERA_INFO_URL, cname)
        if url_type == UrlType.FILE:
            return self._load_calibration_file(res_url[len(_FILE_SCHEME):], cname)
        if url_type == UrlType.FLASH:
            _log.warning("reading from flash not implemented yet")
            return False
        if url_type == UrlType.PACKAGE:
            filename = self._package_file_name(res_url)
            return bool(filename) and self._load_calibration_file(filename, cname)
        _log.error("Invalid camera calibration URL: %s", res_url)
        return False

    def _load_calibration_file(self, filename: str, cname: str) -> bool:
        _log.debug("reading camera calibration from %s", filename)
        try:
            cam_name, cam_info = read_calibration(filename)
        except CalibrationError:
            _log.warning("Camera calibration file %s not found", filename)
            return False
        if cname != cam_name:
            _log.warning("[%s] does not match %s in file %s", cname, cam_name, filename)
        with self._lock:
            self._cam_info = cam_info
        return True

    def _save_calibration(self, new_info: CameraInfo, url: str, cname: str) -> bool:
        res_url = resolve_url(url, cname)
        url_type = parse_url(res_url)
        if url_type == UrlType.EMPTY:
            return self._save_calibration(new_info, DEFAULT_CAMERA_INFO_URL, cname)
        if url_type == UrlType.FILE:
            return self._save_calibration_file(new_info, res_url[len(_FILE_SCHEME):], cname)
        if url_type == UrlType.PACKAGE:
            filename = self._package_file_name(res_url)
            return bool(filename) and self._save_calibration_file(new_info, filename, cname)
        _log.error("invalid url: %s (ignored)", res_url)
        return self._save_calibration(new_info, DEFAULT_CAMERA_INFO_URL, cname)

    def _save_calibration_file(self, new_info: CameraInfo, filename: str, cname: str) -> bool:
        _log.info("writing calibration data to %s", filename)
        parent = Path(filename).parent
        if not parent.exists():
            try:
                parent.mkdir(parents=True, exist_ok=True)
            except OSError:
                _log.error("unable to create path directory [%s]", parent)
                return False
        try:
            write_calibration(filename, cname, new_info)
        except (CalibrationError, OSError) as exc:
            _log.error("unable to save calibration to %s: %s", filename, exc)
            return False
        return True