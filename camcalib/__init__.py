"""Camera calibration file readers and writers (YAML, Videre INI), a converter command and a URL-based calibration manager."""

__version__ = "0.1.0"