"""Calibration URLs: classifying them and resolving their ``${...}`` variables."""

from __future__ import annotations

import logging
import os
import re
from enum import IntEnum

_log = logging.getLogger("camcalib")

_FILE_PREFIX = "file:///"
_FLASH_PREFIX = "flash:///"
_PACKAGE_PREFIX = "package://"

_NAME_VAR = "{NAME}"
_ROS_HOME_VAR = "{ROS_HOME}"


class UrlType(IntEnum):
    """Kinds of calibration URL.

    Values below ``INVALID`` are supported; ``INVALID`` and anything above it
    are not.
    """

    EMPTY = 0
    FILE = 1
    PACKAGE = 2
    INVALID = 3
    FLASH = 4


def parse_url(url: str) -> UrlType:
    """Classify a (resolved) calibration URL; scheme matching ignores case."""
    if url == "":
        return UrlType.EMPTY
    lowered = url.lower()
    if lowered.startswith(_FILE_PREFIX):
        return UrlType.FILE
    if lowered.startswith(_FLASH_PREFIX):
        return UrlType.FLASH
    if lowered.startswith(_PACKAGE_PREFIX):
        # A '/' must follow a non-empty package name, with something after it.
        start = len(_PACKAGE_PREFIX)
        rest = url.find("/", start)
        if rest != -1 and start < rest < len(url) - 1:
            return UrlType.PACKAGE
    return UrlType.INVALID


def _ros_home() -> str:
    ros_home = os.environ.get("ROS_HOME", "")
    if ros_home:
        return ros_home
    home = os.environ.get("HOME", "")
    if home:
        return home + "/.ros"
    return ""


def resolve_url(url: str, cname: str) -> str:
    """Substitute ``${NAME}`` and ``${ROS_HOME}`` in a URL, in a single pass.

    A '$' not followed by '{' is kept as it is.  Unknown variables are left
    unresolved and reported in the log.
    """
    resolved: list[str] = []
    rest = 0
    while True:
        dollar = url.find("$", rest)
        if dollar == -1:
            resolved.append(url[rest:])
            break
        resolved.append(url[rest:dollar])
        after = url[dollar + 1:]
        if not after.startswith("{"):
            resolved.append("$")
        elif after.startswith(_NAME_VAR):
            resolved.append(cname)
            dollar += len(_NAME_VAR)
        elif after.startswith(_ROS_HOME_VAR):
            resolved.append(_ros_home())
            dollar += len(_ROS_HOME_VAR)
        else:
            _log.error("invalid URL substitution (not resolved): %s", url)
            resolved.append("$")
        rest = dollar + 1
    return "".join(resolved)


def split(input: str, regex: str) -> list[str]:
    """Split ``input`` at every match of ``regex``, returning the text between.

    With no match the whole input is returned as the only piece; an empty
    piece after the last match is dropped.
    """
    pattern = re.compile(regex)
    pieces: list[str] = []
    pos = 0
    matched = False
    for match in pattern.finditer(input):
        matched = True
        pieces.append(input[pos:match.start()])
        pos = match.end()
    if not matched:
        return [input]
    if pos < len(input):
        pieces.append(input[pos:])
    return pieces