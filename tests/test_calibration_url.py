import logging

import pytest

from camcalib.calibration_url import UrlType, parse_url, resolve_url, split

PACKAGE_NAME = "camera_info_manager"
TEST_NAME = "test_calibration"
PACKAGE_URL = f"package://{PACKAGE_NAME}/tests/{TEST_NAME}.yaml"
PACKAGE_NAME_URL = f"package://{PACKAGE_NAME}/tests/${{NAME}}.yaml"
DEFAULT_URL = "file://${ROS_HOME}/camera_info/${NAME}.yaml"
CAMERA_NAME = "cam0000000000000"


def _is_valid(url: str, cname: str = "camera") -> bool:
    return parse_url(resolve_url(url, cname)) < UrlType.INVALID


@pytest.fixture
def ros_home_tmp(monkeypatch):
    monkeypatch.setenv("ROS_HOME", "/tmp")


@pytest.mark.parametrize(
    "url",
    [
        "",
        "file:///",
        "file:///tmp/url.yaml",
        "File:///tmp/url.ini",
        "FILE:///tmp/url.yaml",
        DEFAULT_URL,
        PACKAGE_URL,
        "package://no_such_package/calibration.yaml",
        "packAge://camera_info_manager/x",
    ],
)
def test_valid_urls(url, ros_home_tmp):
    assert _is_valid(url) is True


@pytest.mark.parametrize(
    "url",
    [
        "file://",
        "flash:///",
        "html://ros.org/wiki/camera_info_manager",
        "package://",
        "package:///",
        "package://calibration.yaml",
        "package://camera_info_manager/",
    ],
)
def test_invalid_urls(url):
    assert _is_valid(url) is False


@pytest.mark.parametrize(
    "url, expected",
    [
        ("", UrlType.EMPTY),
        ("file:///tmp/x.yaml", UrlType.FILE),
        ("FiLe:///tmp/x.yaml", UrlType.FILE),
        ("flash:///", UrlType.FLASH),
        ("package://pkg/x.yaml", UrlType.PACKAGE),
        ("package://pkg/", UrlType.INVALID),
        ("http://example.com/x.yaml", UrlType.INVALID),
    ],
)
def test_parse_url_types(url, expected):
    assert parse_url(url) is expected


def test_flash_is_unsupported():
    flash_type = parse_url("FLASH:///calibration.yaml")
    package_type = parse_url("package://pkg/x.yaml")
    assert flash_type is UrlType.FLASH
    assert flash_type > UrlType.INVALID
    assert package_type < UrlType.INVALID


@pytest.mark.parametrize(
    "url, expected, cname",
    [
        (
            f"package://{PACKAGE_NAME}/tests/${{NAME}}.yaml",
            f"package://{PACKAGE_NAME}/tests/{CAMERA_NAME}.yaml",
            CAMERA_NAME,
        ),
        (
            f"package://{PACKAGE_NAME}/tests/${{NAME}}_calibration.yaml",
            f"package://{PACKAGE_NAME}/tests/test_calibration.yaml",
            "test",
        ),
        (
            f"package://{PACKAGE_NAME}/tests/${{NAME}}_calibration.yaml",
            f"package://{PACKAGE_NAME}/tests/camera_1024x768_calibration.yaml",
            "camera_1024x768",
        ),
        (
            f"package://{PACKAGE_NAME}/tests/${{NAME}}_calibration.yaml",
            f"package://{PACKAGE_NAME}/tests/_calibration.yaml",
            "",
        ),
        (PACKAGE_NAME_URL, PACKAGE_URL, TEST_NAME),
    ],
)
def test_camera_name_substitution(url, expected, cname):
    assert resolve_url(url, cname) == expected


def test_ros_home_undefined_uses_home(monkeypatch):
    monkeypatch.delenv("ROS_HOME", raising=False)
    monkeypatch.setenv("HOME", "/home/tester")
    url = "file://${ROS_HOME}/camera_info/test_camera.yaml"
    assert resolve_url(url, CAMERA_NAME) == (
        "file:///home/tester/.ros/camera_info/test_camera.yaml"
    )


def test_ros_home_defined(monkeypatch):
    monkeypatch.setenv("ROS_HOME", "/my/ros/home")
    url = "file://${ROS_HOME}/camera_info/test_camera.yaml"
    assert resolve_url(url, CAMERA_NAME) == "file:///my/ros/home/camera_info/test_camera.yaml"


def test_ros_home_empty_is_treated_as_unset(monkeypatch):
    monkeypatch.setenv("ROS_HOME", "")
    monkeypatch.setenv("HOME", "/home/tester")
    assert resolve_url("file://${ROS_HOME}/a.yaml", "x") == "file:///home/tester/.ros/a.yaml"


def test_ros_home_and_home_unset(monkeypatch):
    monkeypatch.delenv("ROS_HOME", raising=False)
    monkeypatch.delenv("HOME", raising=False)
    assert resolve_url("file://${ROS_HOME}/a.yaml", "x") == "file:///a.yaml"


def test_default_url_resolution(monkeypatch):
    monkeypatch.setenv("ROS_HOME", "/tmp")
    assert resolve_url(DEFAULT_URL, "camera") == "file:///tmp/camera_info/camera.yaml"


def test_double_dollar_resolves_name():
    assert resolve_url("file:///tmp/$${NAME}.yaml", CAMERA_NAME) == (
        f"file:///tmp/${CAMERA_NAME}.yaml"
    )


@pytest.mark.parametrize(
    "url",
    [
        "file:///$whatever.yaml",
        "file:///something$$whatever.yaml",
        "file:///$$",
    ],
)
def test_unmatched_dollar_signs(url):
    assert resolve_url(url, CAMERA_NAME) == url


def test_empty_url():
    assert resolve_url("", CAMERA_NAME) == ""


@pytest.mark.parametrize(
    "url",
    [
        "file:///tmp/$NAME.yaml",
        "file:///tmp/${INVALID}/calibration.yaml",
        "file:///tmp/${NAME",
        "file:///tmp/${}",
        "file:///$",
    ],
)
def test_invalid_variables_are_kept(url):
    assert resolve_url(url, CAMERA_NAME) == url


def test_invalid_variable_is_logged(caplog):
    with caplog.at_level(logging.ERROR, logger="camcalib"):
        result = resolve_url("file:///tmp/${INVALID}/c.yaml", CAMERA_NAME)
    assert result == "file:///tmp/${INVALID}/c.yaml"
    assert "invalid URL substitution" in caplog.text


def test_substitution_is_not_recursive():
    assert resolve_url("file:///${NAME}.yaml", "${NAME}") == "file:///${NAME}.yaml"


@pytest.mark.parametrize(
    "text, regex, expected",
    [
        ("a/b/c", "/", ["a", "b", "c"]),
        ("/a/b", "/", ["", "a", "b"]),
        ("a/b/", "/", ["a", "b"]),
        ("abc", "/", ["abc"]),
        ("", "/", [""]),
        ("a, b,,c", ",\\s*", ["a", "b", "", "c"]),
        ("one  two\tthree", "\\s+", ["one", "two", "three"]),
    ],
)
def test_split(text, regex, expected):
    assert split(text, regex) == expected


def test_split_ignores_capture_groups():
    assert split("a1b2c", "([0-9])") == ["a", "b", "c"]