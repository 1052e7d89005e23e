import logging

from camcalib.camera_info import PLUMB_BOB, CameraInfo
from camcalib.convert import main
from camcalib.parse import read_calibration, write_calibration


def make_info():
    return CameraInfo(
        width=640,
        height=480,
        distortion_model=PLUMB_BOB,
        d=[1, 2, 3, 4, 5],
        k=[1, 2, 3, 4, 5, 6, 7, 8, 9],
        r=[1, 0, 0, 0, 1, 0, 0, 0, 1],
        p=[1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12],
    )


def test_usage_without_arguments(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "input.yml output.ini" in out
    assert "input.ini output.yml" in out


def test_usage_with_one_argument(capsys):
    assert main(["only.yml"]) == 0
    assert "Usage:" in capsys.readouterr().out


def test_yaml_to_ini(tmp_path):
    src = tmp_path / "in.yml"
    dst = tmp_path / "out.ini"
    write_calibration(src, "mono_left", make_info())
    assert main([str(src), str(dst)]) == 0
    name, info = read_calibration(dst)
    assert name == "mono_left"
    assert info.k == make_info().k
    assert info.d == make_info().d


def test_ini_to_yaml(tmp_path):
    src = tmp_path / "in.ini"
    dst = tmp_path / "out.yaml"
    write_calibration(src, "cam", make_info())
    assert main([str(src), str(dst)]) == 0
    name, info = read_calibration(dst)
    assert name == "cam"
    assert info.p == make_info().p
    assert (info.width, info.height) == (make_info().width, make_info().height)


def test_missing_input_fails(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="camcalib.convert"):
        assert main([str(tmp_path / "absent.yml"), str(tmp_path / "out.ini")]) == 1
    assert "Failed to load camera model" in caplog.text
    assert not (tmp_path / "out.ini").exists()


def test_bad_output_extension_fails(tmp_path, caplog):
    src = tmp_path / "in.yml"
    write_calibration(src, "cam", make_info())
    with caplog.at_level(logging.ERROR, logger="camcalib.convert"):
        assert main([str(src), str(tmp_path / "out.txt")]) == 1
    assert "Failed to save camera model" in caplog.text


def test_saved_is_logged(tmp_path, caplog):
    src = tmp_path / "in.yml"
    dst = tmp_path / "out.yaml"
    write_calibration(src, "cam", make_info())
    with caplog.at_level(logging.INFO, logger="camcalib.convert"):
        assert main([str(src), str(dst)]) == 0
    assert f"Saved {dst}" in caplog.text