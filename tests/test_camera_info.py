import pytest

from camcalib.camera_info import (
    PLUMB_BOB,
    RATIONAL_POLYNOMIAL,
    CalibrationError,
    CameraInfo,
    RegionOfInterest,
)


def make_calib(distortion_model, extended=False):
    if distortion_model == PLUMB_BOB:
        d = [1, 2, 3, 4, 5]
    else:
        d = [1, 2, 3, 4, 5, 6, 7, 8]
    info = CameraInfo(
        width=640,
        height=480,
        distortion_model=distortion_model,
        d=d,
        k=[1, 2, 3, 4, 5, 6, 7, 8, 9],
        r=[1, 0, 0, 0, 1, 0, 0, 0, 1],
        p=[1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12],
    )
    if extended:
        info.binning_x = 1
        info.binning_y = 2
        info.roi = RegionOfInterest(
            x_offset=20, y_offset=180, height=300, width=600, do_rectify=True
        )
    return info


def test_default_matrices_are_zero_filled():
    info = CameraInfo()
    assert info.k == [0.0] * 9
    assert info.r == [0.0] * 9
    assert info.p == [0.0] * 12
    assert info.d == []
    assert info.roi == RegionOfInterest()


def test_default_lists_are_not_shared():
    first = CameraInfo()
    second = CameraInfo()
    first.k[0] = 5.0
    first.d.append(1.0)
    assert second.k[0] == 0.0
    assert second.d == []


def test_values_are_converted_to_float():
    info = make_calib(PLUMB_BOB)
    assert info.k == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0]
    assert all(isinstance(v, float) for v in info.p)
    assert info.d == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_rational_polynomial_calib_keeps_eight_coefficients():
    info = make_calib(RATIONAL_POLYNOMIAL)
    assert info.distortion_model == "rational_polynomial"
    assert len(info.d) == 8
    assert info.d[7] == 8.0


def test_extended_calib_fields():
    info = make_calib(PLUMB_BOB, extended=True)
    assert (info.binning_x, info.binning_y) == (1, 2)
    assert info.roi.width == 600
    assert info.roi.height == 300
    assert info.roi.x_offset == 20
    assert info.roi.y_offset == 180
    assert info.roi.do_rectify is True


@pytest.mark.parametrize(
    "kwargs",
    [{"k": [1.0] * 8}, {"r": [1.0] * 10}, {"p": [1.0] * 9}],
)
def test_wrong_matrix_size_is_rejected(kwargs):
    with pytest.raises(CalibrationError):
        CameraInfo(**kwargs)


def test_equal_calibrations_compare_equal():
    assert make_calib(PLUMB_BOB) == make_calib(PLUMB_BOB)
    assert make_calib(PLUMB_BOB) != make_calib(RATIONAL_POLYNOMIAL)