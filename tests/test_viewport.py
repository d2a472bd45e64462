import pytest

from fractview.viewport import SampleWindow, ViewTransform, sample_window


def test_square_target_maps_reference_window():
    window = sample_window(ViewTransform(), 4, 4)
    assert window == SampleWindow(origin_re=-2.0, origin_im=-2.0, step_re=1.0, step_im=1.0)
    assert window.point(3, 3) == (1.0, 1.0)


def test_wide_target_is_centred_with_square_pixels():
    window = sample_window(ViewTransform(), 8, 4)
    assert window.step_re == window.step_im == 1.0
    assert window.origin_re == -4.0
    assert window.origin_im == -2.0


def test_tall_target_is_centred_with_square_pixels():
    window = sample_window(ViewTransform(), 100, 200)
    assert window.step_re == pytest.approx(0.04)
    assert window.step_im == pytest.approx(0.04)
    assert window.origin_re == pytest.approx(-2.0)
    # 200 rows of 0.04 centred on zero.
    assert window.origin_im == pytest.approx(-4.0)
    assert window.origin_im + 100 * window.step_im == pytest.approx(0.0)


def test_zoom_shrinks_the_window_around_the_centre():
    window = sample_window(ViewTransform(scale=2.0), 4, 4)
    assert window.step_re == 0.5
    assert window.origin_re == -1.0
    assert window.origin_im == -1.0


def test_pan_offset_is_in_pixels():
    base = sample_window(ViewTransform(), 100, 100)
    panned = sample_window(ViewTransform(offset_x=25.0, offset_y=-50.0), 100, 100)
    assert panned.origin_re - base.origin_re == pytest.approx(25.0 * base.step_re)
    assert panned.origin_im - base.origin_im == pytest.approx(-50.0 * base.step_im)
    assert panned.step_re == base.step_re


def test_transform_helpers():
    t = ViewTransform().translated(10.0, -4.0).zoomed(2.0)
    assert t == ViewTransform(offset_x=20.0, offset_y=-8.0, scale=2.0)


@pytest.mark.parametrize("width,height,scale", [(0, 10, 1.0), (10, 0, 1.0), (10, 10, 0.0), (10, 10, -1.0)])
def test_preconditions_fail_fast(width, height, scale):
    with pytest.raises(ValueError):
        sample_window(ViewTransform(scale=scale), width, height)
