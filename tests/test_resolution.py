import pytest

from app.services.resolution import MIN_TOTAL_PIXELS, RESOLUTIONS, select_resolution


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (1600, 900, "2560x1440"),
        (1400, 1000, "2304x1728"),
        (500, 1000, "1440x2560"),
        (700, 1000, "1728x2304"),
        (1000, 1000, "2048x2048"),
        (1100, 1000, "2048x2048"),
        (900, 1000, "2048x2048"),
    ],
)
def test_select_resolution_bands(width, height, expected) -> None:
    assert select_resolution(width, height) == expected


def test_band_edges_are_exclusive() -> None:
    # exactly 1.5 is not "> 1.5", exactly 0.8 is not "< 0.8"
    assert select_resolution(1500, 1000) == "2304x1728"
    assert select_resolution(1200, 1000) == "2048x2048"
    assert select_resolution(600, 1000) == "1728x2304"
    assert select_resolution(800, 1000) == "2048x2048"


def test_choice_depends_only_on_ratio() -> None:
    assert select_resolution(1600, 900) == select_resolution(3200, 1800)
    assert select_resolution(3, 4) == select_resolution(3000, 4000)


def test_result_is_always_a_known_size() -> None:
    for width in range(1, 40, 3):
        for height in range(1, 40, 3):
            assert select_resolution(width, height) in RESOLUTIONS


def test_every_size_meets_minimum_pixels() -> None:
    for size in RESOLUTIONS:
        w, h = (int(x) for x in size.split("x"))
        assert w * h >= MIN_TOTAL_PIXELS


def test_rejects_non_positive_dimensions() -> None:
    with pytest.raises(ValueError):
        select_resolution(0, 100)
