"""Pick an output resolution for the generation request from the photo's shape."""
from __future__ import annotations

LANDSCAPE_WIDE = "2560x1440"  # 16:9, 3,686,400 px
LANDSCAPE = "2304x1728"  # 4:3, 3,981,312 px
PORTRAIT_TALL = "1440x2560"  # 9:16, 3,686,400 px
PORTRAIT = "1728x2304"  # 3:4, 3,981,312 px
SQUARE = "2048x2048"  # 1:1, 4,194,304 px

RESOLUTIONS = (LANDSCAPE_WIDE, LANDSCAPE, PORTRAIT_TALL, PORTRAIT, SQUARE)

# Every band keeps the output above ~3.6 MP (about 1920x1920), which is the
# minimum the Seedream 4.x models accept.
MIN_TOTAL_PIXELS = 3_686_400


def select_resolution(width: int, height: int) -> str:
    """Return the fixed size string whose band contains ``width / height``.

    Bands are checked in order; anything that misses all four thresholds
    falls back to the square size.
    """

    if width <= 0 or height <= 0:
        raise ValueError(f"image dimensions must be positive, got {width}x{height}")

    ratio = width / height

    if ratio > 1.5:
        return LANDSCAPE_WIDE
    if ratio > 1.2:
        return LANDSCAPE

    if ratio < 0.6:
        return PORTRAIT_TALL
    if ratio < 0.8:
        return PORTRAIT

    return SQUARE


__all__ = ["RESOLUTIONS", "MIN_TOTAL_PIXELS", "select_resolution"]
