from __future__ import annotations

import asyncio
import math

import pytest

from inferbench.data_models import DisplayDimensions, ImageHandle
from inferbench.dimensions import compute_display_size, resolve_display_size
from inferbench.errors import ImageLoadError, InvalidInputError


def test_landscape_fills_width() -> None:
    assert compute_display_size(1920, 1080, 600, 600) == DisplayDimensions(600, 338)


def test_portrait_fills_height() -> None:
    assert compute_display_size(1080, 1920, 600, 600) == DisplayDimensions(338, 600)


def test_square_image_in_wide_box_is_clamped_by_height() -> None:
    assert compute_display_size(100, 100, 600, 400) == DisplayDimensions(400, 400)


def test_very_narrow_image_keeps_positive_width() -> None:
    size = compute_display_size(1, 10_000, 600, 600)
    assert size.height == 600
    assert size.width >= 1


@pytest.mark.parametrize(
    "natural_w, natural_h, max_w, max_h",
    [
        (1920, 1080, 600, 600),
        (1080, 1920, 600, 600),
        (640, 480, 300, 200),
        (4000, 1000, 800, 800),
        (333, 777, 500, 900),
        (1024, 1024, 600, 600),
        (50, 60, 1000, 100),
    ],
)
def test_size_fits_box_and_keeps_ratio(natural_w: int, natural_h: int, max_w: int, max_h: int) -> None:
    size = compute_display_size(natural_w, natural_h, max_w, max_h)
    ratio = natural_w / natural_h

    assert 0 < size.width <= max_w
    assert 0 < size.height <= max_h
    assert size.width == max_w or size.height == max_h
    # ceil rounding moves the ratio by less than one pixel on the short side
    assert abs(size.width / size.height - ratio) / ratio <= 1.0 / (min(size.width, size.height) - 1)


@pytest.mark.parametrize(
    "args",
    [
        (0, 100, 600, 600),
        (100, 0, 600, 600),
        (-5, 100, 600, 600),
        (100, 100, 0, 600),
        (100, 100, 600, -1),
        (math.nan, 100, 600, 600),
        (100, math.inf, 600, 600),
    ],
)
def test_invalid_inputs_raise(args) -> None:
    with pytest.raises(InvalidInputError):
        compute_display_size(*args)


def test_invalid_input_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        compute_display_size(0, 0, 600, 600)


def test_resolve_waits_for_pending_image() -> None:
    async def scenario() -> DisplayDimensions:
        async def pending() -> ImageHandle:
            await asyncio.sleep(0)
            return ImageHandle("wide.png", 1920, 1080)

        return await resolve_display_size(pending(), 600, 600)

    assert asyncio.run(scenario()) == DisplayDimensions(600, 338)


def test_resolve_propagates_load_failure() -> None:
    async def scenario() -> DisplayDimensions:
        async def pending() -> ImageHandle:
            raise ImageLoadError("broken.png")

        return await resolve_display_size(pending(), 600, 600)

    with pytest.raises(ImageLoadError, match="broken.png"):
        asyncio.run(scenario())
