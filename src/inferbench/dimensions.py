"""
Letterbox sizing for the benchmark page.

    size = compute_display_size(1920, 1080, 600, 600)   # 600 x 338

The image fills the box on its constraining axis and keeps its aspect ratio.
"""

from __future__ import annotations

import math
import numbers
from typing import Awaitable

from .data_models import DisplayDimensions, ImageHandle
from .errors import InvalidInputError


def _check_positive(name: str, value: float) -> None:
    if not isinstance(value, numbers.Real) or not math.isfinite(value) or value <= 0:
        raise InvalidInputError(f"{name} must be a positive finite number, got {value!r}")


def compute_display_size(
    natural_width: float,
    natural_height: float,
    max_width: int,
    max_height: int,
) -> DisplayDimensions:
    """
    Scale (natural_width, natural_height) to fit inside (max_width, max_height).

    Width is tried at max_width first; if the resulting height overflows,
    height is clamped to max_height and width follows from the ratio.
    Both sides are rounded up.
    """
    _check_positive("natural_width", natural_width)
    _check_positive("natural_height", natural_height)
    _check_positive("max_width", max_width)
    _check_positive("max_height", max_height)

    ratio = natural_width / natural_height

    width = max_width
    height = math.ceil(width / ratio)
    if height > max_height:
        height = max_height
        width = min(max_width, math.ceil(height * ratio))

    return DisplayDimensions(width=int(width), height=int(height))


async def resolve_display_size(
    pending: Awaitable[ImageHandle],
    max_width: int,
    max_height: int,
) -> DisplayDimensions:
    """
    Wait for an image to finish loading, then size it.

    A failure of `pending` (e.g. ImageLoadError) propagates unchanged.
    """
    image = await pending
    return compute_display_size(image.natural_width, image.natural_height, max_width, max_height)
