"""
Utility functions for loading the image catalog, label files and images.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Union

from PIL import Image

from .constants import DATA_DIR, IMAGE_EXTENSIONS
from .data_models import ImageHandle
from .errors import ImageLoadError


def load_classes_txt(path: Union[str, Path]) -> List[str]:
    """
    Load class names (one per line) from a classes.txt file.

    Used by the vision module to know the index→label mapping of a
    fine-tuned checkpoint.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"classes.txt not found at {p}")

    lines = p.read_text(encoding="utf-8").splitlines()
    classes = [ln.strip() for ln in lines if ln.strip()]
    if not classes:
        raise ValueError(f"No classes found in {p}")
    return classes


def load_catalog(path: Union[str, Path]) -> List[str]:
    """
    Load the list of image locators to sample from.

    `path` is either:
      - a directory: every image file inside it, sorted by name
      - a text file: one locator per line (blank lines and '#' comments skipped);
        relative entries are resolved against the file's directory
    """
    p = Path(path)
    if p.is_dir():
        locators = [
            str(f) for f in sorted(p.iterdir())
            if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS
        ]
    elif p.is_file():
        locators = []
        for ln in p.read_text(encoding="utf-8").splitlines():
            ln = ln.strip()
            if not ln or ln.startswith("#"):
                continue
            entry = Path(ln)
            locators.append(str(entry if entry.is_absolute() else p.parent / entry))
    else:
        raise FileNotFoundError(f"Image catalog not found: {p}")

    if not locators:
        raise ValueError(f"No images found in catalog {p}")
    return locators


def _resolve_image_path(locator: str) -> Path:
    """
    Try:
      1) interpret as a direct path
      2) if not found, prepend DATA_DIR
    """
    p = Path(locator)
    if p.is_file():
        return p

    candidate = DATA_DIR / locator
    if candidate.is_file():
        return candidate

    raise ImageLoadError(
        f"Image not found: {locator} "
        f"(tried '{p}' and '{candidate}')"
    )


def read_image(locator: str) -> ImageHandle:
    """Decode an image fully (blocking) and wrap it in an ImageHandle."""
    path = _resolve_image_path(locator)
    try:
        with Image.open(path) as img:
            pixels = img.convert("RGB")
    except (OSError, Image.DecompressionBombError) as exc:
        raise ImageLoadError(f"Could not read image {locator}: {exc}") from exc

    width, height = pixels.size
    return ImageHandle(locator=locator, natural_width=width, natural_height=height, pixels=pixels)


async def load_image(locator: str) -> ImageHandle:
    """Asynchronous image resource loader: decodes on a worker thread."""
    return await asyncio.to_thread(read_image, locator)
