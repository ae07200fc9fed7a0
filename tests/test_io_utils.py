from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from PIL import Image

from inferbench.errors import ImageLoadError
from inferbench.io_utils import load_catalog, load_classes_txt, load_image, read_image


def _write_image(path: Path, size=(64, 48)) -> Path:
    Image.new("RGB", size, color=(128, 64, 32)).save(path)
    return path


def test_catalog_from_directory_keeps_images_only(tmp_path: Path) -> None:
    _write_image(tmp_path / "b.png")
    _write_image(tmp_path / "a.jpg")
    (tmp_path / "notes.txt").write_text("not an image", encoding="utf-8")

    assert load_catalog(tmp_path) == [str(tmp_path / "a.jpg"), str(tmp_path / "b.png")]


def test_catalog_from_text_file(tmp_path: Path) -> None:
    listing = tmp_path / "images.txt"
    listing.write_text("# samples\ncat.png\n\n/abs/dog.png\n", encoding="utf-8")

    assert load_catalog(listing) == [str(tmp_path / "cat.png"), "/abs/dog.png"]


def test_empty_catalog_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        load_catalog(tmp_path)


def test_missing_catalog(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_catalog(tmp_path / "nowhere")


def test_read_image_reports_natural_size(tmp_path: Path) -> None:
    path = _write_image(tmp_path / "wide.png", size=(192, 108))
    image = read_image(str(path))

    assert image.locator == str(path)
    assert (image.natural_width, image.natural_height) == (192, 108)
    assert image.pixels.mode == "RGB"


def test_load_image_runs_async(tmp_path: Path) -> None:
    path = _write_image(tmp_path / "tall.png", size=(30, 90))
    image = asyncio.run(load_image(str(path)))
    assert (image.natural_width, image.natural_height) == (30, 90)


def test_missing_image_raises_image_load_error(tmp_path: Path) -> None:
    with pytest.raises(ImageLoadError):
        read_image(str(tmp_path / "missing.png"))


def test_corrupt_image_raises_image_load_error(tmp_path: Path) -> None:
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"definitely not a png")
    with pytest.raises(ImageLoadError):
        read_image(str(bad))


def test_load_classes_txt(tmp_path: Path) -> None:
    classes = tmp_path / "classes.txt"
    classes.write_text("cat\n\ndog\n  bird  \n", encoding="utf-8")
    assert load_classes_txt(classes) == ["cat", "dog", "bird"]


def test_load_classes_txt_empty(tmp_path: Path) -> None:
    classes = tmp_path / "classes.txt"
    classes.write_text("\n\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_classes_txt(classes)


def test_oversized_image_raises_image_load_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write_image(tmp_path / "huge.png", size=(100, 100))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    with pytest.raises(ImageLoadError, match="huge.png"):
        asyncio.run(load_image(str(path)))
