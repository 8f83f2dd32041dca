from __future__ import annotations

import sys
from io import BytesIO
from pathlib import Path
from typing import Optional

import piexif
import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))


def jpeg_bytes(size=(100, 100), color=(255, 255, 255), exif: Optional[dict] = None) -> bytes:
	out = BytesIO()
	img = Image.new("RGB", size, color)
	if exif is None:
		img.save(out, format="JPEG", quality=90)
	else:
		img.save(out, format="JPEG", quality=90, exif=piexif.dump(exif))
	return out.getvalue()


def png_bytes(size=(100, 100), color=(255, 255, 255, 255)) -> bytes:
	out = BytesIO()
	Image.new("RGBA", size, color).save(out, format="PNG")
	return out.getvalue()


def fake_measure(text: str, size: float, bold: bool) -> float:
	return len(text) * 10.0


@pytest.fixture
def plain_jpeg() -> bytes:
	return jpeg_bytes()


@pytest.fixture
def rotated_jpeg() -> bytes:
	exif = {
		"0th": {piexif.ImageIFD.Orientation: 6, piexif.ImageIFD.Make: b"Camera"},
		"Exif": {piexif.ExifIFD.DateTimeOriginal: b"2023:05:15 14:30:45"},
	}
	return jpeg_bytes(size=(120, 80), exif=exif)


@pytest.fixture
def plain_png() -> bytes:
	return png_bytes()


@pytest.fixture
def make_jpeg():
	return jpeg_bytes


@pytest.fixture
def make_png():
	return png_bytes


@pytest.fixture
def measure():
	return fake_measure
