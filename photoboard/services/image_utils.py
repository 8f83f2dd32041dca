from __future__ import annotations

from io import BytesIO
from typing import Any, Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from photoboard.errors import ImageEncodeError, ImageLoadError


ORIENTATION_TAG = 274


def _orientation_of(exif) -> int:
	if not exif:
		return 1
	value = exif.get(ORIENTATION_TAG)
	if isinstance(value, (tuple, list)) and value:
		value = value[0]
	try:
		return int(value) if value is not None else 1
	except (TypeError, ValueError):
		return 1


def apply_exif_orientation(img: Image.Image, exif) -> Image.Image:
	o = _orientation_of(exif)
	if o == 2:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT)
	if o == 3:
		return img.rotate(180, expand=True)
	if o == 4:
		return img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)
	if o == 5:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).rotate(90, expand=True)
	if o == 6:
		return img.rotate(270, expand=True)
	if o == 7:
		return img.transpose(Image.Transpose.FLIP_LEFT_RIGHT).rotate(270, expand=True)
	if o == 8:
		return img.rotate(90, expand=True)
	return img


def decode_image(data: bytes) -> Image.Image:
	"""Decode ``data`` into a fully loaded image with its EXIF rotation applied."""
	if not data:
		raise ImageLoadError("Failed to load image: empty buffer")
	try:
		img = Image.open(BytesIO(data))
		img.load()
	except (UnidentifiedImageError, OSError, ValueError) as e:
		raise ImageLoadError(f"Failed to load image: {e}") from e
	return apply_exif_orientation(img, img.getexif())


def new_surface(img: Image.Image) -> Image.Image:
	"""Copy ``img`` at natural size onto a fresh opaque RGB surface.

	Transparent pixels end up black, as on a canvas exported to JPEG.
	"""
	surface = Image.new("RGB", img.size, (0, 0, 0))
	if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
		rgba = img.convert("RGBA")
		surface.paste(rgba, (0, 0), rgba)
	else:
		surface.paste(img.convert("RGB"), (0, 0))
	return surface


def hex_to_rgb(s: str) -> Tuple[int, int, int]:
	s = s.strip()
	if s.startswith("#"):
		s = s[1:]
	if len(s) == 3:
		s = "".join(ch * 2 for ch in s)
	return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))


def vertical_gradient(width: int, height: int, start: str, end: str) -> Image.Image:
	top = np.array(hex_to_rgb(start), dtype=np.float32)
	bottom = np.array(hex_to_rgb(end), dtype=np.float32)
	t = np.linspace(0.0, 1.0, num=max(height, 1), dtype=np.float32)[:, np.newaxis]
	column = top + (bottom - top) * t  # [H,3]
	arr = np.broadcast_to(column[:, np.newaxis, :], (max(height, 1), max(width, 1), 3))
	u8 = (arr + 0.5).astype(np.uint8)
	return Image.fromarray(u8)


def encode_jpeg(img: Image.Image, quality: int) -> bytes:
	out = BytesIO()
	try:
		img.save(out, format="JPEG", quality=quality)
	except (OSError, ValueError) as e:
		raise ImageEncodeError(f"Failed to encode JPEG: {e}") from e
	data = out.getvalue()
	if not data:
		raise ImageEncodeError("Failed to encode JPEG: empty output")
	return data


def image_size(data: bytes) -> Tuple[int, int]:
	with Image.open(BytesIO(data)) as img:
		return img.size


def describe_image(img: Image.Image) -> dict[str, Any]:
	return {"width": img.width, "height": img.height, "mode": img.mode}
