from __future__ import annotations

from datetime import datetime
from io import BytesIO

import piexif
import pytest
from PIL import Image

from photoboard.errors import DecodeError
from photoboard.models import BoardSpec
from photoboard.services import exif_codec
from photoboard.services.image_utils import image_size
from photoboard.services.layout import compute_layout
from photoboard.services.pipeline import attach_exif, process


def test_end_to_end_plain_jpeg(plain_jpeg) -> None:
	board = BoardSpec(name="Test", date=datetime(2024, 1, 1, 0, 0))
	result = process(plain_jpeg, "image/jpeg", None, board)
	assert result.success
	assert result.error_message is None
	assert result.output_bytes and result.output_bytes[:2] == b"\xff\xd8"
	assert image_size(result.output_bytes) == (100, 100)
	with pytest.raises(DecodeError):
		exif_codec.decode(result.output_bytes)


def test_orientation_is_reset(rotated_jpeg) -> None:
	exif_doc = exif_codec.decode(rotated_jpeg)
	result = process(rotated_jpeg, "image/jpeg", exif_doc, BoardSpec(name="Test"))
	assert result.success
	out_exif = exif_codec.decode(result.output_bytes)
	assert out_exif["0th"][piexif.ImageIFD.Orientation] == 1
	assert out_exif["0th"][piexif.ImageIFD.Make] == b"Camera"
	assert out_exif["Exif"][piexif.ExifIFD.DateTimeOriginal] == b"2023:05:15 14:30:45"
	# caller's document is untouched
	assert exif_doc["0th"][piexif.ImageIFD.Orientation] == 6
	# rotation was applied to the pixels instead
	assert image_size(result.output_bytes) == (80, 120)


def test_png_never_gets_exif(plain_png) -> None:
	exif_doc = {"0th": {piexif.ImageIFD.Make: b"Camera"}}
	result = process(plain_png, "image/png", exif_doc, BoardSpec(name="Test"))
	assert result.success
	with pytest.raises(DecodeError):
		exif_codec.decode(result.output_bytes)


def test_jpeg_without_meaningful_exif_gets_none(plain_jpeg) -> None:
	result = process(plain_jpeg, "image/jpeg", {"0th": {}}, BoardSpec(name="Test"))
	assert result.success
	with pytest.raises(DecodeError):
		exif_codec.decode(result.output_bytes)


def test_transparent_png_is_flattened(make_png) -> None:
	result = process(make_png(color=(255, 0, 0, 0)), "image/png", None, BoardSpec())
	assert result.success
	with Image.open(BytesIO(result.output_bytes)) as img:
		assert img.mode == "RGB"
		r, g, b = img.getpixel((50, 50))
	assert r < 30 and g < 30 and b < 30


def test_unsupported_type(plain_jpeg) -> None:
	result = process(plain_jpeg, "image/gif", None, BoardSpec(name="Test"))
	assert not result.success
	assert result.output_bytes is None
	assert "image/gif" in result.error_message


def test_undecodable_image() -> None:
	result = process(b"definitely not an image", "image/jpeg", None, BoardSpec(name="Test"))
	assert not result.success
	assert result.output_bytes is None
	assert result.error_message.startswith("Failed to load image")


def test_empty_board_still_encodes(plain_jpeg) -> None:
	result = process(plain_jpeg, "image/jpeg", None, BoardSpec())
	assert result.success
	with Image.open(BytesIO(result.output_bytes)) as img:
		assert all(c >= 240 for c in img.getpixel((30, 70)))


def test_board_is_drawn_bottom_left(make_jpeg) -> None:
	source = make_jpeg(size=(400, 300))
	board = BoardSpec(name="Road Works", date=datetime(2024, 1, 1, 9, 30))
	result = process(source, "image/jpeg", None, board)
	assert result.success
	g = compute_layout(board, 400, 300).geometry
	with Image.open(BytesIO(result.output_bytes)) as img:
		# inside the board padding, away from borders and text
		r, gr, b = img.getpixel((int(g.x) + 8, int(g.y + g.height) - 8))
		assert gr > r and gr > b
		assert all(c >= 240 for c in img.getpixel((390, 10)))


def test_attach_exif_is_best_effort() -> None:
	doc = {"0th": {piexif.ImageIFD.Make: b"Camera"}}
	assert attach_exif(b"not a jpeg", "image/jpeg", doc) == b"not a jpeg"


def test_attach_exif_skips_png_and_empty(plain_jpeg) -> None:
	doc = {"0th": {piexif.ImageIFD.Make: b"Camera"}}
	assert attach_exif(plain_jpeg, "image/png", doc) == plain_jpeg
	assert attach_exif(plain_jpeg, "image/jpeg", None) == plain_jpeg
	assert attach_exif(plain_jpeg, "image/jpeg", {}) == plain_jpeg
	with_exif = attach_exif(plain_jpeg, "image/jpeg", doc)
	assert exif_codec.decode(with_exif)["0th"][piexif.ImageIFD.Orientation] == 1


def test_attach_exif_survives_unexpected_errors(plain_jpeg, monkeypatch) -> None:
	def boom(document):
		raise RuntimeError("boom")

	monkeypatch.setattr(exif_codec, "encode", boom)
	doc = {"0th": {piexif.ImageIFD.Make: b"Camera"}}
	assert attach_exif(plain_jpeg, "image/jpeg", doc) == plain_jpeg
