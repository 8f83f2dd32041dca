from __future__ import annotations

import logging
from typing import Optional

import piexif

from photoboard.config import DEFAULT_STYLE, JPEG_MIME, SUPPORTED_MIME_TYPES, BoardStyle
from photoboard.errors import ExifError, ImageEncodeError, ImageLoadError, UnsupportedTypeError
from photoboard.models import BoardSpec, ExifDocument, ProcessingResult
from photoboard.services import exif_codec
from photoboard.services.exif_query import has_meaningful_data
from photoboard.services.fonts import FontBook
from photoboard.services.image_utils import decode_image, describe_image, encode_jpeg, new_surface
from photoboard.services.layout import compute_layout
from photoboard.services.rendering import execute


logger = logging.getLogger(__name__)

PROCESSING_FAILED = "画像の処理に失敗しました。"


def attach_exif(jpeg_bytes: bytes, source_mime_type: str, exif_doc: Optional[ExifDocument]) -> bytes:
	"""Carry the source EXIF over to ``jpeg_bytes`` with Orientation reset to 1.

	Best effort: any codec failure returns ``jpeg_bytes`` untouched.
	"""
	if source_mime_type != JPEG_MIME or not has_meaningful_data(exif_doc):
		return jpeg_bytes
	try:
		updated = exif_codec.clone_for_edit(exif_doc)
		updated.setdefault("0th", {})[piexif.ImageIFD.Orientation] = 1
		exif_bytes = exif_codec.encode(updated)
		return exif_codec.insert(exif_bytes, jpeg_bytes)
	except ExifError as e:
		logger.warning("Failed to add EXIF data to image: %s", e)
		return jpeg_bytes
	except Exception:
		logger.warning("Unexpected error while adding EXIF data to image", exc_info=True)
		return jpeg_bytes


def process(
	source_bytes: bytes,
	source_mime_type: str,
	exif_doc: Optional[ExifDocument],
	board: BoardSpec,
	style: BoardStyle = DEFAULT_STYLE,
) -> ProcessingResult:
	try:
		if source_mime_type not in SUPPORTED_MIME_TYPES:
			raise UnsupportedTypeError(source_mime_type)

		# 1) Decode source into a raster image (EXIF rotation applied)
		img = decode_image(source_bytes)
		logger.debug("Decoded source image %s", describe_image(img))

		# 2) Draw it at natural size onto a fresh surface
		surface = new_surface(img)

		# 3) Lay out and draw the board
		fonts = FontBook(style)
		layout = compute_layout(board, surface.width, surface.height, fonts.measure, style)
		if layout is None:
			logger.debug("Board is empty, nothing drawn")
		else:
			execute(surface, layout.commands, fonts)

		# 4) Serialize the surface
		jpeg_bytes = encode_jpeg(surface, style.jpeg_quality)
	except (UnsupportedTypeError, ImageLoadError, ImageEncodeError) as e:
		logger.error("Image processing failed: %s", e)
		return ProcessingResult.failed(str(e))
	except Exception:
		logger.exception("Unexpected error while processing image")
		return ProcessingResult.failed(PROCESSING_FAILED)

	# 5) Pass EXIF through (never fatal)
	output = attach_exif(jpeg_bytes, source_mime_type, exif_doc)

	# 6) Done
	logger.info("Processed image (%d bytes)", len(output))
	return ProcessingResult.ok(output)
