from __future__ import annotations

import logging
from typing import Optional

from photoboard.config import PNG_MIME, SUPPORTED_MIME_TYPES
from photoboard.errors import DecodeError, MissingExifError
from photoboard.models import ExifDetails, UploadResult
from photoboard.services import exif_codec
from photoboard.services.exif_query import describe_exif, extract_exif_details, has_meaningful_data


logger = logging.getLogger(__name__)

UNSUPPORTED_TYPE = "JPEG (.jpg, .jpeg) または PNG (.png) 画像を選択してください。"
EMPTY_FILE = "ファイルの読み込みに失敗しました。"
NO_MEANINGFUL_EXIF = "No meaningful EXIF data found in this JPEG."
EXIF_UNREADABLE = (
	"EXIF data could not be loaded from this JPEG. "
	"It might be corrupted or not a standard JPEG EXIF format."
)
PNG_NOTE = (
	"PNG image selected. PNGs typically do not use EXIF data in the same way as JPEGs. "
	"No EXIF data will be extracted or copied."
)


def read_exif_details(data: bytes) -> ExifDetails:
	"""Decode a JPEG's EXIF into display text, capture time and GPS block."""
	try:
		document = exif_codec.decode(data)
	except MissingExifError:
		return ExifDetails(display_text=NO_MEANINGFUL_EXIF)
	except DecodeError as e:
		logger.warning("Failed to load EXIF data from JPEG: %s", e)
		return ExifDetails(display_text=EXIF_UNREADABLE)
	if not has_meaningful_data(document):
		return ExifDetails(display_text=NO_MEANINGFUL_EXIF)
	capture_time, gps = extract_exif_details(document)
	return ExifDetails(
		document=document,
		display_text=describe_exif(document),
		capture_time=capture_time,
		gps=gps,
	)


def load_source(data: Optional[bytes], mime_type: Optional[str]) -> UploadResult:
	if mime_type not in SUPPORTED_MIME_TYPES:
		return UploadResult(success=False, mime_type=mime_type, error_message=UNSUPPORTED_TYPE)
	if not data:
		return UploadResult(success=False, mime_type=mime_type, error_message=EMPTY_FILE)
	if mime_type == PNG_MIME:
		details = ExifDetails(display_text=PNG_NOTE)
	else:
		details = read_exif_details(data)
	logger.debug("Loaded %s source (%d bytes), capture time %s", mime_type, len(data), details.capture_time)
	return UploadResult(success=True, mime_type=mime_type, data=bytes(data), exif=details)
