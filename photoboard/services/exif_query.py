from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import piexif

from photoboard.models import IFD_NAMES, ExifDocument


logger = logging.getLogger(__name__)

# Capture time candidates, most specific first.
_TIMESTAMP_SOURCES: Tuple[Tuple[str, int], ...] = (
	("Exif", piexif.ExifIFD.DateTimeOriginal),
	("Exif", piexif.ExifIFD.DateTimeDigitized),
	("0th", piexif.ImageIFD.DateTime),
)

EXIF_DUMP_HEADER = "--- JPEG EXIF Data ---"


def _bytes_to_str(v: Any) -> Optional[str]:
	if v is None:
		return None
	if isinstance(v, bytes):
		return v.decode("latin1").rstrip("\x00")
	if isinstance(v, str):
		return v
	return str(v)


def has_meaningful_data(document: Optional[ExifDocument]) -> bool:
	if not document:
		return False
	for ifd in IFD_NAMES:
		if document.get(ifd):
			return True
	thumbnail = document.get("thumbnail")
	return thumbnail is not None and len(thumbnail) > 0


def parse_exif_datetime(raw: Any) -> Optional[datetime]:
	"""Parse ``YYYY:MM:DD HH:MM:SS`` into a naive local datetime, or return None."""
	text = _bytes_to_str(raw)
	if not text:
		return None
	parts = text.split(" ")
	if len(parts) != 2:
		logger.debug("Unexpected EXIF DateTime format: %r", text)
		return None
	date_part, time_part = parts
	iso = f"{date_part.replace(':', '-', 2)}T{time_part}"
	try:
		return datetime.fromisoformat(iso)
	except ValueError:
		logger.debug("Failed to parse EXIF DateTime %r", text)
		return None


def extract_capture_timestamp(document: Optional[ExifDocument]) -> Optional[datetime]:
	if not document:
		return None
	for ifd, tag in _TIMESTAMP_SOURCES:
		raw = (document.get(ifd) or {}).get(tag)
		if raw:
			# first populated source wins, even when it does not parse
			return parse_exif_datetime(raw)
	return None


def extract_gps_block(document: Optional[ExifDocument]) -> Optional[Dict[int, Any]]:
	if not document:
		return None
	gps = document.get("GPS")
	if gps:
		return gps
	return None


def extract_exif_details(document: Optional[ExifDocument]) -> Tuple[Optional[datetime], Optional[Dict[int, Any]]]:
	return extract_capture_timestamp(document), extract_gps_block(document)


def _jsonable(value: Any) -> Any:
	if isinstance(value, bytes):
		return _bytes_to_str(value)
	if isinstance(value, (list, tuple)):
		return [_jsonable(v) for v in value]
	if isinstance(value, dict):
		return {str(k): _jsonable(v) for k, v in value.items()}
	return value


def describe_exif(document: Optional[ExifDocument]) -> str:
	"""Render every present IFD as a labelled JSON dump plus a thumbnail line."""
	lines = [EXIF_DUMP_HEADER]
	document = document or {}
	for ifd in IFD_NAMES:
		tags = document.get(ifd)
		if tags:
			dump = json.dumps(_jsonable(tags), indent=2, ensure_ascii=False)
			lines.append(f"{ifd} IFD:\n{dump}\n")
	thumbnail = document.get("thumbnail")
	if thumbnail:
		lines.append(f"Thumbnail: Present (length {len(thumbnail)})")
	else:
		lines.append("Thumbnail: Not present")
	return "\n".join(lines) + "\n"
