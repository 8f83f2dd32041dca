from __future__ import annotations

import copy
import io
import logging
import numbers
import struct
from fractions import Fraction
from typing import Any, Dict, Optional

import piexif

from photoboard.errors import DecodeError, EncodeError, InsertError, MissingExifError
from photoboard.models import IFD_NAMES, ExifDocument


logger = logging.getLogger(__name__)

SOI = b"\xff\xd8"
EXIF_HEADER = b"Exif\x00\x00"

# Offsets written by piexif.dump itself; they carry no tag data of their own.
_STRUCTURAL_TAGS = {
	"0th": {piexif.ImageIFD.ExifTag, piexif.ImageIFD.GPSTag},
	"Exif": {piexif.ExifIFD.InteroperabilityTag},
	"1st": {piexif.ImageIFD.JPEGInterchangeFormat, piexif.ImageIFD.JPEGInterchangeFormatLength},
}

_INTEGER_TYPES = {
	piexif.TYPES.Byte,
	piexif.TYPES.Short,
	piexif.TYPES.Long,
	piexif.TYPES.SByte,
	piexif.TYPES.SShort,
	piexif.TYPES.SLong,
}
_RATIONAL_TYPES = {piexif.TYPES.Rational, piexif.TYPES.SRational}
_FLOAT_TYPES = {piexif.TYPES.Float, piexif.TYPES.DFloat}


def decode(data: bytes) -> ExifDocument:
	"""Parse the EXIF APP1 segment of a JPEG buffer.

	IFDs without tags are left out of the returned document, so an IFD key is
	present only when it carries data. Raises :class:`DecodeError` when the
	buffer is not a JPEG or holds no usable EXIF segment.
	"""
	if not data or data[0:2] != SOI:
		raise DecodeError("Given data is not JPEG-encoded")
	try:
		raw = piexif.load(bytes(data))
	except (ValueError, struct.error, IndexError, KeyError) as e:
		raise DecodeError(f"Malformed EXIF segment: {e}") from e

	document: ExifDocument = {}
	for ifd in IFD_NAMES:
		tags = dict(raw.get(ifd) or {})
		for tag in _STRUCTURAL_TAGS.get(ifd, ()):
			tags.pop(tag, None)
		if tags:
			document[ifd] = tags
	thumbnail = raw.get("thumbnail")
	if thumbnail:
		document["thumbnail"] = bytes(thumbnail)
	if not document:
		raise MissingExifError("No EXIF segment found")
	return document


def clone_for_edit(document: ExifDocument) -> ExifDocument:
	"""Return a copy of ``document`` whose IFD maps can be mutated freely."""
	return copy.deepcopy(document)


def tag_type(ifd: str, tag: int) -> Optional[int]:
	entry = piexif.TAGS.get(ifd, {}).get(tag)
	if entry is None:
		return None
	return entry["type"]


def _to_rational(value: Any) -> tuple:
	if isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, numbers.Integral) for v in value):
		return (int(value[0]), int(value[1]))
	if isinstance(value, numbers.Integral):
		return (int(value), 1)
	frac = Fraction(value).limit_denominator(1000000)
	return (frac.numerator, frac.denominator)


def _to_number(value: Any) -> float:
	if isinstance(value, tuple) and len(value) == 2:
		num, den = value
		if not den:
			raise ValueError("zero denominator")
		return num / den
	return float(value)


def conform_value(ifd: str, tag: int, value: Any) -> Any:
	"""Coerce ``value`` to the wire type piexif will write for ``ifd``/``tag``.

	Values decoded from files written by other software sometimes use a wire type
	that differs from the tag dictionary (e.g. SceneType stored as BYTE). Raises
	``ValueError`` when no sensible conversion exists.
	"""
	wire = tag_type(ifd, tag)
	if wire is None:
		raise ValueError(f"tag {tag} is not defined for the {ifd} IFD")

	if wire == piexif.TYPES.Ascii:
		if isinstance(value, (bytes, bytearray)):
			return bytes(value)
		if isinstance(value, str):
			return value.encode("latin1")
		raise ValueError(f"expected text, got {type(value).__name__}")

	if wire == piexif.TYPES.Undefined:
		if isinstance(value, (bytes, bytearray)):
			return bytes(value)
		if isinstance(value, str):
			return value.encode("latin1")
		if isinstance(value, numbers.Integral):
			return bytes([int(value)])
		if isinstance(value, tuple) and all(isinstance(v, numbers.Integral) for v in value):
			return bytes(value)
		raise ValueError(f"expected bytes, got {type(value).__name__}")

	if wire in _INTEGER_TYPES:
		if isinstance(value, numbers.Integral):
			return int(value)
		if isinstance(value, (bytes, bytearray)):
			return tuple(value)
		if isinstance(value, float):
			return int(round(value))
		if isinstance(value, tuple):
			return tuple(int(v) for v in value)
		raise ValueError(f"expected integer, got {type(value).__name__}")

	if wire in _RATIONAL_TYPES:
		if isinstance(value, tuple) and value and isinstance(value[0], tuple):
			return tuple(_to_rational(v) for v in value)
		return _to_rational(value)

	if wire in _FLOAT_TYPES:
		if isinstance(value, tuple) and value and isinstance(value[0], tuple):
			return tuple(_to_number(v) for v in value)
		return _to_number(value)

	return value


def _conform_ifd(ifd: str, tags: Dict[int, Any]) -> Dict[int, Any]:
	out: Dict[int, Any] = {}
	for tag, value in tags.items():
		if tag in _STRUCTURAL_TAGS.get(ifd, ()):
			continue
		try:
			out[tag] = conform_value(ifd, tag, value)
		except (ValueError, TypeError, ZeroDivisionError) as e:
			logger.warning("Dropping EXIF tag %s from %s IFD: %s", tag, ifd, e)
	return out


def encode(document: ExifDocument) -> bytes:
	"""Serialize ``document`` into an ``Exif\\0\\0``-prefixed TIFF block.

	Every tag is written with the wire type of the piexif tag dictionary; tags the
	dictionary does not know, or whose values cannot be coerced, are dropped.
	"""
	exif_dict: Dict[str, Any] = {}
	for ifd in IFD_NAMES:
		exif_dict[ifd] = _conform_ifd(ifd, document.get(ifd) or {})
	thumbnail = document.get("thumbnail")
	# piexif writes the 1st IFD only together with a thumbnail
	exif_dict["thumbnail"] = bytes(thumbnail) if thumbnail else None
	if exif_dict["1st"] and not thumbnail:
		logger.warning("Dropping 1st IFD (%d tags): it has no thumbnail", len(exif_dict["1st"]))
	try:
		return piexif.dump(exif_dict)
	except (ValueError, struct.error, TypeError) as e:
		raise EncodeError(f"Could not serialize EXIF: {e}") from e


def insert(exif_bytes: bytes, image_bytes: bytes) -> bytes:
	"""Splice ``exif_bytes`` into a JPEG right after SOI, replacing any EXIF APP1."""
	if not image_bytes or image_bytes[0:2] != SOI:
		raise InsertError("Given image is not JPEG-encoded")
	if exif_bytes[0:6] != EXIF_HEADER:
		raise InsertError("Given data is not EXIF data")
	stripped = io.BytesIO()
	out = io.BytesIO()
	try:
		piexif.remove(bytes(image_bytes), stripped)
		piexif.insert(exif_bytes, stripped.getvalue(), out)
	except (ValueError, struct.error) as e:
		raise InsertError(f"Could not insert EXIF: {e}") from e
	return out.getvalue()
