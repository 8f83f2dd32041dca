from __future__ import annotations


class PhotoboardError(Exception):
	"""Base class for every error raised inside photoboard."""


class ExifError(PhotoboardError):
	pass


class DecodeError(ExifError):
	"""The buffer is not a JPEG or carries no parseable EXIF segment."""


class MissingExifError(DecodeError):
	"""The JPEG is well formed but has no EXIF data."""


class EncodeError(ExifError):
	pass


class InsertError(ExifError):
	"""The target buffer is not JPEG-encoded."""


class ImageLoadError(PhotoboardError):
	pass


class ImageEncodeError(PhotoboardError):
	pass


class UnsupportedTypeError(PhotoboardError):
	def __init__(self, mime_type: str | None) -> None:
		self.mime_type = mime_type
		super().__init__(f"Unsupported image type: {mime_type!r}")


class FieldValidationError(PhotoboardError):
	def __init__(self, reason: str, message: str) -> None:
		self.reason = reason
		super().__init__(message)
