from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


# IFD name -> {tag id -> value}, plus an optional "thumbnail" entry holding bytes.
ExifDocument = Dict[str, Any]

IFD_NAMES: Tuple[str, ...] = ("0th", "Exif", "GPS", "Interop", "1st")


@dataclass
class BoardField:
	id: str
	key: str
	value: str

	def is_renderable(self) -> bool:
		return bool(self.key.strip()) and bool(self.value.strip())


@dataclass
class BoardSpec:
	name: str = ""
	date: Optional[datetime] = None
	date_is_from_exif: bool = False
	fields: List[BoardField] = field(default_factory=list)

	def has_content(self) -> bool:
		return bool(self.name.strip()) or self.date is not None


@dataclass(frozen=True)
class ProcessingResult:
	success: bool
	output_bytes: Optional[bytes] = None
	error_message: Optional[str] = None

	@classmethod
	def ok(cls, output_bytes: bytes) -> "ProcessingResult":
		return cls(success=True, output_bytes=output_bytes)

	@classmethod
	def failed(cls, message: str) -> "ProcessingResult":
		return cls(success=False, error_message=message)


@dataclass
class ExifDetails:
	document: Optional[ExifDocument] = None
	display_text: str = ""
	capture_time: Optional[datetime] = None
	gps: Optional[Dict[int, Any]] = None


@dataclass(frozen=True)
class UploadResult:
	success: bool
	mime_type: Optional[str] = None
	data: Optional[bytes] = None
	exif: ExifDetails = field(default_factory=ExifDetails)
	error_message: Optional[str] = None


@dataclass(frozen=True)
class FieldEditResult:
	success: bool
	field_id: Optional[str] = None
	reason: Optional[str] = None
	error_message: Optional[str] = None
