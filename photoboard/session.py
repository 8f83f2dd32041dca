from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Tuple

from photoboard.config import DEFAULT_STYLE, DOWNLOAD_FILENAME, BoardStyle
from photoboard.errors import FieldValidationError
from photoboard.models import BoardSpec, ExifDetails, FieldEditResult, ProcessingResult, UploadResult
from photoboard.services import fields as board_fields
from photoboard.services.pipeline import process
from photoboard.services.upload import load_source


logger = logging.getLogger(__name__)

NO_SOURCE = "まず画像をアップロードしてください。"
SUPERSEDED = "A newer image was selected while this one was being processed."


@dataclass(frozen=True)
class _Source:
	generation: int
	data: bytes
	mime_type: str
	exif: ExifDetails


class BoardSession:
	"""In-process state for one board editor: current photo, board and output.

	Only one pipeline run uses the session at a time. Selecting a new photo while a
	run is in flight makes that run's result stale; it is dropped when it lands.
	"""

	def __init__(self, style: BoardStyle = DEFAULT_STYLE) -> None:
		self.style = style
		self.board = BoardSpec()
		self._source: Optional[_Source] = None
		self._generation = 0
		self._output: Optional[bytes] = None
		self._state_lock = threading.Lock()
		self._process_lock = threading.Lock()

	# source selection

	def select_file(self, data: Optional[bytes], mime_type: Optional[str]) -> UploadResult:
		result = load_source(data, mime_type)
		with self._state_lock:
			self._generation += 1
			self._output = None
			self.board = BoardSpec()
			if not result.success:
				self._source = None
				return result
			self._source = _Source(self._generation, result.data, result.mime_type, result.exif)
			if result.exif.capture_time is not None:
				self.board.date = result.exif.capture_time
				self.board.date_is_from_exif = True
		return result

	def reset(self) -> None:
		with self._state_lock:
			self._generation += 1
			self._source = None
			self._output = None
			self.board = BoardSpec()

	@property
	def exif(self) -> ExifDetails:
		source = self._source
		return source.exif if source else ExifDetails()

	# board edits

	def set_name(self, name: str) -> None:
		with self._state_lock:
			self.board.name = name

	def set_date(self, date: Optional[datetime]) -> None:
		with self._state_lock:
			self.board.date = date
			# a manual edit means the date no longer comes from EXIF
			self.board.date_is_from_exif = False

	def add_field(self, key: str, value: str) -> FieldEditResult:
		try:
			with self._state_lock:
				new = board_fields.add_field(self.board.fields, key, value)
		except FieldValidationError as e:
			return FieldEditResult(success=False, reason=e.reason, error_message=str(e))
		return FieldEditResult(success=True, field_id=new.id)

	def update_field(self, field_id: str, key: str, value: str) -> FieldEditResult:
		try:
			with self._state_lock:
				board_fields.update_field(self.board.fields, field_id, key, value)
		except FieldValidationError as e:
			return FieldEditResult(success=False, field_id=field_id, reason=e.reason, error_message=str(e))
		return FieldEditResult(success=True, field_id=field_id)

	def remove_field(self, field_id: str) -> bool:
		with self._state_lock:
			return board_fields.remove_field(self.board.fields, field_id)

	def validate(self) -> Tuple[bool, List[str]]:
		return board_fields.validate_required_fields(self.board.name, self.board.date)

	@property
	def has_board_info(self) -> bool:
		return self.board.has_content()

	@property
	def can_process(self) -> bool:
		return self._source is not None and self.has_board_info

	# output

	def generate(self) -> ProcessingResult:
		with self._process_lock:
			with self._state_lock:
				source = self._source
				board = replace(self.board, fields=[replace(f) for f in self.board.fields])
			if source is None:
				return ProcessingResult.failed(NO_SOURCE)
			result = process(source.data, source.mime_type, source.exif.document, board, self.style)
			with self._state_lock:
				if source.generation != self._generation:
					logger.info("Discarding result for superseded source %d", source.generation)
					return ProcessingResult.failed(SUPERSEDED)
				if result.success:
					self._output = result.output_bytes
			return result

	@property
	def output(self) -> Optional[bytes]:
		return self._output

	@property
	def download_name(self) -> str:
		return DOWNLOAD_FILENAME
