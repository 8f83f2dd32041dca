from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Optional, Tuple


JPEG_MIME = "image/jpeg"
PNG_MIME = "image/png"
SUPPORTED_MIME_TYPES: Tuple[str, ...] = (JPEG_MIME, PNG_MIME)

DOWNLOAD_FILENAME = "construction_board_image.jpg"

FONT_ENV = "PHOTOBOARD_FONT"
BOLD_FONT_ENV = "PHOTOBOARD_BOLD_FONT"
JPEG_QUALITY_ENV = "PHOTOBOARD_JPEG_QUALITY"


@dataclass(frozen=True)
class BoardStyle:
	padding: int = 20
	cell_padding: int = 12
	row_extra_height: int = 20
	min_font_size: float = 18
	font_size_ratio: float = 25
	min_value_width: float = 200
	gradient_start: str = "#2d5a3d"
	gradient_end: str = "#4a7c59"
	border_color: str = "#1a3b26"
	text_color: str = "#ffffff"
	border_width: int = 3
	row_separator_width: int = 2
	column_separator_width: int = 3
	name_label: str = "工事名"
	date_label: str = "日時"
	font_path: Optional[str] = None
	bold_font_path: Optional[str] = None
	jpeg_quality: int = 90


DEFAULT_STYLE = BoardStyle()


def load_style(base: BoardStyle = DEFAULT_STYLE) -> BoardStyle:
	"""Return ``base`` with font paths and JPEG quality taken from the environment."""
	overrides = {}
	font_path = os.environ.get(FONT_ENV)
	if font_path:
		overrides["font_path"] = font_path
	bold_font_path = os.environ.get(BOLD_FONT_ENV)
	if bold_font_path:
		overrides["bold_font_path"] = bold_font_path
	quality = os.environ.get(JPEG_QUALITY_ENV)
	if quality:
		try:
			overrides["jpeg_quality"] = max(1, min(95, int(quality)))
		except ValueError:
			raise ValueError(f"{JPEG_QUALITY_ENV} must be an integer, got {quality!r}") from None
	return replace(base, **overrides) if overrides else base
