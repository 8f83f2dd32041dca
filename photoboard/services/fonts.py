from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

from PIL import ImageFont

from photoboard.config import DEFAULT_STYLE, BoardStyle


logger = logging.getLogger(__name__)

# Stroke used to fake a bold weight when no bold font file is configured.
FAKE_BOLD_STROKE = 1

# Looked up by file name in the platform font directories when no font is configured.
REGULAR_FONT_CANDIDATES: Tuple[str, ...] = (
	"NotoSansCJK-Regular.ttc",
	"NotoSansCJKjp-Regular.otf",
	"NotoSansJP-Regular.otf",
	"ipaexg.ttf",
	"ipag.ttf",
	"msgothic.ttc",
	"YuGothM.ttc",
	"ヒラギノ角ゴシック W3.ttc",
)
BOLD_FONT_CANDIDATES: Tuple[str, ...] = (
	"NotoSansCJK-Bold.ttc",
	"NotoSansCJKjp-Bold.otf",
	"NotoSansJP-Bold.otf",
	"YuGothB.ttc",
	"ヒラギノ角ゴシック W6.ttc",
)


@lru_cache(maxsize=None)
def find_font(candidates: Tuple[str, ...]) -> Optional[str]:
	"""Return the first candidate Pillow can open, or None."""
	for name in candidates:
		try:
			ImageFont.truetype(name, 12)
		except OSError:
			continue
		logger.debug("Using font %s", name)
		return name
	return None


@lru_cache(maxsize=None)
def _warn_no_cjk_font() -> None:
	logger.warning("No CJK font found, Japanese board text will not render; set PHOTOBOARD_FONT")


@lru_cache(maxsize=64)
def _load(path: Optional[str], size: float) -> ImageFont.FreeTypeFont:
	if path:
		try:
			return ImageFont.truetype(path, size)
		except OSError:
			logger.warning("Could not open font %s, falling back to the default font", path)
	return ImageFont.load_default(size)


class FontBook:
	"""Regular and bold fonts for a style, cached per size.

	Without configured paths a CJK-capable system font is searched for, since the
	board labels and date are Japanese.
	"""

	def __init__(self, style: BoardStyle = DEFAULT_STYLE) -> None:
		self.style = style
		if style.font_path:
			self.regular_path = style.font_path
			self.bold_path = style.bold_font_path
		else:
			self.regular_path = find_font(REGULAR_FONT_CANDIDATES)
			self.bold_path = style.bold_font_path or find_font(BOLD_FONT_CANDIDATES)
			if self.regular_path is None:
				_warn_no_cjk_font()

	def font(self, size: float, bold: bool = False) -> ImageFont.FreeTypeFont:
		if bold and self.bold_path:
			return _load(self.bold_path, size)
		return _load(self.regular_path, size)

	def bold_stroke(self) -> int:
		return 0 if self.bold_path else FAKE_BOLD_STROKE

	def text_options(self, size: float, bold: bool) -> Tuple[ImageFont.FreeTypeFont, int]:
		return self.font(size, bold), self.bold_stroke() if bold else 0

	def measure(self, text: str, size: float, bold: bool = False) -> float:
		if not text:
			return 0.0
		font, stroke = self.text_options(size, bold)
		return float(font.getlength(text)) + 2 * stroke
