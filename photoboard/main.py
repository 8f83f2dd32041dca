from __future__ import annotations

import logging
from typing import Optional

from photoboard.config import BoardStyle, load_style
from photoboard.session import BoardSession


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
	"""Basic stream logging for hosts that do not configure logging themselves."""
	logging.basicConfig(level=level, format=LOG_FORMAT)


def create_session(style: Optional[BoardStyle] = None) -> BoardSession:
	# Style (fonts, JPEG quality) can be adjusted through PHOTOBOARD_* env vars
	return BoardSession(style or load_style())
