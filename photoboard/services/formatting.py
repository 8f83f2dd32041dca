from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional


logger = logging.getLogger(__name__)


def format_date_for_display(date: Optional[datetime]) -> str:
	"""Return ``2023年5月15日 14:30`` style text; empty string when unavailable."""
	if date is None:
		return ""
	try:
		return f"{date.year}年{date.month}月{date.day}日 {date.hour:02d}:{date.minute:02d}"
	except (AttributeError, TypeError, ValueError):
		logger.warning("Failed to format date for display: %r", date, exc_info=True)
		return ""


def format_date_for_input(date: Optional[datetime]) -> str:
	"""Return the ``YYYY-MM-DDTHH:MM`` form used by datetime-local inputs."""
	if date is None:
		return ""
	try:
		return f"{date.year:04d}-{date.month:02d}-{date.day:02d}T{date.hour:02d}:{date.minute:02d}"
	except (AttributeError, TypeError, ValueError):
		logger.warning("Failed to format date for input: %r", date, exc_info=True)
		return ""
