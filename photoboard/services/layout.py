"""
Construction board layout.

Turns a board (name, date, extra key/value fields) and a canvas size into the
board geometry and an ordered list of drawing primitives. Nothing here touches
pixels; text widths come from a ``measure(text, font_size, bold)`` callable so the
layout stays a pure function of its inputs.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple, Union

from photoboard.config import DEFAULT_STYLE, BoardStyle
from photoboard.models import BoardField, BoardSpec
from photoboard.services.fonts import FontBook
from photoboard.services.formatting import format_date_for_display


TextMeasure = Callable[[str, float, bool], float]


@dataclass(frozen=True)
class FillGradient:
	x: float
	y: float
	width: float
	height: float
	start: str
	end: str


@dataclass(frozen=True)
class StrokeRect:
	x: float
	y: float
	width: float
	height: float
	color: str
	line_width: int


@dataclass(frozen=True)
class Line:
	x1: float
	y1: float
	x2: float
	y2: float
	color: str
	line_width: int


@dataclass(frozen=True)
class Text:
	"""Left-aligned text whose vertical centre sits on ``y``."""

	x: float
	y: float
	text: str
	font_size: float
	bold: bool
	color: str


DrawCommand = Union[FillGradient, StrokeRect, Line, Text]


@dataclass(frozen=True)
class BoardRow:
	label: str
	value: str
	top: float


@dataclass(frozen=True)
class BoardGeometry:
	x: float
	y: float
	width: float
	height: float
	font_size: float
	row_height: float
	label_width: float
	value_width: float
	rows: Tuple[BoardRow, ...]


@dataclass(frozen=True)
class BoardLayout:
	geometry: BoardGeometry
	commands: Tuple[DrawCommand, ...]


def font_size_for(canvas_width: float, canvas_height: float, style: BoardStyle = DEFAULT_STYLE) -> float:
	ratio = style.font_size_ratio
	return max(style.min_font_size, min(canvas_width / ratio, canvas_height / ratio))


def board_rows(
	name: str,
	date: Optional[datetime],
	extra_fields: Sequence[BoardField],
	style: BoardStyle = DEFAULT_STYLE,
) -> List[Tuple[str, str]]:
	"""Return (label, value) pairs in render order: name, renderable extras, date."""
	rows = [(style.name_label, name.strip())]
	for f in extra_fields:
		if f.is_renderable():
			rows.append((f.key.strip(), f.value.strip()))
	rows.append((style.date_label, format_date_for_display(date)))
	return rows


def compute_layout(
	spec: BoardSpec,
	canvas_width: float,
	canvas_height: float,
	measure: Optional[TextMeasure] = None,
	style: BoardStyle = DEFAULT_STYLE,
) -> Optional[BoardLayout]:
	"""Lay out the board in the bottom-left corner of the canvas.

	Returns None when there is nothing to draw (blank name and no date).
	"""
	if not spec.has_content():
		return None
	if measure is None:
		measure = FontBook(style).measure

	rows = board_rows(spec.name, spec.date, spec.fields, style)
	font_size = font_size_for(canvas_width, canvas_height, style)
	row_height = font_size + style.row_extra_height
	padding = style.padding
	cell_padding = style.cell_padding

	label_text_width = max(measure(style.name_label, font_size, True), measure(style.date_label, font_size, True))
	label_width = label_text_width + cell_padding * 2
	value_text_width = max((measure(value, font_size, False) for _, value in rows if value), default=0.0)
	value_width = max(value_text_width, style.min_value_width) + cell_padding * 2

	total_width = label_width + value_width + padding * 2
	total_height = row_height * len(rows) + padding * 2
	board_x = padding
	board_y = canvas_height - total_height - padding

	# rows start at the board's top-left corner; the 2x padding is slack on the right and bottom
	column_x = board_x + label_width

	commands: List[DrawCommand] = [
		FillGradient(board_x, board_y, total_width, total_height, style.gradient_start, style.gradient_end),
		StrokeRect(board_x, board_y, total_width, total_height, style.border_color, style.border_width),
	]
	for index in range(1, len(rows)):
		line_y = board_y + row_height * index
		commands.append(Line(board_x, line_y, board_x + total_width, line_y, style.border_color, style.row_separator_width))
	commands.append(Line(column_x, board_y, column_x, board_y + total_height, style.text_color, style.column_separator_width))

	placed: List[BoardRow] = []
	for index, (label, value) in enumerate(rows):
		top = board_y + row_height * index
		middle = top + row_height / 2
		commands.append(Text(board_x + cell_padding, middle, label, font_size, True, style.text_color))
		if value:
			commands.append(Text(column_x + cell_padding, middle, value, font_size, False, style.text_color))
		placed.append(BoardRow(label, value, top))

	geometry = BoardGeometry(
		x=board_x,
		y=board_y,
		width=total_width,
		height=total_height,
		font_size=font_size,
		row_height=row_height,
		label_width=label_width,
		value_width=value_width,
		rows=tuple(placed),
	)
	return BoardLayout(geometry=geometry, commands=tuple(commands))
