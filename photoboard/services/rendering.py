from __future__ import annotations

from typing import Iterable

from PIL import Image, ImageDraw

from photoboard.services.fonts import FontBook
from photoboard.services.image_utils import hex_to_rgb, vertical_gradient
from photoboard.services.layout import DrawCommand, FillGradient, Line, StrokeRect, Text


def _box(x: float, y: float, width: float, height: float):
	return (round(x), round(y), round(x + width), round(y + height))


def execute(surface: Image.Image, commands: Iterable[DrawCommand], fonts: FontBook) -> None:
	"""Draw ``commands`` onto ``surface`` in order."""
	draw = ImageDraw.Draw(surface)
	for cmd in commands:
		if isinstance(cmd, FillGradient):
			left, top, right, bottom = _box(cmd.x, cmd.y, cmd.width, cmd.height)
			fill = vertical_gradient(right - left, bottom - top, cmd.start, cmd.end)
			# paste clips to the surface; negative offsets are fine
			surface.paste(fill, (left, top))
		elif isinstance(cmd, StrokeRect):
			draw.rectangle(_box(cmd.x, cmd.y, cmd.width, cmd.height), outline=hex_to_rgb(cmd.color), width=cmd.line_width)
		elif isinstance(cmd, Line):
			draw.line(
				[(round(cmd.x1), round(cmd.y1)), (round(cmd.x2), round(cmd.y2))],
				fill=hex_to_rgb(cmd.color),
				width=cmd.line_width,
			)
		elif isinstance(cmd, Text):
			font, stroke = fonts.text_options(cmd.font_size, cmd.bold)
			color = hex_to_rgb(cmd.color)
			draw.text(
				(round(cmd.x), round(cmd.y)),
				cmd.text,
				fill=color,
				font=font,
				anchor="lm",
				stroke_width=stroke,
				stroke_fill=color,
			)
		else:
			raise TypeError(f"Unknown draw command: {cmd!r}")
