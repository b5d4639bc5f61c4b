"""
PDF drawing backend on top of a ReportLab canvas.

Public coordinates are inches from the upper left page corner. Every text
call takes an explicit TextStyle, the canvas font state is set right before
drawing.
"""

# Standard Library
import io
import pathlib

# PIP3 modules
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config
import map_report_pdf.geometry
import map_report_pdf.images


TextStyle = mrp.geometry.TextStyle
DecodedImage = mrp.images.DecodedImage
FontAssets = mrp.config.FontAssets
POINTS_PER_INCH = mrp.config.POINTS_PER_INCH
inches_to_points = mrp.config.inches_to_points
page_size_inches = mrp.config.page_size_inches


#============================================
def read_font_bytes(source: bytes | str | pathlib.Path) -> bytes:
	"""
	Read a font asset into bytes.

	Args:
		source: Raw font bytes or a file path.

	Returns:
		Font bytes.
	"""
	if isinstance(source, bytes):
		return source
	return pathlib.Path(source).read_bytes()


#============================================
def register_fonts(fonts: FontAssets) -> str:
	"""
	Register a regular and a bold TrueType font under one family.

	Args:
		fonts: Font assets.

	Returns:
		The family name to use in text styles.
	"""
	regular_name = mrp.geometry.resolve_font_name(fonts.name, mrp.config.FONT_WEIGHT_REGULAR)
	bold_name = mrp.geometry.resolve_font_name(fonts.name, mrp.config.FONT_WEIGHT_BOLD)
	for font_name, source in ((regular_name, fonts.regular), (bold_name, fonts.bold)):
		data = read_font_bytes(source)
		font = reportlab.pdfbase.ttfonts.TTFont(font_name, io.BytesIO(data))
		reportlab.pdfbase.pdfmetrics.registerFont(font)
	reportlab.pdfbase.pdfmetrics.registerFontFamily(
		fonts.name,
		normal=regular_name,
		bold=bold_name,
		italic=regular_name,
		boldItalic=bold_name,
	)
	return fonts.name


#============================================
def font_ascent(text_style: TextStyle) -> float:
	"""
	Ascent of the style font in inches.

	Args:
		text_style: Text style.

	Returns:
		Ascent in inches.
	"""
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(text_style.font_name) * text_style.font_size / 1000.0
	return ascent / POINTS_PER_INCH


#============================================
def font_descent(text_style: TextStyle) -> float:
	"""
	Descent of the style font in inches, negative below the baseline.

	Args:
		text_style: Text style.

	Returns:
		Descent in inches.
	"""
	descent = reportlab.pdfbase.pdfmetrics.getDescent(text_style.font_name) * text_style.font_size / 1000.0
	return descent / POINTS_PER_INCH


class PdfDocument:
	"""
	A paged PDF document with inch based, top-left origin drawing primitives.
	"""

	def __init__(self, orientation: str, page_format: str):
		self.buffer = io.BytesIO()
		self.page_width, self.page_height = page_size_inches(page_format, orientation)
		self.canvas = reportlab.pdfgen.canvas.Canvas(
			self.buffer,
			pagesize=(inches_to_points(self.page_width), inches_to_points(self.page_height)),
		)
		self.page_count = 1
		self.finalized = False

	def to_x(self, x: float) -> float:
		return inches_to_points(x)

	def to_y(self, y: float) -> float:
		return inches_to_points(self.page_height - y)

	def add_page(self, page_format: str, orientation: str) -> None:
		"""
		End the current page and start a new one.

		Args:
			page_format: Format of the new page.
			orientation: Orientation of the new page.
		"""
		self.canvas.showPage()
		self.page_width, self.page_height = page_size_inches(page_format, orientation)
		self.canvas.setPageSize(
			(inches_to_points(self.page_width), inches_to_points(self.page_height))
		)
		self.page_count += 1

	def measure_text(self, text: str, text_style: TextStyle) -> mrp.geometry.Size:
		"""
		Measure a block of text.

		Args:
			text: Text, may contain line breaks.
			text_style: Text style.

		Returns:
			Size of the block in inches.
		"""
		lines = text.splitlines() or [""]
		width = max(mrp.geometry.text_width(line, text_style) for line in lines)
		height = mrp.geometry.line_height(len(lines), text_style)
		return mrp.geometry.Size(width=width, height=height)

	def wrap_text(self, text: str, max_width: float, text_style: TextStyle) -> list[str]:
		return mrp.geometry.wrap_text(text, max_width, text_style)

	def draw_text(
		self,
		lines: list[str] | str,
		x: float,
		y: float,
		text_style: TextStyle,
		baseline: str = "top",
		color: tuple[float, float, float] = (0.0, 0.0, 0.0),
	) -> None:
		"""
		Draw one or more lines of text.

		Args:
			lines: Text lines or a single string.
			x: Left edge in inches.
			y: Vertical anchor in inches, meaning depends on baseline.
			text_style: Text style.
			baseline: "top", "hanging", "middle" or "alphabetic".
			color: RGB fill color in 0.0-1.0 range.
		"""
		if isinstance(lines, str):
			lines = [lines]
		ascent = font_ascent(text_style)
		descent = font_descent(text_style)
		if baseline in ("top", "hanging"):
			first_baseline = y + ascent
		elif baseline == "middle":
			first_baseline = y + (ascent + descent) / 2.0
		else:
			first_baseline = y
		leading = mrp.geometry.line_height(1, text_style)
		self.canvas.setFont(text_style.font_name, text_style.font_size)
		self.canvas.setFillColorRGB(color[0], color[1], color[2], alpha=1.0)
		for index, line in enumerate(lines):
			self.canvas.drawString(self.to_x(x), self.to_y(first_baseline + index * leading), line)

	def draw_image(self, image: DecodedImage, x: float, y: float, width: float, height: float) -> None:
		"""
		Draw an image into a box.

		Args:
			image: Decoded image.
			x: Left edge in inches.
			y: Top edge in inches.
			width: Width in inches.
			height: Height in inches.
		"""
		self.canvas.drawImage(
			image.reader,
			self.to_x(x),
			self.to_y(y + height),
			width=inches_to_points(width),
			height=inches_to_points(height),
			mask="auto",
			preserveAspectRatio=False,
			anchor="sw",
		)

	def set_fill_color(self, red: float, green: float, blue: float, alpha: float = 1.0) -> None:
		self.canvas.setFillColorRGB(red, green, blue, alpha=alpha)

	def set_stroke_color(self, red: float, green: float, blue: float, alpha: float = 1.0) -> None:
		self.canvas.setStrokeColorRGB(red, green, blue, alpha=alpha)

	def set_line_width(self, width: float) -> None:
		self.canvas.setLineWidth(inches_to_points(width))

	def draw_rect(self, x: float, y: float, width: float, height: float, mode: str = "S") -> None:
		"""
		Draw a rectangle.

		Args:
			x: Left edge in inches.
			y: Top edge in inches.
			width: Width in inches.
			height: Height in inches.
			mode: "S" stroke, "F" fill, "FD" or "DF" both.
		"""
		stroke, fill = paint_flags(mode)
		self.canvas.rect(
			self.to_x(x),
			self.to_y(y + height),
			inches_to_points(width),
			inches_to_points(height),
			stroke=stroke,
			fill=fill,
		)

	def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
		self.canvas.line(self.to_x(x1), self.to_y(y1), self.to_x(x2), self.to_y(y2))

	def draw_circle(self, x: float, y: float, radius: float, mode: str = "FD") -> None:
		stroke, fill = paint_flags(mode)
		self.canvas.circle(
			self.to_x(x),
			self.to_y(y),
			inches_to_points(radius),
			stroke=stroke,
			fill=fill,
		)

	def output(self) -> bytes:
		"""
		Finalize the document and return the PDF bytes.

		Returns:
			PDF bytes.
		"""
		if not self.finalized:
			# save() drops a trailing page without marks
			self.canvas.showPage()
			self.canvas.save()
			self.finalized = True
		return self.buffer.getvalue()


#============================================
def paint_flags(mode: str) -> tuple[int, int]:
	"""
	Translate a paint mode into ReportLab stroke and fill flags.

	Args:
		mode: "S", "F", "FD" or "DF".

	Returns:
		Tuple of (stroke, fill).
	"""
	normalized = mode.strip().upper()
	stroke = 1 if ("S" in normalized or "D" in normalized) else 0
	fill = 1 if "F" in normalized else 0
	return (stroke, fill)
