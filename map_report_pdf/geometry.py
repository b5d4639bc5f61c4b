"""
Geometry value types and text measuring helpers.

All lengths are inches, origin at the upper left page corner.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config
import map_report_pdf.errors


POINTS_PER_INCH = mrp.config.POINTS_PER_INCH
BUILTIN_FONT_FAMILIES = mrp.config.BUILTIN_FONT_FAMILIES
FONT_WEIGHT_BOLD = mrp.config.FONT_WEIGHT_BOLD
DEFAULT_FONT_WEIGHT = mrp.config.DEFAULT_FONT_WEIGHT
DEFAULT_FONT_SIZE = mrp.config.DEFAULT_FONT_SIZE
DEFAULT_LINE_HEIGHT = mrp.config.DEFAULT_LINE_HEIGHT


@dataclasses.dataclass(frozen=True)
class Coords:
	x: float
	y: float


@dataclasses.dataclass(frozen=True)
class Size:
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class Placement:
	coords: Coords
	size: Size

	@property
	def left(self) -> float:
		return self.coords.x

	@property
	def top(self) -> float:
		return self.coords.y

	@property
	def right(self) -> float:
		return self.coords.x + self.size.width

	@property
	def bottom(self) -> float:
		return self.coords.y + self.size.height

	def as_box(self) -> tuple[float, float, float, float]:
		return (self.left, self.top, self.right, self.bottom)


@dataclasses.dataclass(frozen=True)
class TextStyle:
	font_family: str
	font_weight: int
	font_size: float
	line_height: float

	@property
	def font_name(self) -> str:
		return resolve_font_name(self.font_family, self.font_weight)


#============================================
def make_placement(x: float, y: float, width: float, height: float) -> Placement:
	"""
	Build a placement from plain numbers.

	Args:
		x: Left edge.
		y: Top edge.
		width: Width.
		height: Height.

	Returns:
		Placement.
	"""
	return Placement(coords=Coords(x=x, y=y), size=Size(width=width, height=height))


#============================================
def resolve_font_name(font_family: str, font_weight: int) -> str:
	"""
	Map a font family and weight to a registered PDF font name.

	Custom families are registered as "<family>-Regular" and "<family>-Bold".

	Args:
		font_family: Logical family name.
		font_weight: Font weight.

	Returns:
		ReportLab font name.
	"""
	is_bold = font_weight >= FONT_WEIGHT_BOLD
	if font_family in BUILTIN_FONT_FAMILIES:
		regular, bold = BUILTIN_FONT_FAMILIES[font_family]
		return bold if is_bold else regular
	if is_bold:
		return f"{font_family}-Bold"
	return f"{font_family}-Regular"


#============================================
def text_style_for(style: dict, element: str, font_family: str) -> TextStyle:
	"""
	Build the text style of a named element from a style sheet.

	Args:
		style: Style sheet.
		element: Element name such as "title" or "info".
		font_family: Active font family.

	Returns:
		TextStyle.
	"""
	return TextStyle(
		font_family=font_family,
		font_weight=style.get(f"{element}.fontWeight") or DEFAULT_FONT_WEIGHT,
		font_size=style.get(f"{element}.fontSize") or DEFAULT_FONT_SIZE,
		line_height=style.get(f"{element}.lineHeight") or DEFAULT_LINE_HEIGHT,
	)


#============================================
def line_height(line_count: float, text_style: TextStyle) -> float:
	"""
	Height of a number of text lines.

	Args:
		line_count: Number of lines, fractions allowed.
		text_style: Active text style.

	Returns:
		Height in inches.
	"""
	return text_style.font_size * text_style.line_height / POINTS_PER_INCH * line_count


#============================================
def element_width(max_line_width: float, portion: float, element_margin: float) -> float:
	"""
	Width of one of two elements sharing a row.

	Only valid when exactly two elements share the row; half the element
	margin is taken from each side. The contact and map info blocks are the
	only callers, so a row never holds more than two of them.

	Args:
		max_line_width: Printable width of the page.
		portion: Portion of the printable width.
		element_margin: Margin between elements.

	Returns:
		Width in inches.
	"""
	if not 0.0 < portion <= 1.0:
		raise mrp.errors.LayoutConfigError(f"Width portion out of range: {portion}")
	return max_line_width * portion - element_margin / 2.0


#============================================
def text_width(text: str, text_style: TextStyle) -> float:
	"""
	Width of a single line of text.

	Args:
		text: Text line.
		text_style: Active text style.

	Returns:
		Width in inches.
	"""
	width = reportlab.pdfbase.pdfmetrics.stringWidth(
		text,
		text_style.font_name,
		text_style.font_size,
	)
	return width / POINTS_PER_INCH


#============================================
def wrap_text(text: str, width: float, text_style: TextStyle) -> list[str]:
	"""
	Greedy word wrap of text to a width.

	Explicit line breaks are kept. Capping the line count is left to the caller.

	Args:
		text: Text to wrap.
		width: Available width in inches.
		text_style: Active text style.

	Returns:
		Wrapped lines.
	"""
	return reportlab.lib.utils.simpleSplit(
		text,
		text_style.font_name,
		text_style.font_size,
		width * POINTS_PER_INCH,
	)


#============================================
def wrap_and_cap(text: str, width: float, text_style: TextStyle, max_line_count: int) -> list[str]:
	"""
	Wrap text and drop lines beyond the maximum line count.

	Args:
		text: Text to wrap.
		width: Available width in inches.
		text_style: Active text style.
		max_line_count: Maximum number of lines kept.

	Returns:
		Wrapped lines, at most max_line_count.
	"""
	lines = wrap_text(text, width, text_style)
	return lines[:max_line_count]


#============================================
def boxes_intersect(
	box_a: tuple[float, float, float, float],
	box_b: tuple[float, float, float, float],
) -> bool:
	"""
	Check whether two boxes overlap.

	Touching edges do not count as overlap.

	Args:
		box_a: First box (x0, y0, x1, y1).
		box_b: Second box (x0, y0, x1, y1).

	Returns:
		True if boxes overlap.
	"""
	left = max(box_a[0], box_b[0])
	right = min(box_a[2], box_b[2])
	top = max(box_a[1], box_b[1])
	bottom = min(box_a[3], box_b[3])
	return right > left and bottom > top
