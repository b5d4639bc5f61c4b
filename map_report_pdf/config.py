"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import pathlib
import typing

# PIP3 modules
import reportlab.lib.pagesizes

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.errors


POINTS_PER_INCH = 72.0

ORIENTATION_PORTRAIT = "portrait"
ORIENTATION_LANDSCAPE = "landscape"
ORIENTATION_BOTH = "both"
ORIENTATIONS = (ORIENTATION_PORTRAIT, ORIENTATION_LANDSCAPE)
SAME_AS_MAP = "sameAsMap"

# (short edge, long edge) in points
PAGE_FORMATS = {
	"A2": reportlab.lib.pagesizes.A2,
	"A3": reportlab.lib.pagesizes.A3,
	"A4": reportlab.lib.pagesizes.A4,
	"A5": reportlab.lib.pagesizes.A5,
	"A6": reportlab.lib.pagesizes.A6,
}
DEFAULT_FORMAT = "A4"
DEFAULT_ORIENTATION = ORIENTATION_PORTRAIT

FONT_WEIGHT_REGULAR = 400
FONT_WEIGHT_BOLD = 700
DEFAULT_FONT_FAMILY = "Helvetica"
DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
BUILTIN_FONT_FAMILIES = {
	"Helvetica": ("Helvetica", "Helvetica-Bold"),
	"Times-Roman": ("Times-Roman", "Times-Bold"),
	"Courier": ("Courier", "Courier-Bold"),
}
DEFAULT_FONT_WEIGHT = FONT_WEIGHT_REGULAR
DEFAULT_FONT_SIZE = 11.0
DEFAULT_LINE_HEIGHT = 1.15

COPYRIGHT_FONT_SIZE = 6.0
COPYRIGHT_FILL_ALPHA = 0.1
COPYRIGHT_SEPARATOR = " | "

# share of the printable height kept for the map when the description is capped
IMAGE_MIN_HEIGHT_SHARE = 0.25

LEGEND_TITLE_FONT_SIZE = 12.0
LEGEND_ROW_ITEM_WIDTH = 0.4
LEGEND_ROW_ITEM_HEIGHT = 0.2
LEGEND_ROW_MARGIN = 0.1
LEGEND_DEFAULT_COLUMNS = 2
LEGEND_ROW_LINE_WIDTH = 0.005
LEGEND_SEPARATOR_LINE_WIDTH = 0.01
LEGEND_IMAGE_MIN_SCALE = 0.8
LEGEND_IMAGE_FILLED_RATIO = 1.0 / 3.0
LEGEND_LABEL_ELLIPSIS = " ..."

# keys of a contact block, header line is added on top
CONTACT_KEYS = (
	"department",
	"name",
	"street_address",
	"zip_and_city",
	"country",
	"mail",
	"phone",
	"fax",
)


@dataclasses.dataclass
class TextWithHeader:
	header: str
	text: list[str]


@dataclasses.dataclass
class FontAssets:
	name: str
	regular: bytes | str | pathlib.Path
	bold: bytes | str | pathlib.Path


@dataclasses.dataclass
class LegendConfig:
	format: str
	orientation: str


@dataclasses.dataclass
class DocumentOptions:
	orientation: str
	format: str
	img_ratio: float
	title: str | None = None
	logo: typing.Any = None
	description: str | None = None
	contact: TextWithHeader | None = None
	map_info: TextWithHeader | None = None
	copyright: str | None = None
	legend_config: LegendConfig | None = None
	legend_groups: list = dataclasses.field(default_factory=list)
	fonts: FontAssets | None = None
	style_overrides: dict | None = None


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def points_to_inches(value: float) -> float:
	"""
	Convert points to inches.

	Args:
		value: Points value.

	Returns:
		Inches value.
	"""
	return value / POINTS_PER_INCH


#============================================
def page_size_inches(page_format: str, orientation: str) -> tuple[float, float]:
	"""
	Compute the page size for a format and orientation.

	Args:
		page_format: Format key such as "A4".
		orientation: "portrait" or "landscape".

	Returns:
		Tuple of (width, height) in inches.
	"""
	if page_format not in PAGE_FORMATS:
		raise mrp.errors.LayoutConfigError(f"Unsupported page format: {page_format}")
	short_edge, long_edge = PAGE_FORMATS[page_format]
	if orientation == ORIENTATION_PORTRAIT:
		return (points_to_inches(short_edge), points_to_inches(long_edge))
	if orientation == ORIENTATION_LANDSCAPE:
		return (points_to_inches(long_edge), points_to_inches(short_edge))
	raise mrp.errors.LayoutConfigError(f"Unsupported orientation: {orientation}")


#============================================
def resolve_legend_config(
	legend_format: str,
	legend_orientation: str,
	page_format: str,
	orientation: str,
) -> LegendConfig:
	"""
	Resolve "sameAsMap" legend settings against the main document.

	Args:
		legend_format: Legend format or "sameAsMap".
		legend_orientation: Legend orientation or "sameAsMap".
		page_format: Main document format.
		orientation: Main document orientation.

	Returns:
		LegendConfig with concrete values.
	"""
	resolved_format = page_format if legend_format == SAME_AS_MAP else legend_format
	resolved_orientation = orientation
	if legend_orientation != SAME_AS_MAP:
		resolved_orientation = legend_orientation
	return LegendConfig(format=resolved_format, orientation=resolved_orientation)
