"""
Page style sheets and per-format overrides.

A style sheet is a flat dict keyed by dotted names such as
"title.fontSize" or "description.maxLineCount.portrait". Lengths are in
inches, font sizes in points.
"""

# Standard Library
import copy

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config


FONT_WEIGHT_REGULAR = mrp.config.FONT_WEIGHT_REGULAR
FONT_WEIGHT_BOLD = mrp.config.FONT_WEIGHT_BOLD


DEFAULT_STYLE = {
	# top, right, bottom, left
	"pageMargins": [0.4, 0.4, 0.4, 0.4],
	"elementMargin": 0.4,
	# logo height in title line heights
	"logo.scale": 1.2,
	"title.fontWeight": FONT_WEIGHT_BOLD,
	"title.fontSize": 20,
	# portion of the printable width
	"title.widthPortion.portrait": 0.5,
	"title.widthPortion.landscape": 0.75,
	# further lines are dropped
	"title.maxLineCount.portrait": 2,
	"title.maxLineCount.landscape": 1,
	"description.fontWeight": FONT_WEIGHT_REGULAR,
	"description.fontSize": 11,
	"description.lineHeight": 1.25,
	"description.maxLineCount.portrait": 15,
	"description.maxLineCount.landscape": 8,
	# contact and map information
	"info.fontWeight": FONT_WEIGHT_REGULAR,
	"info.fontSize": 10,
	"info.widthPortion.portrait": 0.5,
	"info.widthPortion.landscape": 0.25,
}

FORMAT_STYLES = {
	"A5": {
		"elementMargin": 0.3,
		"description.fontSize": 8,
		"description.lineHeight": 1.15,
		"info.fontSize": 8,
		"info.widthPortion.landscape": 0.3,
		"title.fontSize": 14,
	},
}


#============================================
def resolve_style(page_format: str, overrides: dict | None = None) -> dict:
	"""
	Resolve the style sheet for a page format.

	Unknown formats get the default sheet unchanged.

	Args:
		page_format: Format key such as "A4".
		overrides: Optional caller overrides, merged last.

	Returns:
		New style sheet dict.
	"""
	style = copy.deepcopy(DEFAULT_STYLE)
	style.update(copy.deepcopy(FORMAT_STYLES.get(page_format, {})))
	if overrides:
		style.update(overrides)
	return style


#============================================
def orientation_key(style: dict, key: str, orientation: str) -> float:
	"""
	Look up an orientation dependent style value.

	Args:
		style: Style sheet.
		key: Dotted key without the orientation suffix.
		orientation: "portrait" or "landscape".

	Returns:
		Style value.
	"""
	return style[f"{key}.{orientation}"]
