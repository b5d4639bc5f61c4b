"""
Placement of the first page elements.

Each function computes one element placement from the page context and
the placements of elements computed before it. The fixed order is title,
logo, contact, map info, description, image, copyright.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config
import map_report_pdf.errors
import map_report_pdf.geometry
import map_report_pdf.styles


Placement = mrp.geometry.Placement
TextStyle = mrp.geometry.TextStyle
make_placement = mrp.geometry.make_placement
line_height = mrp.geometry.line_height
element_width = mrp.geometry.element_width
orientation_key = mrp.styles.orientation_key

ORIENTATION_PORTRAIT = mrp.config.ORIENTATION_PORTRAIT
ORIENTATION_LANDSCAPE = mrp.config.ORIENTATION_LANDSCAPE
CONTACT_KEYS = mrp.config.CONTACT_KEYS
IMAGE_MIN_HEIGHT_SHARE = mrp.config.IMAGE_MIN_HEIGHT_SHARE


@dataclasses.dataclass
class PageContext:
	page_width: float
	page_height: float
	orientation: str
	style: dict
	font_family: str

	@property
	def margin_top(self) -> float:
		return self.style["pageMargins"][0]

	@property
	def margin_right(self) -> float:
		return self.style["pageMargins"][1]

	@property
	def margin_bottom(self) -> float:
		return self.style["pageMargins"][2]

	@property
	def margin_left(self) -> float:
		return self.style["pageMargins"][3]

	@property
	def element_margin(self) -> float:
		return self.style["elementMargin"]

	@property
	def max_line_width(self) -> float:
		return self.page_width - self.margin_right - self.margin_left

	def text_style(self, element: str) -> TextStyle:
		return mrp.geometry.text_style_for(self.style, element, self.font_family)

	def value(self, key: str) -> float:
		return orientation_key(self.style, key, self.orientation)


#============================================
def calc_title_width(context: PageContext) -> float:
	"""
	Width of the title text element.

	Args:
		context: Page context.

	Returns:
		Width in inches.
	"""
	portion = context.value("title.widthPortion")
	return element_width(context.max_line_width, portion, context.element_margin)


#============================================
def calc_title_placement(context: PageContext, line_count: int, width: float) -> Placement:
	"""
	Placement of the title.

	The lower edge depends on the maximum line count only, so the image
	below does not move with the title length. Shorter titles are centered
	inside that band.

	Args:
		context: Page context.
		line_count: Number of wrapped title lines.
		width: Title width.

	Returns:
		Title placement.
	"""
	text_style = context.text_style("title")
	band_height = line_height(context.value("title.maxLineCount"), text_style)
	text_height = line_height(line_count, text_style)
	y = context.margin_top + band_height / 2.0 - text_height / 2.0
	height = band_height / 2.0 + text_height / 2.0
	return make_placement(context.margin_left, y, width, height)


#============================================
def calc_logo_placement(context: PageContext, aspect_ratio: float) -> Placement:
	"""
	Placement of the logo in the upper right corner.

	Args:
		context: Page context.
		aspect_ratio: Logo width divided by height.

	Returns:
		Logo placement.
	"""
	text_style = context.text_style("title")
	height = line_height(context.style["logo.scale"], text_style)
	width = height * aspect_ratio
	band_height = line_height(context.value("title.maxLineCount"), text_style)
	x = context.page_width - context.margin_right - width
	y = context.margin_top + band_height / 2.0 - height / 2.0
	return make_placement(x, y, width, height)


#============================================
def calc_info_height(context: PageContext) -> float:
	"""
	Height of the contact and map info blocks.

	Every possible contact key gets a line, plus one header line.

	Args:
		context: Page context.

	Returns:
		Height in inches.
	"""
	return line_height(len(CONTACT_KEYS) + 1, context.text_style("info"))


#============================================
def calc_contact_placement(context: PageContext) -> Placement:
	"""
	Placement of the contact block in the lower left corner.

	Args:
		context: Page context.

	Returns:
		Contact placement.
	"""
	height = calc_info_height(context)
	width = element_width(
		context.max_line_width,
		context.value("info.widthPortion"),
		context.element_margin,
	)
	y = context.page_height - context.margin_bottom - height
	return make_placement(context.margin_left, y, width, height)


#============================================
def calc_map_info_placement(context: PageContext, contact: Placement | None) -> Placement:
	"""
	Placement of the map info block, right of the contact block if present.

	Args:
		context: Page context.
		contact: Contact placement or None.

	Returns:
		Map info placement.
	"""
	if context.orientation == ORIENTATION_PORTRAIT:
		gap = context.element_margin
	else:
		gap = context.element_margin / 2.0
	height = calc_info_height(context)
	width = element_width(
		context.max_line_width,
		context.value("info.widthPortion"),
		context.element_margin,
	)
	if contact is not None:
		x = contact.right + gap
	else:
		x = context.margin_left
	y = context.page_height - context.margin_bottom - height
	return make_placement(x, y, width, height)


#============================================
def calc_description_width(context: PageContext, has_contact: bool, has_map_info: bool) -> float:
	"""
	Width of the description text element.

	In landscape the description shares the footer row with the info blocks.

	Args:
		context: Page context.
		has_contact: Whether a contact block is present.
		has_map_info: Whether a map info block is present.

	Returns:
		Width in inches.
	"""
	width = context.max_line_width
	if context.orientation != ORIENTATION_LANDSCAPE:
		return width
	portion = context.style["info.widthPortion.landscape"]
	if has_contact and has_map_info:
		width *= 1.0 - 2.0 * portion
	elif has_contact != has_map_info:
		width *= 1.0 - portion
	return width


#============================================
def calc_description_placement(
	context: PageContext,
	line_count: int,
	width: float,
	contact: Placement | None,
	map_info: Placement | None,
) -> Placement:
	"""
	Placement of the description.

	Portrait: above the info blocks, text height plus element margin.
	Landscape: right aligned in the footer row with the info block height.

	Args:
		context: Page context.
		line_count: Number of wrapped description lines.
		width: Description width.
		contact: Contact placement or None.
		map_info: Map info placement or None.

	Returns:
		Description placement.
	"""
	text_style = context.text_style("description")
	if context.orientation == ORIENTATION_PORTRAIT:
		if contact is not None:
			lower_border = contact.top
		elif map_info is not None:
			lower_border = map_info.top
		else:
			lower_border = context.page_height - context.margin_bottom
		height = line_height(line_count, text_style) + context.element_margin
		x = context.margin_left
	else:
		lower_border = context.page_height - context.margin_bottom
		if contact is not None:
			height = contact.size.height
		elif map_info is not None:
			height = map_info.size.height
		else:
			height = line_height(line_count, text_style)
		x = context.page_width - context.margin_right - width
	return make_placement(x, lower_border - height, width, height)


#============================================
def fit_aspect_ratio(
	aspect_ratio: float,
	x: float,
	y: float,
	max_width: float,
	max_height: float,
	center_x: float,
) -> Placement:
	"""
	Fit a rectangle with a fixed aspect ratio into a band.

	Exactly one axis is binding. When the height binds, the rectangle is
	centered horizontally on center_x.

	Args:
		aspect_ratio: Width divided by height.
		x: Left edge of the band.
		y: Top edge of the band.
		max_width: Band width.
		max_height: Band height.
		center_x: Horizontal center used when the width shrinks.

	Returns:
		Fitted placement.
	"""
	width = max_width
	height = max_height
	band_ratio = max_width / max_height
	if aspect_ratio < band_ratio:
		width = height * aspect_ratio
		x = center_x - width / 2.0
	else:
		height = width / aspect_ratio
	return make_placement(x, y, width, height)


#============================================
def calc_image_upper_border(context: PageContext, title: Placement | None, logo: Placement | None) -> float:
	"""
	Upper edge of the image band, below the lower of title and logo.

	Args:
		context: Page context.
		title: Title placement or None.
		logo: Logo placement or None.

	Returns:
		Y coordinate in inches.
	"""
	header_bottoms = [placement.bottom for placement in (title, logo) if placement is not None]
	if header_bottoms:
		return max(header_bottoms) + context.element_margin
	return context.margin_top


#============================================
def calc_description_line_limit(
	context: PageContext,
	title: Placement | None,
	logo: Placement | None,
	contact: Placement | None,
	map_info: Placement | None,
) -> int:
	"""
	Maximum description line count that still leaves room for the image.

	The image keeps at least IMAGE_MIN_HEIGHT_SHARE of the printable height.
	Landscape descriptions next to info blocks are limited to the block height.

	Args:
		context: Page context.
		title: Title placement or None.
		logo: Logo placement or None.
		contact: Contact placement or None.
		map_info: Map info placement or None.

	Returns:
		Line count, 0 when no line fits.
	"""
	text_style = context.text_style("description")
	single_line = line_height(1, text_style)
	upper_border = calc_image_upper_border(context, title, logo)
	printable_height = context.page_height - context.margin_top - context.margin_bottom
	min_image_height = printable_height * IMAGE_MIN_HEIGHT_SHARE
	info = contact if contact is not None else map_info
	if context.orientation == ORIENTATION_PORTRAIT:
		lower_border = context.page_height - context.margin_bottom
		if info is not None:
			lower_border = info.top
		# description height carries one margin, the gap to the image another
		available = lower_border - upper_border - min_image_height - 2.0 * context.element_margin
	elif info is not None:
		available = info.size.height
	else:
		lower_border = context.page_height - context.margin_bottom
		available = lower_border - upper_border - min_image_height - context.element_margin
	limit = max(0, math.floor(available / single_line + 1e-9))
	return min(limit, int(context.value("description.maxLineCount")))


#============================================
def calc_image_placement(
	context: PageContext,
	aspect_ratio: float,
	title: Placement | None,
	logo: Placement | None,
	description: Placement | None,
	contact: Placement | None,
	map_info: Placement | None,
) -> Placement:
	"""
	Placement of the main image between header and footer elements.

	Args:
		context: Page context.
		aspect_ratio: Image width divided by height.
		title: Title placement or None.
		logo: Logo placement or None.
		description: Description placement or None.
		contact: Contact placement or None.
		map_info: Map info placement or None.

	Returns:
		Image placement.
	"""
	upper_border = calc_image_upper_border(context, title, logo)

	if description is not None:
		lower_border = description.top - context.element_margin
	elif contact is not None:
		lower_border = contact.top - context.element_margin
	elif map_info is not None:
		lower_border = map_info.top - context.element_margin
	else:
		lower_border = context.page_height - context.margin_bottom

	if lower_border <= upper_border:
		raise mrp.errors.LayoutConfigError(
			f"No space left for the image between {upper_border:.2f} and {lower_border:.2f} in"
		)
	return fit_aspect_ratio(
		aspect_ratio,
		context.margin_left,
		upper_border,
		context.max_line_width,
		lower_border - upper_border,
		context.page_width / 2.0,
	)


#============================================
def copyright_text_style(context: PageContext) -> TextStyle:
	"""
	Text style of the copyright strip: info style at a small fixed size.

	Args:
		context: Page context.

	Returns:
		TextStyle.
	"""
	return dataclasses.replace(
		context.text_style("info"),
		font_size=mrp.config.COPYRIGHT_FONT_SIZE,
	)


#============================================
def calc_copyright_placement(
	context: PageContext,
	lines: list[str],
	image: Placement,
) -> Placement:
	"""
	Placement of the copyright strip over the lower right image corner.

	Args:
		context: Page context.
		lines: Copyright lines wrapped to the image width.
		image: Image placement.

	Returns:
		Copyright placement.
	"""
	text_style = copyright_text_style(context)
	height = line_height(len(lines), text_style)
	width = 0.0
	for line in lines:
		width = max(width, mrp.geometry.text_width(line, text_style))
	x = image.right - width
	y = image.bottom - height
	return make_placement(x, y, width, height)


#============================================
def description_draw_y(context: PageContext, image: Placement, description: Placement) -> float:
	"""
	Top of the drawn description text.

	Portrait descriptions follow the image directly; landscape ones use their
	footer placement.

	Args:
		context: Page context.
		image: Image placement.
		description: Description placement.

	Returns:
		Y coordinate in inches.
	"""
	if context.orientation == ORIENTATION_PORTRAIT:
		return image.bottom + context.element_margin
	return description.top
