"""
Legend appendix pages.

Each legend group gets its own page(s): a heading, then its items laid out
top to bottom in one column, or in two columns on landscape pages. A
cursor tracks the current column and the remaining height.
"""

# Standard Library
import dataclasses
import logging
import math

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config
import map_report_pdf.content
import map_report_pdf.document
import map_report_pdf.errors
import map_report_pdf.geometry
import map_report_pdf.images


Placement = mrp.geometry.Placement
TextStyle = mrp.geometry.TextStyle
LegendConfig = mrp.config.LegendConfig
PdfDocument = mrp.document.PdfDocument
DecodedImage = mrp.images.DecodedImage
make_placement = mrp.geometry.make_placement

POINTS_PER_INCH = mrp.config.POINTS_PER_INCH
ORIENTATION_LANDSCAPE = mrp.config.ORIENTATION_LANDSCAPE
LEGEND_TITLE_FONT_SIZE = mrp.config.LEGEND_TITLE_FONT_SIZE
ROW_ITEM_WIDTH = mrp.config.LEGEND_ROW_ITEM_WIDTH
ROW_ITEM_HEIGHT = mrp.config.LEGEND_ROW_ITEM_HEIGHT
ROW_MARGIN = mrp.config.LEGEND_ROW_MARGIN
DEFAULT_COLUMNS = mrp.config.LEGEND_DEFAULT_COLUMNS
ROW_LINE_WIDTH = mrp.config.LEGEND_ROW_LINE_WIDTH
SEPARATOR_LINE_WIDTH = mrp.config.LEGEND_SEPARATOR_LINE_WIDTH
IMAGE_MIN_SCALE = mrp.config.LEGEND_IMAGE_MIN_SCALE
IMAGE_FILLED_RATIO = mrp.config.LEGEND_IMAGE_FILLED_RATIO
LABEL_ELLIPSIS = mrp.config.LEGEND_LABEL_ELLIPSIS

ITEM_KIND_IMAGE = "image"
ITEM_KIND_STYLE = "style"
ITEM_KIND_IFRAME = "iframe"

ROW_KIND_STROKE = "stroke"
ROW_KIND_FILL = "fill"
ROW_KIND_CIRCLE = "circle"
ROW_KIND_ICON = "icon"
ROW_KIND_SHAPE = "shape"
ROW_KIND_TEXT = "text"
ROW_KINDS = (
	ROW_KIND_STROKE,
	ROW_KIND_FILL,
	ROW_KIND_CIRCLE,
	ROW_KIND_ICON,
	ROW_KIND_SHAPE,
	ROW_KIND_TEXT,
)

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class LegendRow:
	kind: str
	title: str = ""
	# {"color": ..., "width": px}
	stroke: dict | None = None
	# {"color": ...}
	fill: dict | None = None
	# circle: radius/fill/stroke, icon: src, shape: regular shape options
	image: dict | None = None


@dataclasses.dataclass
class LegendItem:
	kind: str
	src: object = None
	rows: list[LegendRow] = dataclasses.field(default_factory=list)
	col_nr: int | None = None


@dataclasses.dataclass
class LegendGroup:
	title: str
	items: list[LegendItem]


@dataclasses.dataclass
class LegendRecord:
	"""One placed legend element, kept for inspection after rendering."""
	group: str
	item_index: int
	row_index: int | None
	page: int
	column: int
	placement: Placement


@dataclasses.dataclass
class LegendCursor:
	"""Running position of one legend group, discarded after the group."""
	origin_x: float
	origin_y: float
	column_width: float
	column_height: float
	page_width: float
	use_columns: bool
	x: float = 0.0
	y: float = 0.0
	remaining_height: float = 0.0
	column: int = 0

	@property
	def used_height(self) -> float:
		return self.y - self.origin_y

	@property
	def column_bottom(self) -> float:
		return self.origin_y + self.column_height

	def reset_column(self) -> None:
		if self.column == 0:
			self.x = self.origin_x
		else:
			self.x = self.origin_x + self.page_width / 2.0
		self.y = self.origin_y
		self.remaining_height = self.column_height

	def advance(self, element_height: float, element_margin: float) -> None:
		self.remaining_height -= element_height + element_margin
		self.y += element_height + element_margin


#============================================
def has_drawable_rows(item: LegendItem) -> bool:
	"""
	Check whether a style item has a row other than text rows.

	Args:
		item: Style legend item.

	Returns:
		True if at least one row can be drawn.
	"""
	return any(row.kind != ROW_KIND_TEXT for row in item.rows)


#============================================
def filter_printable_legend(
	groups: list[LegendGroup],
	notify=None,
	translate=mrp.content.default_translate,
) -> list[LegendGroup]:
	"""
	Drop iframe items, style items without drawable rows and groups left
	without items.

	Args:
		groups: Legend groups in caller order.
		notify: Optional callable receiving a message once iframes were dropped.
		translate: Translation callable for the message.

	Returns:
		Printable legend groups.
	"""
	printable: list[LegendGroup] = []
	dropped = 0
	for group in groups:
		items = [item for item in group.items if item.kind != ITEM_KIND_IFRAME]
		dropped += len(group.items) - len(items)
		items = [item for item in items if item.kind != ITEM_KIND_STYLE or has_drawable_rows(item)]
		if items:
			printable.append(LegendGroup(title=group.title, items=items))
	if dropped > 0:
		message = translate("print.pdf.iframeNotSupported")
		logger.warning("Dropped %d iframe legend items", dropped)
		if notify is not None:
			notify(message)
	return printable


#============================================
def legend_page_size(legend_config: LegendConfig) -> tuple[float, float]:
	"""
	Page size of the legend pages.

	Args:
		legend_config: Legend format and orientation.

	Returns:
		Tuple of (width, height) in inches.
	"""
	return mrp.config.page_size_inches(legend_config.format, legend_config.orientation)


#============================================
def size_image(
	image: DecodedImage,
	placement: Placement,
	center_y: bool = False,
) -> Placement:
	"""
	Fit an image into a box without upscaling it.

	Args:
		image: Decoded image.
		placement: Available box.
		center_y: Whether to center vertically as well.

	Returns:
		Placement of the image, horizontally centered in the box.
	"""
	natural_width = image.natural_width
	natural_height = image.natural_height
	max_width = placement.size.width
	max_height = placement.size.height
	image_ratio = image.pixel_height / image.pixel_width
	box_ratio = max_height / max_width

	width = natural_width
	height = natural_height
	if image_ratio <= box_ratio and natural_width >= max_width:
		height *= max_width / width
		width = max_width
	elif natural_height >= max_height:
		width *= max_height / height
		height = max_height
	x = placement.left + (max_width - width) / 2.0
	y = placement.top
	if center_y:
		y = placement.top + (max_height - height) / 2.0
	return make_placement(x, y, width, height)


#============================================
def decode_legend_image(source, max_height: float | None = None) -> DecodedImage | None:
	"""
	Decode a legend image, logging and returning None on failure.

	Args:
		source: Image source.
		max_height: Optional target height in inches for vector images.

	Returns:
		DecodedImage or None.
	"""
	max_height_px = None
	if max_height is not None:
		max_height_px = max_height * POINTS_PER_INCH
	try:
		return mrp.images.decode_image(source, max_height_px)
	except mrp.errors.ImageDecodeError as error:
		logger.warning("Legend image skipped: %s", error)
		return None


class LegendRenderer:
	"""
	Renders legend groups onto appendix pages of a document.
	"""

	def __init__(
		self,
		document: PdfDocument,
		style: dict,
		legend_config: LegendConfig,
		font_family: str,
		translate=mrp.content.default_translate,
	):
		self.document = document
		self.style = style
		self.legend_config = legend_config
		self.font_family = font_family
		self.translate = translate
		self.page_width, self.page_height = legend_page_size(legend_config)
		self.margins = style["pageMargins"]
		self.element_margin = style["elementMargin"]
		self.records: list[LegendRecord] = []
		self.group_title = ""

	def heading_style(self) -> TextStyle:
		title_style = mrp.geometry.text_style_for(self.style, "title", self.font_family)
		return dataclasses.replace(title_style, font_size=LEGEND_TITLE_FONT_SIZE)

	def info_style(self) -> TextStyle:
		return mrp.geometry.text_style_for(self.style, "info", self.font_family)

	def add_legend_page(self) -> float:
		"""
		Start an appendix page and draw the group heading.

		Returns:
			Height of the heading in inches.
		"""
		self.document.add_page(self.legend_config.format, self.legend_config.orientation)
		heading_style = self.heading_style()
		max_width = self.page_width - self.margins[1] - self.margins[3]
		lines = mrp.geometry.wrap_text(self.group_title, max_width, heading_style) or [""]
		self.document.draw_text(lines, self.margins[3], self.margins[0], heading_style, baseline="top")
		return mrp.geometry.line_height(len(lines), heading_style)

	def draw_separator(self, cursor: LegendCursor) -> None:
		self.document.set_line_width(SEPARATOR_LINE_WIDTH)
		self.document.set_stroke_color(0.0, 0.0, 0.0)
		self.document.draw_line(
			cursor.page_width / 2.0,
			cursor.origin_y,
			cursor.page_width / 2.0,
			cursor.origin_y + cursor.column_height,
		)

	def next_column(self, cursor: LegendCursor) -> None:
		"""
		Move to the right column of the page, or to a fresh page.

		Args:
			cursor: Legend cursor.
		"""
		if cursor.use_columns and cursor.column == 0:
			cursor.column = 1
			cursor.reset_column()
			return
		cursor.column = 0
		self.add_legend_page()
		cursor.reset_column()
		if cursor.use_columns:
			self.draw_separator(cursor)

	def record(self, item_index: int, row_index: int | None, cursor: LegendCursor, placement: Placement) -> None:
		self.records.append(
			LegendRecord(
				group=self.group_title,
				item_index=item_index,
				row_index=row_index,
				page=self.document.page_count,
				column=cursor.column,
				placement=placement,
			)
		)

	def render(self, groups: list[LegendGroup]) -> list[LegendRecord]:
		"""
		Render all legend groups in order.

		Args:
			groups: Printable legend groups.

		Returns:
			Records of every placed image and style row.
		"""
		for group in groups:
			if not group.items:
				continue
			self.render_group(group)
		return self.records

	def render_group(self, group: LegendGroup) -> None:
		"""
		Render one legend group starting on a new page.

		Args:
			group: Legend group.
		"""
		self.group_title = self.translate(group.title)
		title_height = self.add_legend_page()
		use_columns = (
			self.legend_config.orientation == ORIENTATION_LANDSCAPE
			and len(group.items) > 1
		)
		origin_y = self.margins[0] + title_height + self.element_margin
		column_width = self.page_width - self.margins[1] - self.margins[3]
		if use_columns:
			column_width = self.page_width / 2.0 - self.margins[1] - self.margins[3]
		cursor = LegendCursor(
			origin_x=self.margins[3],
			origin_y=origin_y,
			column_width=column_width,
			column_height=self.page_height - origin_y - self.margins[2],
			page_width=self.page_width,
			use_columns=use_columns,
		)
		cursor.reset_column()
		if use_columns:
			self.draw_separator(cursor)

		for item_index, item in enumerate(group.items):
			if cursor.remaining_height <= 0:
				self.next_column(cursor)
			if item.kind == ITEM_KIND_STYLE:
				height = self.render_style_item(item_index, item, cursor)
			elif item.kind == ITEM_KIND_IMAGE:
				height = self.render_image_item(item_index, item, cursor)
			else:
				raise mrp.errors.UnsupportedLegendItemError(f"{item.kind} is not supported")
			if height is None:
				continue
			cursor.advance(height, self.element_margin)

	def render_image_item(self, item_index: int, item: LegendItem, cursor: LegendCursor) -> float | None:
		"""
		Render an image legend item.

		Args:
			item_index: Index of the item in its group.
			item: Image legend item.
			cursor: Legend cursor.

		Returns:
			Rendered height, None when the image cannot be decoded.
		"""
		image = decode_legend_image(item.src)
		if image is None:
			return None
		# break early instead of squeezing a tall image into the column tail
		if (
			image.natural_height * IMAGE_MIN_SCALE > cursor.remaining_height
			and cursor.used_height > cursor.column_height * IMAGE_FILLED_RATIO
		):
			self.next_column(cursor)
		box = make_placement(cursor.x, cursor.y, cursor.column_width, cursor.remaining_height)
		placement = size_image(image, box)
		self.document.draw_image(
			image,
			placement.left,
			placement.top,
			placement.size.width,
			placement.size.height,
		)
		self.record(item_index, None, cursor, placement)
		return placement.size.height

	def render_style_item(self, item_index: int, item: LegendItem, cursor: LegendCursor) -> float | None:
		"""
		Render a style legend item as a grid of sample rows.

		Args:
			item_index: Index of the item in its group.
			item: Style legend item.
			cursor: Legend cursor.

		Returns:
			Height of the grid in the column where it ends, None without rows.
		"""
		columns = item.col_nr or DEFAULT_COLUMNS
		cell_width = (cursor.column_width - (columns - 1) * ROW_MARGIN) / columns
		label_max_width = cell_width - ROW_MARGIN - ROW_ITEM_WIDTH
		text_style = self.info_style()

		start_y = cursor.y
		slot = 0
		for row_index, row in enumerate(item.rows):
			if row.kind == ROW_KIND_TEXT:
				logger.warning(
					"Legend rows of type %s are not yet supported and will be omitted.",
					ROW_KIND_TEXT,
				)
				continue
			if row.kind not in ROW_KINDS:
				raise mrp.errors.UnsupportedLegendItemError(f"{row.kind} is not supported")
			x = cursor.x + (slot % columns) * (cell_width + ROW_MARGIN)
			y = start_y + (slot // columns) * (ROW_ITEM_HEIGHT + ROW_MARGIN)
			if y + ROW_ITEM_HEIGHT > cursor.column_bottom:
				self.next_column(cursor)
				start_y = cursor.y
				slot = 0
				x = cursor.x
				y = start_y
			swatch = make_placement(x, y, ROW_ITEM_WIDTH, ROW_ITEM_HEIGHT)
			self.draw_row_swatch(row, swatch)
			self.draw_row_label(row, swatch, label_max_width, text_style)
			self.record(item_index, row_index, cursor, swatch)
			slot += 1

		if slot == 0:
			return None
		row_count = math.ceil(slot / columns)
		return row_count * ROW_ITEM_HEIGHT + (row_count - 1) * ROW_MARGIN

	def draw_row_label(self, row: LegendRow, swatch: Placement, max_width: float, text_style: TextStyle) -> None:
		"""
		Draw the single line label right of a swatch, shortened with an ellipsis.

		Args:
			row: Legend row.
			swatch: Swatch placement.
			max_width: Label width limit.
			text_style: Label text style.
		"""
		wrapped = mrp.geometry.wrap_text(self.translate(row.title), max_width, text_style)
		if not wrapped:
			return
		label = wrapped[0]
		if len(wrapped) > 1:
			label += LABEL_ELLIPSIS
		self.document.draw_text(
			label,
			swatch.right + ROW_MARGIN,
			swatch.top + swatch.size.height / 2.0,
			text_style,
			baseline="middle",
		)

	def draw_row_swatch(self, row: LegendRow, swatch: Placement) -> None:
		"""
		Draw the graphic part of a style row.

		Args:
			row: Legend row.
			swatch: Swatch placement.
		"""
		document = self.document
		document.set_line_width(ROW_LINE_WIDTH)
		mode = "F"
		if row.stroke:
			stroke_color = mrp.images.parse_color(row.stroke.get("color"), (0, 0, 0))
			document.set_stroke_color(*stroke_color)
			mode += "D"
			if row.stroke.get("width"):
				document.set_line_width(row.stroke["width"] / POINTS_PER_INCH)
		if row.kind == ROW_KIND_FILL:
			if row.fill:
				fill_color = mrp.images.parse_color(row.fill.get("color"), (255, 255, 255))
				document.set_fill_color(*fill_color)
			else:
				mode = "S"

		center_x = swatch.left + swatch.size.width / 2.0
		center_y = swatch.top + swatch.size.height / 2.0
		if row.kind == ROW_KIND_STROKE:
			document.draw_line(swatch.left, center_y, swatch.right, center_y)
		elif row.kind == ROW_KIND_FILL:
			document.draw_rect(swatch.left, swatch.top, swatch.size.width, swatch.size.height, mode)
		elif row.kind == ROW_KIND_CIRCLE:
			image = row.image or {}
			stroke = image.get("stroke") or {}
			fill = image.get("fill") or {}
			document.set_stroke_color(*mrp.images.parse_color(stroke.get("color"), (0, 0, 0)))
			if stroke.get("width"):
				document.set_line_width(stroke["width"] / POINTS_PER_INCH)
			document.set_fill_color(*mrp.images.parse_color(fill.get("color"), (255, 255, 255)))
			radius = min(swatch.size.height / 2.0, float(image.get("radius", 0)) / POINTS_PER_INCH)
			document.draw_circle(center_x, center_y, radius, "FD")
		elif row.kind == ROW_KIND_ICON:
			src = (row.image or {}).get("src")
			if src:
				self.draw_swatch_image(decode_legend_image(src, swatch.size.height), swatch)
		elif row.kind == ROW_KIND_SHAPE:
			raster = mrp.images.render_regular_shape(row.image or {})
			self.draw_swatch_image(decode_legend_image(raster, swatch.size.height), swatch)
		else:
			raise mrp.errors.UnsupportedLegendItemError(f"{row.kind} is not supported")

	def draw_swatch_image(self, image: DecodedImage | None, swatch: Placement) -> None:
		if image is None:
			return
		placement = size_image(image, swatch, center_y=True)
		self.document.draw_image(
			image,
			placement.left,
			placement.top,
			placement.size.width,
			placement.size.height,
		)


#============================================
def render_legend(
	document: PdfDocument,
	style: dict,
	legend_config: LegendConfig,
	groups: list[LegendGroup],
	font_family: str = mrp.config.DEFAULT_FONT_FAMILY,
	translate=mrp.content.default_translate,
) -> list[LegendRecord]:
	"""
	Render legend groups onto appendix pages.

	Args:
		document: Target document.
		style: Resolved style sheet.
		legend_config: Legend page format and orientation.
		groups: Printable legend groups.
		font_family: Active font family.
		translate: Translation callable for titles and labels.

	Returns:
		Records of every placed legend element.
	"""
	renderer = LegendRenderer(document, style, legend_config, font_family, translate)
	return renderer.render(groups)
