"""
Two phase document assembly: setup computes every placement, draw marks
the document.
"""

# Standard Library
import dataclasses
import logging

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config
import map_report_pdf.content
import map_report_pdf.document
import map_report_pdf.errors
import map_report_pdf.geometry
import map_report_pdf.images
import map_report_pdf.legend
import map_report_pdf.placement
import map_report_pdf.styles


Placement = mrp.geometry.Placement
PageContext = mrp.placement.PageContext
DocumentOptions = mrp.config.DocumentOptions
TextWithHeader = mrp.config.TextWithHeader
LegendConfig = mrp.config.LegendConfig
PdfDocument = mrp.document.PdfDocument
DecodedImage = mrp.images.DecodedImage

ORIENTATIONS = mrp.config.ORIENTATIONS
DEFAULT_FONT_FAMILY = mrp.config.DEFAULT_FONT_FAMILY
COPYRIGHT_FILL_ALPHA = mrp.config.COPYRIGHT_FILL_ALPHA
FONT_WEIGHT_BOLD = mrp.config.FONT_WEIGHT_BOLD
SAME_AS_MAP = mrp.config.SAME_AS_MAP

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class PageLayout:
	"""Placements and wrapped text of the first page."""
	image: Placement
	title_lines: list[str] | None = None
	title: Placement | None = None
	logo: Placement | None = None
	contact: Placement | None = None
	map_info: Placement | None = None
	description_lines: list[str] | None = None
	description: Placement | None = None
	copyright_lines: list[str] | None = None
	copyright: Placement | None = None

	def placements(self) -> dict[str, Placement]:
		"""
		Present placements by element name.

		Returns:
			Dict of element name to placement.
		"""
		names = ("title", "logo", "contact", "map_info", "description", "image", "copyright")
		result: dict[str, Placement] = {}
		for name in names:
			placement = getattr(self, name)
			if placement is not None:
				result[name] = placement
		return result


#============================================
def compute_layout(context: PageContext, options: DocumentOptions, logo: DecodedImage | None) -> PageLayout:
	"""
	Compute all first page placements in their fixed order.

	Args:
		context: Page context.
		options: Document options.
		logo: Decoded logo or None.

	Returns:
		PageLayout.
	"""
	title_lines = None
	title = None
	if options.title:
		width = mrp.placement.calc_title_width(context)
		title_lines = mrp.geometry.wrap_and_cap(
			options.title,
			width,
			context.text_style("title"),
			context.value("title.maxLineCount"),
		)
		title = mrp.placement.calc_title_placement(context, len(title_lines), width)

	logo_placement = None
	if logo is not None:
		logo_placement = mrp.placement.calc_logo_placement(context, logo.aspect_ratio)

	contact = None
	if options.contact:
		contact = mrp.placement.calc_contact_placement(context)

	map_info = None
	if options.map_info:
		map_info = mrp.placement.calc_map_info_placement(context, contact)

	description_lines = None
	description = None
	if options.description:
		width = mrp.placement.calc_description_width(
			context,
			contact is not None,
			map_info is not None,
		)
		line_limit = mrp.placement.calc_description_line_limit(
			context,
			title,
			logo_placement,
			contact,
			map_info,
		)
		description_lines = mrp.geometry.wrap_and_cap(
			options.description,
			width,
			context.text_style("description"),
			line_limit,
		)
		if description_lines:
			description = mrp.placement.calc_description_placement(
				context,
				len(description_lines),
				width,
				contact,
				map_info,
			)
		else:
			logger.warning("No room left for the description, it is left out")
			description_lines = None

	image = mrp.placement.calc_image_placement(
		context,
		options.img_ratio,
		title,
		logo_placement,
		description,
		contact,
		map_info,
	)

	copyright_lines = None
	copyright_placement = None
	if options.copyright:
		copyright_lines = mrp.geometry.wrap_text(
			options.copyright,
			image.size.width,
			mrp.placement.copyright_text_style(context),
		)
		copyright_placement = mrp.placement.calc_copyright_placement(context, copyright_lines, image)

	return PageLayout(
		image=image,
		title_lines=title_lines,
		title=title,
		logo=logo_placement,
		contact=contact,
		map_info=map_info,
		description_lines=description_lines,
		description=description,
		copyright_lines=copyright_lines,
		copyright=copyright_placement,
	)


#============================================
def load_logo(source, notify=None) -> DecodedImage | None:
	"""
	Decode the logo, leaving it out when it cannot be decoded.

	Args:
		source: Logo source or None.
		notify: Optional callable receiving a notice about a skipped logo.

	Returns:
		DecodedImage or None.
	"""
	if source is None:
		return None
	try:
		return mrp.images.decode_image(source)
	except mrp.errors.ImageDecodeError as error:
		logger.warning("Logo skipped: %s", error)
		if notify is not None:
			notify(f"Logo skipped: {error}")
		return None


class DocumentAssembler:
	"""
	Lays out and draws the printable map document.

	Call setup() once, then draw() with the captured image.
	"""

	def __init__(self):
		self.initialized = False
		self.options: DocumentOptions | None = None
		self.style: dict = {}
		self.context: PageContext | None = None
		self.font_family = DEFAULT_FONT_FAMILY
		self.logo: DecodedImage | None = None
		self.layout: PageLayout | None = None
		self.legend_config: LegendConfig | None = None
		self.legend_groups: list = []
		self.legend_records: list = []

	def setup(self, options: DocumentOptions, notify=None) -> PageLayout:
		"""
		Resolve style and page size, load fonts and compute placements.

		Args:
			options: Document options.
			notify: Optional callable for user facing notices, such as a
				skipped logo or dropped iframe legend items.

		Returns:
			The computed first page layout.
		"""
		if options.orientation not in ORIENTATIONS:
			raise mrp.errors.LayoutConfigError(f"Unsupported orientation: {options.orientation}")
		self.options = options
		self.style = mrp.styles.resolve_style(options.format, options.style_overrides)
		page_width, page_height = mrp.config.page_size_inches(options.format, options.orientation)

		self.font_family = DEFAULT_FONT_FAMILY
		if options.fonts is not None:
			self.font_family = mrp.document.register_fonts(options.fonts)

		self.context = PageContext(
			page_width=page_width,
			page_height=page_height,
			orientation=options.orientation,
			style=self.style,
			font_family=self.font_family,
		)

		self.logo = load_logo(options.logo, notify)

		self.layout = compute_layout(self.context, options, self.logo)

		self.legend_config = None
		self.legend_groups = []
		if options.legend_groups:
			requested = options.legend_config or LegendConfig(format=SAME_AS_MAP, orientation=SAME_AS_MAP)
			self.legend_config = mrp.config.resolve_legend_config(
				requested.format,
				requested.orientation,
				options.format,
				options.orientation,
			)
			# fail in setup, not halfway through draw
			mrp.legend.legend_page_size(self.legend_config)
			self.legend_groups = mrp.legend.filter_printable_legend(options.legend_groups, notify)

		self.initialized = True
		logger.debug("Layout computed: %s", sorted(self.layout.placements()))
		return self.layout

	def draw(self, image, translate=mrp.content.default_translate) -> bytes:
		"""
		Draw every element at its placement and return the PDF.

		Args:
			image: Captured map image, any source decode_image accepts.
			translate: Translation callable for legend labels.

		Returns:
			PDF bytes.
		"""
		if not self.initialized or self.layout is None:
			raise mrp.errors.LayoutNotInitializedError(
				"DocumentAssembler needs to be set up by calling setup() before draw()."
			)
		options = self.options
		layout = self.layout
		context = self.context
		document = PdfDocument(options.orientation, options.format)

		if layout.title is not None:
			document.draw_text(
				layout.title_lines,
				layout.title.left,
				layout.title.top,
				context.text_style("title"),
			)

		capture = mrp.images.decode_image(image)
		document.draw_image(
			capture,
			layout.image.left,
			layout.image.top,
			layout.image.size.width,
			layout.image.size.height,
		)

		if layout.copyright is not None:
			document.set_fill_color(0.0, 0.0, 0.0, alpha=COPYRIGHT_FILL_ALPHA)
			document.draw_rect(
				layout.copyright.left,
				layout.copyright.top,
				layout.copyright.size.width,
				layout.copyright.size.height,
				"F",
			)
			document.draw_text(
				layout.copyright_lines,
				layout.copyright.left,
				layout.copyright.top,
				mrp.placement.copyright_text_style(context),
			)

		if layout.logo is not None:
			document.draw_image(
				self.logo,
				layout.logo.left,
				layout.logo.top,
				layout.logo.size.width,
				layout.logo.size.height,
			)

		if layout.contact is not None:
			self.draw_info_block(document, options.contact, layout.contact)

		if layout.map_info is not None:
			self.draw_info_block(document, options.map_info, layout.map_info)

		if layout.description is not None:
			document.draw_text(
				layout.description_lines,
				layout.description.left,
				mrp.placement.description_draw_y(context, layout.image, layout.description),
				context.text_style("description"),
				baseline="hanging",
			)

		self.legend_records = []
		if self.legend_groups:
			self.legend_records = mrp.legend.render_legend(
				document,
				self.style,
				self.legend_config,
				self.legend_groups,
				self.font_family,
				translate,
			)

		return document.output()

	def draw_info_block(self, document: PdfDocument, block: TextWithHeader, placement: Placement) -> None:
		"""
		Draw a bold header with regular body lines below it.

		Args:
			document: Target document.
			block: Header and lines.
			placement: Block placement.
		"""
		info_style = self.context.text_style("info")
		header_style = dataclasses.replace(info_style, font_weight=FONT_WEIGHT_BOLD)
		document.draw_text(
			block.text,
			placement.left,
			placement.top + mrp.geometry.line_height(1, info_style),
			info_style,
			baseline="hanging",
		)
		document.draw_text(block.header, placement.left, placement.top, header_style, baseline="hanging")
