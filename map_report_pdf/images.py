"""
Image decoding for the logo, the main capture and legend images.
"""

# Standard Library
import base64
import dataclasses
import io
import math
import pathlib
import re
import urllib.parse

# PIP3 modules
import defusedxml.ElementTree as ElementTree
import PIL.Image
import PIL.ImageDraw
import reportlab.lib.colors
import reportlab.lib.utils

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config
import map_report_pdf.errors


POINTS_PER_INCH = mrp.config.POINTS_PER_INCH

SVG_SOURCE_PATTERN = re.compile(r"([.<]|%3C)svg", re.IGNORECASE)
SVG_MEDIA_PATTERN = re.compile(r"image/svg", re.IGNORECASE)
SVG_LENGTH_PATTERN = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px|pt|in|cm|mm)?\s*$")
SVG_UNIT_TO_PX = {
	None: 1.0,
	"px": 1.0,
	"pt": 1.0,
	"in": POINTS_PER_INCH,
	"cm": POINTS_PER_INCH / 2.54,
	"mm": POINTS_PER_INCH / 25.4,
}


@dataclasses.dataclass
class DecodedImage:
	reader: reportlab.lib.utils.ImageReader
	pixel_width: int
	pixel_height: int

	@property
	def aspect_ratio(self) -> float:
		return self.pixel_width / self.pixel_height

	@property
	def natural_width(self) -> float:
		return self.pixel_width / POINTS_PER_INCH

	@property
	def natural_height(self) -> float:
		return self.pixel_height / POINTS_PER_INCH


#============================================
def is_svg_source(source) -> bool:
	"""
	Check whether an image source refers to SVG content.

	Args:
		source: Image source.

	Returns:
		True for SVG paths, markup, or SVG data URIs.
	"""
	if isinstance(source, PIL.Image.Image):
		return False
	if isinstance(source, bytes):
		head = source[:512].decode("utf-8", errors="ignore")
		return "<svg" in head.lower()
	text = str(source)
	return bool(SVG_SOURCE_PATTERN.search(text) or SVG_MEDIA_PATTERN.search(text))


#============================================
def read_source_bytes(source) -> bytes:
	"""
	Read raw bytes from a bytes object, data URI, markup string or path.

	Args:
		source: Image source.

	Returns:
		Raw bytes.
	"""
	if isinstance(source, bytes):
		return source
	text = str(source)
	if text.startswith("data:"):
		header, _, payload = text.partition(",")
		if header.endswith(";base64"):
			return base64.b64decode(payload)
		return urllib.parse.unquote(payload).encode("utf-8")
	if text.lstrip().startswith("<"):
		return text.encode("utf-8")
	return pathlib.Path(text).read_bytes()


#============================================
def parse_svg_length(value: str | None) -> float | None:
	"""
	Parse an SVG length attribute into pixels.

	Args:
		value: Attribute value like "120", "24px" or "2in".

	Returns:
		Length in pixels, or None when missing or relative.
	"""
	if not value:
		return None
	match = SVG_LENGTH_PATTERN.match(value)
	if match is None:
		return None
	return float(match.group(1)) * SVG_UNIT_TO_PX[match.group(2)]


#============================================
def measure_svg(data: bytes) -> tuple[float, float]:
	"""
	Measure the natural size of SVG markup.

	Explicit width/height win, the viewBox fills in what is missing.

	Args:
		data: SVG bytes.

	Returns:
		Tuple of (width, height) in pixels.
	"""
	try:
		root = ElementTree.fromstring(data)
	except ElementTree.ParseError as error:
		raise mrp.errors.ImageDecodeError(f"Invalid SVG markup: {error}") from error
	width = parse_svg_length(root.get("width"))
	height = parse_svg_length(root.get("height"))
	view_box = root.get("viewBox")
	if view_box and (width is None or height is None):
		parts = [float(part) for part in view_box.replace(",", " ").split()]
		if len(parts) == 4 and parts[2] > 0 and parts[3] > 0:
			box_width, box_height = parts[2], parts[3]
			if width is None and height is None:
				width, height = box_width, box_height
			elif width is None:
				width = height * box_width / box_height
			else:
				height = width * box_height / box_width
	if width is None or height is None or width <= 0 or height <= 0:
		raise mrp.errors.ImageMeasurementError("SVG image has no size information")
	return (width, height)


#============================================
def rasterize_svg(data: bytes, max_height_px: float | None = None) -> PIL.Image.Image:
	"""
	Convert SVG markup to a raster image.

	Args:
		data: SVG bytes.
		max_height_px: Optional output height in pixels.

	Returns:
		PIL image.
	"""
	# needs the native cairo library, loaded only for SVG sources
	import cairosvg

	width, height = measure_svg(data)
	if max_height_px is not None and max_height_px > 0:
		width = width * max_height_px / height
		height = max_height_px
	output_width = max(1, int(round(width)))
	output_height = max(1, int(round(height)))
	try:
		png_bytes = cairosvg.svg2png(
			bytestring=data,
			output_width=output_width,
			output_height=output_height,
		)
	except Exception as error:
		raise mrp.errors.ImageDecodeError(f"SVG conversion failed: {error}") from error
	return open_raster(png_bytes)


#============================================
def open_raster(data: bytes) -> PIL.Image.Image:
	"""
	Decode raster bytes with Pillow.

	Args:
		data: Encoded image bytes.

	Returns:
		Loaded PIL image.
	"""
	try:
		image = PIL.Image.open(io.BytesIO(data))
		image.load()
	except (OSError, SyntaxError, ValueError) as error:
		raise mrp.errors.ImageDecodeError(f"Cannot decode image: {error}") from error
	return image


#============================================
def decode_image(source, max_height_px: float | None = None) -> DecodedImage:
	"""
	Decode an image source into a drawable image with its natural size.

	Args:
		source: Bytes, path, data URI, SVG markup or PIL image.
		max_height_px: Optional rasterization height for SVG sources.

	Returns:
		DecodedImage.
	"""
	if isinstance(source, DecodedImage):
		return source
	if isinstance(source, PIL.Image.Image):
		image = source
	else:
		try:
			data = read_source_bytes(source)
		except (OSError, ValueError) as error:
			raise mrp.errors.ImageDecodeError(f"Cannot read image source: {error}") from error
		if is_svg_source(source) or is_svg_source(data):
			image = rasterize_svg(data, max_height_px)
		else:
			image = open_raster(data)
	pixel_width, pixel_height = image.size
	if pixel_width <= 0 or pixel_height <= 0:
		raise mrp.errors.ImageMeasurementError("Image has no pixels")
	return DecodedImage(
		reader=reportlab.lib.utils.ImageReader(image),
		pixel_width=pixel_width,
		pixel_height=pixel_height,
	)


#============================================
def parse_color(value, default: tuple[int, int, int]) -> tuple[float, float, float, float]:
	"""
	Parse a legend color into RGBA floats.

	Sequences are read as 0-255 channels with an optional 0-1 alpha,
	strings go through the ReportLab color parser.

	Args:
		value: Color sequence, CSS string or None.
		default: RGB fallback in 0-255 range.

	Returns:
		Tuple of (r, g, b, a) in 0.0-1.0 range.
	"""
	fallback = (default[0] / 255.0, default[1] / 255.0, default[2] / 255.0, 1.0)
	if value is None:
		return fallback
	if isinstance(value, (list, tuple)):
		if len(value) < 3:
			return fallback
		alpha = float(value[3]) if len(value) > 3 else 1.0
		return (value[0] / 255.0, value[1] / 255.0, value[2] / 255.0, alpha)
	try:
		color = reportlab.lib.colors.toColor(str(value))
	except ValueError:
		return fallback
	return (color.red, color.green, color.blue, color.alpha)


#============================================
def to_pil_color(color: tuple[float, float, float, float]) -> tuple[int, int, int, int]:
	"""
	Convert RGBA floats to a Pillow color.

	Args:
		color: Tuple of (r, g, b, a) in 0.0-1.0 range.

	Returns:
		Tuple of 0-255 channels.
	"""
	return tuple(int(round(channel * 255.0)) for channel in color)


#============================================
def render_regular_shape(shape: dict) -> PIL.Image.Image:
	"""
	Rasterize a regular shape or star legend sample.

	Args:
		shape: Shape options with points, radius, optional radius2, angle,
			fill and stroke.

	Returns:
		RGBA PIL image sized to the shape.
	"""
	points = int(shape.get("points", 3))
	radius = float(shape.get("radius", 5))
	inner_radius = shape.get("radius2")
	angle = float(shape.get("angle", 0.0))
	stroke = shape.get("stroke") or {}
	fill = shape.get("fill")
	stroke_width = float(stroke.get("width", 1)) if stroke else 0.0

	size = int(math.ceil(2.0 * radius + stroke_width)) + 1
	center = size / 2.0
	vertices: list[tuple[float, float]] = []
	if inner_radius is not None and float(inner_radius) != radius:
		step = math.pi / points
		for index in range(points * 2):
			current = radius if index % 2 == 0 else float(inner_radius)
			theta = angle - math.pi / 2.0 + index * step
			vertices.append((center + current * math.cos(theta), center + current * math.sin(theta)))
	else:
		step = 2.0 * math.pi / points
		for index in range(points):
			theta = angle - math.pi / 2.0 + index * step
			vertices.append((center + radius * math.cos(theta), center + radius * math.sin(theta)))

	image = PIL.Image.new("RGBA", (size, size), (0, 0, 0, 0))
	draw = PIL.ImageDraw.Draw(image)
	fill_color = None
	if fill is not None:
		fill_color = to_pil_color(parse_color(fill.get("color"), (255, 255, 255)))
	outline_color = None
	if stroke:
		outline_color = to_pil_color(parse_color(stroke.get("color"), (0, 0, 0)))
	draw.polygon(
		vertices,
		fill=fill_color,
		outline=outline_color,
		width=max(1, int(round(stroke_width))),
	)
	return image
