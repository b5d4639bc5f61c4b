import base64

import PIL.Image
import pytest

import map_report_pdf.errors
import map_report_pdf.images


#============================================
def test_decode_png_bytes(png_bytes) -> None:
	"""
	Raster bytes decode with their pixel size and aspect ratio.
	"""
	image = map_report_pdf.images.decode_image(png_bytes(300, 150))
	assert (image.pixel_width, image.pixel_height) == (300, 150)
	assert image.aspect_ratio == pytest.approx(2.0)
	assert image.natural_width == pytest.approx(300 / 72.0)


#============================================
def test_decode_data_uri(png_bytes) -> None:
	"""
	Base64 data URIs decode like raw bytes.
	"""
	uri = "data:image/png;base64," + base64.b64encode(png_bytes(40, 20)).decode("ascii")
	image = map_report_pdf.images.decode_image(uri)
	assert image.aspect_ratio == pytest.approx(2.0)


#============================================
def test_decode_path(tmp_path, png_bytes) -> None:
	"""
	File paths are read from disk.
	"""
	path = tmp_path / "logo.png"
	path.write_bytes(png_bytes(64, 64))
	image = map_report_pdf.images.decode_image(str(path))
	assert image.aspect_ratio == pytest.approx(1.0)


#============================================
def test_decode_pil_image() -> None:
	"""
	PIL images are used as they are.
	"""
	image = map_report_pdf.images.decode_image(PIL.Image.new("RGBA", (10, 30)))
	assert image.pixel_height == 30


#============================================
def test_decode_garbage_raises() -> None:
	"""
	Undecodable bytes raise ImageDecodeError.
	"""
	with pytest.raises(map_report_pdf.errors.ImageDecodeError):
		map_report_pdf.images.decode_image(b"definitely not an image")


#============================================
def test_decode_missing_path_raises(tmp_path) -> None:
	"""
	A missing file raises ImageDecodeError.
	"""
	with pytest.raises(map_report_pdf.errors.ImageDecodeError):
		map_report_pdf.images.decode_image(str(tmp_path / "missing.png"))


#============================================
def test_measure_svg_sizes() -> None:
	"""
	Explicit sizes win, the viewBox fills in what is missing.
	"""
	measure = map_report_pdf.images.measure_svg
	assert measure(b'<svg xmlns="http://www.w3.org/2000/svg" width="120" height="40"/>') == (120.0, 40.0)
	assert measure(b'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 60 30"/>') == (60.0, 30.0)
	width, height = measure(b'<svg xmlns="http://www.w3.org/2000/svg" width="1in" viewBox="0 0 20 10"/>')
	assert width == pytest.approx(72.0)
	assert height == pytest.approx(36.0)


#============================================
def test_measure_svg_without_size_raises() -> None:
	"""
	SVG markup without any size information cannot be measured.
	"""
	with pytest.raises(map_report_pdf.errors.ImageMeasurementError):
		map_report_pdf.images.measure_svg(b'<svg xmlns="http://www.w3.org/2000/svg" width="100%"/>')


#============================================
def test_is_svg_source() -> None:
	"""
	SVG paths, markup and media types are recognized.
	"""
	assert map_report_pdf.images.is_svg_source("logo.svg")
	assert map_report_pdf.images.is_svg_source("data:image/svg+xml;utf8,%3Csvg%3E")
	assert map_report_pdf.images.is_svg_source(b"<svg width='1'/>")
	assert not map_report_pdf.images.is_svg_source("logo.png")


#============================================
def test_parse_color() -> None:
	"""
	Channel lists, CSS strings and missing values all give RGBA floats.
	"""
	parse = map_report_pdf.images.parse_color
	assert parse([255, 0, 0], (0, 0, 0)) == (1.0, 0.0, 0.0, 1.0)
	assert parse([0, 0, 255, 0.5], (0, 0, 0)) == (0.0, 0.0, 1.0, 0.5)
	assert parse(None, (255, 255, 255)) == (1.0, 1.0, 1.0, 1.0)
	red, green, blue, alpha = parse("#00ff00", (0, 0, 0))
	assert (red, green, blue) == pytest.approx((0.0, 1.0, 0.0))
	assert alpha == pytest.approx(1.0)


#============================================
def test_render_regular_shape_size() -> None:
	"""
	Shape rasters cover the shape diameter.
	"""
	image = map_report_pdf.images.render_regular_shape(
		{"points": 4, "radius": 10, "fill": {"color": "red"}, "stroke": {"color": "black", "width": 2}}
	)
	assert image.mode == "RGBA"
	assert image.size[0] >= 20
	assert image.size == (image.size[0], image.size[0])
