import io
import pathlib

import pypdf
import pytest
import reportlab

import map_report_pdf.config
import map_report_pdf.document
import map_report_pdf.geometry
import map_report_pdf.images


REPORTLAB_FONTS = pathlib.Path(reportlab.__file__).parent / "fonts"


#============================================
def test_page_size_and_conversion() -> None:
	"""
	Top-left inch coordinates map to bottom-left points.
	"""
	document = map_report_pdf.document.PdfDocument("portrait", "A4")
	assert document.page_width < document.page_height
	assert document.to_x(1.0) == pytest.approx(72.0)
	assert document.to_y(0.0) == pytest.approx(document.page_height * 72.0)


#============================================
def test_add_page_changes_size() -> None:
	"""
	Added pages take their own format and orientation.
	"""
	document = map_report_pdf.document.PdfDocument("portrait", "A4")
	document.add_page("A5", "landscape")
	assert document.page_count == 2
	reader = pypdf.PdfReader(io.BytesIO(document.output()))
	assert len(reader.pages) == 2
	second = reader.pages[1].mediabox
	assert float(second.width) > float(second.height)


#============================================
def test_output_is_stable() -> None:
	"""
	Output can be requested more than once.
	"""
	document = map_report_pdf.document.PdfDocument("landscape", "A6")
	first = document.output()
	assert document.output() == first


#============================================
def test_measure_text_multiline() -> None:
	"""
	Measured height counts lines, width is the widest line.
	"""
	document = map_report_pdf.document.PdfDocument("portrait", "A4")
	text_style = map_report_pdf.geometry.TextStyle("Helvetica", 400, 10.0, 1.15)
	size = document.measure_text("short\na much longer line", text_style)
	assert size.height == pytest.approx(map_report_pdf.geometry.line_height(2, text_style))
	assert size.width == pytest.approx(map_report_pdf.geometry.text_width("a much longer line", text_style))


#============================================
@pytest.mark.parametrize(
	"mode, flags",
	[("S", (1, 0)), ("F", (0, 1)), ("FD", (1, 1)), ("DF", (1, 1))],
)
def test_paint_flags(mode: str, flags: tuple[int, int]) -> None:
	assert map_report_pdf.document.paint_flags(mode) == flags


#============================================
def test_drawing_primitives(png_bytes) -> None:
	"""
	All primitives draw without error into a readable PDF.
	"""
	document = map_report_pdf.document.PdfDocument("portrait", "A5")
	text_style = map_report_pdf.geometry.TextStyle("Helvetica", 700, 12.0, 1.15)
	for baseline in ("top", "hanging", "middle", "alphabetic"):
		document.draw_text(["Title", "second line"], 0.5, 1.0, text_style, baseline=baseline)
	document.set_fill_color(0.0, 0.0, 0.0, alpha=0.1)
	document.draw_rect(0.5, 2.0, 1.0, 0.5, "F")
	document.set_stroke_color(1.0, 0.0, 0.0)
	document.set_line_width(0.01)
	document.draw_line(0.5, 3.0, 2.0, 3.0)
	document.draw_circle(1.0, 4.0, 0.2)
	image = map_report_pdf.images.decode_image(png_bytes(40, 20))
	document.draw_image(image, 0.5, 5.0, 1.0, 0.5)
	reader = pypdf.PdfReader(io.BytesIO(document.output()))
	assert "Title" in reader.pages[0].extract_text()


#============================================
def test_register_custom_fonts() -> None:
	"""
	TrueType fonts register under one family with regular and bold names.
	"""
	fonts = map_report_pdf.config.FontAssets(
		name="Vera",
		regular=(REPORTLAB_FONTS / "Vera.ttf").read_bytes(),
		bold=str(REPORTLAB_FONTS / "VeraBd.ttf"),
	)
	family = map_report_pdf.document.register_fonts(fonts)
	assert family == "Vera"
	bold_style = map_report_pdf.geometry.TextStyle(family, 700, 12.0, 1.15)
	assert bold_style.font_name == "Vera-Bold"
	document = map_report_pdf.document.PdfDocument("portrait", "A4")
	document.draw_text("Custom", 1.0, 1.0, bold_style)
	assert document.output().startswith(b"%PDF")


#============================================
def test_blank_trailing_page_is_kept() -> None:
	"""
	A page without marks still ends up in the output.
	"""
	document = map_report_pdf.document.PdfDocument("portrait", "A4")
	document.draw_text("Map", 1.0, 1.0, map_report_pdf.geometry.TextStyle("Helvetica", 400, 10.0, 1.15))
	document.add_page("A4", "portrait")
	reader = pypdf.PdfReader(io.BytesIO(document.output()))
	assert len(reader.pages) == document.page_count == 2
