import io

import pypdf
import pytest

import map_report_pdf.assembler
import map_report_pdf.config
import map_report_pdf.content
import map_report_pdf.errors
import map_report_pdf.legend


LegendGroup = map_report_pdf.legend.LegendGroup
LegendItem = map_report_pdf.legend.LegendItem
LegendRow = map_report_pdf.legend.LegendRow


#============================================
def build_options(png_bytes, **overrides) -> map_report_pdf.config.DocumentOptions:
	"""
	Build a fully populated set of document options.
	"""
	values = {
		"orientation": "portrait",
		"format": "A4",
		"img_ratio": 1.5,
		"title": "Annual Report",
		"logo": png_bytes(120, 40),
		"description": "Land use survey of the northern district, updated every spring.",
		"contact": map_report_pdf.content.format_contact_info(
			{"name": "Survey Office", "mail": "office@example.org"}
		),
		"map_info": map_report_pdf.content.format_map_info((7.4474, 46.9480)),
		"copyright": "© swisstopo 2024",
	}
	values.update(overrides)
	return map_report_pdf.config.DocumentOptions(**values)


#============================================
def count_pages(pdf_bytes: bytes) -> int:
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	return len(reader.pages)


#============================================
def test_draw_before_setup_raises(png_bytes) -> None:
	"""
	Drawing without a computed layout fails.
	"""
	assembler = map_report_pdf.assembler.DocumentAssembler()
	with pytest.raises(map_report_pdf.errors.LayoutNotInitializedError):
		assembler.draw(png_bytes(30, 20))


#============================================
def test_single_page_document(png_bytes) -> None:
	"""
	Without legend groups the document has one page.
	"""
	assembler = map_report_pdf.assembler.DocumentAssembler()
	layout = assembler.setup(build_options(png_bytes))
	assert set(layout.placements()) == {
		"title", "logo", "contact", "map_info", "description", "image", "copyright",
	}
	pdf_bytes = assembler.draw(png_bytes(300, 200))
	assert pdf_bytes.startswith(b"%PDF")
	assert count_pages(pdf_bytes) == 1


#============================================
def test_minimal_document(png_bytes) -> None:
	"""
	Only the image is placed when nothing else is given.
	"""
	options = map_report_pdf.config.DocumentOptions(orientation="landscape", format="A5", img_ratio=2.0)
	assembler = map_report_pdf.assembler.DocumentAssembler()
	layout = assembler.setup(options)
	assert list(layout.placements()) == ["image"]
	assert count_pages(assembler.draw(png_bytes(200, 100))) == 1


#============================================
def test_legend_pages_follow_map(png_bytes) -> None:
	"""
	Each legend group adds at least one page after the map page.
	"""
	groups = [
		LegendGroup(title="Land use", items=[LegendItem(kind="image", src=png_bytes(100, 60))]),
		LegendGroup(
			title="Roads",
			items=[
				LegendItem(
					kind="style",
					rows=[LegendRow(kind="stroke", title="Highway", stroke={"color": "#c03030", "width": 3})],
				),
			],
		),
		LegendGroup(title="Web", items=[LegendItem(kind="iframe", src="https://example.org")]),
	]
	notices = []
	assembler = map_report_pdf.assembler.DocumentAssembler()
	assembler.setup(build_options(png_bytes, legend_groups=groups), notify=notices.append)
	assert len(assembler.legend_groups) == 2
	assert len(notices) == 1
	pdf_bytes = assembler.draw(png_bytes(300, 200))
	assert count_pages(pdf_bytes) == 3
	assert [record.page for record in assembler.legend_records] == [2, 3]


#============================================
def test_legend_same_as_map(png_bytes) -> None:
	"""
	Legend pages without their own settings take the map page settings.
	"""
	groups = [LegendGroup(title="Land use", items=[LegendItem(kind="image", src=png_bytes(100, 60))])]
	assembler = map_report_pdf.assembler.DocumentAssembler()
	assembler.setup(build_options(png_bytes, orientation="landscape", format="A3", legend_groups=groups))
	assert assembler.legend_config == map_report_pdf.config.LegendConfig(format="A3", orientation="landscape")


#============================================
def test_legend_own_format(png_bytes) -> None:
	"""
	Legend pages may use their own format and orientation.
	"""
	groups = [LegendGroup(title="Land use", items=[LegendItem(kind="image", src=png_bytes(100, 60))])]
	legend_config = map_report_pdf.config.LegendConfig(format="A5", orientation="sameAsMap")
	assembler = map_report_pdf.assembler.DocumentAssembler()
	assembler.setup(build_options(png_bytes, legend_groups=groups, legend_config=legend_config))
	assert assembler.legend_config == map_report_pdf.config.LegendConfig(format="A5", orientation="portrait")
	pdf_bytes = assembler.draw(png_bytes(300, 200))
	reader = pypdf.PdfReader(io.BytesIO(pdf_bytes))
	a5_width = float(reader.pages[1].mediabox.width)
	a4_width = float(reader.pages[0].mediabox.width)
	assert a5_width < a4_width


#============================================
def test_draw_is_repeatable(png_bytes) -> None:
	"""
	One setup can be drawn several times.
	"""
	assembler = map_report_pdf.assembler.DocumentAssembler()
	assembler.setup(build_options(png_bytes))
	first = assembler.draw(png_bytes(300, 200))
	second = assembler.draw(png_bytes(300, 200))
	assert count_pages(first) == count_pages(second) == 1


#============================================
@pytest.mark.parametrize(
	"overrides",
	[
		{"orientation": "both"},
		{"orientation": "diagonal"},
		{"format": "Letter"},
	],
)
def test_bad_page_settings_raise(png_bytes, overrides) -> None:
	"""
	Unknown formats and orientations are rejected during setup.
	"""
	assembler = map_report_pdf.assembler.DocumentAssembler()
	with pytest.raises(map_report_pdf.errors.LayoutConfigError):
		assembler.setup(build_options(png_bytes, **overrides))
	assert not assembler.initialized


#============================================
def test_broken_logo_is_skipped(png_bytes) -> None:
	"""
	An undecodable logo is left out with a notice, the rest still composes.
	"""
	notices = []
	assembler = map_report_pdf.assembler.DocumentAssembler()
	layout = assembler.setup(build_options(png_bytes, logo=b"broken"), notify=notices.append)
	assert layout.logo is None
	assert assembler.logo is None
	assert "title" in layout.placements()
	assert len(notices) == 1
	assert notices[0].startswith("Logo skipped")
	pdf_bytes = assembler.draw(png_bytes(300, 200))
	assert count_pages(pdf_bytes) == 1


#============================================
def test_small_page_long_description(png_bytes) -> None:
	"""
	A long description on A6 portrait is cut instead of failing setup.
	"""
	options = build_options(
		png_bytes,
		format="A6",
		description="Land use survey of the northern district, updated every spring. " * 30,
	)
	assembler = map_report_pdf.assembler.DocumentAssembler()
	layout = assembler.setup(options)
	assert 0 < len(layout.description_lines) < 15
	assert layout.description.top > layout.image.bottom
	assert count_pages(assembler.draw(png_bytes(300, 200))) == 1


#============================================
def test_style_overrides_apply(png_bytes) -> None:
	"""
	Caller style overrides change the computed placements.
	"""
	assembler = map_report_pdf.assembler.DocumentAssembler()
	layout = assembler.setup(build_options(png_bytes, style_overrides={"pageMargins": [1.0, 1.0, 1.0, 1.0]}))
	assert layout.title.left == pytest.approx(1.0)
	assert layout.contact.left == pytest.approx(1.0)
