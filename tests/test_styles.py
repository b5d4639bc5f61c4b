import map_report_pdf.config
import map_report_pdf.styles


#============================================
def test_default_style_for_a4() -> None:
	"""
	A4 has no override sheet and resolves to the defaults.
	"""
	style = map_report_pdf.styles.resolve_style("A4")
	assert style == map_report_pdf.styles.DEFAULT_STYLE
	assert style["pageMargins"] == [0.4, 0.4, 0.4, 0.4]
	assert style["title.fontWeight"] == map_report_pdf.config.FONT_WEIGHT_BOLD


#============================================
def test_a5_overrides_merge_over_defaults() -> None:
	"""
	A5 values replace matching default keys and keep the rest.
	"""
	style = map_report_pdf.styles.resolve_style("A5")
	assert style["elementMargin"] == 0.3
	assert style["title.fontSize"] == 14
	assert style["info.widthPortion.landscape"] == 0.3
	assert style["info.widthPortion.portrait"] == 0.5
	assert style["description.maxLineCount.portrait"] == 15


#============================================
def test_caller_overrides_win() -> None:
	"""
	Caller overrides are merged after the format sheet.
	"""
	style = map_report_pdf.styles.resolve_style("A5", {"title.fontSize": 30, "elementMargin": 0.2})
	assert style["title.fontSize"] == 30
	assert style["elementMargin"] == 0.2
	assert style["description.fontSize"] == 8


#============================================
def test_resolve_does_not_mutate_sheets() -> None:
	"""
	Resolved sheets are independent copies.
	"""
	style = map_report_pdf.styles.resolve_style("A4")
	style["pageMargins"][0] = 2.0
	style["title.fontSize"] = 99
	fresh = map_report_pdf.styles.resolve_style("A4")
	assert fresh["pageMargins"][0] == 0.4
	assert fresh["title.fontSize"] == 20


#============================================
def test_orientation_key() -> None:
	"""
	Orientation dependent keys are looked up with their suffix.
	"""
	style = map_report_pdf.styles.resolve_style("A4")
	assert map_report_pdf.styles.orientation_key(style, "title.maxLineCount", "portrait") == 2
	assert map_report_pdf.styles.orientation_key(style, "title.maxLineCount", "landscape") == 1
