import map_report_pdf.content


#============================================
def test_contact_lines_in_fixed_order() -> None:
	"""
	Filled keys become lines in the fixed key order, prefixes for mail and phone.
	"""
	contact = {
		"phone": "+41 31 000 00 00",
		"name": "Survey Office",
		"mail": "office@example.org",
		"department": "Geodata",
		"fax": "",
	}
	block = map_report_pdf.content.format_contact_info(contact)
	assert block.header == "Contact"
	assert block.text == [
		"Geodata",
		"Survey Office",
		"Email: office@example.org",
		"Phone: +41 31 000 00 00",
	]


#============================================
def test_contact_uses_translate() -> None:
	"""
	Header and prefixes go through the translate callable.
	"""
	translations = {
		"print.pdf.content.contact.header": "Kontakt",
		"print.pdf.content.contact.mail": "E-Mail",
	}
	block = map_report_pdf.content.format_contact_info(
		{"mail": "amt@example.org"},
		lambda key: translations.get(key, key),
	)
	assert block.header == "Kontakt"
	assert block.text == ["E-Mail: amt@example.org"]


#============================================
def test_map_info() -> None:
	"""
	The view center is printed with four decimals.
	"""
	block = map_report_pdf.content.format_map_info((7.44744, 46.94809))
	assert block.header == "Map information"
	assert block.text == ["Center (WGS84): 7.4474, 46.9481"]


#============================================
def test_map_info_without_center() -> None:
	"""
	An unknown center gives no block.
	"""
	assert map_report_pdf.content.format_map_info(None) is None


#============================================
def test_copyright_dedupes_and_joins() -> None:
	"""
	Duplicate attributions collapse, parts are joined without a trailing separator.
	"""
	text = map_report_pdf.content.build_copyright(
		[
			{"provider": "swisstopo", "year": 2024},
			{"provider": "OpenStreetMap"},
			{"provider": "swisstopo", "year": 2024},
			[{"provider": "Survey Office", "year": "2023"}],
			{"provider": ""},
		]
	)
	assert text == "© swisstopo 2024 | © OpenStreetMap | © Survey Office 2023"


#============================================
def test_copyright_empty() -> None:
	"""
	No attributions give no copyright.
	"""
	assert map_report_pdf.content.build_copyright([]) is None


#============================================
def test_strip_trailing_separator() -> None:
	"""
	Exactly one trailing separator is removed, trimmed variants too.
	"""
	strip = map_report_pdf.content.strip_trailing_separator
	assert strip("© A | © B | ") == "© A | © B"
	assert strip("© A |") == "© A"
	assert strip("© A") == "© A"
