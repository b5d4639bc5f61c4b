"""
Text content for the contact, map info and copyright elements.
"""

# Standard Library
import logging

# local repo modules
import map_report_pdf as mrp
import map_report_pdf.config


TextWithHeader = mrp.config.TextWithHeader
CONTACT_KEYS = mrp.config.CONTACT_KEYS
COPYRIGHT_SEPARATOR = mrp.config.COPYRIGHT_SEPARATOR

logger = logging.getLogger(__name__)

DEFAULT_TRANSLATIONS = {
	"print.pdf.content.contact.header": "Contact",
	"print.pdf.content.contact.mail": "Email",
	"print.pdf.content.contact.phone": "Phone",
	"print.pdf.content.contact.fax": "Fax",
	"print.pdf.content.mapInfo": "Map information",
	"print.pdf.content.centerCoordinate": "Center (WGS84)",
	"print.pdf.iframeNotSupported": (
		"Due to technical limitations, legend items of type Iframe cannot be printed."
	),
}

PREFIXED_CONTACT_KEYS = {
	"mail": "print.pdf.content.contact.mail",
	"phone": "print.pdf.content.contact.phone",
	"fax": "print.pdf.content.contact.fax",
}


#============================================
def default_translate(key: str) -> str:
	"""
	Look up a key in the English default table, falling back to the key.

	Args:
		key: Translation key.

	Returns:
		Translated string.
	"""
	return DEFAULT_TRANSLATIONS.get(key, key)


#============================================
def format_contact_info(contact: dict, translate=default_translate) -> TextWithHeader:
	"""
	Format contact details into a header and lines.

	Args:
		contact: Mapping of contact keys to values.
		translate: Translation callable.

	Returns:
		TextWithHeader with one line per filled key.
	"""
	lines: list[str] = []
	for key in CONTACT_KEYS:
		value = contact.get(key)
		if not value:
			continue
		if key in PREFIXED_CONTACT_KEYS:
			lines.append(f"{translate(PREFIXED_CONTACT_KEYS[key])}: {value}")
		else:
			lines.append(str(value))
	return TextWithHeader(header=translate("print.pdf.content.contact.header"), text=lines)


#============================================
def format_map_info(
	center: tuple[float, float] | None,
	translate=default_translate,
) -> TextWithHeader | None:
	"""
	Format information about the current map view.

	Args:
		center: Ground position (lon, lat) of the view center, or None.
		translate: Translation callable.

	Returns:
		TextWithHeader, or None when the center is unknown.
	"""
	if center is None:
		logger.error("Map center cannot be determined")
		return None
	title = translate("print.pdf.content.centerCoordinate")
	coordinates = f"{title}: {center[0]:.4f}, {center[1]:.4f}"
	return TextWithHeader(header=translate("print.pdf.content.mapInfo"), text=[coordinates])


#============================================
def strip_trailing_separator(text: str, separator: str = COPYRIGHT_SEPARATOR) -> str:
	"""
	Remove exactly one trailing separator sequence.

	Args:
		text: Joined text.
		separator: Separator sequence.

	Returns:
		Text without a trailing separator.
	"""
	if separator and text.endswith(separator):
		return text[: -len(separator)]
	stripped = separator.rstrip()
	if stripped and text.endswith(stripped):
		return text[: -len(stripped)].rstrip()
	return text


#============================================
def build_copyright(attributions: list[dict]) -> str | None:
	"""
	Join unique provider and year attributions into one copyright line.

	Args:
		attributions: Entries with "provider" and optional "year", or a list
			of such entries where the first one counts.

	Returns:
		Copyright text, or None when there are no attributions.
	"""
	if not attributions:
		return None
	seen: set[tuple[str, str]] = set()
	parts: list[str] = []
	for entry in attributions:
		if isinstance(entry, (list, tuple)):
			entry = entry[0] if entry else {}
		provider = entry.get("provider")
		if not provider:
			continue
		year = entry.get("year")
		key = (str(provider), str(year or ""))
		if key in seen:
			continue
		seen.add(key)
		if year:
			parts.append(f"© {provider} {year}")
		else:
			parts.append(f"© {provider}")
	text = COPYRIGHT_SEPARATOR.join(parts)
	return strip_trailing_separator(text)
