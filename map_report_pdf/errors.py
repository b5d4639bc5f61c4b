"""
Exceptions raised by the layout engine.
"""


class MapReportError(Exception):
	"""Base class for all layout and rendering errors."""


class LayoutConfigError(MapReportError):
	"""Raised for an unknown format or orientation or an invalid row split."""


class LayoutNotInitializedError(MapReportError):
	"""Raised when drawing is requested before setup computed the placements."""


class UnsupportedLegendItemError(MapReportError):
	"""Raised for a legend item or row kind the renderer does not know."""


class ImageDecodeError(MapReportError):
	"""Raised when an image source cannot be decoded."""


class ImageMeasurementError(ImageDecodeError):
	"""Raised when a vector image carries no size information."""
