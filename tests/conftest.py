"""
Pytest configuration for local imports and shared image fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import pytest

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def build_png_bytes(width: int, height: int, color: tuple[int, int, int] = (30, 120, 200)) -> bytes:
	"""
	Encode a solid color PNG in memory.

	Args:
		width: Pixel width.
		height: Pixel height.
		color: RGB fill.

	Returns:
		PNG bytes.
	"""
	image = PIL.Image.new("RGB", (width, height), color)
	buffer = io.BytesIO()
	image.save(buffer, format="PNG")
	return buffer.getvalue()


@pytest.fixture
def png_bytes():
	"""
	Factory fixture returning in-memory PNG bytes of a given pixel size.
	"""
	return build_png_bytes
