"""
Pytest configuration for local imports and shared PDF/image builders.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import PIL.Image
import pypdf
import pytest
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()

import printdesk.errors


#============================================
def build_pdf(sizes: list[tuple[float, float]], fill: bool = False) -> bytes:
	"""
	Build a PDF whose pages carry "Page N" labels.

	Args:
		sizes: Page sizes in points.
		fill: Paint each page fully black instead of drawing a label.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=sizes[0])
	for index, (width, height) in enumerate(sizes, start=1):
		pdf.setPageSize((width, height))
		if fill:
			pdf.setFillColorRGB(0.0, 0.0, 0.0)
			pdf.rect(0, 0, width, height, stroke=0, fill=1)
		else:
			pdf.setFillColorRGB(0.8, 0.1, 0.1)
			pdf.setFont("Helvetica", 24)
			pdf.drawString(72, height / 2.0, f"Page {index}")
		pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def build_image(width: int, height: int, color=(255, 0, 0), fmt: str = "JPEG") -> bytes:
	"""
	Build a solid color raster image.
	"""
	image = PIL.Image.new("RGB", (width, height), color)
	buffer = io.BytesIO()
	image.save(buffer, format=fmt)
	return buffer.getvalue()


class FakeRasterizer:
	"""
	Rasterizer stand-in that records calls.
	"""

	def __init__(self, fail_grayscale: bool = False):
		self.fail_grayscale = fail_grayscale
		self.grayscale_calls = 0
		self.render_calls = 0

	def convert_to_grayscale(self, pdf_bytes: bytes) -> bytes:
		self.grayscale_calls += 1
		if self.fail_grayscale:
			raise printdesk.errors.RenderingDegraded("gs missing")
		return pdf_bytes

	def render_first_page(self, pdf_bytes: bytes, dpi: int) -> PIL.Image.Image:
		self.render_calls += 1
		width, height = reportlab.lib.pagesizes.A4
		return PIL.Image.new("RGB", (int(width * dpi / 72), int(height * dpi / 72)), (255, 255, 255))


class FakeOfficeConverter:
	"""
	Office converter stand-in returning a fixed PDF or raising.
	"""

	def __init__(self, pages: int = 1, error: Exception | None = None):
		self.pages = pages
		self.error = error
		self.calls: list[str] = []

	def convert_to_pdf(self, data: bytes, extension: str) -> bytes:
		self.calls.append(extension)
		if self.error is not None:
			raise self.error
		if self.pages == 0:
			buffer = io.BytesIO()
			pypdf.PdfWriter().write(buffer)
			return buffer.getvalue()
		return build_pdf([reportlab.lib.pagesizes.A4] * self.pages)


#============================================
@pytest.fixture
def pdf_factory():
	return build_pdf


#============================================
@pytest.fixture
def image_factory():
	return build_image


#============================================
@pytest.fixture
def fake_rasterizer():
	return FakeRasterizer()


#============================================
@pytest.fixture
def failing_rasterizer():
	return FakeRasterizer(fail_grayscale=True)


#============================================
@pytest.fixture
def fake_office():
	return FakeOfficeConverter


#============================================
@pytest.fixture
def a4():
	return reportlab.lib.pagesizes.A4
