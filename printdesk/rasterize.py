"""
PDF rendering backends: page rasterization and grayscale conversion.
"""

# Standard Library
import logging
import pathlib
import subprocess
import tempfile

# PIP3 modules
import fitz
import PIL.Image

# local repo modules
import printdesk.config
import printdesk.errors


RenderingDegraded = printdesk.errors.RenderingDegraded

POINTS_PER_INCH = printdesk.config.POINTS_PER_INCH
DEFAULT_GS_PATH = printdesk.config.DEFAULT_GS_PATH
DEFAULT_SUBPROCESS_TIMEOUT = printdesk.config.DEFAULT_SUBPROCESS_TIMEOUT

logger = logging.getLogger(__name__)


class Rasterizer:
	"""
	Render PDF pages with PyMuPDF and recolor whole documents with Ghostscript.
	"""

	def __init__(
		self,
		gs_path: str = DEFAULT_GS_PATH,
		timeout: float = DEFAULT_SUBPROCESS_TIMEOUT,
	):
		self.gs_path = gs_path
		self.timeout = timeout

	#============================================
	def render_first_page(self, pdf_bytes: bytes, dpi: int) -> PIL.Image.Image:
		"""
		Render the first page of a PDF to an image.

		Args:
			pdf_bytes: PDF content.
			dpi: Render resolution.

		Returns:
			RGB PIL image.
		"""
		try:
			document = fitz.open(stream=pdf_bytes, filetype="pdf")
		except (RuntimeError, ValueError) as error:
			raise RenderingDegraded(f"cannot open PDF: {error}") from error
		try:
			if document.page_count < 1:
				raise RenderingDegraded("PDF has no pages")
			page = document[0]
			scale = dpi / POINTS_PER_INCH
			matrix = fitz.Matrix(scale, scale)
			pixmap = page.get_pixmap(matrix=matrix, alpha=False)
			image = PIL.Image.frombytes("RGB", [pixmap.width, pixmap.height], pixmap.samples)
		except RuntimeError as error:
			raise RenderingDegraded(f"cannot render page: {error}") from error
		finally:
			document.close()
		return image

	#============================================
	def build_grayscale_command(self, input_path: pathlib.Path, output_path: pathlib.Path) -> list[str]:
		return [
			self.gs_path,
			"-sDEVICE=pdfwrite",
			"-sColorConversionStrategy=Gray",
			"-dProcessColorModel=/DeviceGray",
			"-dCompatibilityLevel=1.4",
			"-dNOPAUSE",
			"-dBATCH",
			"-dSAFER",
			f"-sOutputFile={output_path}",
			str(input_path),
		]

	#============================================
	def convert_to_grayscale(self, pdf_bytes: bytes) -> bytes:
		"""
		Convert every page of a PDF, vectors and text included, to gray.

		Args:
			pdf_bytes: PDF content.

		Returns:
			Grayscale PDF bytes.
		"""
		with tempfile.TemporaryDirectory(prefix="printdesk_gs_") as temp_dir:
			input_path = pathlib.Path(temp_dir) / "input.pdf"
			output_path = pathlib.Path(temp_dir) / "output.pdf"
			input_path.write_bytes(pdf_bytes)
			command = self.build_grayscale_command(input_path, output_path)
			logger.debug("Running Ghostscript: %s", " ".join(command))
			try:
				result = subprocess.run(
					command,
					capture_output=True,
					text=True,
					check=False,
					timeout=self.timeout,
				)
			except FileNotFoundError as error:
				raise RenderingDegraded(f"{self.gs_path} not found") from error
			except subprocess.TimeoutExpired as error:
				raise RenderingDegraded(f"Ghostscript timed out after {self.timeout:.0f}s") from error
			if result.stderr.strip():
				logger.debug("Ghostscript stderr: %s", result.stderr.strip())
			if result.returncode != 0:
				raise RenderingDegraded(f"Ghostscript exit code {result.returncode}")
			if not output_path.exists():
				raise RenderingDegraded("Ghostscript did not produce an output file")
			return output_path.read_bytes()
