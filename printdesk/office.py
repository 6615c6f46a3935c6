"""
Office document to PDF conversion through LibreOffice.
"""

# Standard Library
import logging
import pathlib
import subprocess
import tempfile

# local repo modules
import printdesk.config
import printdesk.errors


ConversionFailure = printdesk.errors.ConversionFailure

DEFAULT_SOFFICE_PATH = printdesk.config.DEFAULT_SOFFICE_PATH
DEFAULT_SUBPROCESS_TIMEOUT = printdesk.config.DEFAULT_SUBPROCESS_TIMEOUT

logger = logging.getLogger(__name__)


class OfficeConverter:
	"""
	Convert office documents with a headless LibreOffice process.

	Each call works in its own temporary directory, which is removed
	whether or not the conversion succeeds.
	"""

	def __init__(
		self,
		soffice_path: str = DEFAULT_SOFFICE_PATH,
		timeout: float = DEFAULT_SUBPROCESS_TIMEOUT,
	):
		self.soffice_path = soffice_path
		self.timeout = timeout

	#============================================
	def build_command(self, source_path: pathlib.Path, output_dir: pathlib.Path) -> list[str]:
		return [
			self.soffice_path,
			"--headless",
			"--norestore",
			f"-env:UserInstallation=file://{output_dir / 'profile'}",
			"--convert-to",
			"pdf",
			"--outdir",
			str(output_dir),
			str(source_path),
		]

	#============================================
	def convert_to_pdf(self, data: bytes, extension: str) -> bytes:
		"""
		Convert an office document to PDF.

		Args:
			data: Document content.
			extension: Source extension without the dot, e.g. "docx".

		Returns:
			PDF bytes.
		"""
		extension = extension.lower().lstrip(".") or "bin"
		with tempfile.TemporaryDirectory(prefix="printdesk_office_") as temp_dir:
			work_dir = pathlib.Path(temp_dir)
			source_path = work_dir / f"source.{extension}"
			source_path.write_bytes(data)
			output_path = work_dir / "source.pdf"
			command = self.build_command(source_path, work_dir)
			logger.debug("Running office conversion: %s", " ".join(command))
			try:
				result = subprocess.run(
					command,
					capture_output=True,
					text=True,
					check=False,
					timeout=self.timeout,
				)
			except FileNotFoundError as error:
				raise ConversionFailure(extension, f"{self.soffice_path} not found") from error
			except subprocess.TimeoutExpired as error:
				raise ConversionFailure(extension, f"timed out after {self.timeout:.0f}s") from error
			if result.returncode != 0:
				message = result.stderr.strip() or f"exit code {result.returncode}"
				raise ConversionFailure(extension, message)
			if not output_path.exists():
				raise ConversionFailure(extension, "no PDF output produced")
			return output_path.read_bytes()
