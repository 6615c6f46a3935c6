"""
Error taxonomy for the print composition pipeline.
"""

# local repo modules
import printdesk.config


MAX_PAGES = printdesk.config.MAX_PAGES
SUPPORTED_FORMATS_TEXT = printdesk.config.SUPPORTED_FORMATS_TEXT


class PrintDeskError(Exception):
	"""Base class for pipeline errors."""


class UnsupportedFormat(PrintDeskError):
	"""Input is not an image, a PDF or a known office document."""

	def __init__(self, file_name: str = ""):
		self.file_name = file_name
		self.supported_formats = SUPPORTED_FORMATS_TEXT
		message = "Unsupported file format"
		if file_name:
			message += f": {file_name}"
		super().__init__(message)


class ConversionFailure(PrintDeskError):
	"""Office document could not be converted to PDF."""

	def __init__(self, extension: str, cause: str):
		self.extension = extension
		self.cause = cause
		super().__init__(
			f"Failed to convert {extension.upper()} to PDF ({cause}). "
			"Office conversion requires LibreOffice to be installed."
		)


class PageLimitExceeded(PrintDeskError):
	"""Document has more pages than a print request may contain."""

	def __init__(self, page_count: int, limit: int = MAX_PAGES):
		self.page_count = page_count
		self.limit = limit
		super().__init__(
			f"Too many pages ({page_count}). At most {limit} pages are allowed; "
			"reduce the number of copies or the size of the file."
		)


class RenderingDegraded(PrintDeskError):
	"""Preview or grayscale rendering backend failed."""


class TransportFailure(PrintDeskError):
	"""Mail relay refused or failed to deliver the print job."""
