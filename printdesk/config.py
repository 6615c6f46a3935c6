"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import os

# PIP3 modules
import reportlab.lib.pagesizes


POINTS_PER_INCH = 72.0

A4_PORTRAIT = reportlab.lib.pagesizes.portrait(reportlab.lib.pagesizes.A4)
A4_LANDSCAPE = reportlab.lib.pagesizes.landscape(reportlab.lib.pagesizes.A4)

# 5 mm between imposed slots
GAP_POINTS = 14.17
SUPPORTED_PAGES_PER_SHEET = (2, 4)
MAX_PAGES = 100

PREVIEW_DPI = 72
PREVIEW_WIDTH = 600
PREVIEW_QUALITY = 60
PREVIEW_UNAVAILABLE = b"error-preview"
PREVIEW_PLACEHOLDER = b"mock-preview-data"

PHOTO_MAX_SIZE = 2000
PHOTO_QUALITY = 80
MAX_SOURCE_IMAGES = 20

DEFAULT_GS_PATH = "gs"
DEFAULT_SOFFICE_PATH = "soffice"
DEFAULT_SUBPROCESS_TIMEOUT = 120.0
DEFAULT_SMTP_PORT = 465

PDF_MAGIC = b"%PDF"
PDF_EXTENSIONS = {"pdf"}
IMAGE_EXTENSIONS = {
	"jpg",
	"jpeg",
	"png",
	"webp",
	"tiff",
	"tif",
	"bmp",
	"gif",
	"heic",
	"heif",
}
OFFICE_EXTENSIONS = {
	"doc",
	"docx",
	"xls",
	"xlsx",
	"ppt",
	"pptx",
	"pages",
	"numbers",
	"key",
	"odt",
	"ods",
	"odp",
	"txt",
	"rtf",
}

SUPPORTED_FORMATS_TEXT = (
	"Images: JPG, PNG, WEBP, TIFF, HEIC/HEIF\n"
	"Documents: PDF, DOC/DOCX, XLS/XLSX, PPT/PPTX, ODT/ODS/ODP, TXT, RTF"
)


@dataclasses.dataclass(frozen=True)
class PrintOptions:
	pages_per_sheet: int = 1
	copies_per_page: int = 1
	grayscale: bool = False
	total_copies: int = 1
	source_paths: tuple[str, ...] = ()
	file_name: str = "file.pdf"

	def __post_init__(self) -> None:
		# frozen dataclass, so normalise through object.__setattr__
		object.__setattr__(self, "copies_per_page", max(1, int(self.copies_per_page)))
		object.__setattr__(self, "total_copies", max(1, int(self.total_copies)))
		object.__setattr__(self, "source_paths", tuple(str(path) for path in self.source_paths or ()))

	@property
	def imposes(self) -> bool:
		return self.pages_per_sheet in SUPPORTED_PAGES_PER_SHEET

	@classmethod
	def from_settings(cls, settings: dict) -> "PrintOptions":
		"""
		Build options from a wizard settings mapping.

		Args:
			settings: Mapping with color, pagesPerSheet, copiesPerPage,
				copies, sourcePaths and fileName keys.

		Returns:
			PrintOptions.
		"""
		color = settings.get("color", True)
		return cls(
			pages_per_sheet=parse_int(settings.get("pagesPerSheet"), 1),
			copies_per_page=parse_int(settings.get("copiesPerPage"), 1),
			grayscale=not color,
			total_copies=parse_int(settings.get("copies"), 1),
			source_paths=tuple(settings.get("sourcePaths") or ()),
			file_name=settings.get("fileName") or "file.pdf",
		)


@dataclasses.dataclass(frozen=True)
class Slot:
	x: float
	y: float
	width: float
	height: float


@dataclasses.dataclass(frozen=True)
class Placement:
	scale: float
	rotate: bool
	draw_x: float
	draw_y: float
	visual_width: float
	visual_height: float


@dataclasses.dataclass
class PipelineResult:
	pdf_bytes: bytes
	page_count: int


@dataclasses.dataclass
class ValidationResult:
	pdf_bytes: bytes
	preview_bytes: bytes
	page_count: int


@dataclasses.dataclass
class Settings:
	gs_path: str = DEFAULT_GS_PATH
	soffice_path: str = DEFAULT_SOFFICE_PATH
	timeout: float = DEFAULT_SUBPROCESS_TIMEOUT
	smtp_host: str = ""
	smtp_port: int = DEFAULT_SMTP_PORT
	smtp_user: str = ""
	smtp_password: str = ""
	smtp_from: str = ""
	printer_email: str = ""


#============================================
def parse_int(value, default_value: int) -> int:
	"""
	Parse an integer setting.

	Args:
		value: Raw value (int, str or None).
		default_value: Fallback when parsing fails.

	Returns:
		Parsed integer.
	"""
	if value is None:
		return default_value
	try:
		return int(value)
	except (TypeError, ValueError):
		return default_value


#============================================
def load_settings(environ: dict | None = None) -> Settings:
	"""
	Load runtime settings from environment variables.

	Args:
		environ: Optional mapping used instead of os.environ.

	Returns:
		Settings.
	"""
	if environ is None:
		environ = os.environ
	timeout_text = environ.get("PRINTDESK_TIMEOUT", "")
	try:
		timeout = float(timeout_text) if timeout_text else DEFAULT_SUBPROCESS_TIMEOUT
	except ValueError:
		timeout = DEFAULT_SUBPROCESS_TIMEOUT
	return Settings(
		gs_path=environ.get("GS_PATH", DEFAULT_GS_PATH),
		soffice_path=environ.get("SOFFICE_PATH", DEFAULT_SOFFICE_PATH),
		timeout=timeout,
		smtp_host=environ.get("SMTP_HOST", ""),
		smtp_port=parse_int(environ.get("SMTP_PORT"), DEFAULT_SMTP_PORT),
		smtp_user=environ.get("SMTP_USER", ""),
		smtp_password=environ.get("SMTP_PASS", ""),
		smtp_from=environ.get("SMTP_FROM", ""),
		printer_email=environ.get("PRINTER_EMAIL", ""),
	)


#============================================
def file_extension(file_name: str) -> str:
	"""
	Get the lowercase extension of a file name without the dot.
	"""
	if not file_name or "." not in file_name:
		return ""
	return file_name.rsplit(".", 1)[-1].strip().lower()

