"""
Normalize images, PDFs and office documents into a single PDF document.
"""

# Standard Library
import io
import logging
import pathlib

# PIP3 modules
import PIL.Image
import PIL.ImageOps
import reportlab.lib.utils
import reportlab.pdfgen.canvas

# local repo modules
import printdesk.config
import printdesk.document
import printdesk.errors
import printdesk.office


Document = printdesk.document.Document
UnsupportedFormat = printdesk.errors.UnsupportedFormat
ConversionFailure = printdesk.errors.ConversionFailure
OfficeConverter = printdesk.office.OfficeConverter

A4_PORTRAIT = printdesk.config.A4_PORTRAIT
A4_LANDSCAPE = printdesk.config.A4_LANDSCAPE
PDF_MAGIC = printdesk.config.PDF_MAGIC
PDF_EXTENSIONS = printdesk.config.PDF_EXTENSIONS
IMAGE_EXTENSIONS = printdesk.config.IMAGE_EXTENSIONS
OFFICE_EXTENSIONS = printdesk.config.OFFICE_EXTENSIONS
file_extension = printdesk.config.file_extension
PDF_READ_ERRORS = printdesk.document.PDF_READ_ERRORS

IMAGE_DECODE_ERRORS = (OSError, ValueError, PIL.Image.DecompressionBombError)

logger = logging.getLogger(__name__)


#============================================
def image_page_size(width: float, height: float) -> tuple[float, float]:
	"""
	Pick the A4 orientation for an image.

	Args:
		width: Image width.
		height: Image height.

	Returns:
		Portrait A4 when height >= width, landscape A4 otherwise.
	"""
	if width > height:
		return A4_LANDSCAPE
	return A4_PORTRAIT


#============================================
def fit_box(
	content_width: float,
	content_height: float,
	box_width: float,
	box_height: float,
) -> tuple[float, float, float, float]:
	"""
	Scale content uniformly to fit a box and center it.

	Args:
		content_width: Content width.
		content_height: Content height.
		box_width: Box width.
		box_height: Box height.

	Returns:
		Tuple of (x, y, width, height) relative to the box origin.
	"""
	scale = min(box_width / content_width, box_height / content_height)
	scaled_width = content_width * scale
	scaled_height = content_height * scale
	x = (box_width - scaled_width) / 2.0
	y = (box_height - scaled_height) / 2.0
	return (x, y, scaled_width, scaled_height)


#============================================
def prepare_image(data: bytes, grayscale: bool) -> PIL.Image.Image:
	"""
	Decode an image and normalize its mode for PDF embedding.

	Args:
		data: Raster image content.
		grayscale: Convert to 8-bit gray.

	Returns:
		PIL image in RGB or L mode.
	"""
	image = PIL.Image.open(io.BytesIO(data))
	image.load()
	image = PIL.ImageOps.exif_transpose(image)
	if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
		rgba = image.convert("RGBA")
		background = PIL.Image.new("RGB", rgba.size, (255, 255, 255))
		background.paste(rgba, mask=rgba.getchannel("A"))
		image = background
	if grayscale:
		return image.convert("L")
	if image.mode != "RGB":
		return image.convert("RGB")
	return image


#============================================
def draw_image_page(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image: PIL.Image.Image,
) -> None:
	"""
	Draw one image centered on its own A4 page.

	Args:
		pdf: ReportLab canvas.
		image: Prepared PIL image.
	"""
	page_width, page_height = image_page_size(image.width, image.height)
	pdf.setPageSize((page_width, page_height))
	x, y, width, height = fit_box(image.width, image.height, page_width, page_height)
	pdf.drawImage(
		reportlab.lib.utils.ImageReader(image),
		x,
		y,
		width=width,
		height=height,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)
	pdf.showPage()


#============================================
def images_to_document(images: list[bytes], grayscale: bool = False) -> Document:
	"""
	Build a PDF with one A4 page per image, in input order.

	Args:
		images: Raster image contents.
		grayscale: Convert each image to gray before placing it.

	Returns:
		Document.
	"""
	if not images:
		raise UnsupportedFormat("no images")
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=A4_PORTRAIT)
	for index, data in enumerate(images):
		try:
			image = prepare_image(data, grayscale)
		except IMAGE_DECODE_ERRORS as error:
			logger.warning("Cannot decode image %d: %s", index, error)
			raise UnsupportedFormat(f"image {index + 1}") from error
		draw_image_page(pdf, image)
	pdf.save()
	return Document.from_bytes(buffer.getvalue())


#============================================
def is_pdf(data: bytes, extension: str) -> bool:
	return extension in PDF_EXTENSIONS or data[:4] == PDF_MAGIC


#============================================
def read_source_file(path: str) -> bytes:
	"""
	Read an original upload from disk.

	Args:
		path: File path.

	Returns:
		File content.
	"""
	try:
		return pathlib.Path(path).read_bytes()
	except OSError as error:
		logger.error("Cannot read source file %s: %s", path, error)
		raise UnsupportedFormat(str(path)) from error


#============================================
def check_printable_pages(document: Document, file_name: str) -> Document:
	"""
	Reject PDFs with no pages or with a page of zero width or height.

	Args:
		document: Loaded document.
		file_name: Upload file name for the error message.

	Returns:
		The same document.
	"""
	if document.page_count == 0:
		raise UnsupportedFormat(file_name)
	for width, height in document.page_sizes:
		if width <= 0 or height <= 0:
			raise UnsupportedFormat(file_name)
	return document


#============================================
def convert_document(
	data: bytes,
	file_name: str,
	grayscale: bool = False,
	source_paths: tuple[str, ...] | list[str] = (),
	office_converter: OfficeConverter | None = None,
) -> Document:
	"""
	Convert uploaded content into a Document.

	Original image files in source_paths take precedence over the uploaded
	bytes, so color changes are rendered from the originals.

	Args:
		data: Uploaded content.
		file_name: Upload file name, used for its extension.
		grayscale: Convert images to gray while placing them.
		source_paths: Optional original image files.
		office_converter: Office conversion backend.

	Returns:
		Document.
	"""
	extension = file_extension(file_name)
	if source_paths:
		images = [read_source_file(path) for path in source_paths]
		logger.debug("Rebuilding document from %d source image(s)", len(images))
		return images_to_document(images, grayscale)

	if is_pdf(data, extension):
		try:
			document = Document.from_bytes(data)
		except PDF_READ_ERRORS as error:
			raise UnsupportedFormat(file_name) from error
		return check_printable_pages(document, file_name)

	if extension in IMAGE_EXTENSIONS:
		return images_to_document([data], grayscale)

	if extension in OFFICE_EXTENSIONS:
		if office_converter is None:
			office_converter = OfficeConverter()
		try:
			pdf_bytes = office_converter.convert_to_pdf(data, extension)
		except ConversionFailure:
			logger.error("Office conversion failed for %s", file_name)
			raise
		try:
			document = Document.from_bytes(pdf_bytes)
		except PDF_READ_ERRORS as error:
			raise ConversionFailure(extension, f"invalid PDF output: {error}") from error
		return check_printable_pages(document, file_name)

	# unknown extension, last chance as a raster image
	try:
		return images_to_document([data], grayscale)
	except UnsupportedFormat as error:
		raise UnsupportedFormat(file_name) from error
