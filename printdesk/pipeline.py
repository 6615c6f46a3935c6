"""
Print option pipeline: convert, duplicate, impose, recolor, multiply.
"""

# Standard Library
import logging

# local repo modules
import printdesk.config
import printdesk.convert
import printdesk.copies
import printdesk.document
import printdesk.errors
import printdesk.imposition
import printdesk.office
import printdesk.preview
import printdesk.rasterize


Document = printdesk.document.Document
PrintOptions = printdesk.config.PrintOptions
PipelineResult = printdesk.config.PipelineResult
ValidationResult = printdesk.config.ValidationResult
OfficeConverter = printdesk.office.OfficeConverter
Rasterizer = printdesk.rasterize.Rasterizer
PrintDeskError = printdesk.errors.PrintDeskError
RenderingDegraded = printdesk.errors.RenderingDegraded

PDF_READ_ERRORS = printdesk.document.PDF_READ_ERRORS
enforce_page_limit = printdesk.document.enforce_page_limit

logger = logging.getLogger(__name__)


#============================================
def apply_grayscale_pass(document: Document, rasterizer: Rasterizer) -> Document:
	"""
	Recolor the assembled document to gray, keeping color on failure.

	Args:
		document: Assembled document.
		rasterizer: Backend with convert_to_grayscale().

	Returns:
		Grayscale document, or the input document if the backend failed.
	"""
	try:
		gray_bytes = rasterizer.convert_to_grayscale(document.data)
		gray_document = Document.from_bytes(gray_bytes)
	except RenderingDegraded as error:
		logger.warning("Grayscale pass failed, printing in color: %s", error)
		return document
	except PDF_READ_ERRORS as error:
		logger.warning("Grayscale output unreadable, printing in color: %s", error)
		return document
	if gray_document.page_count != document.page_count:
		logger.warning(
			"Grayscale pass changed page count %d -> %d, printing in color",
			document.page_count,
			gray_document.page_count,
		)
		return document
	return gray_document


#============================================
def apply_options_to_document(
	document: Document,
	options: PrintOptions,
	rasterizer: Rasterizer | None = None,
) -> Document:
	"""
	Apply layout, color and copy options to a converted document.

	Args:
		document: Converted document.
		options: Print options.
		rasterizer: Backend for the grayscale pass.

	Returns:
		Final document.
	"""
	if options.copies_per_page > 1:
		document = printdesk.imposition.duplicate_pages(document, options.copies_per_page)

	if options.imposes:
		document = printdesk.imposition.impose_n_up(document, options.pages_per_sheet)

	enforce_page_limit(document)

	# images rebuilt from source_paths were already converted to gray
	if options.grayscale and not options.source_paths:
		if rasterizer is None:
			rasterizer = Rasterizer()
		document = apply_grayscale_pass(document, rasterizer)

	if options.total_copies > 1:
		document = printdesk.copies.multiply_whole_document(document, options.total_copies)
	return document


#============================================
def run_pipeline(
	data: bytes,
	options: PrintOptions,
	office_converter: OfficeConverter | None = None,
	rasterizer: Rasterizer | None = None,
) -> PipelineResult:
	"""
	Turn uploaded content into the final print PDF.

	Args:
		data: Uploaded content (ignored when options.source_paths is set).
		options: Print options.
		office_converter: Office conversion backend.
		rasterizer: Backend for the grayscale pass.

	Returns:
		PipelineResult.
	"""
	document = printdesk.convert.convert_document(
		data,
		options.file_name,
		grayscale=options.grayscale,
		source_paths=options.source_paths,
		office_converter=office_converter,
	)
	logger.info("Converted %s: %d page(s)", options.file_name, document.page_count)
	document = apply_options_to_document(document, options, rasterizer)
	logger.info(
		"Pipeline finished for %s: %d page(s) (n-up=%d, per-page=%d, copies=%d, gray=%s)",
		options.file_name,
		document.page_count,
		options.pages_per_sheet,
		options.copies_per_page,
		options.total_copies,
		options.grayscale,
	)
	return PipelineResult(pdf_bytes=document.data, page_count=document.page_count)


#============================================
def apply_options(
	data: bytes,
	options: PrintOptions,
	office_converter: OfficeConverter | None = None,
	rasterizer: Rasterizer | None = None,
) -> bytes:
	"""
	Turn uploaded content into final print bytes.
	"""
	result = run_pipeline(data, options, office_converter, rasterizer)
	return result.pdf_bytes


#============================================
def validate_and_preview(
	data: bytes,
	file_name: str,
	office_converter: OfficeConverter | None = None,
	rasterizer: Rasterizer | None = None,
) -> ValidationResult:
	"""
	Convert a freshly received file, check its size and render a preview.

	Args:
		data: Uploaded content.
		file_name: Upload file name.
		office_converter: Office conversion backend.
		rasterizer: Preview backend.

	Returns:
		ValidationResult.
	"""
	document = printdesk.convert.convert_document(
		data,
		file_name,
		office_converter=office_converter,
	)
	enforce_page_limit(document)
	preview_bytes = printdesk.preview.render_first_page_thumbnail(document.data, rasterizer)
	return ValidationResult(
		pdf_bytes=document.data,
		preview_bytes=preview_bytes,
		page_count=document.page_count,
	)


#============================================
def merge_images(images: list[bytes], grayscale: bool = False) -> PipelineResult:
	"""
	Merge several uploaded images into one PDF, one page per image.

	Args:
		images: Raster image contents, in upload order.
		grayscale: Convert the images to gray.

	Returns:
		PipelineResult.
	"""
	document = printdesk.convert.images_to_document(images, grayscale)
	enforce_page_limit(document)
	return PipelineResult(pdf_bytes=document.data, page_count=document.page_count)


#============================================
def live_preview(
	data: bytes,
	options: PrintOptions,
	fallback_preview: bytes,
	office_converter: OfficeConverter | None = None,
	rasterizer: Rasterizer | None = None,
) -> bytes:
	"""
	Re-run the pipeline for the current wizard settings and preview it.

	Args:
		data: Cached upload content.
		options: Current print options.
		fallback_preview: Preview to show when the pipeline fails.
		office_converter: Office conversion backend.
		rasterizer: Rendering backend.

	Returns:
		JPEG preview bytes.
	"""
	try:
		result = run_pipeline(data, options, office_converter, rasterizer)
	except PrintDeskError as error:
		logger.error("Live preview failed: %s", error)
		return fallback_preview
	return printdesk.preview.render_first_page_thumbnail(result.pdf_bytes, rasterizer)
