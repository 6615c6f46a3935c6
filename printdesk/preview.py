"""
Chat-sized previews and upload photo compression.
"""

# Standard Library
import io
import logging

# PIP3 modules
import PIL.Image

# local repo modules
import printdesk.config
import printdesk.convert
import printdesk.rasterize


Rasterizer = printdesk.rasterize.Rasterizer

PREVIEW_DPI = printdesk.config.PREVIEW_DPI
PREVIEW_WIDTH = printdesk.config.PREVIEW_WIDTH
PREVIEW_QUALITY = printdesk.config.PREVIEW_QUALITY
PREVIEW_UNAVAILABLE = printdesk.config.PREVIEW_UNAVAILABLE
PREVIEW_PLACEHOLDER = printdesk.config.PREVIEW_PLACEHOLDER
PHOTO_MAX_SIZE = printdesk.config.PHOTO_MAX_SIZE
PHOTO_QUALITY = printdesk.config.PHOTO_QUALITY

logger = logging.getLogger(__name__)


#============================================
def encode_thumbnail(image: PIL.Image.Image) -> bytes:
	"""
	Shrink an image to preview width and encode it as progressive JPEG.

	Args:
		image: Rendered page.

	Returns:
		JPEG bytes.
	"""
	if image.width > PREVIEW_WIDTH:
		height = max(1, round(image.height * PREVIEW_WIDTH / image.width))
		image = image.resize((PREVIEW_WIDTH, height), PIL.Image.LANCZOS)
	if image.mode != "RGB":
		image = image.convert("RGB")
	buffer = io.BytesIO()
	image.save(buffer, format="JPEG", quality=PREVIEW_QUALITY, progressive=True, optimize=True)
	return buffer.getvalue()


#============================================
def render_first_page_thumbnail(pdf_bytes: bytes, rasterizer: Rasterizer | None = None) -> bytes:
	"""
	Render page 1 of a PDF as a small JPEG preview.

	Never raises: on any failure the PREVIEW_UNAVAILABLE sentinel is
	returned so the caller can continue without a picture.

	Args:
		pdf_bytes: PDF content.
		rasterizer: Rendering backend.

	Returns:
		JPEG bytes or PREVIEW_UNAVAILABLE.
	"""
	if pdf_bytes == PREVIEW_PLACEHOLDER:
		return pdf_bytes
	if rasterizer is None:
		rasterizer = Rasterizer()
	try:
		image = rasterizer.render_first_page(pdf_bytes, PREVIEW_DPI)
		return encode_thumbnail(image)
	except Exception as error:
		# any backend failure degrades to the sentinel
		logger.error("Preview generation failed: %s", error)
		return PREVIEW_UNAVAILABLE


#============================================
def compress_photo(data: bytes) -> bytes:
	"""
	Shrink an uploaded photo to fit inside PHOTO_MAX_SIZE and re-encode it.

	Args:
		data: Uploaded image content.

	Returns:
		JPEG bytes, or the original content when it cannot be decoded.
	"""
	try:
		image = printdesk.convert.prepare_image(data, grayscale=False)
		image.thumbnail((PHOTO_MAX_SIZE, PHOTO_MAX_SIZE), PIL.Image.LANCZOS)
		buffer = io.BytesIO()
		image.save(buffer, format="JPEG", quality=PHOTO_QUALITY)
	except printdesk.convert.IMAGE_DECODE_ERRORS as error:
		logger.warning("Photo compression failed, keeping original: %s", error)
		return data
	return buffer.getvalue()
