"""
Immutable PDF document values passed between pipeline stages.
"""

# Standard Library
import dataclasses
import io

# PIP3 modules
import pypdf
import pypdf.errors

# local repo modules
import printdesk.config
import printdesk.errors


MAX_PAGES = printdesk.config.MAX_PAGES
PageLimitExceeded = printdesk.errors.PageLimitExceeded

PDF_READ_ERRORS = (pypdf.errors.PyPdfError, ValueError, KeyError, TypeError)


@dataclasses.dataclass(frozen=True)
class Document:
	data: bytes
	page_sizes: tuple[tuple[float, float], ...]

	@property
	def page_count(self) -> int:
		return len(self.page_sizes)

	@classmethod
	def from_bytes(cls, data: bytes) -> "Document":
		"""
		Load PDF bytes and measure their pages.

		Args:
			data: PDF file content.

		Returns:
			Document.
		"""
		reader = pypdf.PdfReader(io.BytesIO(data))
		sizes = tuple(page_display_size(page) for page in reader.pages)
		return cls(data=bytes(data), page_sizes=sizes)

	def reader(self) -> pypdf.PdfReader:
		return pypdf.PdfReader(io.BytesIO(self.data))


#============================================
def page_display_size(page: pypdf.PageObject) -> tuple[float, float]:
	"""
	Compute the visible size of a page after its /Rotate attribute.

	Args:
		page: PDF page.

	Returns:
		Tuple of (width, height) in points.
	"""
	width = float(page.mediabox.width)
	height = float(page.mediabox.height)
	if page.rotation % 180 == 90:
		return (height, width)
	return (width, height)


#============================================
def writer_to_document(writer: pypdf.PdfWriter) -> Document:
	"""
	Serialize a writer into a new Document.

	Args:
		writer: Populated PDF writer.

	Returns:
		Document.
	"""
	buffer = io.BytesIO()
	writer.write(buffer)
	return Document.from_bytes(buffer.getvalue())


#============================================
def enforce_page_limit(document: Document, limit: int = MAX_PAGES) -> Document:
	"""
	Fail when a document exceeds the page ceiling.

	Args:
		document: Document to check.
		limit: Maximum page count.

	Returns:
		The same document when within the limit.
	"""
	if document.page_count > limit:
		raise PageLimitExceeded(document.page_count, limit)
	return document
