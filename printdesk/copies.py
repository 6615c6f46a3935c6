"""
Whole-document copy multiplication.
"""

# PIP3 modules
import pypdf

# local repo modules
import printdesk.config
import printdesk.document
import printdesk.errors


Document = printdesk.document.Document
PageLimitExceeded = printdesk.errors.PageLimitExceeded

MAX_PAGES = printdesk.config.MAX_PAGES


#============================================
def multiply_whole_document(document: Document, copies: int, limit: int = MAX_PAGES) -> Document:
	"""
	Repeat the full page sequence (A, B becomes A, B, A, B).

	Args:
		document: Finished document.
		copies: Number of full copies.
		limit: Page ceiling for the result.

	Returns:
		New Document with copies * page_count pages.
	"""
	if copies <= 1:
		return printdesk.document.enforce_page_limit(document, limit)
	total_pages = document.page_count * copies
	if total_pages > limit:
		raise PageLimitExceeded(total_pages, limit)

	reader = document.reader()
	writer = pypdf.PdfWriter()
	for _ in range(copies):
		for page in reader.pages:
			writer.add_page(page)
	result = printdesk.document.writer_to_document(writer)
	return printdesk.document.enforce_page_limit(result, limit)
