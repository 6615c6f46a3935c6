"""
Per-page duplication and N-up imposition onto A4 sheets.
"""

# Standard Library
import logging

# PIP3 modules
import pypdf

# local repo modules
import printdesk.config
import printdesk.document
import printdesk.errors


Document = printdesk.document.Document
PageLimitExceeded = printdesk.errors.PageLimitExceeded
Slot = printdesk.config.Slot
Placement = printdesk.config.Placement

A4_PORTRAIT = printdesk.config.A4_PORTRAIT
A4_LANDSCAPE = printdesk.config.A4_LANDSCAPE
GAP_POINTS = printdesk.config.GAP_POINTS
MAX_PAGES = printdesk.config.MAX_PAGES
SUPPORTED_PAGES_PER_SHEET = printdesk.config.SUPPORTED_PAGES_PER_SHEET

logger = logging.getLogger(__name__)


#============================================
def compute_grid_slots(pages_per_sheet: int) -> tuple[tuple[float, float], list[Slot]]:
	"""
	Compute the destination page size and its slots in fill order.

	Two-up sheets are landscape with two side-by-side slots. Four-up
	sheets are portrait with a 2x2 grid filled top-left, top-right,
	bottom-left, bottom-right.

	Args:
		pages_per_sheet: 2 or 4.

	Returns:
		Tuple of ((page_width, page_height), slots).
	"""
	if pages_per_sheet == 2:
		page_width, page_height = A4_LANDSCAPE
		slot_width = (page_width - GAP_POINTS) / 2.0
		slot_height = page_height
		slots = [
			Slot(0.0, 0.0, slot_width, slot_height),
			Slot(slot_width + GAP_POINTS, 0.0, slot_width, slot_height),
		]
		return ((page_width, page_height), slots)
	if pages_per_sheet == 4:
		page_width, page_height = A4_PORTRAIT
		slot_width = (page_width - GAP_POINTS) / 2.0
		slot_height = (page_height - GAP_POINTS) / 2.0
		top_y = slot_height + GAP_POINTS
		right_x = slot_width + GAP_POINTS
		slots = [
			Slot(0.0, top_y, slot_width, slot_height),
			Slot(right_x, top_y, slot_width, slot_height),
			Slot(0.0, 0.0, slot_width, slot_height),
			Slot(right_x, 0.0, slot_width, slot_height),
		]
		return ((page_width, page_height), slots)
	raise ValueError(f"Unsupported pages per sheet: {pages_per_sheet}")


#============================================
def compute_placement(source_width: float, source_height: float, slot: Slot) -> Placement:
	"""
	Fit a source page into a slot without distortion.

	Landscape pages going into a portrait slot are turned 90 degrees
	counter-clockwise. A counter-clockwise turn about the origin moves
	the content's lower-left corner to the lower-right corner of the
	visual box, so the draw origin is shifted by the visual width.

	Args:
		source_width: Source page width.
		source_height: Source page height.
		slot: Destination slot.

	Returns:
		Placement.
	"""
	rotate = source_width > source_height and slot.height > slot.width
	effective_width = source_width
	effective_height = source_height
	if rotate:
		effective_width = source_height
		effective_height = source_width

	scale = min(slot.width / effective_width, slot.height / effective_height)
	visual_width = effective_width * scale
	visual_height = effective_height * scale
	centered_x = slot.x + (slot.width - visual_width) / 2.0
	centered_y = slot.y + (slot.height - visual_height) / 2.0

	draw_x = centered_x
	if rotate:
		draw_x = centered_x + visual_width
	return Placement(
		scale=scale,
		rotate=rotate,
		draw_x=draw_x,
		draw_y=centered_y,
		visual_width=visual_width,
		visual_height=visual_height,
	)


#============================================
def build_transformation(
	placement: Placement,
	origin_x: float = 0.0,
	origin_y: float = 0.0,
) -> pypdf.Transformation:
	"""
	Build the page transformation for a placement.

	Args:
		placement: Computed placement.
		origin_x: Source mediabox left edge.
		origin_y: Source mediabox bottom edge.

	Returns:
		pypdf Transformation.
	"""
	transform = pypdf.Transformation().translate(-origin_x, -origin_y)
	if placement.rotate:
		transform = transform.rotate(90)
	transform = transform.scale(placement.scale, placement.scale).translate(
		placement.draw_x,
		placement.draw_y,
	)
	return transform


#============================================
def normalized_source_pages(document: Document) -> list[pypdf.PageObject]:
	"""
	Read source pages with any /Rotate attribute baked into the content.

	Args:
		document: Source document.

	Returns:
		List of page objects.
	"""
	reader = document.reader()
	pages = []
	for page in reader.pages:
		if page.rotation % 360 != 0:
			page.transfer_rotation_to_content()
		pages.append(page)
	return pages


#============================================
def duplicate_pages(document: Document, copies: int, limit: int = MAX_PAGES) -> Document:
	"""
	Repeat each page consecutively (A, B becomes A, A, B, B).

	Args:
		document: Source document.
		copies: Copies of every page.
		limit: Page ceiling for the result, checked before any page is written.

	Returns:
		New Document with copies * page_count pages.
	"""
	if copies <= 1:
		return document
	total_pages = document.page_count * copies
	if total_pages > limit:
		raise PageLimitExceeded(total_pages, limit)
	reader = document.reader()
	writer = pypdf.PdfWriter()
	for page in reader.pages:
		for _ in range(copies):
			writer.add_page(page)
	result = printdesk.document.writer_to_document(writer)
	logger.debug("Duplicated %d page(s) x%d -> %d", document.page_count, copies, result.page_count)
	return result


#============================================
def impose_n_up(document: Document, pages_per_sheet: int) -> Document:
	"""
	Impose source pages onto A4 sheets, 2 or 4 per sheet.

	A trailing partial group only fills the slots it has pages for.

	Args:
		document: Source document.
		pages_per_sheet: 2 or 4.

	Returns:
		New Document with ceil(page_count / pages_per_sheet) pages.
	"""
	if pages_per_sheet not in SUPPORTED_PAGES_PER_SHEET:
		raise ValueError(f"Unsupported pages per sheet: {pages_per_sheet}")
	(page_width, page_height), slots = compute_grid_slots(pages_per_sheet)
	writer = pypdf.PdfWriter()

	source_pages = normalized_source_pages(document)
	for index, source_page in enumerate(source_pages):
		slot_index = index % pages_per_sheet
		if slot_index == 0:
			page = pypdf.PageObject.create_blank_page(
				width=page_width,
				height=page_height,
			)
			writer.add_page(page)

		page = writer.pages[-1]
		box = source_page.mediabox
		placement = compute_placement(float(box.width), float(box.height), slots[slot_index])
		transform = build_transformation(placement, float(box.left), float(box.bottom))
		page.merge_transformed_page(source_page, transform)

	result = printdesk.document.writer_to_document(writer)
	logger.debug(
		"Imposed %d page(s) %d-up -> %d sheet(s)",
		document.page_count,
		pages_per_sheet,
		result.page_count,
	)
	return result
