import math

import pytest

import printdesk.config
import printdesk.imposition


GAP_POINTS = printdesk.config.GAP_POINTS
EPSILON = 0.001


#============================================
def _slot_box(slot: printdesk.config.Slot) -> tuple[float, float, float, float]:
	return (slot.x, slot.y, slot.x + slot.width, slot.y + slot.height)


#============================================
@pytest.mark.parametrize("pages_per_sheet", [2, 4])
def test_grid_boxes_within_page(pages_per_sheet: int) -> None:
	"""
	Ensure all slots are on-page.
	"""
	(page_width, page_height), slots = printdesk.imposition.compute_grid_slots(pages_per_sheet)
	assert len(slots) == pages_per_sheet
	for slot in slots:
		x0, y0, x1, y1 = _slot_box(slot)
		assert 0.0 <= x0 < x1 <= page_width + EPSILON
		assert 0.0 <= y0 < y1 <= page_height + EPSILON


#============================================
def test_two_up_is_landscape_with_gap() -> None:
	"""
	Two-up sheets are landscape A4 with a 5 mm gap between the slots.
	"""
	(page_width, page_height), slots = printdesk.imposition.compute_grid_slots(2)
	assert page_width > page_height
	assert (page_width, page_height) == printdesk.config.A4_LANDSCAPE
	left, right = slots
	assert right.x - (left.x + left.width) == pytest.approx(GAP_POINTS)
	assert left.height == pytest.approx(page_height)
	assert right.x + right.width == pytest.approx(page_width)


#============================================
def test_four_up_fill_order_and_gaps() -> None:
	"""
	Four-up slots fill top-left, top-right, bottom-left, bottom-right.
	"""
	(page_width, page_height), slots = printdesk.imposition.compute_grid_slots(4)
	assert page_height > page_width
	top_left, top_right, bottom_left, bottom_right = slots
	assert top_left.y > bottom_left.y
	assert top_right.x > top_left.x
	assert top_left.y == pytest.approx(top_right.y)
	assert bottom_left.y == pytest.approx(0.0)
	assert bottom_right.x - (bottom_left.x + bottom_left.width) == pytest.approx(GAP_POINTS)
	assert top_left.y - (bottom_left.y + bottom_left.height) == pytest.approx(GAP_POINTS)
	assert top_left.y + top_left.height == pytest.approx(page_height)


#============================================
@pytest.mark.parametrize("pages_per_sheet", [2, 4])
def test_grid_boxes_non_overlapping(pages_per_sheet: int) -> None:
	"""
	Ensure slots do not overlap.
	"""
	_page, slots = printdesk.imposition.compute_grid_slots(pages_per_sheet)
	for index, slot_a in enumerate(slots):
		for slot_b in slots[index + 1:]:
			a = _slot_box(slot_a)
			b = _slot_box(slot_b)
			overlap_x = min(a[2], b[2]) - max(a[0], b[0])
			overlap_y = min(a[3], b[3]) - max(a[1], b[1])
			assert overlap_x <= EPSILON or overlap_y <= EPSILON


#============================================
def test_unsupported_grid_raises() -> None:
	with pytest.raises(ValueError):
		printdesk.imposition.compute_grid_slots(3)


#============================================
@pytest.mark.parametrize(
	"source_size",
	[(595.28, 841.89), (841.89, 595.28), (100.0, 100.0), (300.0, 50.0), (40.0, 500.0)],
)
@pytest.mark.parametrize("pages_per_sheet", [2, 4])
def test_placement_preserves_aspect_and_fits(source_size, pages_per_sheet: int) -> None:
	"""
	Placed content keeps its aspect ratio, is centered and stays inside the slot.
	"""
	source_width, source_height = source_size
	_page, slots = printdesk.imposition.compute_grid_slots(pages_per_sheet)
	for slot in slots:
		placement = printdesk.imposition.compute_placement(source_width, source_height, slot)
		content_width = source_width * placement.scale
		content_height = source_height * placement.scale
		assert content_width / content_height == pytest.approx(source_width / source_height)
		if placement.rotate:
			assert placement.visual_width == pytest.approx(content_height)
			assert placement.visual_height == pytest.approx(content_width)
			left = placement.draw_x - placement.visual_width
		else:
			assert placement.visual_width == pytest.approx(content_width)
			left = placement.draw_x
		bottom = placement.draw_y
		assert left >= slot.x - EPSILON
		assert bottom >= slot.y - EPSILON
		assert left + placement.visual_width <= slot.x + slot.width + EPSILON
		assert bottom + placement.visual_height <= slot.y + slot.height + EPSILON
		# centered on both axes
		assert left - slot.x == pytest.approx(slot.x + slot.width - (left + placement.visual_width))
		assert bottom - slot.y == pytest.approx(slot.y + slot.height - (bottom + placement.visual_height))
		# touches the slot on at least one axis
		fills_width = math.isclose(placement.visual_width, slot.width, rel_tol=1e-9)
		fills_height = math.isclose(placement.visual_height, slot.height, rel_tol=1e-9)
		assert fills_width or fills_height


#============================================
def test_landscape_source_rotates_into_portrait_slot() -> None:
	"""
	Landscape pages are turned so portrait slots get upright, maximal content.
	"""
	_page, slots = printdesk.imposition.compute_grid_slots(2)
	slot = slots[0]
	landscape = printdesk.imposition.compute_placement(841.89, 595.28, slot)
	portrait = printdesk.imposition.compute_placement(595.28, 841.89, slot)
	assert landscape.rotate is True
	assert portrait.rotate is False
	assert landscape.visual_height > landscape.visual_width
	# rotated origin sits on the right edge of the visual box
	centered_x = slot.x + (slot.width - landscape.visual_width) / 2.0
	assert landscape.draw_x == pytest.approx(centered_x + landscape.visual_width)


#============================================
def test_square_source_is_not_rotated() -> None:
	_page, slots = printdesk.imposition.compute_grid_slots(4)
	placement = printdesk.imposition.compute_placement(200.0, 200.0, slots[0])
	assert placement.rotate is False
	assert placement.visual_width == pytest.approx(slots[0].width)
