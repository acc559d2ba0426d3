"""
Sticker layout geometry.

All boxes are in the unrotated page frame with the origin at the bottom
left, in points. A rotated element is drawn by translating to its pivot,
rotating by a multiple of 90 degrees, then translating by a counter offset
that puts the rotated content exactly on its box.
"""

# Standard Library
import dataclasses

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config


LayoutVariant = lpc.config.LayoutVariant
VariantRules = lpc.config.VariantRules

TEXT_LEADING = lpc.config.TEXT_LEADING
TEXT_KINDS = ("sku", "barcode_digits", "brand")
IMAGE_KINDS = ("qr", "barcode")

# exact cos/sin for quarter turns
QUARTER_TURNS = {
	0: (1, 0),
	90: (0, 1),
	180: (-1, 0),
	270: (0, -1),
}


@dataclasses.dataclass(frozen=True)
class PlacedElement:
	kind: str
	x: float
	y: float
	width: float
	height: float
	rotation: int = 0
	origin: tuple[float, float] | None = None
	font_size: float = 0.0


#============================================
def text_box_height(font_size: float) -> float:
	"""
	Height reserved for one line of text.
	"""
	return font_size * TEXT_LEADING


#============================================
def rotation_cos_sin(degrees: int) -> tuple[int, int]:
	"""
	Look up cos and sin for a quarter-turn rotation.

	Args:
		degrees: Rotation in degrees, counter-clockwise.

	Returns:
		Tuple of (cos, sin).
	"""
	normalized = degrees % 360
	if normalized not in QUARTER_TURNS:
		raise ValueError(f"rotation must be a multiple of 90 degrees, got {degrees}")
	return QUARTER_TURNS[normalized]


#============================================
def pivot_of(element: PlacedElement) -> tuple[float, float]:
	"""
	Rotation origin, defaulting to the box center.
	"""
	if element.origin is not None:
		return element.origin
	return (element.x + element.width / 2.0, element.y + element.height / 2.0)


#============================================
def content_size(element: PlacedElement) -> tuple[float, float]:
	"""
	Size of the element content in its own unrotated frame.

	Args:
		element: Placed element.

	Returns:
		Tuple of (width, height).
	"""
	cos_value, _sin_value = rotation_cos_sin(element.rotation)
	if cos_value == 0:
		return (element.height, element.width)
	return (element.width, element.height)


#============================================
def counter_offset(element: PlacedElement) -> tuple[float, float]:
	"""
	Compute the local translation applied after the rotation.

	Args:
		element: Placed element.

	Returns:
		Tuple of (offset_x, offset_y) in the rotated frame.
	"""
	cos_value, sin_value = rotation_cos_sin(element.rotation)
	pivot_x, pivot_y = pivot_of(element)
	local_width, local_height = content_size(element)
	corners = [(0.0, 0.0), (local_width, 0.0), (0.0, local_height), (local_width, local_height)]
	min_x = min(cos_value * cx - sin_value * cy for cx, cy in corners)
	min_y = min(sin_value * cx + cos_value * cy for cx, cy in corners)
	vector_x = element.x - pivot_x - min_x
	vector_y = element.y - pivot_y - min_y
	# inverse rotation is the transpose
	offset_x = cos_value * vector_x + sin_value * vector_y
	offset_y = -sin_value * vector_x + cos_value * vector_y
	return (offset_x, offset_y)


#============================================
def element_transform(element: PlacedElement) -> tuple[float, float, float, float, float, float]:
	"""
	Affine matrix from local content coordinates to page coordinates.

	Equivalent to translate(pivot), rotate(rotation), translate(counter_offset).

	Args:
		element: Placed element.

	Returns:
		Matrix (a, b, c, d, e, f) in PDF order.
	"""
	cos_value, sin_value = rotation_cos_sin(element.rotation)
	pivot_x, pivot_y = pivot_of(element)
	offset_x, offset_y = counter_offset(element)
	e = pivot_x + cos_value * offset_x - sin_value * offset_y
	f = pivot_y + sin_value * offset_x + cos_value * offset_y
	return (float(cos_value), float(sin_value), float(-sin_value), float(cos_value), e, f)


#============================================
def transform_point(
	matrix: tuple[float, float, float, float, float, float],
	x: float,
	y: float,
) -> tuple[float, float]:
	a, b, c, d, e, f = matrix
	return (a * x + c * y + e, b * x + d * y + f)


#============================================
def measure_element(element: PlacedElement) -> tuple[float, float, float, float]:
	"""
	Measure where the element content lands after its transform.

	Args:
		element: Placed element.

	Returns:
		Bounding box (x0, y0, x1, y1).
	"""
	matrix = element_transform(element)
	local_width, local_height = content_size(element)
	points = [
		transform_point(matrix, 0.0, 0.0),
		transform_point(matrix, local_width, 0.0),
		transform_point(matrix, 0.0, local_height),
		transform_point(matrix, local_width, local_height),
	]
	x_values = [point[0] for point in points]
	y_values = [point[1] for point in points]
	return (min(x_values), min(y_values), max(x_values), max(y_values))


#============================================
def working_frame_size(rules: VariantRules, width: float, height: float) -> tuple[float, float]:
	"""
	Page size the layout is built on.

	A portrait working frame swaps a landscape canvas; the finished page
	is turned back by the orientation adapter.

	Args:
		rules: Variant rules.
		width: Physical canvas width.
		height: Physical canvas height.

	Returns:
		Tuple of (width, height).
	"""
	if rules.working_frame == "portrait" and width > height:
		return (height, width)
	return (width, height)


#============================================
def stack_vertically(
	entries: list[tuple[str, float, float, float]],
	canvas_width: float,
	canvas_height: float,
	gap: float,
	left: float | None = None,
) -> list[PlacedElement]:
	"""
	Stack boxes top to bottom and center the stack vertically.

	Args:
		entries: List of (kind, width, height, font_size).
		canvas_width: Canvas width.
		canvas_height: Canvas height.
		gap: Gap between consecutive boxes.
		left: Shared left edge, or None to center each box horizontally.

	Returns:
		Placed elements in stacking order.
	"""
	total_height = sum(entry[2] for entry in entries) + gap * max(0, len(entries) - 1)
	cursor = (canvas_height + total_height) / 2.0
	elements: list[PlacedElement] = []
	for kind, width, height, font_size in entries:
		cursor -= height
		if left is None:
			x = (canvas_width - width) / 2.0
		else:
			x = left
		elements.append(PlacedElement(kind=kind, x=x, y=cursor, width=width, height=height, font_size=font_size))
		cursor -= gap
	return elements


#============================================
def layout_default(rules: VariantRules, canvas_width: float, canvas_height: float) -> list[PlacedElement]:
	"""
	QR and brand on the left, SKU turned 90 degrees in the middle band,
	barcode block turned 180 degrees on the right.
	"""
	padding = rules.padding
	gap = rules.gap
	brand_height = text_box_height(rules.brand_text_size)
	digits_height = text_box_height(rules.digits_text_size)

	left_block = stack_vertically(
		[
			("qr", rules.qr_size, rules.qr_size, 0.0),
			("brand", rules.qr_size, brand_height, rules.brand_text_size),
		],
		canvas_width,
		canvas_height,
		gap,
		left=padding,
	)

	barcode_x = canvas_width - padding - rules.barcode_width
	block_height = rules.barcode_height + gap + digits_height
	block_bottom = (canvas_height - block_height) / 2.0
	pivot = (barcode_x + rules.barcode_width / 2.0, canvas_height / 2.0)
	# after the half turn the digits sit above the bars
	barcode_element = PlacedElement(
		kind="barcode",
		x=barcode_x,
		y=block_bottom,
		width=rules.barcode_width,
		height=rules.barcode_height,
		rotation=180,
		origin=pivot,
	)
	digits_element = PlacedElement(
		kind="barcode_digits",
		x=barcode_x,
		y=block_bottom + rules.barcode_height + gap,
		width=rules.barcode_width,
		height=digits_height,
		rotation=180,
		origin=pivot,
		font_size=rules.digits_text_size,
	)

	band_left = padding + rules.qr_size + gap
	band_right = barcode_x - gap
	band_width = band_right - band_left
	if band_width <= 0.0:
		raise ValueError(f"no room for SKU text between QR and barcode ({band_width:.2f}pt)")
	sku_element = PlacedElement(
		kind="sku",
		x=band_left,
		y=padding,
		width=band_width,
		height=canvas_height - 2.0 * padding,
		rotation=90,
		font_size=rules.sku_text_size,
	)
	return left_block + [sku_element, barcode_element, digits_element]


#============================================
def layout_marketplace_a(rules: VariantRules, canvas_width: float, canvas_height: float) -> list[PlacedElement]:
	"""
	Single QR with the brand caption below, centered as one block.
	"""
	caption_width = canvas_width - 2.0 * rules.padding
	return stack_vertically(
		[
			("qr", rules.qr_size, rules.qr_size, 0.0),
			("brand", caption_width, text_box_height(rules.brand_text_size), rules.brand_text_size),
		],
		canvas_width,
		canvas_height,
		rules.gap,
	)


#============================================
def layout_marketplace_b(rules: VariantRules, canvas_width: float, canvas_height: float) -> list[PlacedElement]:
	"""
	SKU, barcode, barcode digits and brand stacked and centered.
	"""
	text_width = canvas_width - 2.0 * rules.padding
	return stack_vertically(
		[
			("sku", text_width, text_box_height(rules.sku_text_size), rules.sku_text_size),
			("barcode", rules.barcode_width, rules.barcode_height, 0.0),
			("barcode_digits", rules.barcode_width, text_box_height(rules.digits_text_size), rules.digits_text_size),
			("brand", text_width, text_box_height(rules.brand_text_size), rules.brand_text_size),
		],
		canvas_width,
		canvas_height,
		rules.gap,
	)


LAYOUT_BUILDERS = {
	LayoutVariant.DEFAULT: layout_default,
	LayoutVariant.MARKETPLACE_A: layout_marketplace_a,
	LayoutVariant.MARKETPLACE_B: layout_marketplace_b,
}


#============================================
def check_within_canvas(
	elements: list[PlacedElement],
	canvas_width: float,
	canvas_height: float,
	epsilon: float = 0.001,
) -> None:
	"""
	Raise ValueError when any element lands off the canvas.

	Args:
		elements: Placed elements.
		canvas_width: Canvas width.
		canvas_height: Canvas height.
		epsilon: Rounding tolerance.
	"""
	for element in elements:
		x0, y0, x1, y1 = measure_element(element)
		if x0 < -epsilon or y0 < -epsilon or x1 > canvas_width + epsilon or y1 > canvas_height + epsilon:
			raise ValueError(
				f"{element.kind} lands outside the {canvas_width:.2f}x{canvas_height:.2f} canvas: "
				f"({x0:.2f}, {y0:.2f}, {x1:.2f}, {y1:.2f})"
			)


#============================================
def compute_layout(
	variant: LayoutVariant,
	canvas_width: float,
	canvas_height: float,
	rules: VariantRules,
) -> list[PlacedElement]:
	"""
	Place the sticker elements for a layout variant.

	Args:
		variant: Layout variant.
		canvas_width: Working frame width in points.
		canvas_height: Working frame height in points.
		rules: Sizes and gaps for the variant.

	Returns:
		Placed elements in drawing order.
	"""
	builder = LAYOUT_BUILDERS[variant]
	elements = builder(rules, canvas_width, canvas_height)
	check_within_canvas(elements, canvas_width, canvas_height)
	return elements


#============================================
def required_kinds(variant: LayoutVariant, rules: VariantRules) -> set[str]:
	"""
	Element kinds a variant draws, without needing canvas dimensions.
	"""
	if variant == LayoutVariant.MARKETPLACE_A:
		return {"qr", "brand"}
	if variant == LayoutVariant.MARKETPLACE_B:
		return {"sku", "barcode", "barcode_digits", "brand"}
	return {"qr", "brand", "sku", "barcode", "barcode_digits"}
