"""
Sticker page drawing and orientation.
"""

# Standard Library
import io

# PIP3 modules
import PIL.Image
import pypdf
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.layout


PlacedElement = lpc.layout.PlacedElement

DEFAULT_FONT_REGULAR = lpc.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = lpc.config.DEFAULT_FONT_BOLD
MIN_TEXT_SIZE = lpc.config.MIN_TEXT_SIZE
TEXT_KINDS = lpc.layout.TEXT_KINDS
IMAGE_KINDS = lpc.layout.IMAGE_KINDS

FONT_BY_KIND = {
	"sku": DEFAULT_FONT_BOLD,
	"barcode_digits": DEFAULT_FONT_REGULAR,
	"brand": DEFAULT_FONT_BOLD,
}


#============================================
def fit_font_size(text: str, font_name: str, font_size: float, width: float, height: float) -> float:
	"""
	Shrink a font size until one line of text fits its box.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Preferred font size.
		width: Box width.
		height: Box height.

	Returns:
		Font size, never below MIN_TEXT_SIZE.
	"""
	text_width = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)
	scale_width = width / text_width if text_width > 0 else 1.0
	scale_height = height / font_size if font_size > 0 else 1.0
	scale = min(1.0, scale_width, scale_height)
	if scale >= 1.0:
		return font_size
	return max(MIN_TEXT_SIZE, font_size * scale)


#============================================
def draw_text_element(
	pdf: reportlab.pdfgen.canvas.Canvas,
	element: PlacedElement,
	text: str,
) -> None:
	"""
	Draw one centered line of text in the element's local frame.

	Args:
		pdf: ReportLab canvas, already transformed to the element frame.
		element: Placed text element.
		text: Text content.
	"""
	if not text:
		return
	width, height = lpc.layout.content_size(element)
	font_name = FONT_BY_KIND.get(element.kind, DEFAULT_FONT_REGULAR)
	font_size = fit_font_size(text, font_name, element.font_size, width, height)
	pdf.setFont(font_name, font_size)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)

	ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
	descent = reportlab.pdfbase.pdfmetrics.getDescent(font_name) * font_size / 1000.0
	# center the glyph box, descent is negative
	baseline_y = (height - (ascent - descent)) / 2.0 - descent
	pdf.drawCentredString(width / 2.0, baseline_y, text)


#============================================
def draw_image_element(
	pdf: reportlab.pdfgen.canvas.Canvas,
	element: PlacedElement,
	image_reader: reportlab.lib.utils.ImageReader,
) -> None:
	"""
	Draw a raster image stretched to the element's local frame.

	Args:
		pdf: ReportLab canvas, already transformed to the element frame.
		element: Placed image element.
		image_reader: ImageReader instance.
	"""
	width, height = lpc.layout.content_size(element)
	pdf.drawImage(
		image_reader,
		0.0,
		0.0,
		width=width,
		height=height,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)


#============================================
def draw_element(
	pdf: reportlab.pdfgen.canvas.Canvas,
	element: PlacedElement,
	assets: dict,
	image_cache: dict,
) -> None:
	"""
	Apply the element transform and draw its content.

	Args:
		pdf: ReportLab canvas.
		element: Placed element.
		assets: Mapping of kind to PIL image or text.
		image_cache: ImageReader cache keyed by kind.
	"""
	value = assets.get(element.kind)
	if value is None:
		return
	pdf.saveState()
	pdf.transform(*lpc.layout.element_transform(element))
	if element.kind in IMAGE_KINDS:
		if element.kind not in image_cache:
			image_cache[element.kind] = reportlab.lib.utils.ImageReader(value)
		draw_image_element(pdf, element, image_cache[element.kind])
	else:
		draw_text_element(pdf, element, str(value))
	pdf.restoreState()


#============================================
def render_sticker_page(
	elements: list[PlacedElement],
	assets: dict,
	page_width: float,
	page_height: float,
) -> bytes:
	"""
	Draw placed elements onto a single PDF page.

	Elements are drawn in the order given. Image kinds take PIL images,
	text kinds take strings; kinds missing from assets are skipped.

	Args:
		elements: Placed elements from compute_layout.
		assets: Mapping of element kind to content.
		page_width: Page width in points.
		page_height: Page height in points.

	Returns:
		Single-page PDF bytes.
	"""
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	image_cache: dict[str, reportlab.lib.utils.ImageReader] = {}
	for element in elements:
		draw_element(pdf, element, assets, image_cache)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()


#============================================
def rotate_to_physical(page_pdf: bytes, target_width: float, target_height: float) -> bytes:
	"""
	Copy a sticker page onto a page of the physical size, turned 90 degrees clockwise.

	The source page is expected to be target_height wide and target_width
	tall. Content is merged as vector data, not rasterized.

	Args:
		page_pdf: Single-page PDF bytes.
		target_width: Physical page width in points.
		target_height: Physical page height in points.

	Returns:
		Single-page PDF bytes.
	"""
	reader = pypdf.PdfReader(io.BytesIO(page_pdf))
	source_page = reader.pages[0]
	source_width = float(source_page.mediabox.width)
	source_height = float(source_page.mediabox.height)
	if abs(source_width - target_height) > 0.01 or abs(source_height - target_width) > 0.01:
		raise ValueError(
			f"source page {source_width:.2f}x{source_height:.2f} does not match "
			f"rotated target {target_width:.2f}x{target_height:.2f}"
		)

	writer = pypdf.PdfWriter()
	page = writer.add_blank_page(width=target_width, height=target_height)
	# (x, y) -> (y, source_width - x)
	transform = pypdf.Transformation().rotate(-90).translate(0.0, source_width)
	page.merge_transformed_page(source_page, transform)

	buffer = io.BytesIO()
	writer.write(buffer)
	return buffer.getvalue()


#============================================
def image_to_page(image: PIL.Image.Image, page_width: float, page_height: float) -> bytes:
	"""
	Fit a raster image onto a single page, centered.

	Args:
		image: PIL image.
		page_width: Page width in points.
		page_height: Page height in points.

	Returns:
		Single-page PDF bytes.
	"""
	image_width, image_height = image.size
	scale = min(page_width / image_width, page_height / image_height)
	draw_width = image_width * scale
	draw_height = image_height * scale
	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	pdf.drawImage(
		reportlab.lib.utils.ImageReader(image),
		(page_width - draw_width) / 2.0,
		(page_height - draw_height) / 2.0,
		width=draw_width,
		height=draw_height,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)
	pdf.showPage()
	pdf.save()
	return buffer.getvalue()
