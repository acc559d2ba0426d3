"""
Marketplace label decoding and final document assembly.
"""

# Standard Library
import base64
import binascii
import io
import logging
import re

# PIP3 modules
import PIL.Image
import pypdf

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.errors
import label_pack_composer.render


SheetConfig = lpc.config.SheetConfig
MarketplaceDocumentError = lpc.errors.MarketplaceDocumentError
AssemblyError = lpc.errors.AssemblyError

A4_WIDTH = lpc.config.mm_to_points(lpc.config.A4_WIDTH_MM)
A4_HEIGHT = lpc.config.mm_to_points(lpc.config.A4_HEIGHT_MM)

DATA_URI_PATTERN = re.compile(r"^\s*data:[\w.+-]+/[\w.+-]+;base64,", re.IGNORECASE)
PDF_MAGIC = b"%PDF"
PDF_HEADER_WINDOW = 1024
IMAGE_MAGICS = (
	b"\x89PNG\r\n\x1a\n",
	b"\xff\xd8\xff",
)

logger = logging.getLogger(__name__)


#============================================
def decode_marketplace_label(label, order_id: str | None = None) -> bytes:
	"""
	Turn a marketplace label into raw document bytes.

	Strings are base64 text, optionally behind a data URI prefix such as
	"data:application/pdf;base64,". Bytes are taken as is.

	Args:
		label: Label as bytes or base64 text.
		order_id: Order id for error context.

	Returns:
		Raw document bytes.
	"""
	if isinstance(label, (bytes, bytearray, memoryview)):
		data = bytes(label)
	elif isinstance(label, str):
		# base64 tools wrap lines at 76 columns
		text = "".join(DATA_URI_PATTERN.sub("", label, count=1).split())
		try:
			data = base64.b64decode(text, validate=True)
		except (binascii.Error, ValueError) as error:
			raise MarketplaceDocumentError(f"marketplace label is not valid base64: {error}", order_id) from error
	else:
		raise MarketplaceDocumentError(
			f"invalid marketplace label format: {type(label).__name__}",
			order_id,
		)
	if not data:
		raise MarketplaceDocumentError("marketplace label is empty", order_id)
	return data


#============================================
def find_pdf_header(data: bytes) -> int:
	"""
	Offset of the %PDF header within the first kilobyte, or -1.
	"""
	return data[:PDF_HEADER_WINDOW].find(PDF_MAGIC)


#============================================
def detect_document_kind(data: bytes) -> str | None:
	"""
	Sniff the document type from its leading bytes.

	Returns:
		"pdf", "image" or None.
	"""
	for magic in IMAGE_MAGICS:
		if data.startswith(magic):
			return "image"
	if find_pdf_header(data) >= 0:
		return "pdf"
	return None


#============================================
def load_marketplace_document(data: bytes, order_id: str | None = None) -> pypdf.PdfReader:
	"""
	Parse marketplace label bytes into a PDF reader.

	A PNG or JPEG label becomes one A4 page with the image fitted and
	centered.

	Args:
		data: Raw label bytes.
		order_id: Order id for error context.

	Returns:
		PdfReader with at least one page.
	"""
	kind = detect_document_kind(data)
	if kind is None:
		raise MarketplaceDocumentError("marketplace label is neither a PDF nor a PNG/JPEG image", order_id)

	if kind == "image":
		try:
			with PIL.Image.open(io.BytesIO(data)) as image:
				image.load()
				page_pdf = lpc.render.image_to_page(image.convert("RGB"), A4_WIDTH, A4_HEIGHT)
		except (OSError, PIL.Image.DecompressionBombError) as error:
			raise MarketplaceDocumentError(f"cannot read marketplace label image: {error}", order_id) from error
		data = page_pdf
	else:
		# some exporters put junk before the header
		data = data[find_pdf_header(data):]

	try:
		reader = pypdf.PdfReader(io.BytesIO(data))
		page_count = len(reader.pages)
	except Exception as error:
		raise MarketplaceDocumentError(f"cannot parse marketplace label PDF: {error}", order_id) from error
	if page_count == 0:
		raise MarketplaceDocumentError("marketplace label PDF has no pages", order_id)
	logger.debug("marketplace label: %s, %d page(s)", kind, page_count)
	return reader


#============================================
def sheet_slot_origin(sheet: SheetConfig, slot: int, sticker_width: float, sticker_height: float) -> tuple[float, float]:
	"""
	Bottom-left corner of a sticker slot on a sheet.

	Slots fill left to right, then top to bottom.

	Args:
		sheet: Sheet configuration.
		slot: Slot index on the sheet.
		sticker_width: Sticker width in points.
		sticker_height: Sticker height in points.

	Returns:
		Tuple of (x, y).
	"""
	row = slot // sheet.columns
	col = slot % sheet.columns
	x = sheet.margin + col * (sticker_width + sheet.spacing)
	y = sheet.page_height - sheet.margin - sticker_height - row * (sticker_height + sheet.spacing)
	return (x, y)


#============================================
def check_sheet_fits(sheet: SheetConfig, sticker_width: float, sticker_height: float) -> None:
	"""
	Raise ValueError when the sheet grid runs off the page.
	"""
	grid_width = 2.0 * sheet.margin + sheet.columns * sticker_width + (sheet.columns - 1) * sheet.spacing
	grid_height = 2.0 * sheet.margin + sheet.rows * sticker_height + (sheet.rows - 1) * sheet.spacing
	if grid_width > sheet.page_width + 0.001 or grid_height > sheet.page_height + 0.001:
		raise ValueError(
			f"{sheet.columns}x{sheet.rows} sticker grid ({grid_width:.1f}x{grid_height:.1f}pt) "
			f"does not fit a {sheet.page_width:.1f}x{sheet.page_height:.1f}pt sheet"
		)


#============================================
def copy_sticker_page(sticker_pdf: bytes) -> pypdf.PageObject:
	"""
	Independent page object for one sticker copy.
	"""
	reader = pypdf.PdfReader(io.BytesIO(sticker_pdf))
	return reader.pages[0]


#============================================
def append_sticker_pages(writer: pypdf.PdfWriter, sticker_pages: list[tuple[bytes, int]]) -> int:
	"""
	Append quantity copies of each sticker page, one sticker per page.

	Returns:
		Number of pages appended.
	"""
	added = 0
	for sticker_pdf, quantity in sticker_pages:
		for _copy in range(quantity):
			writer.add_page(copy_sticker_page(sticker_pdf))
			added += 1
	return added


#============================================
def impose_sticker_sheets(
	writer: pypdf.PdfWriter,
	sticker_pages: list[tuple[bytes, int]],
	sheet: SheetConfig,
) -> int:
	"""
	Impose sticker copies onto sheets in a grid.

	Copies keep product order and stay contiguous; a new sheet starts when
	the current one is full.

	Returns:
		Number of sheets appended.
	"""
	slots_per_sheet = sheet.columns * sheet.rows
	index = 0
	sheets = 0
	for sticker_pdf, quantity in sticker_pages:
		for _copy in range(quantity):
			sticker_page = copy_sticker_page(sticker_pdf)
			sticker_width = float(sticker_page.mediabox.width)
			sticker_height = float(sticker_page.mediabox.height)
			slot = index % slots_per_sheet
			if slot == 0:
				check_sheet_fits(sheet, sticker_width, sticker_height)
				writer.add_blank_page(width=sheet.page_width, height=sheet.page_height)
				sheets += 1
			page = writer.pages[-1]
			x, y = sheet_slot_origin(sheet, slot, sticker_width, sticker_height)
			page.merge_transformed_page(sticker_page, pypdf.Transformation().translate(x, y))
			index += 1
	return sheets


#============================================
def assemble_document(
	marketplace: pypdf.PdfReader,
	sticker_pages: list[tuple[bytes, int]],
	sheet: SheetConfig | None = None,
	order_id: str | None = None,
) -> bytes:
	"""
	Build the final document: marketplace pages, then sticker copies.

	Args:
		marketplace: Parsed marketplace label.
		sticker_pages: Ordered (sticker PDF bytes, quantity) per product.
		sheet: Sheet layout, or None for one sticker per page.
		order_id: Order id for error context.

	Returns:
		Final PDF bytes.
	"""
	writer = pypdf.PdfWriter()
	try:
		for page in marketplace.pages:
			writer.add_page(page)
		if sheet is None:
			added = append_sticker_pages(writer, sticker_pages)
		else:
			added = impose_sticker_sheets(writer, sticker_pages, sheet)
		buffer = io.BytesIO()
		writer.write(buffer)
	except Exception as error:
		raise AssemblyError(f"page copy failed: {error}", order_id) from error
	logger.info(
		"assembled %d marketplace page(s) and %d sticker page(s)",
		len(marketplace.pages),
		added,
	)
	return buffer.getvalue()
