"""
QR code and 1-D barcode raster generation.
"""

# Standard Library
import concurrent.futures
import dataclasses
import json
import logging

# PIP3 modules
import barcode
import barcode.base
import barcode.writer
import PIL.Image
import qrcode
import qrcode.constants

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.errors
import label_pack_composer.models


QrPayloadMode = lpc.config.QrPayloadMode
Symbology = lpc.config.Symbology
ProductRecord = lpc.models.ProductRecord
CodeGenerationError = lpc.errors.CodeGenerationError

EAN13_PLACEHOLDER = lpc.config.EAN13_PLACEHOLDER
QR_BOX_SIZE = lpc.config.QR_BOX_SIZE
QR_BORDER = lpc.config.QR_BORDER
BARCODE_MODULE_WIDTH = lpc.config.BARCODE_MODULE_WIDTH
BARCODE_MODULE_HEIGHT = lpc.config.BARCODE_MODULE_HEIGHT
BARCODE_QUIET_ZONE = lpc.config.BARCODE_QUIET_ZONE
BARCODE_DPI = lpc.config.BARCODE_DPI

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class BarcodeInput:
	digits: str
	warning: str | None = None


@dataclasses.dataclass
class CodeAssets:
	qr: PIL.Image.Image | None
	barcode: PIL.Image.Image | None
	barcode_text: str


#============================================
def build_qr_payload(order_id: str, product: ProductRecord, mode: QrPayloadMode) -> str:
	"""
	Build the QR payload text for one product.

	Args:
		order_id: Order identifier.
		product: Product record.
		mode: Payload policy.

	Returns:
		Payload string.
	"""
	if mode == QrPayloadMode.BARCODE:
		return product.product_barcode or order_id
	if mode == QrPayloadMode.ORDER_ID:
		return order_id
	payload = {"order": order_id, "sku": product.product_code}
	return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


#============================================
def normalize_barcode_input(value: str | None, symbology: Symbology) -> BarcodeInput:
	"""
	Validate product barcode digits before encoding.

	Accepts 12 or 13 numeric digits. For EAN13 a 13 digit value is cut to
	its first 12 digits so the encoder recomputes the check digit. Anything
	else is replaced by EAN13_PLACEHOLDER.

	Args:
		value: Raw product barcode.
		symbology: Target barcode symbology.

	Returns:
		BarcodeInput with the digits to encode and an optional warning.
	"""
	digits = (value or "").strip()
	if not digits.isascii() or not digits.isdigit() or len(digits) not in (12, 13):
		warning = f"invalid product barcode {value!r}, using placeholder {EAN13_PLACEHOLDER}"
		logger.warning(warning)
		return BarcodeInput(digits=EAN13_PLACEHOLDER, warning=warning)
	# TODO: validate the supplied 13th digit instead of discarding it
	if symbology == Symbology.EAN13 and len(digits) == 13:
		digits = digits[:12]
	return BarcodeInput(digits=digits)


#============================================
def render_qr(payload: str) -> PIL.Image.Image:
	"""
	Render a QR code image.

	Args:
		payload: Text to encode.

	Returns:
		RGB PIL image.
	"""
	try:
		qr = qrcode.QRCode(
			version=None,
			error_correction=qrcode.constants.ERROR_CORRECT_M,
			box_size=QR_BOX_SIZE,
			border=QR_BORDER,
		)
		qr.add_data(payload)
		qr.make(fit=True)
		image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
	except Exception as error:
		raise CodeGenerationError("QR", payload, str(error)) from error
	return image


#============================================
def build_barcode(digits: str, symbology: Symbology) -> barcode.base.Barcode:
	"""
	Build a python-barcode object with an image writer.

	Args:
		digits: Validated digits.
		symbology: Barcode symbology.

	Returns:
		Barcode instance.
	"""
	barcode_class = barcode.get_barcode_class(symbology.value.lower())
	return barcode_class(digits, writer=barcode.writer.ImageWriter())


#============================================
def render_barcode(digits: str, symbology: Symbology) -> tuple[PIL.Image.Image, str]:
	"""
	Render a 1-D barcode image.

	Args:
		digits: Validated digits from normalize_barcode_input.
		symbology: Barcode symbology.

	Returns:
		Tuple of (RGB PIL image, human readable code text).
	"""
	try:
		code = build_barcode(digits, symbology)
		image = code.render(
			writer_options={
				"module_width": BARCODE_MODULE_WIDTH,
				"module_height": BARCODE_MODULE_HEIGHT,
				"quiet_zone": BARCODE_QUIET_ZONE,
				"dpi": BARCODE_DPI,
				"write_text": False,
			}
		)
		text = code.get_fullcode()
	except Exception as error:
		raise CodeGenerationError("barcode", digits, str(error)) from error
	return (image.convert("RGB"), text)


#============================================
def render_code_assets(
	qr_payload: str | None,
	barcode_digits: str | None,
	symbology: Symbology,
	workers: int = 1,
) -> CodeAssets:
	"""
	Render the QR and barcode images for one sticker.

	The two encoders are independent; with workers > 1 they run in a
	thread pool.

	Args:
		qr_payload: QR text, or None when the layout has no QR.
		barcode_digits: Barcode digits, or None when the layout has no barcode.
		symbology: Barcode symbology.
		workers: Thread count.

	Returns:
		CodeAssets.
	"""
	if workers > 1 and qr_payload is not None and barcode_digits is not None:
		with concurrent.futures.ThreadPoolExecutor(max_workers=2) as executor:
			qr_future = executor.submit(render_qr, qr_payload)
			barcode_future = executor.submit(render_barcode, barcode_digits, symbology)
			qr_image = qr_future.result()
			barcode_image, barcode_text = barcode_future.result()
		return CodeAssets(qr=qr_image, barcode=barcode_image, barcode_text=barcode_text)

	qr_image = None
	if qr_payload is not None:
		qr_image = render_qr(qr_payload)
	barcode_image = None
	barcode_text = ""
	if barcode_digits is not None:
		barcode_image, barcode_text = render_barcode(barcode_digits, symbology)
	return CodeAssets(qr=qr_image, barcode=barcode_image, barcode_text=barcode_text)
