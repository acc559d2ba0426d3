"""
Tests for QR and barcode generation.
"""

# Standard Library
import json

# PIP3 modules
import PIL.Image
import pytest

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.codes
import label_pack_composer.config
import label_pack_composer.errors
import label_pack_composer.models


Symbology = lpc.config.Symbology
QrPayloadMode = lpc.config.QrPayloadMode
ProductRecord = lpc.models.ProductRecord
CodeGenerationError = lpc.errors.CodeGenerationError
PLACEHOLDER = lpc.config.EAN13_PLACEHOLDER


#============================================
@pytest.mark.parametrize("value", ["590123412345", "5901234123457", "4006381333931", "000000000000"])
def test_valid_ean13_input_renders(value: str) -> None:
	barcode_input = lpc.codes.normalize_barcode_input(value, Symbology.EAN13)
	assert barcode_input.warning is None
	image, text = lpc.codes.render_barcode(barcode_input.digits, Symbology.EAN13)
	assert isinstance(image, PIL.Image.Image)
	assert image.width > 0 and image.height > 0
	assert len(text) == 13


#============================================
def test_thirteen_digits_are_cut_to_twelve() -> None:
	barcode_input = lpc.codes.normalize_barcode_input("5901234123450", Symbology.EAN13)
	assert barcode_input.digits == "590123412345"


#============================================
def test_check_digit_is_recomputed() -> None:
	"""
	A wrong 13th digit never reaches the encoded payload.
	"""
	barcode_input = lpc.codes.normalize_barcode_input("5901234123450", Symbology.EAN13)
	_image, text = lpc.codes.render_barcode(barcode_input.digits, Symbology.EAN13)
	assert text == "5901234123457"


#============================================
@pytest.mark.parametrize("value", ["bad!!", "", None, "12345", "12345678901234", "59012341234a", "５９０１２３４１２３４５"])
def test_invalid_input_uses_placeholder(value) -> None:
	barcode_input = lpc.codes.normalize_barcode_input(value, Symbology.EAN13)
	assert barcode_input.digits == PLACEHOLDER
	assert barcode_input.warning is not None
	image, _text = lpc.codes.render_barcode(barcode_input.digits, Symbology.EAN13)
	assert image.width > 0


#============================================
def test_code128_keeps_all_digits() -> None:
	barcode_input = lpc.codes.normalize_barcode_input("5901234123457", Symbology.CODE128)
	assert barcode_input.digits == "5901234123457"
	image, text = lpc.codes.render_barcode(barcode_input.digits, Symbology.CODE128)
	assert image.width > 0
	assert "5901234123457" in text


#============================================
def test_qr_payload_modes() -> None:
	product = ProductRecord(product_barcode="5901234123457", product_code="SKU-1")
	payload = lpc.codes.build_qr_payload("A1", product, QrPayloadMode.ORDER_SKU)
	assert json.loads(payload) == {"order": "A1", "sku": "SKU-1"}
	assert " " not in payload
	assert lpc.codes.build_qr_payload("A1", product, QrPayloadMode.BARCODE) == "5901234123457"
	assert lpc.codes.build_qr_payload("A1", product, QrPayloadMode.ORDER_ID) == "A1"


#============================================
def test_qr_renders_fixed_resolution() -> None:
	image = lpc.codes.render_qr("A1")
	assert image.mode == "RGB"
	assert image.width == image.height
	# box size and border drive the pixel size, not the drawn size
	modules = image.width // lpc.config.QR_BOX_SIZE
	assert modules == 21 + 2 * lpc.config.QR_BORDER


#============================================
def test_barcode_encoder_failure_is_tagged(monkeypatch: pytest.MonkeyPatch) -> None:
	def fail_build(digits, symbology):
		raise RuntimeError("encoder exploded")

	monkeypatch.setattr(lpc.codes, "build_barcode", fail_build)
	with pytest.raises(CodeGenerationError) as excinfo:
		lpc.codes.render_barcode("590123412345", Symbology.EAN13)
	assert excinfo.value.component == "barcode"
	assert excinfo.value.data == "590123412345"
	assert "encoder exploded" in str(excinfo.value)


#============================================
def test_qr_encoder_failure_is_tagged(monkeypatch: pytest.MonkeyPatch) -> None:
	class FailingQRCode:
		def __init__(self, **kwargs):
			pass

		def add_data(self, data):
			raise RuntimeError("qr exploded")

	monkeypatch.setattr(lpc.codes.qrcode, "QRCode", FailingQRCode)
	with pytest.raises(CodeGenerationError) as excinfo:
		lpc.codes.render_qr("A1")
	assert excinfo.value.component == "QR"
	assert "qr exploded" in str(excinfo.value)


#============================================
def test_code_assets_threaded_match_sequential() -> None:
	sequential = lpc.codes.render_code_assets("A1", "590123412345", Symbology.EAN13, workers=1)
	threaded = lpc.codes.render_code_assets("A1", "590123412345", Symbology.EAN13, workers=2)
	assert sequential.barcode_text == threaded.barcode_text
	assert sequential.qr.tobytes() == threaded.qr.tobytes()
	assert sequential.barcode.tobytes() == threaded.barcode.tobytes()


#============================================
def test_code_assets_skip_missing_kinds() -> None:
	assets = lpc.codes.render_code_assets("A1", None, Symbology.EAN13)
	assert assets.qr is not None
	assert assets.barcode is None
	assert assets.barcode_text == ""
