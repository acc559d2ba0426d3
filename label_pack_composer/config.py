"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses
import enum


MM_TO_POINTS = 2.83465
STICKER_WIDTH_MM = 58.0
STICKER_HEIGHT_MM = 40.0
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

DEFAULT_PADDING = 5.0
DEFAULT_GAP = 2.0
TEXT_LEADING = 1.2

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
SKU_TEXT_SIZE = 9.0
BARCODE_DIGITS_SIZE = 7.0
BRAND_TEXT_SIZE = 6.5
MIN_TEXT_SIZE = 4.0

# encoder output, independent of the drawn size
QR_BOX_SIZE = 10
QR_BORDER = 1
BARCODE_MODULE_WIDTH = 0.33
BARCODE_MODULE_HEIGHT = 15.0
BARCODE_QUIET_ZONE = 2.0
BARCODE_DPI = 300

EAN13_PLACEHOLDER = "590123412345"
FALLBACK_PRODUCT_BARCODE = "5901234123457"
DEFAULT_PRODUCT_CODE = ""
DEFAULT_QUANTITY = 2
DEFAULT_BRAND_TEXT = "BRAND"
DATA_URI_PREFIX = "data:application/pdf;base64,"

SHEET_COLUMNS = 3
SHEET_ROWS = 6
SHEET_MARGIN = 20.0
SHEET_SPACING = 10.0


class LayoutVariant(enum.Enum):
	DEFAULT = "default"
	MARKETPLACE_A = "marketplace_a"
	MARKETPLACE_B = "marketplace_b"


class QrPayloadMode(enum.Enum):
	ORDER_SKU = "order_sku"
	BARCODE = "barcode"
	ORDER_ID = "order_id"


class Symbology(enum.Enum):
	CODE128 = "CODE128"
	EAN13 = "EAN13"


@dataclasses.dataclass(frozen=True)
class VariantRules:
	working_frame: str = "native"
	qr_payload_mode: QrPayloadMode | None = None
	padding: float = DEFAULT_PADDING
	gap: float = DEFAULT_GAP
	qr_size: float = 0.0
	barcode_width: float = 0.0
	barcode_height: float = 0.0
	sku_text_size: float = SKU_TEXT_SIZE
	digits_text_size: float = BARCODE_DIGITS_SIZE
	brand_text_size: float = BRAND_TEXT_SIZE


DEFAULT_VARIANT_RULES = {
	LayoutVariant.DEFAULT: VariantRules(
		qr_size=58.0,
		barcode_width=56.0,
		barcode_height=58.0,
	),
	LayoutVariant.MARKETPLACE_A: VariantRules(
		qr_payload_mode=QrPayloadMode.BARCODE,
		qr_size=84.0,
		brand_text_size=7.0,
	),
	LayoutVariant.MARKETPLACE_B: VariantRules(
		working_frame="portrait",
		gap=3.0,
		barcode_width=100.0,
		barcode_height=60.0,
		digits_text_size=8.0,
		brand_text_size=7.0,
	),
}


@dataclasses.dataclass(frozen=True)
class SheetConfig:
	page_width: float
	page_height: float
	columns: int
	rows: int
	margin: float
	spacing: float


@dataclasses.dataclass(frozen=True)
class ComposerConfig:
	sticker_width: float
	sticker_height: float
	brand_text: str
	qr_payload_mode: QrPayloadMode
	symbology: Symbology
	default_quantity: int
	unknown_marketplace: str
	workers: int
	variant_rules: dict
	sheet: SheetConfig | None = None


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeters value.

	Returns:
		Points value.
	"""
	return value * MM_TO_POINTS


#============================================
def build_sheet_config() -> SheetConfig:
	"""
	Build the default A4 sticker sheet configuration.

	Returns:
		SheetConfig.
	"""
	return SheetConfig(
		page_width=mm_to_points(A4_WIDTH_MM),
		page_height=mm_to_points(A4_HEIGHT_MM),
		columns=SHEET_COLUMNS,
		rows=SHEET_ROWS,
		margin=SHEET_MARGIN,
		spacing=SHEET_SPACING,
	)


#============================================
def build_config(**overrides) -> ComposerConfig:
	"""
	Build the default composer config.

	Args:
		overrides: Field values replacing the defaults.

	Returns:
		ComposerConfig.
	"""
	config = ComposerConfig(
		sticker_width=mm_to_points(STICKER_WIDTH_MM),
		sticker_height=mm_to_points(STICKER_HEIGHT_MM),
		brand_text=DEFAULT_BRAND_TEXT,
		qr_payload_mode=QrPayloadMode.ORDER_SKU,
		symbology=Symbology.EAN13,
		default_quantity=DEFAULT_QUANTITY,
		unknown_marketplace="default",
		workers=1,
		variant_rules=dict(DEFAULT_VARIANT_RULES),
	)
	if overrides:
		config = dataclasses.replace(config, **overrides)
	if config.unknown_marketplace not in ("default", "error"):
		raise ValueError(f"unknown_marketplace must be 'default' or 'error', got {config.unknown_marketplace!r}")
	if config.workers < 1:
		raise ValueError(f"workers must be at least 1, got {config.workers}")
	return config
