"""
Label pack pipeline: order data and marketplace label in, merged PDF out.

Stages run in this order:
	1. decode and parse the marketplace label (fails fast)
	2. normalize the order and pick the layout variant
	3. per product: render code assets, compute layout, draw the page,
	   turn it to the physical orientation when needed
	4. assemble marketplace pages followed by sticker copies
"""

# Standard Library
import concurrent.futures
import dataclasses
import logging

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.assemble
import label_pack_composer.codes
import label_pack_composer.config
import label_pack_composer.errors
import label_pack_composer.layout
import label_pack_composer.models
import label_pack_composer.render


ComposerConfig = lpc.config.ComposerConfig
LayoutVariant = lpc.config.LayoutVariant
OrderRecord = lpc.models.OrderRecord
ProductRecord = lpc.models.ProductRecord
CodeGenerationError = lpc.errors.CodeGenerationError

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class StickerResult:
	pdf: bytes
	quantity: int
	warnings: list[str]


@dataclasses.dataclass
class ComposeResult:
	order_id: str
	variant: LayoutVariant
	pdf: bytes
	page_count: int
	sticker_count: int
	warnings: list[str]

	@property
	def filename(self) -> str:
		return f"label_{self.order_id}.pdf"


#============================================
def render_product_sticker(
	order: OrderRecord,
	product: ProductRecord,
	variant: LayoutVariant,
	config: ComposerConfig,
) -> StickerResult:
	"""
	Render the sticker page for one product.

	Args:
		order: Normalized order.
		product: Product to render.
		variant: Layout variant.
		config: Composer config.

	Returns:
		StickerResult with the page in physical orientation.
	"""
	rules = config.variant_rules[variant]
	kinds = lpc.layout.required_kinds(variant, rules)
	warnings: list[str] = []

	# placement does not depend on the rendered assets
	frame_width, frame_height = lpc.layout.working_frame_size(rules, config.sticker_width, config.sticker_height)
	elements = lpc.layout.compute_layout(variant, frame_width, frame_height, rules)

	qr_payload = None
	if "qr" in kinds:
		mode = rules.qr_payload_mode or config.qr_payload_mode
		qr_payload = lpc.codes.build_qr_payload(order.order_id, product, mode)
	barcode_digits = None
	if "barcode" in kinds:
		barcode_input = lpc.codes.normalize_barcode_input(product.product_barcode, config.symbology)
		if barcode_input.warning:
			warnings.append(barcode_input.warning)
		barcode_digits = barcode_input.digits

	try:
		code_assets = lpc.codes.render_code_assets(qr_payload, barcode_digits, config.symbology, config.workers)
	except CodeGenerationError as error:
		raise CodeGenerationError(error.component, error.data, error.detail, order.order_id) from error

	assets = {
		"qr": code_assets.qr,
		"barcode": code_assets.barcode,
		"barcode_digits": code_assets.barcode_text,
		"sku": product.product_code,
		"brand": config.brand_text,
	}
	page_pdf = lpc.render.render_sticker_page(elements, assets, frame_width, frame_height)
	if (frame_width, frame_height) != (config.sticker_width, config.sticker_height):
		page_pdf = lpc.render.rotate_to_physical(page_pdf, config.sticker_width, config.sticker_height)
	return StickerResult(pdf=page_pdf, quantity=product.quantity, warnings=warnings)


#============================================
def render_stickers(
	order: OrderRecord,
	variant: LayoutVariant,
	config: ComposerConfig,
) -> list[StickerResult]:
	"""
	Render one sticker page per product, keeping product order.

	Products render in a thread pool when config.workers > 1.
	"""
	if config.workers > 1 and len(order.products) > 1:
		with concurrent.futures.ThreadPoolExecutor(max_workers=config.workers) as executor:
			futures = [
				executor.submit(render_product_sticker, order, product, variant, config)
				for product in order.products
			]
			return [future.result() for future in futures]
	return [render_product_sticker(order, product, variant, config) for product in order.products]


#============================================
def compose_label_pack(
	order_data,
	marketplace_label,
	config: ComposerConfig | None = None,
) -> ComposeResult:
	"""
	Build the complete label pack for one order.

	Args:
		order_data: OrderRecord or raw order mapping (multi-product or legacy shape).
		marketplace_label: Marketplace label as bytes or base64 text.
		config: Composer config, defaults to build_config().

	Returns:
		ComposeResult with the merged PDF bytes.
	"""
	if config is None:
		config = lpc.config.build_config()

	warnings: list[str] = []
	if isinstance(order_data, OrderRecord):
		order = order_data
	else:
		order, order_warnings = lpc.models.order_from_dict(order_data, config.default_quantity)
		warnings.extend(order_warnings)
	order_id = order.order_id

	label_bytes = lpc.assemble.decode_marketplace_label(marketplace_label, order_id)
	marketplace = lpc.assemble.load_marketplace_document(label_bytes, order_id)

	try:
		variant, variant_warning = lpc.models.parse_variant(order.marketplace, config.unknown_marketplace)
	except lpc.errors.UnknownMarketplaceError as error:
		raise lpc.errors.UnknownMarketplaceError(error.message, order_id) from error
	if variant_warning:
		logger.warning("[order %s] %s", order_id, variant_warning)
		warnings.append(variant_warning)
	logger.info("order %s: %s layout, %d product(s)", order_id, variant.value, len(order.products))

	stickers = render_stickers(order, variant, config)
	for sticker in stickers:
		warnings.extend(sticker.warnings)

	pdf_bytes = lpc.assemble.assemble_document(
		marketplace,
		[(sticker.pdf, sticker.quantity) for sticker in stickers],
		config.sheet,
		order_id,
	)
	sticker_count = sum(sticker.quantity for sticker in stickers)
	if config.sheet is None:
		page_count = len(marketplace.pages) + sticker_count
	else:
		slots = config.sheet.columns * config.sheet.rows
		page_count = len(marketplace.pages) + (sticker_count + slots - 1) // slots
	return ComposeResult(
		order_id=order_id,
		variant=variant,
		pdf=pdf_bytes,
		page_count=page_count,
		sticker_count=sticker_count,
		warnings=warnings,
	)
