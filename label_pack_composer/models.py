"""
Order records and marketplace variant parsing.
"""

# Standard Library
import dataclasses
import logging

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.errors


LayoutVariant = lpc.config.LayoutVariant
UnknownMarketplaceError = lpc.errors.UnknownMarketplaceError

DEFAULT_QUANTITY = lpc.config.DEFAULT_QUANTITY
DEFAULT_PRODUCT_CODE = lpc.config.DEFAULT_PRODUCT_CODE
FALLBACK_PRODUCT_BARCODE = lpc.config.FALLBACK_PRODUCT_BARCODE

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class ProductRecord:
	product_barcode: str
	product_code: str = DEFAULT_PRODUCT_CODE
	quantity: int = DEFAULT_QUANTITY

	def __post_init__(self):
		if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
			raise ValueError(f"quantity must be a positive integer, got {self.quantity!r}")


@dataclasses.dataclass(frozen=True)
class OrderRecord:
	order_id: str
	marketplace: str
	products: tuple[ProductRecord, ...]


#============================================
def parse_variant(value: str | None, policy: str = "default") -> tuple[LayoutVariant, str | None]:
	"""
	Parse a marketplace string into a layout variant.

	Matching is case-insensitive and ignores surrounding whitespace;
	hyphens and spaces count as underscores.

	Args:
		value: Marketplace string from the order.
		policy: "default" maps unknown values to DEFAULT, "error" raises.

	Returns:
		Tuple of (variant, warning message or None).
	"""
	normalized = (value or "").strip().lower().replace("-", "_").replace(" ", "_")
	if not normalized:
		return (LayoutVariant.DEFAULT, None)
	for variant in LayoutVariant:
		if variant.value == normalized:
			return (variant, None)
	if policy == "error":
		raise UnknownMarketplaceError(f"unknown marketplace {value!r}")
	warning = f"unknown marketplace {value!r}, using default layout"
	return (LayoutVariant.DEFAULT, warning)


#============================================
def parse_quantity(value, default_quantity: int) -> tuple[int, str | None]:
	"""
	Parse a product quantity.

	Args:
		value: Raw quantity value or None.
		default_quantity: Quantity used when the value is missing or invalid.

	Returns:
		Tuple of (quantity, warning message or None).
	"""
	if value is None:
		return (default_quantity, None)
	try:
		quantity = int(value)
	except (TypeError, ValueError):
		return (default_quantity, f"invalid quantity {value!r}, using {default_quantity}")
	if quantity < 1:
		return (default_quantity, f"quantity {quantity} below 1, using {default_quantity}")
	return (quantity, None)


#============================================
def order_from_dict(data: dict, default_quantity: int = DEFAULT_QUANTITY) -> tuple[OrderRecord, list[str]]:
	"""
	Normalize raw order data into an OrderRecord.

	Accepts the multi-product shape with a "products" list and the legacy
	single-product shape with top-level "product_barcode"/"product_code".

	Args:
		data: Raw order mapping.
		default_quantity: Quantity for products that do not give one.

	Returns:
		Tuple of (OrderRecord, warning messages).
	"""
	warnings: list[str] = []
	order_id = str(data.get("order_id") or "").strip()
	if not order_id:
		raise ValueError("order_id is required")

	raw_products = data.get("products")
	if not raw_products:
		raw_products = [
			{
				"product_barcode": data.get("product_barcode"),
				"product_code": data.get("product_code"),
				"quantity": data.get("quantity"),
			}
		]
	if not isinstance(raw_products, list) or not all(isinstance(raw, dict) for raw in raw_products):
		raise ValueError("products must be a list of objects")

	products: list[ProductRecord] = []
	for raw in raw_products:
		barcode_value = str(raw.get("product_barcode") or "").strip()
		product_code = raw.get("product_code")
		if product_code is None:
			warnings.append(f"missing product_code for barcode {barcode_value!r}")
			product_code = DEFAULT_PRODUCT_CODE
		quantity, warning = parse_quantity(raw.get("quantity"), default_quantity)
		if warning:
			warnings.append(warning)
		products.append(
			ProductRecord(
				product_barcode=barcode_value,
				product_code=str(product_code).strip(),
				quantity=quantity,
			)
		)

	if not any(product.product_barcode for product in products):
		warnings.append(f"no product barcode in order {order_id}, using {FALLBACK_PRODUCT_BARCODE}")
		products[0] = dataclasses.replace(products[0], product_barcode=FALLBACK_PRODUCT_BARCODE)

	for message in warnings:
		logger.warning("[order %s] %s", order_id, message)

	order = OrderRecord(
		order_id=order_id,
		marketplace=str(data.get("marketplace") or "default"),
		products=tuple(products),
	)
	return (order, warnings)
