"""
Tests for order normalization and variant parsing.
"""

# PIP3 modules
import pytest

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.errors
import label_pack_composer.models


LayoutVariant = lpc.config.LayoutVariant


#============================================
@pytest.mark.parametrize(
	"value, expected",
	[
		("default", LayoutVariant.DEFAULT),
		("  Marketplace_A ", LayoutVariant.MARKETPLACE_A),
		("MARKETPLACE-B", LayoutVariant.MARKETPLACE_B),
		("marketplace b", LayoutVariant.MARKETPLACE_B),
		("", LayoutVariant.DEFAULT),
		(None, LayoutVariant.DEFAULT),
	],
)
def test_parse_variant_known(value, expected) -> None:
	variant, warning = lpc.models.parse_variant(value)
	assert variant == expected
	assert warning is None


#============================================
def test_parse_variant_unknown_defaults_with_warning() -> None:
	variant, warning = lpc.models.parse_variant("somewhere-else")
	assert variant == LayoutVariant.DEFAULT
	assert "somewhere-else" in warning


#============================================
def test_parse_variant_unknown_error_policy() -> None:
	with pytest.raises(lpc.errors.UnknownMarketplaceError):
		lpc.models.parse_variant("somewhere-else", policy="error")


#============================================
def test_multi_product_order() -> None:
	order, warnings = lpc.models.order_from_dict(
		{
			"order_id": " A1 ",
			"marketplace": "marketplace_a",
			"products": [
				{"product_barcode": "5901234123457", "product_code": "SKU-1", "quantity": 3},
				{"product_barcode": "4006381333931", "product_code": "SKU-2"},
			],
		}
	)
	assert warnings == []
	assert order.order_id == "A1"
	assert order.marketplace == "marketplace_a"
	assert [product.product_code for product in order.products] == ["SKU-1", "SKU-2"]
	assert [product.quantity for product in order.products] == [3, lpc.config.DEFAULT_QUANTITY]


#============================================
def test_legacy_single_product_shape() -> None:
	order, warnings = lpc.models.order_from_dict(
		{"order_id": "A1", "product_barcode": "5901234123457", "product_code": "SKU-1"}
	)
	assert warnings == []
	assert len(order.products) == 1
	product = order.products[0]
	assert product.product_barcode == "5901234123457"
	assert product.product_code == "SKU-1"
	assert product.quantity == 2
	assert order.marketplace == "default"


#============================================
def test_missing_barcode_uses_fallback(caplog: pytest.LogCaptureFixture) -> None:
	with caplog.at_level("WARNING"):
		order, warnings = lpc.models.order_from_dict({"order_id": "A1", "product_code": "SKU-1"})
	assert order.products[0].product_barcode == lpc.config.FALLBACK_PRODUCT_BARCODE
	assert any("no product barcode" in message for message in warnings)
	assert "no product barcode" in caplog.text


#============================================
def test_missing_product_code_is_a_warning() -> None:
	order, warnings = lpc.models.order_from_dict({"order_id": "A1", "product_barcode": "5901234123457"})
	assert order.products[0].product_code == lpc.config.DEFAULT_PRODUCT_CODE
	assert any("missing product_code" in message for message in warnings)


#============================================
@pytest.mark.parametrize("raw", [0, -1, "many", 1.5j])
def test_bad_quantity_falls_back(raw) -> None:
	quantity, warning = lpc.models.parse_quantity(raw, 2)
	assert quantity == 2
	assert warning is not None


#============================================
def test_missing_order_id_rejected() -> None:
	with pytest.raises(ValueError):
		lpc.models.order_from_dict({"order_id": "  ", "product_barcode": "5901234123457"})


#============================================
@pytest.mark.parametrize("quantity", [0, -3, 1.5, "2", True])
def test_product_record_rejects_bad_quantity(quantity) -> None:
	with pytest.raises(ValueError):
		lpc.models.ProductRecord(product_barcode="5901234123457", quantity=quantity)


#============================================
@pytest.mark.parametrize("products", [["5901234123457"], [{"product_barcode": "5901234123457"}, 7], "5901234123457"])
def test_products_must_be_objects(products) -> None:
	with pytest.raises(ValueError):
		lpc.models.order_from_dict({"order_id": "A1", "products": products})
