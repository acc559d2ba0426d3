"""
HTTP endpoint tests.
"""

# Standard Library
import base64
import io
import logging

# PIP3 modules
import fastapi.testclient
import httpx
import pypdf
import pytest

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.logging_config
import label_pack_composer.service


ORDER = {
	"order_id": "A1",
	"marketplace": "default",
	"products": [{"product_barcode": "5901234123457", "product_code": "SKU-1", "quantity": 2}],
}


#============================================
def _client(transport: httpx.MockTransport | None = None) -> fastapi.testclient.TestClient:
	app = lpc.service.create_app(lpc.config.build_config(), transport=transport)
	return fastapi.testclient.TestClient(app)


#============================================
def _page_count(payload: dict) -> int:
	pdf_bytes = base64.b64decode(payload["pdf"])
	return len(pypdf.PdfReader(io.BytesIO(pdf_bytes)).pages)


#============================================
def test_health() -> None:
	response = _client().get("/health")
	assert response.status_code == 200
	assert response.json()["status"] == "ok"


#============================================
def test_generate_label(marketplace_pdf: bytes) -> None:
	label = "data:application/pdf;base64," + base64.b64encode(marketplace_pdf).decode("ascii")
	response = _client().post("/generate-label", json={"orderData": ORDER, "marketplaceLabel": label})
	assert response.status_code == 200
	payload = response.json()
	assert payload["success"] is True
	assert payload["filename"] == "label_A1.pdf"
	assert payload["pages"] == 3
	assert _page_count(payload) == 3


#============================================
@pytest.mark.parametrize(
	"order",
	[
		{"marketplace": "default", "product_barcode": "5901234123457"},
		{"order_id": "A1"},
	],
)
def test_generate_label_rejects_incomplete_order(order: dict, marketplace_pdf: bytes) -> None:
	label = base64.b64encode(marketplace_pdf).decode("ascii")
	response = _client().post("/generate-label", json={"orderData": order, "marketplaceLabel": label})
	assert response.status_code == 400


#============================================
def test_generate_label_rejects_bad_document() -> None:
	label = base64.b64encode(b"not a pdf").decode("ascii")
	response = _client().post("/generate-label", json={"orderData": ORDER, "marketplaceLabel": label})
	assert response.status_code == 400
	assert "A1" in response.json()["message"]


#============================================
def test_generate_label_missing_fields() -> None:
	response = _client().post("/generate-label", json={"orderData": ORDER})
	assert response.status_code == 422


#============================================
def test_generate_from_order_fetches_label(marketplace_pdf: bytes) -> None:
	seen = {}

	def handler(request: httpx.Request) -> httpx.Response:
		seen["url"] = str(request.url)
		seen["auth"] = request.headers.get("authorization")
		return httpx.Response(200, content=marketplace_pdf, headers={"content-type": "application/pdf"})

	client = _client(httpx.MockTransport(handler))
	response = client.post(
		"/generate-from-order",
		json={
			"orderData": ORDER,
			"marketplaceLabelUrl": "https://labels.example.com/A1.pdf",
			"authHeaders": {"Authorization": "Bearer token"},
		},
	)
	assert response.status_code == 200
	assert seen == {"url": "https://labels.example.com/A1.pdf", "auth": "Bearer token"}
	assert _page_count(response.json()) == 3


#============================================
def test_generate_from_order_upstream_error() -> None:
	def handler(request: httpx.Request) -> httpx.Response:
		return httpx.Response(404, content=b"missing")

	client = _client(httpx.MockTransport(handler))
	response = client.post(
		"/generate-from-order",
		json={"orderData": ORDER, "marketplaceLabelUrl": "https://labels.example.com/A1.pdf"},
	)
	assert response.status_code == 502


#============================================
@pytest.mark.parametrize(
	"products",
	[["5901234123457"], [{"product_barcode": "5901234123457"}, None], {"product_barcode": "5901234123457"}],
)
def test_generate_label_rejects_non_object_products(products, marketplace_pdf: bytes) -> None:
	label = base64.b64encode(marketplace_pdf).decode("ascii")
	order = {"order_id": "A1", "products": products}
	response = _client().post("/generate-label", json={"orderData": order, "marketplaceLabel": label})
	assert response.status_code == 400
	assert "products" in response.json()["error"]


#============================================
def test_create_app_leaves_root_logging_alone() -> None:
	root = logging.getLogger()
	handlers = list(root.handlers)
	level = root.level
	app = lpc.service.create_app(lpc.config.build_config())
	fastapi.testclient.TestClient(app).get("/health")
	assert root.handlers == handlers
	assert root.level == level


#============================================
def test_startup_configures_logging(monkeypatch: pytest.MonkeyPatch) -> None:
	calls = []
	monkeypatch.setattr(lpc.logging_config, "setup_logging", lambda verbose=False: calls.append(verbose))
	app = lpc.service.create_app(lpc.config.build_config())
	with fastapi.testclient.TestClient(app) as client:
		assert client.get("/health").status_code == 200
	assert calls == [False]
