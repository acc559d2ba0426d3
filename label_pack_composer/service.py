"""
HTTP surface for the label pack pipeline.

Endpoints:
	GET  /health               service status
	POST /generate-label       order data plus base64 marketplace label
	POST /generate-from-order  order data plus a URL to fetch the label from

Both generate endpoints answer with the merged PDF as base64 and a
label_<order_id>.pdf filename.

Run with: uvicorn label_pack_composer.service:app
"""

# Standard Library
import base64
import logging

# PIP3 modules
import fastapi
import fastapi.concurrency
import fastapi.responses
import httpx
import pydantic

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.errors
import label_pack_composer.logging_config
import label_pack_composer.pipeline


ComposerConfig = lpc.config.ComposerConfig
LabelPackError = lpc.errors.LabelPackError
MarketplaceDocumentError = lpc.errors.MarketplaceDocumentError
UnknownMarketplaceError = lpc.errors.UnknownMarketplaceError

SERVICE_NAME = "label-pack-composer"
FETCH_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


class GenerateLabelRequest(pydantic.BaseModel):
	orderData: dict
	marketplaceLabel: str


class GenerateFromOrderRequest(pydantic.BaseModel):
	orderData: dict
	marketplaceLabelUrl: str
	authHeaders: dict[str, str] | None = None


#============================================
def error_response(status_code: int, message: str) -> fastapi.responses.JSONResponse:
	return fastapi.responses.JSONResponse(
		status_code=status_code,
		content={"error": "Failed to generate label", "message": message},
	)


#============================================
def check_order_data(order_data: dict) -> str | None:
	"""
	Minimal request validation, returns an error message or None.
	"""
	if not str(order_data.get("order_id") or "").strip():
		return "orderData must include order_id"
	if not order_data.get("products") and not order_data.get("product_barcode"):
		return "orderData must include products or product_barcode"
	products = order_data.get("products")
	if products and (not isinstance(products, list) or not all(isinstance(product, dict) for product in products)):
		return "orderData products must be a list of objects"
	return None


#============================================
async def build_response(order_data: dict, marketplace_label, config: ComposerConfig):
	"""
	Run the pipeline off the event loop and shape the JSON answer.
	"""
	try:
		result = await fastapi.concurrency.run_in_threadpool(
			lpc.pipeline.compose_label_pack,
			order_data,
			marketplace_label,
			config,
		)
	except (MarketplaceDocumentError, UnknownMarketplaceError) as error:
		logger.error("label generation rejected: %s", error)
		return error_response(400, str(error))
	except LabelPackError as error:
		logger.error("label generation failed: %s", error)
		return error_response(500, str(error))
	logger.info("label generated for order %s, %d bytes", result.order_id, len(result.pdf))
	return {
		"success": True,
		"pdf": base64.b64encode(result.pdf).decode("ascii"),
		"filename": result.filename,
		"pages": result.page_count,
		"warnings": result.warnings,
	}


#============================================
def create_app(
	config: ComposerConfig | None = None,
	transport: httpx.AsyncBaseTransport | None = None,
) -> fastapi.FastAPI:
	"""
	Build the FastAPI application.

	Args:
		config: Composer config, defaults to build_config().
		transport: Optional httpx transport for label fetches.

	Returns:
		FastAPI app.
	"""
	if config is None:
		config = lpc.config.build_config()
	app = fastapi.FastAPI(title="Label Pack Composer")

	@app.on_event("startup")
	def on_startup():
		lpc.logging_config.setup_logging()
		logger.info("%s starting", SERVICE_NAME)

	@app.get("/health")
	def health():
		return {"status": "ok", "service": SERVICE_NAME}

	@app.post("/generate-label")
	async def generate_label(request: GenerateLabelRequest):
		message = check_order_data(request.orderData)
		if message:
			return fastapi.responses.JSONResponse(status_code=400, content={"error": message})
		logger.info("generating label for order %s", request.orderData.get("order_id"))
		return await build_response(request.orderData, request.marketplaceLabel, config)

	@app.post("/generate-from-order")
	async def generate_from_order(request: GenerateFromOrderRequest):
		message = check_order_data(request.orderData)
		if message:
			return fastapi.responses.JSONResponse(status_code=400, content={"error": message})
		logger.info("fetching marketplace label from %s", request.marketplaceLabelUrl)
		try:
			async with httpx.AsyncClient(timeout=FETCH_TIMEOUT, transport=transport) as client:
				response = await client.get(request.marketplaceLabelUrl, headers=request.authHeaders or {})
				response.raise_for_status()
		except httpx.HTTPError as error:
			logger.error("marketplace label fetch failed: %s", error)
			return fastapi.responses.JSONResponse(
				status_code=502,
				content={"error": "Failed to fetch marketplace label", "message": str(error)},
			)
		return await build_response(request.orderData, response.content, config)

	return app


app = create_app()
