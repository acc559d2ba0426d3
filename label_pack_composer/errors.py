"""
Error types raised by the label pack pipeline.
"""


class LabelPackError(Exception):
	"""
	Base class for fatal label pack errors.
	"""

	def __init__(self, message: str, order_id: str | None = None):
		self.message = message
		self.order_id = order_id
		if order_id:
			message = f"[order {order_id}] {message}"
		super().__init__(message)


class CodeGenerationError(LabelPackError):
	"""
	The QR or barcode encoder failed for a reason other than input shape.
	"""

	def __init__(self, component: str, data: str, message: str, order_id: str | None = None):
		self.component = component
		self.data = data
		self.detail = message
		super().__init__(f"{component} generation failed for {data!r}: {message}", order_id)


class MarketplaceDocumentError(LabelPackError):
	pass


class AssemblyError(LabelPackError):
	pass


class UnknownMarketplaceError(LabelPackError, ValueError):
	pass
