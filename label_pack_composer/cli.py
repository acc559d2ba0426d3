"""
CLI entry point for building a label pack from files.
"""

# Standard Library
import argparse
import json
import pathlib
import time

# local repo modules
import label_pack_composer as lpc
import label_pack_composer.config
import label_pack_composer.logging_config
import label_pack_composer.pipeline


QrPayloadMode = lpc.config.QrPayloadMode
Symbology = lpc.config.Symbology
ComposerConfig = lpc.config.ComposerConfig


#============================================
def build_config(args: argparse.Namespace) -> ComposerConfig:
	"""
	Build composer config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		ComposerConfig.
	"""
	sheet = None
	if args.sheet:
		sheet = lpc.config.build_sheet_config()
	return lpc.config.build_config(
		brand_text=args.brand_text,
		qr_payload_mode=QrPayloadMode(args.qr_payload),
		symbology=Symbology(args.symbology),
		default_quantity=args.quantity,
		unknown_marketplace=args.unknown_marketplace,
		workers=args.workers,
		sheet=sheet,
	)


#============================================
def parse_args() -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Merge a marketplace label with product stickers into one PDF.")
	parser.add_argument("order_path", help="Order JSON file.")
	parser.add_argument("label_path", help="Marketplace label (PDF, PNG, JPEG or base64 text).")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument(
		"-s", "--sheet", dest="sheet", action="store_true",
		help="Impose stickers on A4 sheets instead of one per page.",
	)
	output_group.add_argument("-S", "--no-sheet", dest="sheet", action="store_false", help="One sticker per page.")

	content_group = parser.add_argument_group("Content")
	content_group.add_argument("-m", "--marketplace", dest="marketplace", default=None, help="Override the order marketplace.")
	content_group.add_argument("-b", "--brand", dest="brand_text", default=lpc.config.DEFAULT_BRAND_TEXT, help="Brand caption text.")
	content_group.add_argument(
		"-q", "--qr-payload", dest="qr_payload",
		choices=[mode.value for mode in QrPayloadMode], default=QrPayloadMode.ORDER_SKU.value,
		help="QR payload for layouts without a per-variant payload.",
	)
	content_group.add_argument(
		"-y", "--symbology", dest="symbology",
		choices=[symbology.value for symbology in Symbology], default=Symbology.EAN13.value,
		help="1-D barcode symbology.",
	)
	content_group.add_argument(
		"-n", "--quantity", dest="quantity", type=int, default=lpc.config.DEFAULT_QUANTITY,
		help="Sticker copies for products without a quantity.",
	)
	content_group.add_argument(
		"-u", "--unknown-marketplace", dest="unknown_marketplace",
		choices=("default", "error"), default="default",
		help="Fall back to the default layout or fail on unknown marketplaces.",
	)

	runtime_group = parser.add_argument_group("Runtime")
	runtime_group.add_argument("-w", "--workers", dest="workers", type=int, default=1, help="Render threads.")
	runtime_group.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Debug logging.")

	parser.set_defaults(sheet=False, verbose=False)

	args = parser.parse_args()
	return args


#============================================
def read_label(path: pathlib.Path):
	"""
	Read a marketplace label file.

	Files holding base64 text (with or without a data URI prefix) are
	returned as text, anything else as bytes.
	"""
	data = path.read_bytes()
	stripped = data.lstrip()
	if stripped.startswith(b"data:") or path.suffix.lower() in (".b64", ".txt"):
		return stripped.decode("ascii").strip()
	return data


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Build the label pack and write it to disk.

	Args:
		args: Parsed argparse namespace.
	"""
	lpc.logging_config.setup_logging(args.verbose)
	config = build_config(args)

	order_path = pathlib.Path(args.order_path)
	label_path = pathlib.Path(args.label_path)
	with order_path.open("r", encoding="utf-8") as handle:
		order_data = json.load(handle)
	if args.marketplace is not None:
		order_data["marketplace"] = args.marketplace

	print("Label pack pipeline")
	print(f"Order: {order_path}")
	print(f"Marketplace label: {label_path}")
	print(f"Sheet mode: {args.sheet}")

	start_time = time.perf_counter()
	result = lpc.pipeline.compose_label_pack(order_data, read_label(label_path), config)
	total_time = time.perf_counter() - start_time

	output_path = args.output_path
	if output_path is None:
		output_path = result.filename
	output_path = pathlib.Path(output_path)
	output_path.write_bytes(result.pdf)

	print(f"Layout: {result.variant.value}")
	print(f"Stickers: {result.sticker_count}")
	print(f"Pages written: {result.page_count}")
	if result.warnings:
		print(f"Warnings: {len(result.warnings)}")
		for message in result.warnings:
			print(f"  {message}")
	print(f"Output PDF: {output_path}")
	print(f"Timing: total={total_time:.2f}s")


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	run_pipeline(args)
