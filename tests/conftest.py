"""
Pytest configuration for local imports and shared PDF fixtures.
"""

# Standard Library
import io
import os
import sys

# PIP3 modules
import pytest
import reportlab.lib.pagesizes
import reportlab.pdfgen.canvas

#============================================


def _ensure_repo_on_path() -> None:
	"""
	Ensure the repository root is on sys.path.
	"""
	repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
	if repo_root not in sys.path:
		sys.path.insert(0, repo_root)


_ensure_repo_on_path()


#============================================
def build_marketplace_pdf(page_count: int) -> bytes:
	"""
	Build an A4 PDF with one line of text per page.

	Args:
		page_count: Number of pages.

	Returns:
		PDF bytes.
	"""
	buffer = io.BytesIO()
	page_width, page_height = reportlab.lib.pagesizes.A4
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
	for index in range(page_count):
		pdf.setFont("Helvetica", 14)
		pdf.drawString(50, page_height - 80, f"MARKETPLACE PAGE {index + 1}")
		pdf.showPage()
	pdf.save()
	return buffer.getvalue()


@pytest.fixture
def marketplace_pdf() -> bytes:
	return build_marketplace_pdf(1)


@pytest.fixture
def marketplace_pdf_two_pages() -> bytes:
	return build_marketplace_pdf(2)
