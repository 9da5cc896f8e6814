import io

import docx
import openpyxl
import pytest
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from doctransform.encoding.pdf_encoder import find_unicode_font


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def scanned_pdf_bytes() -> bytes:
    """Generate a PDF whose only page content is a raster image."""
    image = Image.new("RGB", (400, 200), "white")
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawImage(ImageReader(image), 72, 500, width=400, height=200)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_docx_bytes() -> bytes:
    document = docx.Document()
    document.add_paragraph("First paragraph")
    document.add_paragraph("")
    document.add_paragraph("Second paragraph")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Name"
    table.rows[0].cells[1].text = "Value"
    buf = io.BytesIO()
    document.save(buf)
    return buf.getvalue()


@pytest.fixture()
def sample_xlsx_bytes() -> bytes:
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    sheet.append(["Header A", "Header B"])
    sheet.append([None, None])
    sheet.append(["Row 2", 42])
    second = workbook.create_sheet("Second")
    second.append(["Other sheet"])
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def unicode_font_path() -> str:
    """Path of an installed TTF that covers Cyrillic; skips when none is installed."""
    path = find_unicode_font()
    if path is None:
        pytest.skip("No Unicode TTF installed (e.g. fonts-dejavu-core)")
    return path


@pytest.fixture()
def paragraph_pdf_bytes() -> bytes:
    """Two paragraphs: two lines at normal leading, then a wider gap."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setFont("Helvetica", 12)
    c.drawString(72, 720, "First line of a paragraph")
    c.drawString(72, 706, "second line of it")
    c.drawString(72, 680, "Next paragraph")
    c.save()
    return buf.getvalue()
