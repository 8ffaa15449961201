"""
Backend Tests

Exercise the real PyMuPDF and python-docx parsers on documents built in
memory. Tesseract tests run only when the binary is installed.
"""
import io
import shutil

import fitz
import pytest
import pytesseract
from docx import Document
from PIL import Image, ImageDraw

from transcribe_it.backends import (
    PyMuPDFParser,
    PythonDocxParser,
    TesseractOcrEngine,
    build_capabilities,
)
from transcribe_it.config import ExtractorConfig, LLMConfig
from transcribe_it.exceptions import ParseError
from transcribe_it.llm import GeminiClient


def _pdf_bytes(pages):
    pdf = fitz.open()
    for text in pages:
        page = pdf.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=12)
    data = pdf.tobytes()
    pdf.close()
    return data


def _docx_bytes():
    doc = Document()
    doc.add_paragraph("Invoice for consulting services")
    doc.add_paragraph("")
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Item"
    table.cell(0, 1).text = "Amount"
    table.cell(1, 0).text = "Audit"
    table.cell(1, 1).text = "100"
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


class TestPyMuPDFParser:
    def test_extracts_text_and_page_count(self):
        parsed = PyMuPDFParser().parse(_pdf_bytes(["Hello from page one", "And page two"]))

        assert parsed.page_count == 2
        assert "Hello from page one" in parsed.text
        assert "And page two" in parsed.text

    def test_blank_pdf_has_no_text(self):
        parsed = PyMuPDFParser().parse(_pdf_bytes([None]))

        assert parsed.page_count == 1
        assert parsed.text.strip() == ""

    def test_corrupt_pdf_raises_parse_error(self):
        with pytest.raises(ParseError):
            PyMuPDFParser().parse(b"this is not a pdf")


class TestPythonDocxParser:
    def test_paragraphs_then_tables(self):
        text = PythonDocxParser().extract_raw_text(_docx_bytes())

        assert text == (
            "Invoice for consulting services\n\n"
            "Item | Amount\n--- | ---\nAudit | 100"
        )

    def test_corrupt_docx_raises_parse_error(self):
        with pytest.raises(ParseError):
            PythonDocxParser().extract_raw_text(b"PK\x03\x04 broken")


class TestTesseractOcrEngine:
    def test_unreadable_image_raises_parse_error(self):
        with pytest.raises(ParseError):
            TesseractOcrEngine().recognize(b"not an image", "eng")

    def test_truncated_image_raises_parse_error(self):
        buffer = io.BytesIO()
        Image.effect_noise((200, 200), 64).save(buffer, format="PNG")

        with pytest.raises(ParseError):
            TesseractOcrEngine().recognize(buffer.getvalue()[:120], "eng")

    def test_unavailable_when_binary_missing(self, monkeypatch):
        def missing():
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)

        assert TesseractOcrEngine().is_available() is False

    @pytest.mark.skipif(shutil.which("tesseract") is None, reason="tesseract not installed")
    def test_recognizes_rendered_text(self):
        image = Image.new("RGB", (600, 120), "white")
        ImageDraw.Draw(image).text((20, 40), "INVOICE 123", fill="black")
        image = image.resize((1800, 360))
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")

        text = TesseractOcrEngine().recognize(buffer.getvalue(), "eng")

        assert "123" in text


class TestBuildCapabilities:
    def test_without_api_key_or_tesseract(self, monkeypatch):
        monkeypatch.setattr(TesseractOcrEngine, "is_available", lambda self: False)

        caps = build_capabilities(ExtractorConfig(llm_config=LLMConfig(api_key=None)))

        assert isinstance(caps.pdf_parser, PyMuPDFParser)
        assert isinstance(caps.docx_parser, PythonDocxParser)
        assert caps.ocr_engine is None
        assert caps.llm_client is None

    def test_with_api_key_and_tesseract(self, monkeypatch):
        monkeypatch.setattr(TesseractOcrEngine, "is_available", lambda self: True)

        caps = build_capabilities(ExtractorConfig(llm_config=LLMConfig(api_key="k")))

        assert isinstance(caps.ocr_engine, TesseractOcrEngine)
        assert isinstance(caps.llm_client, GeminiClient)
