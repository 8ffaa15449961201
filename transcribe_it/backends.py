"""Extraction backends and the capability set handed to the extractor.

Each backend exposes one method. Which backends exist is decided once, when
:func:`build_capabilities` runs; an absent backend is ``None``.
"""

import io
import os
from dataclasses import dataclass
from typing import Optional, Protocol

import fitz  # PyMuPDF
import pymupdf4llm
import pytesseract
from docx import Document
from PIL import Image, UnidentifiedImageError

from transcribe_it.config import ExtractorConfig, OCRConfig
from transcribe_it.exceptions import ParseError
from transcribe_it.llm import GeminiClient, LlmClient
from transcribe_it.logger import Timer, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ParsedPdf:
    text: str
    page_count: int


class PdfParser(Protocol):
    def parse(self, content: bytes) -> ParsedPdf: ...


class DocxParser(Protocol):
    def extract_raw_text(self, content: bytes) -> str: ...


class OcrEngine(Protocol):
    def recognize(self, content: bytes, language: str) -> str: ...


@dataclass(frozen=True)
class Capabilities:
    """Backends available to the pipeline."""

    pdf_parser: Optional[PdfParser] = None
    docx_parser: Optional[DocxParser] = None
    ocr_engine: Optional[OcrEngine] = None
    llm_client: Optional[LlmClient] = None


class PyMuPDFParser:
    """Native PDF text layer via PyMuPDF4LLM, rendered as Markdown."""

    def __init__(self, table_strategy: str = "lines_strict", fontsize_limit: int = 3):
        self.table_strategy = table_strategy
        self.fontsize_limit = fontsize_limit

    def parse(self, content: bytes) -> ParsedPdf:
        try:
            with fitz.open(stream=content, filetype="pdf") as pdf_document:
                page_count = pdf_document.page_count
                md_text = pymupdf4llm.to_markdown(
                    pdf_document,
                    table_strategy=self.table_strategy,
                    force_text=True,  # Extract text even over images
                    write_images=False,
                    ignore_images=True,
                    ignore_code=False,
                    fontsize_limit=self.fontsize_limit,
                )
        except Exception as exc:
            raise ParseError(f"Failed to parse PDF: {exc}") from exc

        return ParsedPdf(text=md_text, page_count=page_count)


class PythonDocxParser:
    """DOCX paragraphs followed by tables rendered as Markdown."""

    def extract_raw_text(self, content: bytes) -> str:
        try:
            doc = Document(io.BytesIO(content))
        except Exception as exc:
            raise ParseError(f"Failed to parse DOCX: {exc}") from exc

        parts = [p.text.strip() for p in doc.paragraphs if p.text.strip()]

        for table in doc.tables:
            rows = []
            for i, row in enumerate(table.rows):
                cells = [cell.text.strip() for cell in row.cells]
                rows.append(" | ".join(cells))

                # Header separator after first row
                if i == 0:
                    rows.append(" | ".join(["---"] * len(cells)))

            if rows:
                parts.append("\n".join(rows))

        return "\n\n".join(parts)


class TesseractOcrEngine:
    """Conventional OCR with Tesseract through pytesseract."""

    def __init__(self, config: Optional[OCRConfig] = None):
        self.config = config or OCRConfig()

        if self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd
        if self.config.tessdata_prefix:
            os.environ["TESSDATA_PREFIX"] = self.config.tessdata_prefix

    def is_available(self) -> bool:
        try:
            version = pytesseract.get_tesseract_version()
        except pytesseract.TesseractNotFoundError:
            return False
        logger.debug("Tesseract available", extra_data={"version": version})
        return True

    def recognize(self, content: bytes, language: str) -> str:
        try:
            image = Image.open(io.BytesIO(content))
            image.load()  # Pillow decodes lazily
        except (UnidentifiedImageError, OSError) as exc:
            raise ParseError(f"Failed to open image: {exc}") from exc

        logger.debug(
            "Starting Tesseract OCR",
            extra_data={
                "image_format": image.format,
                "image_dimensions": f"{image.size[0]}x{image.size[1]}",
                "language": language,
            },
        )

        try:
            with Timer("tesseract_ocr") as timer:
                text = pytesseract.image_to_string(
                    image, lang=language, config=f"--psm {self.config.psm_mode}"
                )
        except pytesseract.TesseractError as exc:
            raise ParseError(f"Tesseract OCR failed: {exc}") from exc

        logger.info(
            "Tesseract OCR completed",
            extra_data={
                "characters_extracted": len(text.strip()),
                "ocr_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text


def build_capabilities(config: Optional[ExtractorConfig] = None) -> Capabilities:
    """Check the optional backends once and return what is usable."""
    config = config or ExtractorConfig()

    ocr_engine: Optional[TesseractOcrEngine] = TesseractOcrEngine(config.ocr_config)
    if not ocr_engine.is_available():
        ocr_engine = None

    llm_client = GeminiClient(config.llm_config) if config.llm_config.enabled else None

    logger.info(
        "Pipeline capabilities resolved",
        extra_data={
            "tesseract": ocr_engine is not None,
            "llm": llm_client is not None,
            "llm_model": config.llm_config.model if llm_client else None,
        },
    )

    return Capabilities(
        pdf_parser=PyMuPDFParser(config.table_strategy, config.fontsize_limit),
        docx_parser=PythonDocxParser(),
        ocr_engine=ocr_engine,
        llm_client=llm_client,
    )
