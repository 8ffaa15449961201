"""Text extraction for PDF, DOCX and image documents with OCR fallbacks."""

from typing import Callable, Optional

from transcribe_it.backends import Capabilities
from transcribe_it.config import ExtractorConfig
from transcribe_it.detector import GUESS_ORDER, PDF_MIME, FormatDetector
from transcribe_it.exceptions import (
    ConfigurationError,
    ParseError,
    TranscribeItError,
    TransportError,
    UnsupportedTypeError,
)
from transcribe_it.logger import Timer, get_logger
from transcribe_it.models import DocumentKind, ExtractionResult, RawDocument

logger = get_logger(__name__)


# The LLM endpoint is subtype-tolerant, so every image is declared as JPEG
IMAGE_OCR_MIME = "image/jpeg"

LLM_OCR_PDF_WARNING = "Used LLM OCR fallback for PDF (Gemini)"
LLM_OCR_EMPTY_WARNING = (
    "LLM OCR fallback returned empty text. "
    "Document may be purely images or unreadable."
)
OCR_NOT_CONFIGURED_WARNING = (
    "No extractable text found. If this is a scanned PDF, OCR is required. "
    "Configure GOOGLE_API_KEY to enable LLM OCR."
)
PDF_PARSE_FAILED_WARNING = "pdf-parse failed; used LLM OCR fallback for PDF (Gemini)"
PDF_PARSER_MISSING_WARNING = "PDF parser not available; used LLM OCR for PDF (Gemini)"
DOCX_EMPTY_WARNING = "No text found in DOCX document."
IMAGE_EMPTY_WARNING = "OCR found no text in image."

Handler = Callable[[bytes, bool], ExtractionResult]


class DocumentExtractor:
    """Extracts text from PDF, DOCX and image documents.

    PDFs use their native text layer and fall back to LLM OCR when the layer
    is missing or too short. Images prefer LLM OCR over Tesseract. DOCX files
    are always read directly.
    """

    def __init__(
        self,
        capabilities: Capabilities,
        config: Optional[ExtractorConfig] = None,
        detector: Optional[FormatDetector] = None,
    ):
        """Initialize extractor.

        Args:
            capabilities: Backends to extract with. Absent backends are None.
            config: Extraction configuration. If None, uses defaults.
            detector: Format detector. If None, creates default.
        """
        self.capabilities = capabilities
        self.config = config or ExtractorConfig()
        self.detector = detector or FormatDetector()

        self._handlers: dict[DocumentKind, Handler] = {
            "pdf": self._extract_pdf,
            "docx": self._extract_docx,
            "image": self._extract_image,
        }

    @property
    def llm_ocr_enabled(self) -> bool:
        return self.capabilities.llm_client is not None

    def extract(self, document: RawDocument, force_ocr: bool = False) -> ExtractionResult:
        """Extract text from a document.

        Args:
            document: Raw bytes plus optional MIME type and file name
            force_ocr: Run OCR on PDFs even when a native text layer exists

        Returns:
            ExtractionResult with best-effort text and any warnings

        Raises:
            UnsupportedTypeError: Format unknown and guessing disabled
            ConfigurationError: No backend can handle the document
            ParseError: Document is malformed and no fallback is configured
            TransportError: LLM OCR request failed
        """
        kind = self.detector.detect(document.mime_type, document.file_name)

        logger.debug(
            "Starting document extraction",
            extra_data={
                "file_name": document.file_name,
                "mime_type": document.mime_type,
                "kind": kind or "unknown",
                "file_size_bytes": len(document.content),
                "force_ocr": force_ocr,
            },
        )

        try:
            with Timer("extraction") as timer:
                if kind is not None:
                    result = self._handlers[kind](document.content, force_ocr)
                elif self.config.guess_unknown_formats:
                    result = self._extract_guessing(document, force_ocr)
                else:
                    raise UnsupportedTypeError(
                        f"Unsupported document type: mime_type={document.mime_type!r}, "
                        f"file_name={document.file_name!r}"
                    )
        except TranscribeItError as exc:
            logger.error(
                "Document extraction failed",
                extra_data={
                    "file_name": document.file_name,
                    "kind": kind or "unknown",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise

        logger.info(
            "Document extraction completed",
            extra_data={
                "file_name": document.file_name,
                "kind": result.kind,
                "characters_extracted": result.character_count,
                "page_count": result.page_count,
                "ocr_used": result.ocr_used,
                "warnings": len(result.warnings),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    def _extract_guessing(self, document: RawDocument, force_ocr: bool) -> ExtractionResult:
        """Try every format in GUESS_ORDER; the last failure propagates.

        Kept for clients that send neither a MIME type nor a file extension.
        A missing backend only skips its format here; declared formats still
        fail on it.
        """
        *leading, last = GUESS_ORDER

        for kind in leading:
            try:
                return self._handlers[kind](document.content, force_ocr)
            except (ParseError, TransportError, ConfigurationError) as exc:
                logger.warning(
                    "Guessed format failed, trying next",
                    extra_data={
                        "file_name": document.file_name,
                        "guessed_kind": kind,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )

        return self._handlers[last](document.content, force_ocr)

    def _llm_ocr(self, content: bytes, mime_type: str) -> str:
        return self.capabilities.llm_client.extract_text(content, mime_type).strip()

    def _extract_pdf(self, content: bytes, force_ocr: bool = False) -> ExtractionResult:
        parser = self.capabilities.pdf_parser
        if parser is None:
            if not self.llm_ocr_enabled:
                raise ConfigurationError(
                    "PDF parser not available and LLM OCR is not configured. "
                    "Install pymupdf4llm or configure GOOGLE_API_KEY."
                )
            return ExtractionResult(
                kind="pdf",
                text=self._llm_ocr(content, PDF_MIME),
                warnings=[PDF_PARSER_MISSING_WARNING],
                ocr_used=True,
            )

        try:
            with Timer("pdf_native_extraction") as native_timer:
                parsed = parser.parse(content)
        except ParseError as exc:
            if not self.llm_ocr_enabled:
                raise
            logger.warning(
                "PDF parsing failed, extracting with LLM OCR",
                extra_data={"error": str(exc)},
            )
            return ExtractionResult(
                kind="pdf",
                text=self._llm_ocr(content, PDF_MIME),
                warnings=[PDF_PARSE_FAILED_WARNING],
                ocr_used=True,
            )

        text = parsed.text.strip()
        warnings: list[str] = []
        ocr_used = False

        logger.debug(
            "PDF native text extraction completed",
            extra_data={
                "characters_extracted": len(text),
                "page_count": parsed.page_count,
                "extraction_time_ms": native_timer.get_elapsed_ms(),
            },
        )

        if force_ocr or len(text) < self.config.min_pdf_text_length:
            logger.info(
                "Native PDF text insufficient, OCR needed",
                extra_data={
                    "native_characters": len(text),
                    "min_characters": self.config.min_pdf_text_length,
                    "force_ocr": force_ocr,
                    "llm_ocr_enabled": self.llm_ocr_enabled,
                },
            )
            if self.llm_ocr_enabled:
                ocr_text = self._llm_ocr(content, PDF_MIME)
                if ocr_text:
                    text = ocr_text
                    ocr_used = True
                    warnings.append(LLM_OCR_PDF_WARNING)
                else:
                    warnings.append(LLM_OCR_EMPTY_WARNING)
            else:
                warnings.append(OCR_NOT_CONFIGURED_WARNING)

        return ExtractionResult(
            kind="pdf",
            text=text,
            page_count=parsed.page_count,
            warnings=warnings,
            ocr_used=ocr_used,
        )

    def _extract_docx(self, content: bytes, force_ocr: bool = False) -> ExtractionResult:
        parser = self.capabilities.docx_parser
        if parser is None:
            raise ConfigurationError("DOCX parser not available. Install python-docx.")

        with Timer("docx_extraction") as timer:
            text = parser.extract_raw_text(content).strip()

        logger.debug(
            "DOCX extraction completed",
            extra_data={
                "characters_extracted": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return ExtractionResult(
            kind="docx",
            text=text,
            warnings=[] if text else [DOCX_EMPTY_WARNING],
        )

    def _extract_image(self, content: bytes, force_ocr: bool = False) -> ExtractionResult:
        if self.llm_ocr_enabled:
            text = self._llm_ocr(content, IMAGE_OCR_MIME)
        elif self.capabilities.ocr_engine is not None:
            text = self.capabilities.ocr_engine.recognize(
                content, self.config.ocr_config.languages
            ).strip()
        else:
            raise ConfigurationError(
                "OCR engine not available. Install Tesseract (pytesseract) "
                "or configure GOOGLE_API_KEY to enable LLM OCR."
            )

        return ExtractionResult(
            kind="image",
            text=text,
            warnings=[] if text else [IMAGE_EMPTY_WARNING],
            ocr_used=True,
        )
