"""High-level API for local documents."""

import mimetypes
from pathlib import Path
from typing import Optional

from transcribe_it.config import ExtractorConfig
from transcribe_it.models import ExtractAndTranslateResult, ExtractionResult
from transcribe_it.service import DocumentService
from transcribe_it.translator import DEFAULT_TARGET_LANG


def _load(
    file_path: Optional[str],
    file_bytes: Optional[bytes],
    file_name: Optional[str],
    mime_type: Optional[str],
) -> tuple[bytes, Optional[str], Optional[str]]:
    if file_path and file_bytes:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and not file_bytes:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValueError(f"File not found: {file_path}")

        file_bytes = path.read_bytes()
        file_name = path.name

        if not mime_type:
            mime_type, _ = mimetypes.guess_type(str(path))

    return file_bytes, file_name, mime_type


def parse_document(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    force_ocr: bool = False,
    config: Optional[ExtractorConfig] = None,
) -> ExtractionResult:
    """Extract text from a document given as a path or as raw bytes.

    Args:
        file_path: Path to document file (alternative to file_bytes)
        file_bytes: Raw document bytes (alternative to file_path)
        file_name: Original filename, used for format detection with file_bytes
        mime_type: MIME type hint (guessed from the path if not provided)
        force_ocr: OCR PDFs even when they have a native text layer
        config: Pipeline configuration (read from the environment if omitted)

    Returns:
        ExtractionResult with extracted text, page count and warnings

    Raises:
        ValueError: If neither or both of file_path and file_bytes are given

    Examples:
        >>> result = parse_document(file_path="scan.pdf", force_ocr=True)
        >>> print(result.text)
    """
    file_bytes, file_name, mime_type = _load(file_path, file_bytes, file_name, mime_type)
    service = DocumentService.from_config(config)
    return service.extract_text(file_bytes, mime_type, file_name, force_ocr)


def translate_document(
    source_lang: str,
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    target_lang: str = DEFAULT_TARGET_LANG,
    force_ocr: bool = False,
    config: Optional[ExtractorConfig] = None,
) -> ExtractAndTranslateResult:
    """Extract text from a document and translate it to ``target_lang``.

    Examples:
        >>> result = translate_document("fr", file_path="facture.pdf")
        >>> print(result.translated_text)
    """
    file_bytes, file_name, mime_type = _load(file_path, file_bytes, file_name, mime_type)
    service = DocumentService.from_config(config)
    return service.extract_and_translate(
        file_bytes,
        source_lang,
        mime_type=mime_type,
        file_name=file_name,
        target_lang=target_lang,
        force_ocr=force_ocr,
    )
