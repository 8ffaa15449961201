"""Document text extraction, OCR and Markdown-preserving translation."""

from transcribe_it.backends import (
    Capabilities,
    PyMuPDFParser,
    PythonDocxParser,
    TesseractOcrEngine,
    build_capabilities,
)
from transcribe_it.config import ExtractorConfig, LLMConfig, OCRConfig
from transcribe_it.credits import CreditHook, compute_required_credits
from transcribe_it.detector import FormatDetector
from transcribe_it.exceptions import (
    ConfigurationError,
    InsufficientCreditsError,
    InvalidBase64Error,
    MalformedResponseError,
    ParseError,
    TranscribeItError,
    TransportError,
    UnsupportedTypeError,
    ValidationError,
)
from transcribe_it.extractor import DocumentExtractor
from transcribe_it.handler import DocumentRequestHandler
from transcribe_it.llm import GeminiClient
from transcribe_it.models import (
    ExtractAndTranslateResult,
    ExtractionResult,
    RawDocument,
    TranslationResult,
)
from transcribe_it.parser import parse_document, translate_document
from transcribe_it.service import DocumentService
from transcribe_it.translator import Translator

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "parse_document",
    "translate_document",
    # Core classes
    "DocumentService",
    "DocumentRequestHandler",
    "DocumentExtractor",
    "FormatDetector",
    "Translator",
    "GeminiClient",
    # Backends
    "Capabilities",
    "PyMuPDFParser",
    "PythonDocxParser",
    "TesseractOcrEngine",
    "build_capabilities",
    # Credits
    "CreditHook",
    "compute_required_credits",
    # Data models
    "RawDocument",
    "ExtractionResult",
    "TranslationResult",
    "ExtractAndTranslateResult",
    # Configuration
    "OCRConfig",
    "LLMConfig",
    "ExtractorConfig",
    # Exceptions
    "TranscribeItError",
    "ValidationError",
    "InvalidBase64Error",
    "UnsupportedTypeError",
    "ConfigurationError",
    "ParseError",
    "TransportError",
    "MalformedResponseError",
    "InsufficientCreditsError",
]
