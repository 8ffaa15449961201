"""
Test Configuration and Fixtures
"""
from unittest.mock import Mock

import pytest

from transcribe_it.backends import Capabilities, ParsedPdf
from transcribe_it.config import ExtractorConfig
from transcribe_it.extractor import DocumentExtractor

LONG_TEXT = (
    "# Quarterly report\n\n"
    "Revenue grew by twelve percent compared with the previous quarter."
)


@pytest.fixture
def pdf_parser():
    """PDF parser returning a full native text layer"""
    parser = Mock(spec=["parse"])
    parser.parse.return_value = ParsedPdf(text=LONG_TEXT, page_count=10)
    return parser


@pytest.fixture
def docx_parser():
    parser = Mock(spec=["extract_raw_text"])
    parser.extract_raw_text.return_value = "Heading\n\nBody paragraph"
    return parser


@pytest.fixture
def ocr_engine():
    """Tesseract stand-in"""
    engine = Mock(spec=["recognize"])
    engine.recognize.return_value = "  Invoice #123\n"
    return engine


@pytest.fixture
def llm_client():
    """Gemini client stand-in"""
    client = Mock(spec=["extract_text", "generate"])
    client.extract_text.return_value = "Hello World"
    client.generate.return_value = "Hello"
    return client


@pytest.fixture
def make_extractor():
    """Build an extractor from whichever backends a test passes in"""

    def _make(config=None, **backends):
        return DocumentExtractor(Capabilities(**backends), config or ExtractorConfig())

    return _make
