"""
Request Handler Tests
"""
import base64
from unittest.mock import Mock

import pytest

from transcribe_it.exceptions import (
    ConfigurationError,
    InsufficientCreditsError,
    InvalidBase64Error,
    ParseError,
    TransportError,
    UnsupportedTypeError,
    ValidationError,
)
from transcribe_it.handler import DocumentRequestHandler, parse_flag, status_code_for
from transcribe_it.models import ExtractAndTranslateResult, ExtractionResult, TranslationResult
from transcribe_it.service import DocumentService

ENCODED = base64.b64encode(b"%PDF-1.7").decode("ascii")


@pytest.fixture
def service():
    service = Mock(spec=DocumentService)
    service.extract_text.return_value = ExtractionResult(
        kind="pdf", text="Hello World", page_count=1, warnings=["Used LLM OCR fallback for PDF (Gemini)"]
    )
    service.translate_text.return_value = TranslationResult(translated_text="Hello")
    service.extract_and_translate.return_value = ExtractAndTranslateResult(
        translated_text="Hello",
        extraction=ExtractionResult(kind="image", text="Bonjour"),
    )
    return service


@pytest.fixture
def handler(service):
    return DocumentRequestHandler(service)


class TestExtract:
    def test_success_body(self, handler, service):
        body = handler.extract(
            {"contentBase64": ENCODED, "fileName": "a.pdf", "mimeType": "application/pdf"}
        )

        assert body["success"] is True
        assert body["message"] == "Text extracted successfully"
        assert body["data"] == {
            "type": "pdf",
            "text": "Hello World",
            "pages": 1,
            "warnings": ["Used LLM OCR fallback for PDF (Gemini)"],
            "fileName": "a.pdf",
            "mimeType": "application/pdf",
            "forceOcr": False,
        }
        service.extract_text.assert_called_once_with(b"%PDF-1.7", "application/pdf", "a.pdf", False)

    def test_missing_content(self, handler):
        with pytest.raises(ValidationError, match="contentBase64"):
            handler.extract({"fileName": "a.pdf"})

    def test_invalid_base64(self, handler):
        with pytest.raises(InvalidBase64Error):
            handler.extract({"contentBase64": "not base64!!"})

    def test_force_ocr_body_flag(self, handler, service):
        handler.extract({"contentBase64": ENCODED, "forceOcr": True})

        assert service.extract_text.call_args.args[3] is True

    def test_query_param_overrides_body(self, handler, service):
        handler.extract({"contentBase64": ENCODED, "forceOcr": True}, force_ocr_param="off")

        assert service.extract_text.call_args.args[3] is False


class TestTranslate:
    def test_translate_text(self, handler, service):
        body = handler.translate_text({"text": "Bonjour", "sourceLang": "fr"})

        assert body["data"] == {"translation": "Hello", "sourceLang": "fr", "targetLang": "en"}
        service.translate_text.assert_called_once_with("Bonjour", "fr", "en")

    def test_extract_and_translate(self, handler, service):
        body = handler.extract_and_translate(
            {"contentBase64": ENCODED, "sourceLang": "fr", "targetLang": "de", "forceOcr": "yes"}
        )

        assert body["message"] == "Document translated successfully"
        assert body["data"]["translation"] == "Hello"
        assert body["data"]["meta"] == {"type": "image", "text": "Bonjour"}
        assert body["data"]["targetLang"] == "de"
        assert body["data"]["forceOcr"] is True

    def test_extract_and_translate_requires_language(self, handler, service):
        with pytest.raises(ValidationError, match="sourceLang"):
            handler.extract_and_translate({"contentBase64": ENCODED})
        service.extract_and_translate.assert_not_called()


class TestHandle:
    def test_success(self, handler):
        status, body = handler.handle(handler.translate_text, {"text": "Bonjour", "sourceLang": "fr"})

        assert status == 200
        assert body["success"] is True

    def test_validation_error_is_400(self, handler):
        status, body = handler.handle(handler.extract, {})

        assert status == 400
        assert body == {"success": False, "message": "Missing 'contentBase64' in JSON body"}

    def test_configuration_error_is_500(self, handler, service):
        service.translate_text.side_effect = ConfigurationError("no key")

        status, body = handler.handle(handler.translate_text, {"text": "a", "sourceLang": "fr"})

        assert status == 500
        assert body["message"] == "no key"

    def test_unexpected_errors_propagate(self, handler, service):
        service.translate_text.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            handler.handle(handler.translate_text, {"text": "a", "sourceLang": "fr"})


@pytest.mark.parametrize(
    "exc, status",
    [
        (ValidationError("x"), 400),
        (InvalidBase64Error("x"), 400),
        (UnsupportedTypeError("x"), 400),
        (InsufficientCreditsError("x"), 402),
        (ConfigurationError("x"), 500),
        (TransportError("x"), 500),
        (ParseError("x"), 500),
    ],
)
def test_status_code_for(exc, status):
    assert status_code_for(exc) == status


@pytest.mark.parametrize(
    "value, expected",
    [(True, True), (False, False), (None, False), ("1", True), ("TRUE", True),
     ("yes", True), ("on", True), ("0", False), ("no", False), ("", False)],
)
def test_parse_flag(value, expected):
    assert parse_flag(value) is expected
