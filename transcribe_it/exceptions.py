"""Custom exceptions for the extraction and translation pipeline."""

from typing import Optional


class TranscribeItError(Exception):
    """Base exception for pipeline errors."""

    pass


class ValidationError(TranscribeItError):
    """Raised when a request is missing a file or a language."""

    pass


class InvalidBase64Error(ValidationError):
    """Raised when base64 decoding fails."""

    pass


class UnsupportedTypeError(TranscribeItError):
    """Raised when the document format cannot be determined."""

    pass


class ConfigurationError(TranscribeItError):
    """Raised when a required backend (OCR engine, LLM API key) is absent."""

    pass


class ParseError(TranscribeItError):
    """Raised when a document parser rejects the input."""

    pass


class TransportError(TranscribeItError):
    """Raised when an LLM HTTP call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(TranscribeItError):
    """Raised when the LLM returns a payload that cannot be used."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(f"{message}. Raw response: {raw_response!r}")
        self.raw_response = raw_response


class InsufficientCreditsError(TranscribeItError):
    """Raised by a credit hook when the balance cannot cover an operation."""

    pass
