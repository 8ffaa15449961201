"""HTTP client for the Gemini generative-language endpoint.

Used both for LLM OCR (inline file bytes plus an instruction) and for
translation (a text prompt, optionally with a JSON response schema).
"""

import base64
from typing import Any, Optional, Protocol
from urllib.parse import quote

import httpx

from transcribe_it.config import LLMConfig
from transcribe_it.detector import PDF_MIME
from transcribe_it.exceptions import ConfigurationError, TransportError
from transcribe_it.logger import Timer, get_logger

logger = get_logger(__name__)


OCR_INSTRUCTION = (
    "Extract all text from this document. "
    "If no text is present, return an empty response."
)
IMAGE_WRAPPED_PDF_INSTRUCTION = (
    "This file may be an image-wrapped PDF. Perform OCR and extract any text."
)
# Some backends reject PDF input but accept the same bytes declared as an image
RETRY_MIME = "image/jpeg"


class LlmClient(Protocol):
    def extract_text(self, content: bytes, mime_type: str) -> str: ...

    def generate(self, prompt: str, response_schema: Optional[dict] = None) -> str: ...


def parse_candidate_text(data: Any) -> str:
    """Join the text parts of the first candidate; "" for any other shape."""
    if not isinstance(data, dict):
        return ""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return ""
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return ""

    texts = [
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"]
    ]
    return "\n".join(texts)


class GeminiClient:
    """Gemini ``generateContent`` client using httpx (sync).

    A new ``httpx.Client`` is opened per request; pooling is left to the
    caller's runtime.
    """

    def __init__(
        self,
        config: LLMConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not config.api_key:
            raise ConfigurationError(
                "LLM OCR not available. Set GOOGLE_API_KEY/GENAI_API_KEY."
            )
        self.config = config
        self._transport = transport

    @property
    def model(self) -> str:
        return self.config.model

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            transport=self._transport,
        )

    def _endpoint(self) -> str:
        return f"/models/{quote(self.config.model, safe='')}:generateContent"

    def _post(self, payload: dict) -> httpx.Response:
        try:
            with self._client() as client:
                return client.post(
                    self._endpoint(),
                    params={"key": self.config.api_key},
                    json=payload,
                )
        except httpx.HTTPError as exc:
            logger.error(
                "LLM request could not be sent",
                extra_data={
                    "model": self.config.model,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise TransportError(f"LLM request failed: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {}

    def _error_message(self, response: httpx.Response, default: str) -> str:
        data = self._json(response)
        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return response.reason_phrase or default

    @staticmethod
    def _file_payload(encoded: str, mime_type: str, instruction: str) -> dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"inlineData": {"mimeType": mime_type, "data": encoded}},
                        {"text": instruction},
                    ]
                }
            ]
        }

    def extract_text(self, content: bytes, mime_type: str) -> str:
        """Run LLM OCR over inline file bytes.

        A PDF-declared request rejected with an HTTP error is retried once
        as ``image/jpeg``. Any other failure raises :class:`TransportError`.
        """
        encoded = base64.b64encode(content).decode("ascii")

        with Timer("llm_ocr") as timer:
            response = self._post(self._file_payload(encoded, mime_type, OCR_INSTRUCTION))

        if response.is_success:
            text = parse_candidate_text(self._json(response))
            logger.info(
                "LLM OCR completed",
                extra_data={
                    "model": self.config.model,
                    "mime_type": mime_type,
                    "characters_extracted": len(text),
                    "ocr_time_ms": timer.get_elapsed_ms(),
                },
            )
            return text

        message = self._error_message(response, "LLM OCR request failed")

        if mime_type == PDF_MIME:
            logger.warning(
                "LLM OCR rejected PDF, retrying as image",
                extra_data={
                    "model": self.config.model,
                    "status_code": response.status_code,
                    "error": message,
                },
            )
            retry = self._post(
                self._file_payload(encoded, RETRY_MIME, IMAGE_WRAPPED_PDF_INSTRUCTION)
            )
            if retry.is_success:
                return parse_candidate_text(self._json(retry))

        logger.error(
            "LLM OCR request failed",
            extra_data={
                "model": self.config.model,
                "mime_type": mime_type,
                "status_code": response.status_code,
                "error": message,
            },
        )
        raise TransportError(message, status_code=response.status_code)

    def generate(self, prompt: str, response_schema: Optional[dict] = None) -> str:
        """Send a text prompt and return the reply text.

        With ``response_schema`` the backend is asked for JSON matching it;
        the raw JSON text is returned for the caller to validate.
        """
        payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if response_schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }

        response = self._post(payload)
        if not response.is_success:
            message = self._error_message(response, "LLM request failed")
            logger.error(
                "LLM generate request failed",
                extra_data={
                    "model": self.config.model,
                    "status_code": response.status_code,
                    "error": message,
                },
            )
            raise TransportError(message, status_code=response.status_code)

        return parse_candidate_text(self._json(response))
