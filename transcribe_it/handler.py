"""Request-level handling for the OCR endpoints.

Turns JSON payloads (``contentBase64``, ``fileName``, ``mimeType``,
``forceOcr``, ``text``, ``sourceLang``, ``targetLang``) into service calls
and service results or errors into ``{success, message, data}`` bodies.
"""

import base64
import binascii
from typing import Any, Callable, Mapping, Optional

from transcribe_it.exceptions import (
    InsufficientCreditsError,
    InvalidBase64Error,
    TranscribeItError,
    UnsupportedTypeError,
    ValidationError,
)
from transcribe_it.logger import Timer, get_logger, request_context
from transcribe_it.service import DocumentService
from transcribe_it.translator import DEFAULT_TARGET_LANG

logger = get_logger(__name__)

TRUTHY_VALUES = {"1", "true", "yes", "on"}

Payload = Mapping[str, Any]


def parse_flag(value: Any) -> bool:
    """Interpret a boolean flag sent as JSON bool or form/query string."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY_VALUES


def status_code_for(exc: Exception) -> int:
    if isinstance(exc, (ValidationError, UnsupportedTypeError)):
        return 400
    if isinstance(exc, InsufficientCreditsError):
        return 402
    return 500


def response_body(message: str, data: Optional[dict] = None, success: bool = True) -> dict:
    body: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    return body


class DocumentRequestHandler:
    def __init__(self, service: DocumentService) -> None:
        self.service = service

    def decode_file(self, encoded: str) -> bytes:
        """Decode base64-encoded file.

        Raises:
            InvalidBase64Error: If decoding fails
        """
        try:
            with Timer("base64_decode") as timer:
                decoded = base64.b64decode(encoded, validate=True)

            logger.debug(
                "Successfully decoded base64 file",
                extra_data={
                    "decoded_size_bytes": len(decoded),
                    "decode_time_ms": timer.get_elapsed_ms(),
                },
            )
            return decoded
        except (ValueError, binascii.Error) as exc:
            logger.error(
                "Failed to decode base64 string",
                extra_data={
                    "error_type": type(exc).__name__,
                    "encoded_length": len(encoded) if encoded else 0,
                },
            )
            raise InvalidBase64Error("Invalid base64 content") from exc

    def _file_content(self, payload: Payload) -> bytes:
        encoded = payload.get("contentBase64")
        if not encoded:
            raise ValidationError("Missing 'contentBase64' in JSON body")
        return self.decode_file(encoded)

    @staticmethod
    def _force_ocr(payload: Payload, query_value: Optional[str]) -> bool:
        # Query parameter wins over the body field
        if query_value is not None:
            return parse_flag(query_value)
        return parse_flag(payload.get("forceOcr"))

    def extract(self, payload: Payload, force_ocr_param: Optional[str] = None) -> dict:
        content = self._file_content(payload)
        file_name = payload.get("fileName")
        mime_type = payload.get("mimeType")
        force_ocr = self._force_ocr(payload, force_ocr_param)

        result = self.service.extract_text(content, mime_type, file_name, force_ocr)

        return response_body(
            "Text extracted successfully",
            {
                **result.to_dict(),
                "fileName": file_name,
                "mimeType": mime_type,
                "forceOcr": force_ocr,
            },
        )

    def translate_text(self, payload: Payload) -> dict:
        source_lang = payload.get("sourceLang")
        target_lang = payload.get("targetLang") or DEFAULT_TARGET_LANG

        result = self.service.translate_text(payload.get("text"), source_lang, target_lang)

        return response_body(
            "Text translated successfully",
            {
                "translation": result.translated_text,
                "sourceLang": source_lang,
                "targetLang": target_lang,
            },
        )

    def extract_and_translate(
        self, payload: Payload, force_ocr_param: Optional[str] = None
    ) -> dict:
        content = self._file_content(payload)
        source_lang = payload.get("sourceLang")
        if not source_lang:
            raise ValidationError("'sourceLang' is required")

        file_name = payload.get("fileName")
        mime_type = payload.get("mimeType")
        target_lang = payload.get("targetLang") or DEFAULT_TARGET_LANG
        force_ocr = self._force_ocr(payload, force_ocr_param)

        result = self.service.extract_and_translate(
            content,
            source_lang,
            mime_type=mime_type,
            file_name=file_name,
            target_lang=target_lang,
            force_ocr=force_ocr,
        )

        return response_body(
            "Document translated successfully",
            {
                "translation": result.translated_text,
                "meta": result.extraction.to_dict(),
                "fileName": file_name,
                "mimeType": mime_type,
                "sourceLang": source_lang,
                "targetLang": target_lang,
                "forceOcr": force_ocr,
            },
        )

    def handle(
        self,
        action: Callable[..., dict],
        *args: Any,
        request_id: Optional[str] = None,
        **kwargs: Any,
    ) -> tuple[int, dict]:
        """Run one of the handler actions and map its outcome to (status, body).

        Pipeline errors become error bodies; anything else propagates to the
        web framework.
        """
        with request_context(request_id):
            try:
                return 200, action(*args, **kwargs)
            except TranscribeItError as exc:
                status = status_code_for(exc)
                logger.warning(
                    "Request failed",
                    extra_data={
                        "action": getattr(action, "__name__", str(action)),
                        "status_code": status,
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
                return status, response_body(str(exc), success=False)
