"""Document service: extraction, translation, and the two combined."""

from typing import Optional

from transcribe_it.backends import build_capabilities
from transcribe_it.config import ExtractorConfig
from transcribe_it.credits import CreditHook, CreditOperation, compute_required_credits
from transcribe_it.exceptions import ValidationError
from transcribe_it.extractor import DocumentExtractor
from transcribe_it.logger import get_logger
from transcribe_it.models import (
    ExtractAndTranslateResult,
    ExtractionResult,
    RawDocument,
    TranslationResult,
)
from transcribe_it.translator import DEFAULT_TARGET_LANG, Translator

logger = get_logger(__name__)


class DocumentService:
    def __init__(
        self,
        extractor: DocumentExtractor,
        translator: Translator,
        credit_hook: Optional[CreditHook] = None,
    ) -> None:
        """Initialize document service.

        Args:
            extractor: Document text extractor
            translator: LLM translator
            credit_hook: Optional ledger hook charged for each translation
        """
        self.extractor = extractor
        self.translator = translator
        self.credit_hook = credit_hook

    @classmethod
    def from_config(
        cls,
        config: Optional[ExtractorConfig] = None,
        credit_hook: Optional[CreditHook] = None,
    ) -> "DocumentService":
        """Build a service with the default backends.

        If ``config`` is None it is read from the environment.
        """
        config = config or ExtractorConfig.from_env()
        capabilities = build_capabilities(config)
        return cls(
            extractor=DocumentExtractor(capabilities, config),
            translator=Translator(capabilities.llm_client, config.llm_config.response_mode),
            credit_hook=credit_hook,
        )

    def extract_text(
        self,
        content: Optional[bytes],
        mime_type: Optional[str] = None,
        file_name: Optional[str] = None,
        force_ocr: bool = False,
    ) -> ExtractionResult:
        if not content:
            raise ValidationError("No file provided")

        document = RawDocument(content=bytes(content), file_name=file_name, mime_type=mime_type)
        return self.extractor.extract(document, force_ocr=force_ocr)

    def translate_text(
        self,
        text: Optional[str],
        source_lang: Optional[str],
        target_lang: Optional[str] = DEFAULT_TARGET_LANG,
    ) -> TranslationResult:
        if not text or not source_lang:
            raise ValidationError("'text' and 'sourceLang' are required")

        return self._translate(
            text, source_lang, target_lang or DEFAULT_TARGET_LANG, operation="translation"
        )

    def extract_and_translate(
        self,
        content: Optional[bytes],
        source_lang: Optional[str],
        mime_type: Optional[str] = None,
        file_name: Optional[str] = None,
        target_lang: Optional[str] = DEFAULT_TARGET_LANG,
        force_ocr: bool = False,
    ) -> ExtractAndTranslateResult:
        """Extract text from a document, then translate it.

        Input is validated before any backend is called. The extracted text
        is translated as-is, even when empty.
        """
        if not content:
            raise ValidationError("No file provided")
        if not source_lang:
            raise ValidationError("'sourceLang' is required")

        extraction = self.extract_text(content, mime_type, file_name, force_ocr)
        translation = self._translate(
            extraction.text,
            source_lang,
            target_lang or DEFAULT_TARGET_LANG,
            operation="extract_and_translate",
            metadata={"file_name": file_name, "kind": extraction.kind},
        )

        return ExtractAndTranslateResult(
            translated_text=translation.translated_text,
            extraction=extraction,
        )

    def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        operation: CreditOperation,
        metadata: Optional[dict] = None,
    ) -> TranslationResult:
        billable = self.credit_hook is not None and bool(text.strip())
        credits = compute_required_credits(len(text))

        if billable:
            self.credit_hook.ensure_sufficient(credits)

        result = self.translator.translate(text, source_lang, target_lang)

        if billable:
            self.credit_hook.charge(
                operation,
                credits,
                {
                    **(metadata or {}),
                    "source_lang": source_lang,
                    "target_lang": target_lang,
                    "characters": len(text),
                },
            )
            logger.info(
                "Credits charged",
                extra_data={"operation": operation, "credits": credits},
            )

        return result
