"""Markdown-preserving translation through the generative-language endpoint."""

import json
from typing import Optional

from transcribe_it.exceptions import ConfigurationError, MalformedResponseError
from transcribe_it.llm import LlmClient
from transcribe_it.logger import Timer, get_logger
from transcribe_it.models import TranslationResult

logger = get_logger(__name__)


DEFAULT_TARGET_LANG = "en"

PROMPT_TEMPLATE = (
    "Translate the following document from {source_lang} to {target_lang}. "
    "Output ONLY Markdown preserving structure (headings, lists, tables, "
    "emphasis, code blocks). No commentary.\n\n---\n{text}"
)

TRANSLATION_SCHEMA = {
    "type": "OBJECT",
    "properties": {"translation": {"type": "STRING"}},
    "required": ["translation"],
}


def build_prompt(text: str, source_lang: str, target_lang: str) -> str:
    return PROMPT_TEMPLATE.format(source_lang=source_lang, target_lang=target_lang, text=text)


def parse_json_translation(raw: str) -> str:
    """Pull the ``translation`` string out of a structured response."""
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MalformedResponseError("Translation response is not valid JSON", raw) from exc

    translation = data.get("translation") if isinstance(data, dict) else None
    if not isinstance(translation, str):
        raise MalformedResponseError(
            "Translation response is missing a string 'translation' field", raw
        )
    return translation


class Translator:
    """Translates text between languages, keeping its Markdown structure."""

    def __init__(self, llm_client: Optional[LlmClient], response_mode: str = "text"):
        """Initialize translator.

        Args:
            llm_client: Gemini client. None means translation is unavailable.
            response_mode: "text" to use the reply directly, "json" to request
                and validate a ``{"translation": ...}`` object.
        """
        self.llm_client = llm_client
        self.response_mode = response_mode

    def translate(
        self, text: str, source_lang: str, target_lang: str = DEFAULT_TARGET_LANG
    ) -> TranslationResult:
        """Translate ``text`` from ``source_lang`` to ``target_lang``.

        Raises:
            ConfigurationError: No LLM backend configured
            TransportError: LLM request failed
            MalformedResponseError: LLM reply unusable as a translation
        """
        if self.llm_client is None:
            raise ConfigurationError(
                "Google GenAI API key not configured. "
                "Set GOOGLE_API_KEY or GENAI_API_KEY or API_KEY."
            )

        target_lang = target_lang or DEFAULT_TARGET_LANG

        if not text.strip():
            logger.info(
                "Skipping translation of empty text",
                extra_data={"source_lang": source_lang, "target_lang": target_lang},
            )
            return TranslationResult(translated_text="")

        prompt = build_prompt(text, source_lang, target_lang)
        json_mode = self.response_mode == "json"

        with Timer("translation") as timer:
            raw = self.llm_client.generate(
                prompt, response_schema=TRANSLATION_SCHEMA if json_mode else None
            )

        translated = parse_json_translation(raw) if json_mode else raw
        if not translated.strip():
            raise MalformedResponseError("Translation response is empty", raw)

        logger.info(
            "Translation completed",
            extra_data={
                "source_lang": source_lang,
                "target_lang": target_lang,
                "response_mode": self.response_mode,
                "input_characters": len(text),
                "output_characters": len(translated),
                "translation_time_ms": timer.get_elapsed_ms(),
            },
        )
        return TranslationResult(translated_text=translated)
