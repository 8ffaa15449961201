"""Configuration for the extraction and translation pipeline."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

API_KEY_ENV_VARS = ("GOOGLE_API_KEY", "GENAI_API_KEY", "API_KEY")
"""Environment variables checked, in order, for the generative-language API key."""

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

RESPONSE_MODES = ("text", "json")


@dataclass
class OCRConfig:
    """Configuration for the conventional (Tesseract) OCR engine.

    Examples:
        >>> # Default: English, uniform block of text
        >>> config = OCRConfig()

        >>> # Custom binary location
        >>> config = OCRConfig(tesseract_cmd="/usr/local/bin/tesseract")
    """

    tesseract_cmd: str = "tesseract"
    """Path to tesseract binary. Default: "tesseract" (assumes in PATH)."""

    tessdata_prefix: Optional[str] = None
    """Optional path to tessdata directory. If None, uses system default."""

    languages: str = "eng"
    """OCR language in Tesseract format. Images are always read as English."""

    psm_mode: int = 6
    """Page segmentation mode (0-13). Default: 6 (uniform block of text)."""


@dataclass
class LLMConfig:
    """Configuration for the generative-language (Gemini) endpoint.

    LLM OCR and translation are enabled only when ``api_key`` is set.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = 120.0
    response_mode: str = "text"
    """How translation responses are parsed: "text" uses the reply as-is,
    "json" requests a structured object with a ``translation`` field."""

    def __post_init__(self):
        if self.response_mode not in RESPONSE_MODES:
            raise ValueError(
                f"response_mode must be one of {RESPONSE_MODES}, got {self.response_mode!r}"
            )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "LLMConfig":
        """Build from environment variables (or any mapping standing in for them)."""
        env = os.environ if env is None else env

        api_key = next((env[name] for name in API_KEY_ENV_VARS if env.get(name)), None)

        return cls(
            api_key=api_key,
            model=env.get("GENAI_MODEL") or DEFAULT_MODEL,
            base_url=(env.get("GENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=float(env.get("GENAI_TIMEOUT_SECONDS") or 120.0),
            response_mode=(env.get("GENAI_RESPONSE_MODE") or "text").lower(),
        )


@dataclass
class ExtractorConfig:
    """Configuration for document extraction."""

    ocr_config: OCRConfig = field(default_factory=OCRConfig)
    llm_config: LLMConfig = field(default_factory=LLMConfig)

    min_pdf_text_length: int = 50
    """Native PDF text shorter than this (characters, after trimming) is
    treated as missing and sent to LLM OCR."""

    guess_unknown_formats: bool = True
    """Try PDF, then DOCX, then image when neither MIME type nor file
    extension is recognised. When False, such input is rejected."""

    table_strategy: str = "lines_strict"
    fontsize_limit: int = 3

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExtractorConfig":
        env = os.environ if env is None else env

        ocr_config = OCRConfig(
            tesseract_cmd=env.get("TESSERACT_CMD") or "tesseract",
            tessdata_prefix=env.get("TESSDATA_PREFIX") or None,
        )
        guess = (env.get("GUESS_UNKNOWN_FORMATS") or "true").lower()

        return cls(
            ocr_config=ocr_config,
            llm_config=LLMConfig.from_env(env),
            guess_unknown_formats=guess in {"1", "true", "yes", "on"},
        )
