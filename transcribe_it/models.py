"""Data models for the extraction and translation pipeline."""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

DocumentKind = Literal["pdf", "docx", "image"]


@dataclass(frozen=True)
class RawDocument:
    """Caller-provided document bytes plus optional type hints."""

    content: bytes
    file_name: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class ExtractionResult:
    """Result of document extraction.

    ``text`` is best-effort: an empty string is valid and always comes with
    at least one entry in ``warnings`` explaining why.
    """

    kind: DocumentKind
    text: str  # Markdown for PDFs, plain text otherwise
    page_count: Optional[int] = None
    warnings: list[str] = field(default_factory=list)
    ocr_used: bool = False

    @property
    def character_count(self) -> int:
        return len(self.text)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind, "text": self.text}
        if self.page_count is not None:
            data["pages"] = self.page_count
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data


@dataclass(frozen=True)
class TranslationResult:
    translated_text: str


@dataclass(frozen=True)
class ExtractAndTranslateResult:
    translated_text: str
    extraction: ExtractionResult
