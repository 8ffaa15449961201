"""Document format detection from declared MIME type and file name."""

from pathlib import Path
from typing import Optional

from transcribe_it.logger import get_logger
from transcribe_it.models import DocumentKind

logger = get_logger(__name__)


PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
IMAGE_MIMES = frozenset(
    {
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/webp",
        "image/bmp",
        "image/tiff",
    }
)

PDF_EXTENSIONS = frozenset({".pdf"})
DOCX_EXTENSIONS = frozenset({".docx"})
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tiff", ".tif"})

# Order in which formats are tried when nothing identifies the input
GUESS_ORDER: tuple[DocumentKind, ...] = ("pdf", "docx", "image")


def normalize_mime(mime_type: Optional[str]) -> str:
    return (mime_type or "").strip().lower()


def file_extension(file_name: Optional[str]) -> str:
    if not file_name:
        return ""
    return Path(file_name).suffix.lower()


class FormatDetector:
    """Maps a declared MIME type and/or file name to a document kind.

    MIME types are checked before extensions; the first rule that matches
    wins. ``detect`` returns None when neither hint is recognised, leaving
    the caller to decide whether to guess.
    """

    RULES: tuple[tuple[DocumentKind, frozenset, frozenset], ...] = (
        ("pdf", frozenset({PDF_MIME}), PDF_EXTENSIONS),
        ("docx", frozenset({DOCX_MIME}), DOCX_EXTENSIONS),
        ("image", IMAGE_MIMES, IMAGE_EXTENSIONS),
    )

    def detect(
        self, mime_type: Optional[str] = None, file_name: Optional[str] = None
    ) -> Optional[DocumentKind]:
        mime = normalize_mime(mime_type)
        ext = file_extension(file_name)

        kind = self._match(mime, ext)

        if kind is None:
            logger.warning(
                "Unrecognized document format",
                extra_data={"file_name": file_name, "mime_type": mime, "file_extension": ext},
            )
        else:
            logger.debug(
                "Document format detected",
                extra_data={
                    "file_name": file_name,
                    "mime_type": mime,
                    "file_extension": ext,
                    "kind": kind,
                },
            )
        return kind

    def _match(self, mime: str, ext: str) -> Optional[DocumentKind]:
        for kind, mimes, _ in self.RULES:
            if mime in mimes:
                return kind
        for kind, _, extensions in self.RULES:
            if ext in extensions:
                return kind
        return None
