"""
Format Detection Tests
"""
import pytest

from transcribe_it.detector import DOCX_MIME, FormatDetector, file_extension


class TestFormatDetector:
    """Test MIME and extension based detection"""

    @pytest.mark.parametrize(
        "mime_type, expected",
        [
            ("application/pdf", "pdf"),
            ("APPLICATION/PDF", "pdf"),
            (DOCX_MIME, "docx"),
            ("image/png", "image"),
            ("image/jpeg", "image"),
            ("image/jpg", "image"),
            ("image/webp", "image"),
            ("image/bmp", "image"),
            ("image/tiff", "image"),
        ],
    )
    def test_detects_declared_mime(self, mime_type, expected):
        """Should map every supported MIME type to its extractor"""
        assert FormatDetector().detect(mime_type, None) == expected

    @pytest.mark.parametrize(
        "file_name, expected",
        [
            ("report.PDF", "pdf"),
            ("letter.docx", "docx"),
            ("scan.tif", "image"),
            ("scan.tiff", "image"),
            ("photo.jpeg", "image"),
        ],
    )
    def test_falls_back_to_extension(self, file_name, expected):
        """Should use the file extension when MIME type is absent"""
        assert FormatDetector().detect(None, file_name) == expected

    def test_unrecognized_mime_uses_extension(self):
        """Should ignore generic MIME types such as octet-stream"""
        assert FormatDetector().detect("application/octet-stream", "a.docx") == "docx"

    def test_mime_takes_precedence_over_extension(self):
        assert FormatDetector().detect("image/png", "misnamed.pdf") == "image"

    def test_unknown_returns_none(self):
        assert FormatDetector().detect("application/zip", "archive.zip") is None
        assert FormatDetector().detect(None, None) is None


def test_file_extension():
    assert file_extension("a/b/Report.PDF") == ".pdf"
    assert file_extension("noext") == ""
    assert file_extension(None) == ""
