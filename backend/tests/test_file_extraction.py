"""
Text extraction dispatch by file extension.

Run with: pytest tests/test_file_extraction.py -v
"""

import io

import pytest
from docx import Document
from pypdf import PdfWriter

from exceptions import UnsupportedFileTypeError
from utils import extract_text, is_supported_extension


class TestPlainText:

    def test_txt_returns_exact_utf8_text(self):
        raw = "Line one\nLínea dos · 第三行\n".encode("utf-8")
        assert extract_text(raw, ".txt") == "Line one\nLínea dos · 第三行\n"

    def test_markdown_is_read_as_text(self):
        assert extract_text(b"# Title\n\n- item", ".md") == "# Title\n\n- item"

    def test_extension_match_is_case_insensitive(self):
        assert extract_text(b"upper", ".TXT") == "upper"

    def test_empty_file_yields_empty_string(self):
        assert extract_text(b"", ".txt") == ""


class TestOfficeFormats:

    def test_docx_paragraphs_joined(self):
        doc = Document()
        doc.add_paragraph("First paragraph")
        doc.add_paragraph("Second paragraph")
        buf = io.BytesIO()
        doc.save(buf)

        text = extract_text(buf.getvalue(), ".docx")
        assert "First paragraph" in text
        assert "Second paragraph" in text
        assert text.index("First") < text.index("Second")

    def test_pdf_without_text_yields_empty_string(self):
        writer = PdfWriter()
        writer.add_blank_page(width=200, height=200)
        buf = io.BytesIO()
        writer.write(buf)

        assert extract_text(buf.getvalue(), ".pdf") == ""


class TestUnsupported:

    def test_unsupported_extension_raises_preview_error(self):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            extract_text(b"MZ\x90\x00", ".exe")
        assert "Preview not available" in str(exc_info.value)
        assert ".exe" in str(exc_info.value)
        assert exc_info.value.status_code == 400

    def test_custom_unsupported_message(self):
        with pytest.raises(UnsupportedFileTypeError, match="Unsupported file type for summary: .png"):
            extract_text(b"", ".png", unsupported_message="Unsupported file type for summary: .png")

    @pytest.mark.parametrize("ext,expected", [
        (".txt", True),
        (".md", True),
        (".pdf", True),
        (".docx", True),
        (".doc", True),
        (".exe", False),
        (".png", False),
    ])
    def test_is_supported_extension(self, ext, expected):
        assert is_supported_extension(ext) is expected
