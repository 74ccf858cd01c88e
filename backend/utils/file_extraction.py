# backend/utils/file_extraction.py

import io
from typing import Callable, Dict, Optional

from pypdf import PdfReader
from docx import Document

from exceptions import UnsupportedFileTypeError

SUPPORTED_TEXT = (".txt", ".md")
SUPPORTED_PDF = (".pdf",)
SUPPORTED_DOCX = (".docx", ".doc")
SUPPORTED_EXTENSIONS = SUPPORTED_TEXT + SUPPORTED_PDF + SUPPORTED_DOCX


def extract_text_from_plain_bytes(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """
    Read all pages from a PDF (given as raw bytes) and return their merged text.
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    text_parts = []
    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
    return "\n".join(text_parts)


def extract_text_from_docx_bytes(docx_bytes: bytes) -> str:
    """
    Extract raw text from a Word document (given as raw bytes), one paragraph per line.
    """
    doc = Document(io.BytesIO(docx_bytes))
    return "\n".join(paragraph.text for paragraph in doc.paragraphs)


_EXTRACTORS: Dict[str, Callable[[bytes], str]] = {}
for _ext in SUPPORTED_TEXT:
    _EXTRACTORS[_ext] = extract_text_from_plain_bytes
for _ext in SUPPORTED_PDF:
    _EXTRACTORS[_ext] = extract_text_from_pdf_bytes
for _ext in SUPPORTED_DOCX:
    _EXTRACTORS[_ext] = extract_text_from_docx_bytes


def is_supported_extension(ext: str) -> bool:
    return ext.lower() in _EXTRACTORS


def extract_text(data: bytes, ext: str, unsupported_message: Optional[str] = None) -> str:
    """
    Dispatch raw bytes to the extractor registered for ``ext``.

    Raises:
        UnsupportedFileTypeError: no extractor for the extension. The message
            defaults to the preview wording; callers may pass their own.
    """
    extractor = _EXTRACTORS.get(ext.lower())
    if extractor is None:
        raise UnsupportedFileTypeError(
            unsupported_message or f"Preview not available for this file type ({ext})."
        )
    return extractor(data) or ""
