# backend/utils/__init__.py

"""Shared utilities: file extraction and object naming."""

from .file_extraction import (
    SUPPORTED_EXTENSIONS,
    extract_text,
    extract_text_from_pdf_bytes,
    extract_text_from_docx_bytes,
    is_supported_extension,
)
from .naming import (
    UTF8_BOM,
    download_file_name,
    file_extension,
    is_hidden,
    sanitize_upload_name,
    strip_timestamp_prefix,
    summary_file_name,
    timestamped,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "extract_text",
    "extract_text_from_pdf_bytes",
    "extract_text_from_docx_bytes",
    "is_supported_extension",
    "UTF8_BOM",
    "download_file_name",
    "file_extension",
    "is_hidden",
    "sanitize_upload_name",
    "strip_timestamp_prefix",
    "summary_file_name",
    "timestamped",
]
