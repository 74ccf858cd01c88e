# backend/utils/naming.py

"""Object-key naming: sanitization, millisecond timestamp prefixes, display names."""

import re
import time

_TIMESTAMP_PREFIX = re.compile(r"^\d+-")
_UPLOAD_UNSAFE = re.compile(r"[^a-zA-Z0-9.-]")
_SUMMARY_UNSAFE = re.compile(r"[^a-zA-Z0-9.\-_]")
_DOWNLOAD_UNSAFE = re.compile(r"[^\w.\-]", re.ASCII)

HIDDEN_PREFIX = "."
UTF8_BOM = b"\xef\xbb\xbf"


def now_ms() -> int:
    return int(time.time() * 1000)


def sanitize_upload_name(filename: str) -> str:
    return _UPLOAD_UNSAFE.sub("_", filename)


def sanitize_summary_name(name: str) -> str:
    return _SUMMARY_UNSAFE.sub("_", name)


def strip_timestamp_prefix(name: str) -> str:
    """``1700000000000-report.pdf`` -> ``report.pdf``."""
    return _TIMESTAMP_PREFIX.sub("", name, count=1)


def timestamped(name: str, timestamp: int | None = None) -> str:
    return f"{timestamp if timestamp is not None else now_ms()}-{name}"


def is_hidden(name: str) -> bool:
    return not name or name.startswith(HIDDEN_PREFIX)


def file_extension(path: str) -> str:
    """Extension including the dot; extensionless paths are treated as text."""
    if "." not in path:
        return ".txt"
    return path[path.rindex("."):]


def summary_file_name(source_path: str, custom_name: str | None = None, timestamp: int | None = None) -> str:
    """
    Build the object key for a derived summary file.

    A custom name keeps its base (a trailing ``.txt`` is dropped before
    sanitizing); otherwise the name is derived from the source document's
    base name as ``summary_<base>.txt``.
    """
    if custom_name and custom_name.strip():
        base = re.sub(r"\.txt$", "", custom_name.strip(), flags=re.IGNORECASE)
        return timestamped(f"{sanitize_summary_name(base)}.txt", timestamp)

    base_name = re.sub(r"\.[^.]+$", "", strip_timestamp_prefix(source_path)) or "document"
    return timestamped(f"summary_{sanitize_summary_name(base_name)}.txt", timestamp)


def download_file_name(path: str) -> str:
    """Attachment filename for a stored object: last segment, prefix stripped, sanitized."""
    filename = strip_timestamp_prefix(re.sub(r"^.*/", "", path)) or "summary.txt"
    return _DOWNLOAD_UNSAFE.sub("_", filename) or "summary.txt"
