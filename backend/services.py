# backend/services.py

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

import config
from exceptions import DuplicateFileError, MetadataStoreError, NoSummaryError, StorageError
from logger import logger
from models import DocumentRecord, FileEntry, SummaryHistoryEntry
from stores import MetadataStore, ObjectStore
from utils import (
    UTF8_BOM,
    download_file_name,
    extract_text,
    file_extension,
    is_hidden,
    sanitize_upload_name,
    strip_timestamp_prefix,
    summary_file_name,
    timestamped,
)

EMPTY_FILE = "(Empty file)"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_metadata_lookup(rows: List[DocumentRecord]) -> Dict[str, DocumentRecord]:
    """Index metadata rows by object path, built once per listing."""
    return {row.path: row for row in rows}


def _enrich(entry: FileEntry, row: Optional[DocumentRecord]) -> None:
    summary_file_path = row.summary_file_path if row else None
    entry.has_summary = bool(row and (row.summary or "").strip())
    entry.summary_file_path = summary_file_path
    entry.is_ai_summary = summary_file_path is not None


def list_documents(
    object_store: ObjectStore,
    metadata_store: MetadataStore,
    search: Optional[str] = None,
    sort_by: str = "date",
    limit: int = config.LIST_LIMIT,
    offset: int = 0,
) -> Tuple[List[FileEntry], int]:
    """
    List visible objects (newest first by default), annotated from the metadata
    table. A failed metadata lookup drops the annotation fields, not the listing.

    Returns:
        (page of entries, total matching entries before pagination)
    """
    objects = [obj for obj in object_store.list_objects(limit=config.LIST_LIMIT) if not is_hidden(obj.name)]

    entries = [
        FileEntry(
            name=obj.name,
            display_name=strip_timestamp_prefix(obj.name),
            path=obj.name,
            created_at=obj.created_at,
            size=obj.size,
        )
        for obj in objects
    ]

    if search and search.strip():
        needle = search.strip().lower()
        entries = [entry for entry in entries if needle in entry.display_name.lower()]

    if sort_by == "name":
        entries.sort(key=lambda entry: entry.display_name.lower())
    else:
        entries.sort(key=lambda entry: entry.created_at or "", reverse=True)

    total = len(entries)
    page = entries[offset:offset + limit]

    try:
        lookup = build_metadata_lookup(metadata_store.get_many([entry.path for entry in page]))
    except MetadataStoreError as exc:
        logger.warning("Metadata join skipped for listing: %s", exc)
        return page, total

    for entry in page:
        _enrich(entry, lookup.get(entry.path))
    return page, total


def _existing_base_names(object_store: ObjectStore) -> set:
    try:
        objects = object_store.list_objects(limit=config.DUPLICATE_SCAN_LIMIT, newest_first=False)
    except StorageError as exc:
        logger.warning("Duplicate-name check skipped: %s", exc)
        return set()
    return {strip_timestamp_prefix(obj.name) for obj in objects if not is_hidden(obj.name)}


def upload_document(
    object_store: ObjectStore,
    metadata_store: MetadataStore,
    filename: str,
    data: bytes,
    content_type: Optional[str] = None,
    reject_duplicates: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Store ``data`` under ``<epoch-ms>-<sanitized name>`` and upsert its metadata
    row. The object write is authoritative; a failed row write is only logged.
    """
    if reject_duplicates is None:
        reject_duplicates = config.REJECT_DUPLICATE_UPLOADS

    safe_base_name = sanitize_upload_name(filename)
    if reject_duplicates and safe_base_name in _existing_base_names(object_store):
        raise DuplicateFileError("A file with this name has already been uploaded.")

    path = object_store.upload(timestamped(safe_base_name), data, content_type=content_type)

    now = _now_iso()
    try:
        metadata_store.upsert(
            {
                "path": path,
                "name": filename,
                "size": len(data),
                "created_at": now,
                "updated_at": now,
            }
        )
    except MetadataStoreError as exc:
        logger.warning("DB insert warning for '%s': %s", path, exc)

    logger.info("Uploaded '%s' as '%s' (bytes=%s)", filename, path, len(data))
    return {
        "path": path,
        "url": object_store.public_url(path),
        "name": filename,
        "size": len(data),
    }


def delete_document(
    object_store: ObjectStore,
    metadata_store: MetadataStore,
    path: str,
    cascade: Optional[bool] = None,
) -> None:
    """
    Remove the object. The metadata row and any linked summary file are kept
    unless ``cascade`` (default: DELETE_CASCADE_METADATA) is on.
    """
    if cascade is None:
        cascade = config.DELETE_CASCADE_METADATA

    targets = [path]
    if cascade:
        row = metadata_store.get(path)
        if row and row.summary_file_path:
            targets.append(row.summary_file_path)

    object_store.remove(targets)

    if cascade:
        metadata_store.delete(path)
    logger.info("Deleted '%s' (cascade=%s)", path, cascade)


def read_document_text(object_store: ObjectStore, path: str) -> str:
    """Extracted text for preview, or the empty-file marker."""
    data = object_store.download(path)
    content = extract_text(data, file_extension(path))
    return content or EMPTY_FILE


def download_document(object_store: ObjectStore, path: str) -> Tuple[bytes, str]:
    """Raw bytes plus the attachment filename (prefix stripped, sanitized)."""
    return object_store.download(path), download_file_name(path)


def save_summary_file(
    object_store: ObjectStore,
    metadata_store: MetadataStore,
    path: str,
    custom_name: Optional[str] = None,
    summary: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Persist a summary as a new BOM-prefixed ``.txt`` object and link it to the
    source document's row. Falls back to the cached English summary.
    """
    summary_text = (summary or "").strip() or None
    if summary_text is None:
        try:
            row = metadata_store.get(path)
        except MetadataStoreError as exc:
            logger.error("Save summary: could not load '%s': %s", path, exc)
            raise MetadataStoreError("Could not load document. Try again.") from exc
        summary_text = ((row.summary if row else None) or "").strip() or None

    if summary_text is None:
        raise NoSummaryError("No summary to save. Generate a summary first.")

    name = summary_file_name(path, custom_name)
    stored_path = object_store.upload(
        name,
        UTF8_BOM + summary_text.encode("utf-8"),
        content_type="text/plain; charset=utf-8",
    )

    try:
        metadata_store.update(path, {"summary_file_path": stored_path, "updated_at": _now_iso()})
    except MetadataStoreError as exc:
        logger.warning("DB update warning for '%s': %s", path, exc)

    logger.info("Saved summary of '%s' as '%s'", path, stored_path)
    return {
        "summaryFilePath": stored_path,
        "summaryFileName": strip_timestamp_prefix(name),
        "alreadySaved": False,
    }


def get_summary_history(metadata_store: MetadataStore, path: str) -> List[SummaryHistoryEntry]:
    row = metadata_store.get(path)
    return row.summary_history if row else []
