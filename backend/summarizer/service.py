# backend/summarizer/service.py

"""Summary generation with the default-language cache and a capped history."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import config
from exceptions import (
    DocsumError,
    EmptyDocumentError,
    MetadataStoreError,
    ProviderError,
    SummaryBlockedError,
    UnsupportedFileTypeError,
)
from logger import logger
from models import DocumentRecord, SummaryHistoryEntry
from stores import MetadataStore, ObjectStore
from utils import extract_text, file_extension, is_supported_extension, strip_timestamp_prefix

from .clients import ChatBackend
from .prompts import LANGUAGE_LABELS, build_messages, language_label, normalize_language, truncate_text

NO_SUMMARY = "No summary generated."
_BLOCKED_FINISH_REASONS = {"SAFETY", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII", "RECITATION", "content_filter"}
_PROVIDER_NAMES = {"gemini": "Gemini", "openai": "OpenAI", "deepseek": "DeepSeek"}

INVALID_REQUEST_HINT = (
    " Check: 1) provider account balance 2) API key valid 3) account activated."
)
TIMEOUT_HINT = " Try the DeepSeek backend: LLM_BACKEND=deepseek (OPENAI_BASE_URL=https://api.deepseek.com/v1)."


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def cached_summary(record: Optional[DocumentRecord]) -> Optional[str]:
    """
    The English cache is only served when the latest history entry is English
    (or there is no history yet); a newer non-English run makes it stale.
    """
    if record is None or not (record.summary or "").strip():
        return None
    history = record.summary_history
    if history and history[0].language != LANGUAGE_LABELS[config.DEFAULT_LANGUAGE]:
        return None
    return record.summary


def prepend_history(
    history: List[SummaryHistoryEntry],
    entry: SummaryHistoryEntry,
    limit: int = config.SUMMARY_HISTORY_LIMIT,
) -> List[SummaryHistoryEntry]:
    return ([entry] + list(history))[:limit]


def _content_text(response: Any) -> str:
    content = getattr(response, "content", response)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text", ""))
        content = "".join(parts)
    return (content or "").strip() if isinstance(content, str) else str(content).strip()


def _blocked_reason(response: Any) -> Optional[str]:
    metadata = getattr(response, "response_metadata", None) or {}
    finish_reason = str(metadata.get("finish_reason") or "")
    if finish_reason in _BLOCKED_FINISH_REASONS:
        return finish_reason
    feedback = metadata.get("prompt_feedback") or {}
    block_reason = feedback.get("block_reason") if isinstance(feedback, dict) else None
    if block_reason:
        reason = str(getattr(block_reason, "name", block_reason))
        if reason not in ("0", "BLOCK_REASON_UNSPECIFIED"):
            return reason
    return None


def describe_provider_error(exc: Exception) -> str:
    """Pass the provider message through, with a troubleshooting hint for known cases."""
    body = getattr(exc, "body", None)
    message = None
    if isinstance(body, dict):
        inner = body.get("error") if isinstance(body.get("error"), dict) else body
        message = inner.get("message")
    message = message or str(exc) or "Failed to generate summary"

    lowered = message.lower()
    if "invalid_request" in lowered or getattr(exc, "code", None) == "invalid_request_error":
        return message + INVALID_REQUEST_HINT
    if "timed out" in lowered or "timeout" in lowered:
        return message + TIMEOUT_HINT
    return message


def generate_summary(chat_backend: ChatBackend, text: str, language: str) -> str:
    """One provider call; no retry."""
    messages = build_messages(chat_backend.backend, truncate_text(text), language)
    try:
        response = chat_backend.chat.invoke(messages)
    except DocsumError:
        raise
    except Exception as exc:
        logger.error("Summarize error (%s): %s", chat_backend.backend.value, exc)
        raise ProviderError(describe_provider_error(exc)) from exc

    summary = _content_text(response)
    if summary:
        return summary

    reason = _blocked_reason(response)
    if reason:
        provider = _PROVIDER_NAMES.get(chat_backend.backend.value, chat_backend.backend.value)
        raise SummaryBlockedError(f"{provider} blocked response: {reason}. Try a different document.")
    return NO_SUMMARY


def record_summary(
    metadata_store: MetadataStore,
    path: str,
    summary: str,
    language: str,
) -> None:
    """
    Persist a fresh summary. ``summary`` is only overwritten for the default
    language; every run is prepended to ``summary_history``. Failures are
    logged and swallowed since the summary itself was produced.

    The row is read here, after generation, so runs that finished while the
    provider call was in flight stay in the history.
    """
    now = _now_iso()
    try:
        existing = metadata_store.get(path)
    except MetadataStoreError as exc:
        logger.warning("DB summary_history read warning for '%s': %s", path, exc)
        return

    entry = SummaryHistoryEntry(summary=summary, language=language_label(language), created_at=now)
    history = prepend_history(existing.summary_history if existing else [], entry)

    row: Dict[str, Any] = {
        "path": path,
        "updated_at": now,
        "summary_history": [item.model_dump() for item in history],
    }
    if existing is None:
        row["name"] = strip_timestamp_prefix(path.split("/")[-1]) or path
        row["created_at"] = now
    if language == config.DEFAULT_LANGUAGE:
        row["summary"] = summary

    try:
        metadata_store.upsert(row)
    except MetadataStoreError as exc:
        logger.warning("DB summary save warning for '%s': %s", path, exc)


def summarize_document(
    path: str,
    language: Optional[str],
    object_store: ObjectStore,
    metadata_store: MetadataStore,
    backend_factory: Callable[[], ChatBackend],
) -> Dict[str, Any]:
    """
    Return ``{"summary": ..., "cached": True}`` from the English cache when it is
    trustworthy, otherwise generate, persist and return ``{"summary": ...}``.
    """
    language = normalize_language(language)

    if language == config.DEFAULT_LANGUAGE:
        record = None
        try:
            record = metadata_store.get(path)
        except MetadataStoreError as exc:
            logger.warning("Summary cache lookup failed for '%s': %s", path, exc)
        cached = cached_summary(record)
        if cached is not None:
            logger.info("Serving cached summary for '%s'", path)
            return {"summary": cached, "cached": True}

    ext = file_extension(path)
    unsupported = f"Unsupported file type for summary: {ext}"
    if not is_supported_extension(ext):
        raise UnsupportedFileTypeError(unsupported)

    chat_backend = backend_factory()

    data = object_store.download(path)
    text = extract_text(data, ext, unsupported_message=unsupported)
    if not text.strip():
        raise EmptyDocumentError("No text content could be extracted from this file.")

    summary = generate_summary(chat_backend, text, language)
    logger.info(
        "Generated summary for '%s' (language=%s, backend=%s, chars_in=%s)",
        path,
        language,
        chat_backend.backend.value,
        len(text),
    )

    record_summary(metadata_store, path, summary, language)
    return {"summary": summary}
