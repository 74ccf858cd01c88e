# backend/summarizer/__init__.py

"""Document summarization: prompts, LLM backends, cache and history handling."""

from .clients import (
    ChatBackend,
    get_chat_backend,
    get_chat_backend_factory,
    log_backend_selection,
    resolve_backend,
)
from .service import (
    cached_summary,
    generate_summary,
    prepend_history,
    record_summary,
    summarize_document,
)

__all__ = [
    "ChatBackend",
    "get_chat_backend",
    "get_chat_backend_factory",
    "log_backend_selection",
    "resolve_backend",
    "cached_summary",
    "generate_summary",
    "prepend_history",
    "record_summary",
    "summarize_document",
]
