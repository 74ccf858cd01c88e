# backend/summarizer/clients.py

"""LLM client construction for summarization (Gemini or OpenAI-compatible)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import config
from config import LLMBackend
from exceptions import SummarizerConfigError
from logger import logger

MISSING_KEY_HINT = "Add GEMINI_API_KEY or OPENAI_API_KEY in .env (and optionally LLM_BACKEND)."


@dataclass
class ChatBackend:
    backend: LLMBackend
    model: str
    chat: Any  # LangChain chat model exposing .invoke(messages)


def resolve_backend() -> Optional[LLMBackend]:
    """
    Canonical backend selector:
      - LLM_BACKEND when set
      - else Gemini if GEMINI_API_KEY is set
      - else OpenAI if OPENAI_API_KEY is set
    """
    if config.LLM_BACKEND is not None:
        return config.LLM_BACKEND
    if config.GEMINI_API_KEY:
        return LLMBackend.GEMINI
    if config.OPENAI_API_KEY:
        return LLMBackend.OPENAI
    return None


def model_for(backend: LLMBackend) -> str:
    return {
        LLMBackend.GEMINI: config.GEMINI_MODEL,
        LLMBackend.OPENAI: config.OPENAI_MODEL,
        LLMBackend.DEEPSEEK: config.DEEPSEEK_MODEL,
    }[backend]


def get_chat_backend(backend: Optional[LLMBackend] = None) -> ChatBackend:
    """
    Build the chat model for the selected backend. Retries are disabled so
    each summary request makes exactly one provider call.

    Raises:
        SummarizerConfigError: no backend resolvable, or its key is missing.
    """
    backend = backend or resolve_backend()
    if backend is None:
        raise SummarizerConfigError(MISSING_KEY_HINT)

    model = model_for(backend)

    if backend == LLMBackend.GEMINI:
        if not config.GEMINI_API_KEY:
            raise SummarizerConfigError("LLM_BACKEND=gemini requires GEMINI_API_KEY in .env.")
        from langchain_google_genai import ChatGoogleGenerativeAI

        chat = ChatGoogleGenerativeAI(
            model=model,
            google_api_key=config.GEMINI_API_KEY,
            max_output_tokens=config.SUMMARY_MAX_OUTPUT_TOKENS,
            timeout=config.LLM_TIMEOUT_SECONDS,
            max_retries=0,
        )
        return ChatBackend(backend, model, chat)

    if not config.OPENAI_API_KEY:
        raise SummarizerConfigError(f"LLM_BACKEND={backend.value} requires OPENAI_API_KEY in .env.")

    base_url = config.OPENAI_BASE_URL
    if backend == LLMBackend.DEEPSEEK and not base_url:
        base_url = config.DEEPSEEK_BASE_URL

    from langchain_openai import ChatOpenAI

    chat = ChatOpenAI(
        model=model,
        api_key=config.OPENAI_API_KEY,
        base_url=base_url,
        max_tokens=config.SUMMARY_MAX_OUTPUT_TOKENS,
        timeout=config.LLM_TIMEOUT_SECONDS,
        max_retries=0,
    )
    return ChatBackend(backend, model, chat)


def get_chat_backend_factory() -> Callable[[], ChatBackend]:
    """
    FastAPI dependency. Returns the factory rather than a built client so a
    cached summary can be served without any provider configured.
    """
    return get_chat_backend


def log_backend_selection() -> None:
    backend = resolve_backend()
    if backend is None:
        logger.warning("No LLM backend configured; summarization requests will fail. %s", MISSING_KEY_HINT)
        return
    source = "LLM_BACKEND" if config.LLM_BACKEND is not None else "API key presence"
    logger.info("LLM backend: %s (model=%s, selected by %s)", backend.value, model_for(backend), source)
