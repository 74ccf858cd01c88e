# backend/summarizer/prompts.py

"""Per-language summary instructions, input truncation and message construction."""

from typing import List

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from config import DEFAULT_LANGUAGE, SUMMARY_MAX_INPUT_CHARS, LLMBackend

TRUNCATION_MARKER = "..."

LANGUAGE_LABELS = {
    "en": "English",
    "zh": "中文",
    "yue": "粤语",
}

LANGUAGE_INSTRUCTIONS = {
    "en": "Provide the summary in English as plain, well-structured prose.",
    "zh": (
        "You MUST provide the summary in Mandarin Chinese (普通话/中文). "
        "Use simplified Chinese characters only. Do NOT use English."
    ),
    "yue": (
        "You MUST provide the summary in Cantonese (粤语/广东话). "
        "Use traditional Chinese characters and Cantonese vocabulary "
        "(e.g. 嘅、係、唔、咁、呢度). Do NOT use Mandarin or English."
    ),
}

_STYLE = (
    "You are a helpful assistant that summarizes documents concisely. {instruction} "
    "Use plain text only, no markdown, no ** or other formatting symbols."
)


def normalize_language(language: str | None) -> str:
    return language if language in LANGUAGE_LABELS else DEFAULT_LANGUAGE


def language_label(language: str | None) -> str:
    return LANGUAGE_LABELS[normalize_language(language)]


def truncate_text(text: str, limit: int = SUMMARY_MAX_INPUT_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def system_instruction(language: str | None) -> str:
    return _STYLE.format(instruction=LANGUAGE_INSTRUCTIONS[normalize_language(language)])


def build_messages(backend: LLMBackend, text: str, language: str | None) -> List[BaseMessage]:
    """
    Gemini gets a single prompt with the document appended; OpenAI-compatible
    backends get a system message plus a user message.
    """
    instruction = system_instruction(language)
    if backend == LLMBackend.GEMINI:
        return [HumanMessage(content=f"{instruction}\n\nDocument to summarize:\n\n{text}")]
    return [
        SystemMessage(content=instruction),
        HumanMessage(content=f"Summarize the following document:\n\n{text}"),
    ]
