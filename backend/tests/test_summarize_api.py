"""
Summarize and summary-history endpoints: English cache, language invalidation,
history cap and provider failure surfaces.

Run with: pytest tests/test_summarize_api.py -v
"""

import pytest
from langchain_core.messages import AIMessage

import config
from main import app
from summarizer import get_chat_backend, get_chat_backend_factory, summarize_document

DOC = "1700000000000-paper.txt"


@pytest.fixture
def document(object_store):
    object_store.put(DOC, b"The quick brown fox jumps over the lazy dog. " * 10)
    return DOC


def _summarize(client, language=None, path=DOC):
    body = {"filePath": path}
    if language is not None:
        body["language"] = language
    return client.post("/summarize", json=body)


class TestEnglishCache:

    def test_second_english_call_is_cached(self, client, document, chat):
        first = _summarize(client, "en")
        assert first.status_code == 200
        assert "cached" not in first.json()

        second = _summarize(client, "en")
        assert second.status_code == 200
        assert second.json() == {"summary": first.json()["summary"], "cached": True}
        assert len(chat.calls) == 1

    def test_language_defaults_to_english(self, client, document, metadata_store):
        _summarize(client)
        assert metadata_store.rows[DOC]["summary"] == "Summary #1"
        assert metadata_store.rows[DOC]["summary_history"][0]["language"] == "English"

    def test_non_english_run_invalidates_english_cache(self, client, document, chat, metadata_store):
        english = _summarize(client, "en").json()["summary"]
        chinese = _summarize(client, "zh").json()["summary"]
        assert chinese != english
        # the English column is untouched by the zh run
        assert metadata_store.rows[DOC]["summary"] == english

        refreshed = _summarize(client, "en").json()
        assert "cached" not in refreshed
        assert len(chat.calls) == 3

        assert _summarize(client, "en").json()["cached"] is True
        assert len(chat.calls) == 3

    def test_non_english_never_served_from_cache(self, client, document, chat):
        _summarize(client, "en")
        _summarize(client, "yue")
        _summarize(client, "yue")
        assert len(chat.calls) == 3


class TestHistory:

    def test_history_capped_and_newest_first(self, client, document, metadata_store):
        languages = ["en", "zh", "yue"] * 5
        for language in languages:
            assert _summarize(client, language).status_code == 200

        history = client.get("/summary-history", params={"path": DOC}).json()["history"]
        assert len(history) == 10
        timestamps = [entry["created_at"] for entry in history]
        assert timestamps == sorted(timestamps, reverse=True)
        assert history[0]["language"] == "粤语"
        assert history[1]["language"] == "中文"
        assert history[2]["language"] == "English"

    def test_history_empty_for_unknown_path(self, client):
        assert client.get("/summary-history", params={"path": "missing.txt"}).json() == {"history": []}

    def test_history_requires_path(self, client):
        response = client.get("/summary-history")
        assert response.status_code == 400
        assert response.json() == {"error": "path is required"}

    def test_run_finishing_during_generation_is_kept(self, client, document, chat, object_store, metadata_store, backend_factory):
        def responder(messages):
            if len(chat.calls) == 1:
                # a zh run completes while the English call is still in flight
                summarize_document(DOC, "zh", object_store, metadata_store, backend_factory)
                return AIMessage(content="english summary")
            return AIMessage(content="chinese summary")

        chat.responder = responder
        assert _summarize(client, "en").json() == {"summary": "english summary"}

        history = metadata_store.rows[DOC]["summary_history"]
        assert [(e["language"], e["summary"]) for e in history] == [
            ("English", "english summary"),
            ("中文", "chinese summary"),
        ]
        assert metadata_store.rows[DOC]["summary"] == "english summary"

    def test_history_update_failure_still_returns_summary(self, client, document, metadata_store):
        metadata_store.fail = True
        response = _summarize(client, "zh")
        assert response.status_code == 200
        assert response.json()["summary"]


class TestPrompting:

    def test_input_truncated_to_budget(self, client, object_store, chat):
        object_store.put("1-long.md", b"a" * 5000)
        _summarize(client, "en", path="1-long.md")
        user_message = chat.calls[0][-1].content
        assert user_message.endswith("a" * 2500 + "...")
        assert "a" * 2501 not in user_message

    def test_language_instruction_in_system_message(self, client, document, chat):
        _summarize(client, "yue")
        assert "Cantonese" in chat.calls[0][0].content


class TestFailures:

    def test_missing_file_path_is_400(self, client):
        response = client.post("/summarize", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "filePath is required"}

    def test_unknown_language_is_400(self, client, document):
        assert _summarize(client, "fr").status_code == 400

    def test_missing_object_is_404(self, client):
        assert _summarize(client, "en", path="nope.txt").status_code == 404

    def test_unsupported_type_is_400_without_provider_call(self, client, object_store, chat):
        object_store.put("1-image.png", b"\x89PNG")
        response = _summarize(client, "en", path="1-image.png")
        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported file type for summary: .png"}
        assert chat.calls == []

    def test_empty_text_is_400(self, client, object_store):
        object_store.put("1-blank.txt", b"   \n ")
        response = _summarize(client, "en", path="1-blank.txt")
        assert response.status_code == 400
        assert response.json() == {"error": "No text content could be extracted from this file."}

    def test_no_backend_configured_is_500_with_hint(self, client, document, monkeypatch):
        monkeypatch.setattr(config, "LLM_BACKEND", None)
        monkeypatch.setattr(config, "GEMINI_API_KEY", None)
        monkeypatch.setattr(config, "OPENAI_API_KEY", None)
        app.dependency_overrides[get_chat_backend_factory] = lambda: get_chat_backend

        response = _summarize(client, "zh")
        assert response.status_code == 500
        assert "GEMINI_API_KEY or OPENAI_API_KEY" in response.json()["error"]

    def test_cached_summary_served_without_backend(self, client, metadata_store, monkeypatch):
        monkeypatch.setattr(config, "LLM_BACKEND", None)
        monkeypatch.setattr(config, "GEMINI_API_KEY", None)
        monkeypatch.setattr(config, "OPENAI_API_KEY", None)
        app.dependency_overrides[get_chat_backend_factory] = lambda: get_chat_backend
        metadata_store.rows[DOC] = {"path": DOC, "summary": "from cache"}

        assert _summarize(client, "en").json() == {"summary": "from cache", "cached": True}

    def test_blocked_response_surfaces_error(self, client, document, chat):
        chat.responder = lambda messages: AIMessage(content="", response_metadata={"finish_reason": "content_filter"})
        response = _summarize(client, "en")
        assert response.status_code == 500
        assert "blocked response: content_filter" in response.json()["error"]

    def test_provider_timeout_gets_hint_and_no_retry(self, client, document, chat, metadata_store):
        chat.responder = lambda messages: TimeoutError("Request timed out.")
        response = _summarize(client, "en")
        assert response.status_code == 500
        assert response.json()["error"].startswith("Request timed out.")
        assert "deepseek" in response.json()["error"].lower()
        assert len(chat.calls) == 1
        assert DOC not in metadata_store.rows
