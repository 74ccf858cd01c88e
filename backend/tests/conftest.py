"""
Shared fixtures: in-memory object/metadata stores and a scripted chat model
wired into the FastAPI app through dependency overrides.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from config import LLMBackend
from exceptions import MetadataStoreError, ObjectNotFoundError, StorageError
from main import app
from models import DocumentRecord, StoredObject
from stores import get_metadata_store, get_object_store
from summarizer import ChatBackend, get_chat_backend_factory

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeObjectStore:
    def __init__(self):
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.removed: List[str] = []
        self._clock = itertools.count()

    def put(self, name: str, data: bytes) -> str:
        created = _EPOCH + timedelta(seconds=next(self._clock))
        self.objects[name] = {"data": data, "created_at": created.isoformat()}
        return name

    def list_objects(self, limit: int = 100, newest_first: bool = True) -> List[StoredObject]:
        items = sorted(self.objects.items(), key=lambda kv: kv[1]["created_at"], reverse=newest_first)
        return [
            StoredObject(name=name, created_at=obj["created_at"], size=len(obj["data"]))
            for name, obj in items[:limit]
        ]

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        if path in self.objects:
            raise StorageError("The resource already exists")
        return self.put(path, data)

    def download(self, path: str) -> bytes:
        if path not in self.objects:
            raise ObjectNotFoundError("Object not found")
        return self.objects[path]["data"]

    def remove(self, paths: List[str]) -> None:
        for path in paths:
            self.objects.pop(path, None)
            self.removed.append(path)

    def public_url(self, path: str) -> str:
        return f"https://storage.test/public/Documents/{path}"

    def close(self) -> None:
        pass


class FakeMetadataStore:
    def __init__(self):
        self.rows: Dict[str, Dict[str, Any]] = {}
        self.fail = False

    def _guard(self):
        if self.fail:
            raise MetadataStoreError('relation "documents" does not exist')

    def get(self, path: str) -> Optional[DocumentRecord]:
        self._guard()
        row = self.rows.get(path)
        if row is None:
            return None
        return DocumentRecord.model_validate({**row, "summary_history": row.get("summary_history") or []})

    def get_many(self, paths: List[str]) -> List[DocumentRecord]:
        return [record for record in (self.get(path) for path in paths) if record is not None]

    def upsert(self, row: Dict[str, Any]) -> None:
        self._guard()
        self.rows.setdefault(row["path"], {}).update(row)

    def update(self, path: str, values: Dict[str, Any]) -> None:
        self._guard()
        if path in self.rows:
            self.rows[path].update(values)

    def delete(self, path: str) -> None:
        self._guard()
        self.rows.pop(path, None)

    def close(self) -> None:
        pass


class ScriptedChat:
    """Stands in for a LangChain chat model; replies are produced by ``responder``."""

    def __init__(self):
        self.calls: List[List[Any]] = []
        self.responder: Callable[[List[Any]], Any] = self._default_reply

    def _default_reply(self, messages):
        return AIMessage(content=f"Summary #{len(self.calls)}")

    def invoke(self, messages):
        self.calls.append(messages)
        reply = self.responder(messages)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def metadata_store() -> FakeMetadataStore:
    return FakeMetadataStore()


@pytest.fixture
def chat() -> ScriptedChat:
    return ScriptedChat()


@pytest.fixture
def backend_factory(chat):
    return lambda: ChatBackend(LLMBackend.OPENAI, "test-model", chat)


@pytest.fixture
def client(object_store, metadata_store, backend_factory):
    app.dependency_overrides[get_object_store] = lambda: object_store
    app.dependency_overrides[get_metadata_store] = lambda: metadata_store
    app.dependency_overrides[get_chat_backend_factory] = lambda: backend_factory
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def upload(client):
    def _upload(name: str, data: bytes = b"hello world", content_type: str = "text/plain"):
        return client.post("/documents", files={"file": (name, data, content_type)})
    return _upload
