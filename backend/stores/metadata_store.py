# backend/stores/metadata_store.py

"""Document metadata rows over PostgREST (the ``documents`` table, keyed by path)."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional

import httpx

import config
from exceptions import MetadataStoreError
from models import DocumentRecord

from .client import build_http_client, error_message, resolve_credentials


def _in_filter(values: Iterable[str]) -> str:
    quoted = []
    for value in values:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        quoted.append(f'"{escaped}"')
    return f"in.({','.join(quoted)})"


class MetadataStore:
    """Select / upsert / update / delete on a single table keyed by ``path``."""

    def __init__(self, http: httpx.Client, table: str):
        self._http = http
        self.table = table

    @classmethod
    def from_config(cls, transport: Optional[httpx.BaseTransport] = None) -> "MetadataStore":
        base_url, key = resolve_credentials()
        return cls(build_http_client(base_url, key, transport), config.DOCUMENTS_TABLE)

    def close(self) -> None:
        self._http.close()

    @property
    def _table_url(self) -> str:
        return f"/rest/v1/{self.table}"

    def _check(self, response: httpx.Response) -> None:
        if response.is_error:
            raise MetadataStoreError(error_message(response))

    def get(self, path: str) -> Optional[DocumentRecord]:
        """Return the row for ``path`` or None when absent."""
        response = self._http.get(
            self._table_url, params={"select": "*", "path": f"eq.{path}", "limit": "1"}
        )
        self._check(response)
        rows = response.json() or []
        return _to_record(rows[0]) if rows else None

    def get_many(self, paths: List[str]) -> List[DocumentRecord]:
        if not paths:
            return []
        response = self._http.get(
            self._table_url,
            params={"select": "path,summary,summary_file_path", "path": _in_filter(paths)},
        )
        self._check(response)
        return [_to_record(row) for row in response.json() or []]

    def upsert(self, row: Dict[str, Any]) -> None:
        """Insert or merge ``row`` on its ``path``; columns not in ``row`` are untouched."""
        response = self._http.post(
            self._table_url,
            params={"on_conflict": "path"},
            json=row,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )
        self._check(response)

    def update(self, path: str, values: Dict[str, Any]) -> None:
        response = self._http.patch(
            self._table_url,
            params={"path": f"eq.{path}"},
            json=values,
            headers={"Prefer": "return=minimal"},
        )
        self._check(response)

    def delete(self, path: str) -> None:
        response = self._http.delete(self._table_url, params={"path": f"eq.{path}"})
        self._check(response)


def _to_record(row: Dict[str, Any]) -> DocumentRecord:
    row = dict(row)
    if row.get("summary_history") is None:
        row["summary_history"] = []
    return DocumentRecord.model_validate(row)


def get_metadata_store() -> Iterator[MetadataStore]:
    """FastAPI dependency: one client per request, closed afterwards."""
    store = MetadataStore.from_config()
    try:
        yield store
    finally:
        store.close()
