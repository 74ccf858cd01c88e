# backend/stores/object_store.py

"""Flat-namespace blob storage over the Supabase Storage REST API."""

from __future__ import annotations

from typing import Iterator, List, Optional
from urllib.parse import quote

import httpx

import config
from exceptions import ObjectNotFoundError, StorageError
from logger import logger
from models import StoredObject

from .client import build_http_client, error_message, resolve_credentials


class ObjectStore:
    """
    Thin wrapper over one storage bucket.

    Keys are flat (no folders are created by this service); every method makes
    exactly one HTTP call and raises on a non-2xx response.
    """

    def __init__(self, http: httpx.Client, bucket: str, public_base_url: str):
        self._http = http
        self.bucket = bucket
        self._public_base_url = public_base_url.rstrip("/")

    @classmethod
    def from_config(cls, transport: Optional[httpx.BaseTransport] = None) -> "ObjectStore":
        base_url, key = resolve_credentials()
        return cls(build_http_client(base_url, key, transport), config.STORAGE_BUCKET, base_url)

    def close(self) -> None:
        self._http.close()

    def _object_url(self, path: str) -> str:
        return f"/storage/v1/object/{self.bucket}/{quote(path)}"

    def list_objects(self, limit: int = config.LIST_LIMIT, newest_first: bool = True) -> List[StoredObject]:
        body = {"prefix": "", "limit": limit, "offset": 0}
        if newest_first:
            body["sortBy"] = {"column": "created_at", "order": "desc"}

        response = self._http.post(f"/storage/v1/object/list/{self.bucket}", json=body)
        if response.is_error:
            raise StorageError(error_message(response))

        objects = []
        for item in response.json() or []:
            metadata = item.get("metadata") or {}
            objects.append(
                StoredObject(
                    name=item.get("name") or "",
                    created_at=item.get("created_at"),
                    size=metadata.get("size"),
                )
            )
        return objects

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Write a new object; never overwrites an existing key. Returns the stored path."""
        response = self._http.post(
            self._object_url(path),
            content=data,
            headers={
                "Content-Type": content_type or "application/octet-stream",
                "x-upsert": "false",
            },
        )
        if response.is_error:
            raise StorageError(error_message(response))
        logger.info("Stored object '%s' (%s bytes, bucket=%s)", path, len(data), self.bucket)
        return path

    def download(self, path: str) -> bytes:
        response = self._http.get(self._object_url(path))
        if response.status_code in (400, 404):
            raise ObjectNotFoundError(error_message(response) or "File not found")
        if response.is_error:
            raise StorageError(error_message(response))
        return response.content

    def remove(self, paths: List[str]) -> None:
        response = self._http.request(
            "DELETE", f"/storage/v1/object/{self.bucket}", json={"prefixes": paths}
        )
        if response.is_error:
            raise StorageError(error_message(response))
        logger.info("Removed objects %s (bucket=%s)", paths, self.bucket)

    def public_url(self, path: str) -> str:
        return f"{self._public_base_url}/storage/v1/object/public/{self.bucket}/{quote(path)}"


def get_object_store() -> Iterator[ObjectStore]:
    """FastAPI dependency: one client per request, closed afterwards."""
    store = ObjectStore.from_config()
    try:
        yield store
    finally:
        store.close()
