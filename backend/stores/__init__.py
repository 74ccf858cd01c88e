# backend/stores/__init__.py

"""Clients for the object store (blobs) and the metadata store (documents table)."""

from .client import resolve_credentials
from .object_store import ObjectStore, get_object_store
from .metadata_store import MetadataStore, get_metadata_store

__all__ = [
    "resolve_credentials",
    "ObjectStore",
    "get_object_store",
    "MetadataStore",
    "get_metadata_store",
]
